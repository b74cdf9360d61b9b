"""
ProjStoreLib - Project storage

This module handles persistence of PixelForge projects as JSON bundles
in a key-value store.
"""

from PF_Libs.ProjStoreLib.project_store import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    build_project_bundle,
    save_project_bundle,
    load_project_bundle,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "build_project_bundle",
    "save_project_bundle",
    "load_project_bundle",
]
