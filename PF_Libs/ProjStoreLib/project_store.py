"""
Project storage for PixelForge.

Projects are saved as a single JSON bundle in a generic key-value store
under a fixed key. A save overwrites the previous one unconditionally;
there is no versioning or migration.

Bundle schema:
- image: PNG data URL of the rendered image
- source: PNG data URL of the unedited source image (optional)
- settings: the adjustment values
- layers: layer list (without pixels)
- timestamp: save time in milliseconds since the epoch

Classes:
    KeyValueStore: Protocol for string key-value stores
    MemoryStore: In-memory store
    JsonFileStore: One file per key in a directory

Functions:
    build_project_bundle: Assemble a bundle dict
    save_project_bundle: Serialize a bundle into a store
    load_project_bundle: Read and normalize a bundle from a store
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from PF_Libs.constants import (
    FIELD_IMAGE,
    FIELD_LAYERS,
    FIELD_SETTINGS,
    FIELD_SOURCE,
    FIELD_TIMESTAMP,
    PROJECT_STORAGE_KEY,
    SAFE_FILENAME_CHARS,
    FILENAME_REPLACEMENT_CHAR,
    STORE_FILE_EXTENSION,
)
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ImageEditingLib.image_editing_ops import current_timestamp_ms

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Dictionary-backed store."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStore:
    """
    Store each key as '<key>.json' inside a directory.

    The directory is created on first use.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        # Sanitize filename - keep only alphanumeric and safe characters
        safe_key = "".join(
            c if c.isalnum() or c in SAFE_FILENAME_CHARS else FILENAME_REPLACEMENT_CHAR
            for c in key
        ).strip(FILENAME_REPLACEMENT_CHAR)
        if not safe_key:
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{safe_key}{STORE_FILE_EXTENSION}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path_for(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path_for(key).write_text(str(value), encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def build_project_bundle(
    image_data_url: str,
    settings: EditorSettings,
    layers: List[Dict[str, Any]],
    timestamp_ms: Optional[int] = None,
    source_data_url: Optional[str] = None,
) -> Dict[str, Any]:
    bundle = {
        FIELD_IMAGE: image_data_url,
        FIELD_SETTINGS: settings.to_dict(),
        FIELD_LAYERS: list(layers),
        FIELD_TIMESTAMP: int(timestamp_ms if timestamp_ms is not None else current_timestamp_ms()),
    }
    if source_data_url is not None:
        bundle[FIELD_SOURCE] = source_data_url
    return bundle


def save_project_bundle(
    store: KeyValueStore,
    bundle: Dict[str, Any],
    key: str = PROJECT_STORAGE_KEY,
) -> None:
    """Write a bundle to the store, replacing any previous save."""
    store.set(key, json.dumps(bundle))
    logger.info(f"Saved project under key '{key}'")


def load_project_bundle(
    store: KeyValueStore,
    key: str = PROJECT_STORAGE_KEY,
) -> Optional[Dict[str, Any]]:
    """
    Load and normalize a project bundle.

    Returns:
        Bundle with every field present (settings as EditorSettings),
        or None if nothing is stored or the stored text is not a JSON object
    """
    raw = store.get(key)
    if raw is None:
        return None

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Stored project under '{key}' is not valid JSON")
        return None

    if not isinstance(payload, dict):
        logger.warning(f"Stored project under '{key}' is not an object")
        return None

    settings_data = payload.get(FIELD_SETTINGS)
    if not isinstance(settings_data, dict):
        settings_data = {}

    layers = payload.get(FIELD_LAYERS)
    if not isinstance(layers, list):
        layers = []

    image = payload.get(FIELD_IMAGE)
    if not isinstance(image, str):
        image = None

    source = payload.get(FIELD_SOURCE)
    if not isinstance(source, str):
        source = None

    timestamp = payload.get(FIELD_TIMESTAMP)
    if not isinstance(timestamp, (int, float)):
        timestamp = None

    return {
        FIELD_IMAGE: image,
        FIELD_SOURCE: source,
        FIELD_SETTINGS: EditorSettings.from_dict(settings_data),
        FIELD_LAYERS: [layer for layer in layers if isinstance(layer, dict)],
        FIELD_TIMESTAMP: timestamp,
    }
