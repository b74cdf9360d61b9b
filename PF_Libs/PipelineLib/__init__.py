"""
PipelineLib - Render pipeline

Holds the registry of render stage functions and the compositor that runs
them, in fixed order, from the source image on every change.
"""

from PF_Libs.PipelineLib.stage_executors import (
    StageExecutorRegistry,
    get_default_registry,
    register_default_stages,
)
from PF_Libs.PipelineLib.compositor import (
    RenderFailure,
    RenderResult,
    render_image,
)

__all__ = [
    "StageExecutorRegistry",
    "get_default_registry",
    "register_default_stages",
    "RenderFailure",
    "RenderResult",
    "render_image",
]
