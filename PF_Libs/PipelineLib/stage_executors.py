"""
Render Stage Executors Registry.

This module provides a centralized registry for render stage executors.
Each stage is a pure function (image, settings, context) -> image that
reads only the adjustment fields it needs. The compositor looks stages up
here by name and runs them in the fixed pipeline order.

Classes:
    StageExecutorRegistry: Registry for stage executors

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_stages: Register all built-in render stages
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from PF_Libs.constants import (
    STAGE_GEOMETRY,
    STAGE_GRAIN,
    STAGE_TONE,
    STAGE_VIGNETTE,
)
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ImageEditingLib.effects_filter import apply_grain, apply_vignette
from PF_Libs.ImageEditingLib.geometry_filter import apply_rotate_scale
from PF_Libs.ImageEditingLib.tone_filter import apply_tone_stage

logger = logging.getLogger(__name__)

# Type alias for executor function
StageFunction = Callable[[Any, EditorSettings, Dict[str, Any]], Any]


class StageExecutorRegistry:
    """
    Registry for render stage executors.

    Example:
        >>> registry = StageExecutorRegistry()
        >>> registry.register("vignette", vignette_executor)
        >>> result = registry.execute("vignette", image, settings, {"seed": 7})
    """

    def __init__(self):
        self._executors: Dict[str, StageFunction] = {}

    def register(self, stage_name: str, executor: StageFunction) -> None:
        """
        Register a stage executor.

        Raises:
            ValueError: If stage_name is empty or executor is not callable
            RuntimeError: If stage_name is already registered
        """
        stage_name = str(stage_name).strip()

        if not stage_name:
            raise ValueError("stage_name cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if stage_name in self._executors:
            raise RuntimeError(f"Stage '{stage_name}' is already registered, unregister it first")

        self._executors[stage_name] = executor
        logger.debug(f"Registered executor for stage: {stage_name}")

    def unregister(self, stage_name: str) -> bool:
        """Remove a stage; False if it was not registered."""
        if self._executors.pop(str(stage_name).strip(), None) is None:
            return False
        logger.debug(f"Unregistered executor for stage: {stage_name}")
        return True

    def get_executor(self, stage_name: str) -> StageFunction:
        """
        Get the executor for a stage.

        Raises:
            KeyError: If stage_name is not registered
        """
        executor = self._executors.get(str(stage_name).strip())
        if executor is None:
            available = ", ".join(self.list_stage_names())
            raise KeyError(f"No executor registered for stage '{stage_name}'. Available stages: {available}")
        return executor

    def execute(
        self,
        stage_name: str,
        image: Any,
        settings: EditorSettings,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        executor = self.get_executor(stage_name)
        return executor(image, settings, context or {})

    def list_stage_names(self) -> List[str]:
        return sorted(self._executors)


def execute_geometry_stage(image: Any, settings: EditorSettings, context: Dict[str, Any]) -> Any:
    return apply_rotate_scale(image, settings.rotation, settings.scale)


def execute_tone_stage(image: Any, settings: EditorSettings, context: Dict[str, Any]) -> Any:
    return apply_tone_stage(image, settings)


def execute_vignette_stage(image: Any, settings: EditorSettings, context: Dict[str, Any]) -> Any:
    return apply_vignette(image, settings.vignette)


def execute_grain_stage(image: Any, settings: EditorSettings, context: Dict[str, Any]) -> Any:
    return apply_grain(image, settings.grain, seed=context.get("seed"))


# Global singleton registry
_default_registry: Optional[StageExecutorRegistry] = None


def get_default_registry() -> StageExecutorRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in stages.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = StageExecutorRegistry()
        register_default_stages(_default_registry)

    return _default_registry


def register_default_stages(registry: StageExecutorRegistry) -> None:
    """
    Register all built-in render stages.

    This function registers:
    - geometry: rotate + scale around the center
    - tone: combined tonal/color transform, blur and sharpen
    - vignette: radial darkening
    - grain: seeded film grain
    """
    registry.register(STAGE_GEOMETRY, execute_geometry_stage)
    registry.register(STAGE_TONE, execute_tone_stage)
    registry.register(STAGE_VIGNETTE, execute_vignette_stage)
    registry.register(STAGE_GRAIN, execute_grain_stage)

    logger.info("Registered default render stages")
