"""
Layer Stack and Multi-Layer Compositor.

Keeps the ordered list of named layers (bottom to top) with visibility,
opacity, blend mode and lock state, tracks which layer is active, and
composites visible layers onto the source image.

Structural problems (unknown ids, deleting the last layer, unknown blend
modes) never raise: the operation is a logged no-op that returns False.

Example:
    >>> stack = LayerStack()
    >>> background = stack.reset()
    >>> added = stack.add_layer()
    >>> stack.set_blend_mode(added.layer_id, "multiply")
    True
    >>> [layer.name for layer in stack.layers]
    ['Background', 'Layer 2']
"""

import logging
import math
import uuid
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional

import numpy as np
from PIL import Image

from PF_Libs.constants import (
    BLEND_MODES,
    DEFAULT_BLEND_MODE,
    DEFAULT_LAYER_OPACITY,
    DUPLICATE_LAYER_SUFFIX,
    INITIAL_LAYER_ID,
    INITIAL_LAYER_NAME,
    LAYER_ID_PREFIX,
)
from PF_Libs.ImageEditingLib.blend_modes import blend_channels
from PF_Libs.ImageEditingLib.image_models import (
    ensure_rgba,
    from_pixel_array,
    to_pixel_array,
)

logger = logging.getLogger(__name__)


def clamp_opacity(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_LAYER_OPACITY
    if math.isnan(number):
        return DEFAULT_LAYER_OPACITY
    return max(0.0, min(100.0, number))


def new_layer_id() -> str:
    return f"{LAYER_ID_PREFIX}{uuid.uuid4().hex}"


@dataclass
class Layer:
    """A single layer in the stack.

    Attributes:
        layer_id: Stable unique identifier
        name: Display name
        visible: Hidden layers contribute nothing to the composite
        opacity: Layer opacity in percent (0-100)
        blend_mode: One of BLEND_MODES
        locked: Lock flag shown to the user
        image: Optional PIL Image with the layer's own pixels
    """
    layer_id: str
    name: str
    visible: bool = True
    opacity: float = DEFAULT_LAYER_OPACITY
    blend_mode: str = DEFAULT_BLEND_MODE
    locked: bool = False
    image: Optional[Any] = field(default=None, compare=False)

    def __post_init__(self):
        self.opacity = clamp_opacity(self.opacity)
        if self.blend_mode not in BLEND_MODES:
            logger.warning(f"Unknown blend mode '{self.blend_mode}', using {DEFAULT_BLEND_MODE}")
            self.blend_mode = DEFAULT_BLEND_MODE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (excludes image objects)."""
        data = asdict(self)
        data.pop("image")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layer":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__ and k != "image"}
        filtered.setdefault("layer_id", new_layer_id())
        filtered.setdefault("name", INITIAL_LAYER_NAME)
        return cls(**filtered)


class LayerStack:
    """Ordered layers (index 0 is the bottom) plus the active layer id."""

    def __init__(self, layers: Optional[List[Layer]] = None, active_id: Optional[str] = None):
        self.layers: List[Layer] = list(layers) if layers else []
        self.active_id: Optional[str] = active_id
        if self.active_id is None and self.layers:
            self.active_id = self.layers[0].layer_id

    def __len__(self) -> int:
        return len(self.layers)

    def reset(self, initial_name: str = INITIAL_LAYER_NAME) -> Layer:
        """Replace the stack with a single background layer (on image load)."""
        background = Layer(layer_id=INITIAL_LAYER_ID, name=initial_name)
        self.layers = [background]
        self.active_id = background.layer_id
        return background

    def index_of(self, layer_id: str) -> int:
        for index, layer in enumerate(self.layers):
            if layer.layer_id == layer_id:
                return index
        return -1

    def get(self, layer_id: str) -> Optional[Layer]:
        index = self.index_of(layer_id)
        return self.layers[index] if index >= 0 else None

    @property
    def active_layer(self) -> Optional[Layer]:
        if self.active_id is None:
            return None
        return self.get(self.active_id)

    def _require(self, layer_id: str, operation: str) -> Optional[Layer]:
        layer = self.get(layer_id)
        if layer is None:
            logger.warning(f"{operation}: no layer with id '{layer_id}'")
        return layer

    def set_active(self, layer_id: str) -> bool:
        if self._require(layer_id, "set_active") is None:
            return False
        self.active_id = layer_id
        return True

    def add_layer(self, name: Optional[str] = None, image: Optional[Any] = None) -> Layer:
        """Append a new visible layer on top and make it active."""
        layer = Layer(
            layer_id=new_layer_id(),
            name=name or f"Layer {len(self.layers) + 1}",
            image=image,
        )
        self.layers.append(layer)
        self.active_id = layer.layer_id
        logger.debug(f"Added layer {layer.layer_id}")
        return layer

    def duplicate_layer(self, layer_id: str) -> Optional[Layer]:
        """Insert a copy directly above the source layer."""
        index = self.index_of(layer_id)
        if index < 0:
            logger.warning(f"duplicate_layer: no layer with id '{layer_id}'")
            return None

        source = self.layers[index]
        copy = replace(
            source,
            layer_id=new_layer_id(),
            name=f"{source.name}{DUPLICATE_LAYER_SUFFIX}",
            image=source.image.copy() if source.image is not None else None,
        )
        self.layers.insert(index + 1, copy)
        return copy

    def delete_layer(self, layer_id: str) -> bool:
        """
        Remove a layer. The last remaining layer cannot be deleted.

        If the active layer is removed, the bottom layer becomes active.
        """
        index = self.index_of(layer_id)
        if index < 0:
            logger.warning(f"delete_layer: no layer with id '{layer_id}'")
            return False

        if len(self.layers) <= 1:
            logger.warning("delete_layer: refusing to delete the only layer")
            return False

        del self.layers[index]
        if self.active_id == layer_id:
            self.active_id = self.layers[0].layer_id if self.layers else None
        return True

    def reorder(self, layer_id: str, target_id: str) -> bool:
        """
        Move a layer to the target layer's position.

        The other layers keep their relative order.
        """
        if layer_id == target_id:
            return False

        source_index = self.index_of(layer_id)
        target_index = self.index_of(target_id)
        if source_index < 0 or target_index < 0:
            logger.warning(f"reorder: unknown layer id in ({layer_id}, {target_id})")
            return False

        moved = self.layers.pop(source_index)
        self.layers.insert(target_index, moved)
        return True

    def rename(self, layer_id: str, name: str) -> bool:
        layer = self._require(layer_id, "rename")
        if layer is None or not str(name).strip():
            return False
        layer.name = str(name).strip()
        return True

    def set_visible(self, layer_id: str, visible: bool) -> bool:
        layer = self._require(layer_id, "set_visible")
        if layer is None:
            return False
        layer.visible = bool(visible)
        return True

    def set_opacity(self, layer_id: str, opacity: Any) -> bool:
        layer = self._require(layer_id, "set_opacity")
        if layer is None:
            return False
        layer.opacity = clamp_opacity(opacity)
        return True

    def set_blend_mode(self, layer_id: str, blend_mode: str) -> bool:
        layer = self._require(layer_id, "set_blend_mode")
        if layer is None:
            return False
        if blend_mode not in BLEND_MODES:
            logger.warning(f"set_blend_mode: unknown blend mode '{blend_mode}'")
            return False
        layer.blend_mode = blend_mode
        return True

    def set_locked(self, layer_id: str, locked: bool) -> bool:
        layer = self._require(layer_id, "set_locked")
        if layer is None:
            return False
        layer.locked = bool(locked)
        return True

    def to_list(self) -> List[Dict[str, Any]]:
        return [layer.to_dict() for layer in self.layers]

    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> "LayerStack":
        """Rebuild a stack from to_list() output, skipping malformed entries."""
        layers = [Layer.from_dict(item) for item in data if isinstance(item, dict)]
        return cls(layers=layers)


class LayerCompositor:
    """Blends visible layers, bottom to top, onto an accumulator."""

    @staticmethod
    def composite_layers(base_image: Any, layers: List[Layer]) -> Any:
        """
        Composite layers onto the base image.

        A layer without its own pixels stands for the base image itself; at
        the bottom of the stack it is the base, with nothing beneath it to
        blend with.
        For each visible layer the blended color is mixed into the
        accumulator by opacity and by the layer pixel's own alpha.

        Args:
            base_image: PIL Image to use as base (converted to RGBA)
            layers: Layers ordered bottom to top

        Returns:
            Composited PIL Image in RGBA mode

        Raises:
            TypeError: If base_image is not a PIL Image
        """
        if not hasattr(base_image, "mode"):
            raise TypeError(f"Expected PIL Image for base, got {type(base_image)}")

        base = ensure_rgba(base_image)
        if layers and layers[0].image is None:
            layers = layers[1:]

        active = [layer for layer in layers if layer.visible and layer.opacity > 0]
        # Normal blending of the base onto itself is the identity
        if all(layer.image is None and layer.blend_mode == "normal" for layer in active):
            return base

        base_pixels = to_pixel_array(base) / 255.0
        accumulator = base_pixels.copy()

        for layer in active:
            if layer.image is not None:
                layer_pixels = LayerCompositor._layer_pixels(layer.image, base.size)
            else:
                layer_pixels = base_pixels
            accumulator = LayerCompositor._blend_layer(accumulator, layer_pixels, layer)

        return from_pixel_array(accumulator * 255.0)

    @staticmethod
    def _layer_pixels(image: Any, size) -> np.ndarray:
        overlay = ensure_rgba(image)
        if overlay.size != size:
            overlay = overlay.resize(size, Image.Resampling.LANCZOS)
        return to_pixel_array(overlay) / 255.0

    @staticmethod
    def _blend_layer(accumulator: np.ndarray, layer_pixels: np.ndarray, layer: Layer) -> np.ndarray:
        blended = blend_channels(accumulator[..., :3], layer_pixels[..., :3], layer.blend_mode)
        weight = layer_pixels[..., 3:] * np.float32(layer.opacity / 100.0)

        result = accumulator.copy()
        result[..., :3] = accumulator[..., :3] + (blended - accumulator[..., :3]) * weight
        result[..., 3:] = accumulator[..., 3:] + (1.0 - accumulator[..., 3:]) * weight
        return result
