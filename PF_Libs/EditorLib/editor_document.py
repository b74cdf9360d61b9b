"""
Editor document and controller.

EditorDocument is the explicit state container for one open image: the
read-only source, the adjustment history (whose live value is the current
settings), the layer stack and the last successfully rendered frame.

EditorController is the single owner that mutates a document. Every
settings, layer or history change re-renders from the source image. A
failed render keeps the previous frame and records a notice instead of
touching history or settings.

Example:
    >>> controller = EditorController()
    >>> controller.load_image("photo.png")
    >>> controller.set_parameter("brightness", 10)
    >>> controller.apply_preset("B&W")
    >>> controller.undo()
    >>> controller.export(Path("exports"))
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional

from PF_Libs.constants import (
    FIELD_IMAGE,
    FIELD_LAYERS,
    FIELD_SETTINGS,
    FIELD_SOURCE,
    PRESETS,
    QUICK_ENHANCE_SETTINGS,
)
from PF_Libs.HistoryLib.history_manager import HistoryEntry, HistoryManager
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ImageEditingLib.image_editing_ops import (
    decode_png_data_url,
    encode_png_data_url,
    export_image,
)
from PF_Libs.ImageEditingLib.image_import import load_source_image
from PF_Libs.LayersLib.layer_stack import Layer, LayerCompositor, LayerStack
from PF_Libs.PipelineLib.compositor import RenderFailure, RenderResult, render_image
from PF_Libs.ProjStoreLib.project_store import (
    KeyValueStore,
    build_project_bundle,
    load_project_bundle,
    save_project_bundle,
)

logger = logging.getLogger(__name__)


@dataclass
class EditorDocument:
    """State of one open image.

    Attributes:
        source: Source RGBA PIL Image (never modified after load)
        history: Undo/redo history; history.current is the live settings
        layers: Layer stack
        last_render: Last successful render, kept when a render fails
        notices: Transient user-facing messages, oldest first
        grain_seed: Fixed grain seed, or None for a fresh seed per render
    """
    source: Optional[Any] = None
    history: HistoryManager = field(default_factory=HistoryManager)
    layers: LayerStack = field(default_factory=LayerStack)
    last_render: Optional[RenderResult] = None
    notices: List[str] = field(default_factory=list)
    grain_seed: Optional[int] = None

    @property
    def settings(self) -> EditorSettings:
        return self.history.current

    @property
    def has_image(self) -> bool:
        return self.source is not None


class EditorController:
    """Applies user actions to an EditorDocument and keeps its render current."""

    def __init__(self, document: Optional[EditorDocument] = None):
        self.document = document or EditorDocument()
        self._render_lock = threading.RLock()
        self._batch_depth = 0
        self._render_pending = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_image(self, source: Any) -> Optional[RenderResult]:
        """
        Open a new source image and reset settings, history and layers.

        Raises:
            IngestFailure: If the image cannot be used; the document is unchanged
        """
        image = load_source_image(source)
        with self._render_lock:
            self.document.source = image
            self.document.history.reset()
            self.document.layers.reset()
            self.document.last_render = None
        return self._changed()

    # ------------------------------------------------------------------
    # Settings and history
    # ------------------------------------------------------------------

    @property
    def settings(self) -> EditorSettings:
        return self.document.settings

    def set_parameter(self, name: str, value: Any) -> Optional[RenderResult]:
        """Change one adjustment (clamped into its range) as a new edit."""
        with self._render_lock:
            return self.apply_settings(self.settings.with_value(name, value))

    def apply_settings(self, settings: EditorSettings) -> Optional[RenderResult]:
        """Replace the whole settings value as a new edit."""
        with self._render_lock:
            self.document.history.edit(settings)
        return self._changed()

    def apply_preset(self, name: str) -> Optional[RenderResult]:
        """Merge a named preset into the current settings as a new edit."""
        overlay = PRESETS.get(name)
        if overlay is None:
            logger.warning(f"apply_preset: unknown preset '{name}'")
            return None
        with self._render_lock:
            return self.apply_settings(self.settings.merged(overlay))

    def quick_enhance(self) -> Optional[RenderResult]:
        with self._render_lock:
            return self.apply_settings(self.settings.merged(QUICK_ENHANCE_SETTINGS))

    def reset_settings(self) -> Optional[RenderResult]:
        """Return every adjustment to its default as a new (undoable) edit."""
        return self.apply_settings(EditorSettings())

    def undo(self) -> Optional[RenderResult]:
        with self._render_lock:
            changed = self.document.history.undo()
        if not changed:
            return None
        return self._changed()

    def redo(self) -> Optional[RenderResult]:
        with self._render_lock:
            changed = self.document.history.redo()
        if not changed:
            return None
        return self._changed()

    def jump_to(self, index: int) -> Optional[RenderResult]:
        with self._render_lock:
            changed = self.document.history.jump_to(index)
        if not changed:
            return None
        return self._changed()

    def history_timeline(self) -> List[HistoryEntry]:
        with self._render_lock:
            return self.document.history.timeline()

    def set_grain_seed(self, seed: Optional[int]) -> Optional[RenderResult]:
        with self._render_lock:
            self.document.grain_seed = seed
        return self._changed()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def add_layer(self, name: Optional[str] = None, image: Optional[Any] = None) -> Layer:
        with self._render_lock:
            layer = self.document.layers.add_layer(name=name, image=image)
        self._changed()
        return layer

    def duplicate_layer(self, layer_id: str) -> Optional[Layer]:
        with self._render_lock:
            layer = self.document.layers.duplicate_layer(layer_id)
        if layer is not None:
            self._changed()
        return layer

    def delete_layer(self, layer_id: str) -> bool:
        return self._layer_change(self.document.layers.delete_layer, layer_id)

    def reorder_layer(self, layer_id: str, target_id: str) -> bool:
        return self._layer_change(self.document.layers.reorder, layer_id, target_id)

    def set_active_layer(self, layer_id: str) -> bool:
        return self.document.layers.set_active(layer_id)

    def rename_layer(self, layer_id: str, name: str) -> bool:
        return self.document.layers.rename(layer_id, name)

    def set_layer_visible(self, layer_id: str, visible: bool) -> bool:
        return self._layer_change(self.document.layers.set_visible, layer_id, visible)

    def set_layer_opacity(self, layer_id: str, opacity: Any) -> bool:
        return self._layer_change(self.document.layers.set_opacity, layer_id, opacity)

    def set_layer_blend_mode(self, layer_id: str, blend_mode: str) -> bool:
        return self._layer_change(self.document.layers.set_blend_mode, layer_id, blend_mode)

    def set_layer_locked(self, layer_id: str, locked: bool) -> bool:
        return self.document.layers.set_locked(layer_id, locked)

    def _layer_change(self, operation, *args) -> bool:
        with self._render_lock:
            changed = operation(*args)
        if changed:
            self._changed()
        return changed

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @contextmanager
    def batch(self) -> Iterator[None]:
        """
        Coalesce several changes into one render.

        Renders once on exit if anything changed inside the block.
        """
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._render_pending:
                self.render()

    def _changed(self) -> Optional[RenderResult]:
        if self._batch_depth > 0:
            self._render_pending = True
            return None
        return self.render()

    def render(self) -> Optional[RenderResult]:
        """
        Re-render the document from its source image.

        Returns:
            The new RenderResult, or None if there is no image or the
            render failed (the previous frame is kept)
        """
        document = self.document
        with self._render_lock:
            self._render_pending = False
            if document.source is None:
                return None

            try:
                base = LayerCompositor.composite_layers(document.source, document.layers.layers)
                result = render_image(base, document.settings, seed=document.grain_seed)
            except (RenderFailure, TypeError, ValueError) as e:
                logger.warning(f"Render failed, keeping previous frame: {str(e)}")
                document.notices.append(f"Render failed: {str(e)}")
                return None

            for stage_name in result.skipped_stages:
                document.notices.append(f"Skipped {stage_name} stage")
            document.last_render = result
            return result

    def snapshot(self) -> Optional[Any]:
        """Copy of the last fully rendered image (None before the first render)."""
        with self._render_lock:
            if self.document.last_render is None:
                return None
            return self.document.last_render.image.copy()

    def pop_notices(self) -> List[str]:
        notices = list(self.document.notices)
        self.document.notices.clear()
        return notices

    # ------------------------------------------------------------------
    # Export and persistence
    # ------------------------------------------------------------------

    def export(self, output_dir: Path, timestamp_ms: Optional[int] = None) -> Optional[Path]:
        image = self.snapshot()
        if image is None:
            logger.warning("export: nothing rendered yet")
            return None
        return export_image(image, output_dir, timestamp_ms)

    def save_project(self, store: KeyValueStore, timestamp_ms: Optional[int] = None) -> bool:
        image = self.snapshot()
        if image is None:
            logger.warning("save_project: nothing rendered yet")
            return False

        bundle = build_project_bundle(
            encode_png_data_url(image),
            self.settings,
            self.document.layers.to_list(),
            timestamp_ms,
            source_data_url=encode_png_data_url(self.document.source),
        )
        save_project_bundle(store, bundle)
        self.document.notices.append("Project saved successfully!")
        return True

    def load_project(self, store: KeyValueStore) -> Optional[RenderResult]:
        """
        Restore a saved project.

        When the bundle carries the unedited source, it is restored together
        with the saved settings. Otherwise the saved (rendered) image becomes
        the new source and settings start from their defaults, so the
        adjustments are not applied twice. History always starts fresh.
        """
        bundle = load_project_bundle(store)
        if bundle is None or (bundle[FIELD_SOURCE] is None and bundle[FIELD_IMAGE] is None):
            logger.warning("load_project: no saved project")
            return None

        if bundle[FIELD_SOURCE] is not None:
            data_url, settings = bundle[FIELD_SOURCE], bundle[FIELD_SETTINGS]
        else:
            data_url, settings = bundle[FIELD_IMAGE], EditorSettings()

        try:
            image = load_source_image(decode_png_data_url(data_url))
        except ValueError as e:
            logger.warning(f"load_project: {str(e)}")
            self.document.notices.append("Saved project image is unreadable")
            return None

        layers = LayerStack.from_list(bundle[FIELD_LAYERS])
        with self._render_lock:
            self.document.source = image
            self.document.history.reset(settings)
            if len(layers) > 0:
                self.document.layers = layers
            else:
                self.document.layers.reset()
            self.document.last_render = None
        logger.info("Loaded saved project")
        return self._changed()
