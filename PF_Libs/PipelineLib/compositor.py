"""
Render Compositor.

Produces the final image from the immutable source image and the current
adjustment settings by running the registered stages in the fixed order
geometry -> tone -> vignette -> grain.

Every render starts from the source image, never from a previous render,
so adjustments are non-destructive and repeated renders do not drift.

Error handling:
    - An unusable source (not an image, zero-size, allocation failure)
      raises RenderFailure; nothing is rendered.
    - An exception inside a single stage is logged and the stage is
      skipped; its input passes through to the next stage.

Example:
    >>> from PIL import Image
    >>> source = Image.new("RGBA", (4, 4), (255, 255, 255, 255))
    >>> result = render_image(source, EditorSettings(saturation=-100))
    >>> result.image.getpixel((0, 0))
    (255, 255, 255, 255)
"""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from PF_Libs.constants import PIPELINE_ORDER
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ImageEditingLib.image_models import ensure_rgba
from PF_Libs.PipelineLib.stage_executors import (
    StageExecutorRegistry,
    get_default_registry,
)

logger = logging.getLogger(__name__)


class RenderFailure(RuntimeError):
    """Raised when a render cannot produce any image."""


@dataclass
class RenderResult:
    """Outcome of one render.

    Attributes:
        image: Final RGBA PIL Image, same size as the source
        settings: Settings the image was rendered with
        seed: Grain seed used (pass it back to reproduce the render)
        skipped_stages: Stages that failed and were passed through
    """
    image: Any
    settings: EditorSettings
    seed: int
    skipped_stages: List[str] = field(default_factory=list)


def new_render_seed() -> int:
    return secrets.randbits(32)


def _prepare_source(source: Any) -> Any:
    if not hasattr(source, "size") or not hasattr(source, "convert"):
        raise RenderFailure(f"Expected PIL Image as render source, got {type(source)}")

    width, height = source.size
    if width <= 0 or height <= 0:
        raise RenderFailure(f"Cannot render a {width}x{height} image")

    try:
        # Fresh canvas sized to the source; the source itself is never touched
        return ensure_rgba(source)
    except (MemoryError, OSError, ValueError) as e:
        raise RenderFailure(f"Failed to allocate render buffer: {str(e)}") from e


def render_image(
    source: Any,
    settings: EditorSettings,
    seed: Optional[int] = None,
    registry: Optional[StageExecutorRegistry] = None,
    stage_order: Sequence[str] = PIPELINE_ORDER,
) -> RenderResult:
    """
    Render the source image with the given settings.

    Args:
        source: Source PIL Image (read only)
        settings: Adjustment values
        seed: Grain seed (None = draw a fresh one)
        registry: Stage registry (default: global registry)
        stage_order: Stage names in execution order

    Returns:
        RenderResult with the final image and the seed used

    Raises:
        RenderFailure: If the source cannot be rendered at all
    """
    canvas = _prepare_source(source)
    registry = registry or get_default_registry()
    if seed is None:
        seed = new_render_seed()

    context = {"seed": seed, "size": canvas.size}
    skipped: List[str] = []

    for stage_name in stage_order:
        try:
            output = registry.execute(stage_name, canvas, settings, context)
        except MemoryError as e:
            raise RenderFailure(f"Out of memory in stage '{stage_name}'") from e
        except Exception as e:
            logger.warning(f"Stage '{stage_name}' failed, skipping: {str(e)}")
            skipped.append(stage_name)
            continue

        if output is None or getattr(output, "size", None) != canvas.size:
            logger.warning(f"Stage '{stage_name}' returned an unusable image, skipping")
            skipped.append(stage_name)
            continue

        canvas = output

    return RenderResult(image=canvas, settings=settings, seed=seed, skipped_stages=skipped)
