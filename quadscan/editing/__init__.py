"""
Editing: interactive adjustment of a document quadrilateral

Maps detector output onto the preview, lets the user drag corner and edge
handles on the edit screen, and converts the result for perspective
correction.

Flow:
1. Detector -> display transform (live preview)
2. Default quadrilateral fallback when nothing was detected
3. Hit testing and synchronized corner/edge dragging
4. Display -> image -> cartesian conversion on commit
"""

from quadscan.editing.config_loader import load_config
from quadscan.editing.editor import (
    NullRenderer,
    QuadrilateralEditor,
    QuadrilateralRenderer,
    clamp_point,
)
from quadscan.editing.pipeline import (
    aspect_fit_rect,
    default_quadrilateral,
    detector_to_display,
    detector_to_display_transforms,
    display_to_image,
    image_to_cartesian,
    image_to_display,
)
from quadscan.editing.processor import EditSession, PreviewOverlay
from quadscan.editing.types import (
    CommitResult,
    DragSession,
    EditorConfig,
    EditorState,
    GesturePhase,
)

__all__ = [
    "EditSession",
    "PreviewOverlay",
    "QuadrilateralEditor",
    "QuadrilateralRenderer",
    "NullRenderer",
    "clamp_point",
    "load_config",
    "aspect_fit_rect",
    "default_quadrilateral",
    "detector_to_display",
    "detector_to_display_transforms",
    "display_to_image",
    "image_to_cartesian",
    "image_to_display",
    "CommitResult",
    "DragSession",
    "EditorConfig",
    "EditorState",
    "GesturePhase",
]
