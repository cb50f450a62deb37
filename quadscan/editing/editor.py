"""
Corner/edge editor.

Turns a stream of pointer positions into coordinated corner updates on a
display-space quadrilateral:

- The handle under the first drag update is resolved once and held for the
  whole gesture, so the active handle never jumps mid-drag.
- Corner handles move one corner by the pointer delta.
- Midpoint handles move both adjacent corners by the same delta, which
  translates the edge.
- Every moved corner is clamped to the view bounds.

Midpoints are derived from the corners on every access, so the quadrilateral
handed to the renderer always has midpoints that match its corners.

The editor owns the quadrilateral and the drag session exclusively; the
renderer and callers only ever receive copies. It is not thread-safe; drive
it from a single event thread.
"""

import logging
from typing import Dict, Optional, Protocol

from quadscan.common.types import Point, Size
from quadscan.editing.config_loader import load_config
from quadscan.editing.types import (
    DragSession,
    EditorConfig,
    EditorState,
    GesturePhase,
)
from quadscan.geometry.hit_testing import Handle, closest_handle, handle_positions
from quadscan.geometry.quadrilateral import Quadrilateral

logger = logging.getLogger(__name__)


class QuadrilateralRenderer(Protocol):
    """Drawing collaborator that turns a quadrilateral into pixels."""

    def draw_quadrilateral(self, quad: Quadrilateral, animated: bool) -> None: ...

    def remove_quadrilateral(self) -> None: ...

    def highlight_handle(self, handle: Handle) -> None: ...

    def reset_highlighted_handles(self) -> None: ...


class NullRenderer:
    """Renderer that draws nothing."""

    def draw_quadrilateral(self, quad: Quadrilateral, animated: bool) -> None:
        pass

    def remove_quadrilateral(self) -> None:
        pass

    def highlight_handle(self, handle: Handle) -> None:
        pass

    def reset_highlighted_handles(self) -> None:
        pass


def clamp_point(point: Point, bounds: Size) -> Point:
    """Clamp ``point`` to [0, width] x [0, height]."""
    return Point(
        x=min(max(point.x, 0.0), bounds.width),
        y=min(max(point.y, 0.0), bounds.height),
    )


class QuadrilateralEditor:
    """
    Interaction state machine for editing a quadrilateral by dragging handles.

    States: IDLE (no drag session) and DRAGGING (session holding a resolved
    handle). With no quadrilateral, or when not editable, drag input is inert.

    Example:
        >>> editor = QuadrilateralEditor(Size(width=300, height=400))
        >>> editor.draw_quadrilateral(quad)
        >>> editor.handle_gesture(Point(x=5, y=5), GesturePhase.BEGAN)
        >>> editor.handle_gesture(Point(x=25, y=15), GesturePhase.MOVED)
        >>> editor.handle_gesture(Point(x=25, y=15), GesturePhase.ENDED)
    """

    def __init__(
        self,
        view_size: Size,
        renderer: Optional[QuadrilateralRenderer] = None,
        config: Optional[EditorConfig] = None,
        editable: bool = True,
    ):
        """
        Initialize the editor.

        Args:
            view_size: Bounds of the interactive view; drags are clamped to it.
            renderer: Drawing collaborator. Defaults to a NullRenderer.
            config: Pre-loaded configuration. If None, loads the default file.
            editable: Whether drag input edits the quadrilateral.
        """
        self.view_size = view_size
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.config = config if config is not None else load_config()
        self.editable = editable

        self._quad: Optional[Quadrilateral] = None
        self._session: Optional[DragSession] = None

    @property
    def quad(self) -> Optional[Quadrilateral]:
        """Copy of the current quadrilateral; edits go through drag input only."""
        return self._quad.model_copy() if self._quad is not None else None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def state(self) -> EditorState:
        return EditorState.DRAGGING if self._session is not None else EditorState.IDLE

    @property
    def active_handle(self) -> Optional[Handle]:
        return self._session.handle if self._session is not None else None

    def handle_positions(self) -> Dict[Handle, Point]:
        """Positions of all eight handles, or an empty dict without a quad."""
        if self._quad is None:
            return {}
        return handle_positions(self._quad)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_quadrilateral(self, quad: Quadrilateral, animated: bool = False) -> None:
        """Take ownership of ``quad`` (display coordinates) and render it."""
        self._quad = quad.model_copy()
        self.renderer.draw_quadrilateral(self._quad.model_copy(), animated)

    def remove_quadrilateral(self) -> None:
        """Drop the quadrilateral; editing becomes inert until one is drawn."""
        self.end_drag()
        self._quad = None
        self.renderer.remove_quadrilateral()

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def handle_gesture(self, position: Point, phase: GesturePhase) -> None:
        """Dispatch one gesture event."""
        if phase in (GesturePhase.ENDED, GesturePhase.CANCELLED):
            self.end_drag()
        else:
            self.drag_to(position)

    def drag_to(self, position: Point) -> None:
        """
        Process one drag update at ``position`` (display coordinates).

        The first update of a gesture resolves the handle and moves nothing
        (zero delta). Later updates move the resolved handle by the pointer
        delta since the previous update.
        """
        if self._quad is None or not self.editable:
            return

        session = self._session
        if session is None:
            handle = closest_handle(
                position, self._quad, self.config.interaction.hit_radius
            )
            session = DragSession(handle=handle, previous_position=position)
            self._session = session
            if handle is None:
                # Missed every handle; the gesture stays inert until it ends.
                logger.debug(f"Drag at {position} hit no handle")
                return
            logger.debug(f"Drag started on {handle.value} at {position}")
            if self.config.interaction.highlight_active_handle:
                self.renderer.highlight_handle(handle)
        elif session.handle is None:
            return

        delta = position - session.previous_position
        self._move_handle(session.handle, delta)
        session.previous_position = position

        self.renderer.draw_quadrilateral(self._quad.model_copy(), False)

    def end_drag(self) -> None:
        """End or cancel the current gesture. The edit is kept."""
        if self._session is None:
            return
        handle = self._session.handle
        logger.debug(f"Drag ended on {handle.value if handle else None}")
        self._session = None
        self.renderer.reset_highlighted_handles()

    def _move_handle(self, handle: Handle, delta: Point) -> None:
        # New positions are computed from the pre-move corners, then written.
        targets = {
            corner: self._quad.corner(corner) + delta for corner in handle.corners
        }
        for corner, target in targets.items():
            if self.config.interaction.clamp_to_bounds:
                target = clamp_point(target, self.view_size)
            self._quad.set_corner(corner, target)
