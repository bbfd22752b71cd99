"""
GestureController - Turns pointer, keyboard and drop events into slot edits.

State machine:

    idle -> creating | moving | resizing(left/right) -> idle

At most one gesture runs at a time; a press while a gesture is active is
ignored. Each gesture keeps the slot snapshot taken at press time and
recomputes from it plus the total pointer delta, so rounding never
accumulates during a drag. Palette drags keep a separate hover preview
that never touches the model until the drop.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from config import (
    DROP_DEFAULT_LEFT_PX,
    DROP_DEFAULT_RIGHT_PX,
    DROP_MIN_PREVIEW_PX,
    DROP_PREVIEW_OFFSET_PX,
    MIN_LEN,
)
from core.interval_model import BOUNDARY_END, BOUNDARY_START, IntervalModel
from models.palette import DropPayload
from models.timeline import Category, Slot
from runtime_config import get_config

logger = logging.getLogger(__name__)

EDGE_LEFT = "left"
EDGE_RIGHT = "right"

KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_DELETE = "delete"


# ---------------------------------------------------------------------------
# Gesture states
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    mode = "none"


@dataclass(frozen=True)
class Creating:
    """Blank-area drag. The provisional slot is not part of the model."""
    anchor: float          # snapped press time
    provisional: Slot
    mode = "creating"


@dataclass(frozen=True)
class Moving:
    target_id: str
    origin: Slot
    pointer_offset: float  # press x minus the slot's left edge, in pixels
    mode = "moving"


@dataclass(frozen=True)
class Resizing:
    target_id: str
    origin: Slot
    edge: str              # EDGE_LEFT | EDGE_RIGHT
    press_x: float

    @property
    def mode(self) -> str:
        return f"resizing-{self.edge}"


GestureState = Union[Idle, Creating, Moving, Resizing]


@dataclass(frozen=True)
class DragPreview:
    """Hover rectangle of a palette drag over the track."""
    start_x: float
    current_x: float
    payload: DropPayload

    @property
    def left(self) -> float:
        return min(self.start_x, self.current_x)

    @property
    def right(self) -> float:
        return max(self.start_x, self.current_x)

    @property
    def width(self) -> float:
        return self.right - self.left


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class GestureController:
    """Interaction state machine over an IntervalModel.

    Pointer x values are track pixels; they are clamped to the track on
    every event, so a release outside the track acts like a release at
    its edge.
    """

    def __init__(self, model: IntervalModel):
        self.model = model
        self.state: GestureState = Idle()
        self.preview: Optional[DragPreview] = None
        self.selected_id: Optional[str] = None

    # -- Queries -----------------------------------------------------------

    @property
    def timebase(self):
        return self.model.timebase

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    @property
    def mode(self) -> str:
        return self.state.mode

    @property
    def selected(self) -> Optional[Slot]:
        if self.selected_id is None:
            return None
        return self.model.get(self.selected_id)

    @property
    def provisional(self) -> Optional[Slot]:
        if isinstance(self.state, Creating):
            return self.state.provisional
        return None

    def visible_slots(self) -> List[Slot]:
        """Model slots plus the provisional slot of a blank drag, for drawing."""
        slots = self.model.slots
        if self.provisional is not None:
            slots.append(self.provisional)
        return slots

    def hit(self, x: float):
        """Classify a press at *x*.

        Returns (slot, part) where part is "left", "right", "body", or
        (None, "blank") when no slot is under the pointer.
        """
        tb = self.timebase
        handle = get_config().edge_handle_px
        slot = self.model.hit_test(x)
        if slot is None:
            return None, "blank"
        left = tb.to_pixel(slot.start)
        right = tb.to_pixel(slot.end)
        if x - left <= handle and x - left <= right - x:
            return slot, EDGE_LEFT
        if right - x <= handle:
            return slot, EDGE_RIGHT
        return slot, "body"

    # -- Pointer -----------------------------------------------------------

    def press(self, x: float) -> bool:
        """Pointer down anywhere on the track; dispatches on what is hit."""
        if not self.is_idle or not self.timebase.ready:
            return False
        x = self.timebase.clamp_x(x)
        slot, part = self.hit(x)
        if slot is None:
            return self.press_blank(x)
        if part == "body":
            return self.press_body(slot.id, x)
        return self.press_edge(slot.id, part, x)

    def press_blank(self, x: float) -> bool:
        """Start a new slot at the snapped press position."""
        if not self.is_idle or not self.timebase.ready:
            return False
        tb = self.timebase
        x = tb.clamp_x(x)
        anchor = tb.snap_clamp(tb.to_seconds(x), 0.0, tb.upper_bound)
        provisional = Slot(
            start=anchor,
            end=anchor,
            participants=[],
            category=Category.DIALOGUE,
            color=self.model.colors.peek(),
        )
        self.state = Creating(anchor=anchor, provisional=provisional)
        self.selected_id = None
        logger.debug("Gesture creating at %.3f", anchor)
        return True

    def press_body(self, slot_id: str, x: float) -> bool:
        """Start moving an existing slot."""
        slot = self.model.get(slot_id)
        if not self.is_idle or slot is None:
            return False
        x = self.timebase.clamp_x(x)
        offset = x - self.timebase.to_pixel(slot.start)
        self.state = Moving(target_id=slot.id, origin=slot.copy(), pointer_offset=offset)
        self.selected_id = slot.id
        logger.debug("Gesture moving %s", slot.id)
        return True

    def press_edge(self, slot_id: str, edge: str, x: float) -> bool:
        """Start resizing an existing slot from its left or right edge."""
        slot = self.model.get(slot_id)
        if not self.is_idle or slot is None or edge not in (EDGE_LEFT, EDGE_RIGHT):
            return False
        x = self.timebase.clamp_x(x)
        self.state = Resizing(target_id=slot.id, origin=slot.copy(), edge=edge, press_x=x)
        self.selected_id = slot.id
        logger.debug("Gesture resizing-%s %s", edge, slot.id)
        return True

    def move(self, x: float) -> bool:
        """Pointer moved. Returns True when something visible changed."""
        state = self.state
        if isinstance(state, Idle):
            return False
        tb = self.timebase
        x = tb.clamp_x(x)

        if isinstance(state, Creating):
            t = tb.snap_clamp(tb.to_seconds(x), 0.0, tb.upper_bound)
            start, end = min(state.anchor, t), max(state.anchor, t)
            provisional = state.provisional.copy(start=start, end=end)
            self.state = Creating(anchor=state.anchor, provisional=provisional)
            return True

        if isinstance(state, Moving):
            target_start = tb.to_seconds(x - state.pointer_offset)
            delta = target_start - state.origin.start
            self.model.move_by(state.target_id, delta, origin=state.origin)
            return True

        # Resizing
        delta = tb.to_seconds(x) - tb.to_seconds(state.press_x)
        if state.edge == EDGE_LEFT:
            self.model.resize_boundary(state.target_id, BOUNDARY_START, state.origin.start + delta)
        else:
            self.model.resize_boundary(state.target_id, BOUNDARY_END, state.origin.end + delta)
        return True

    def release(self, x: Optional[float] = None) -> Optional[Slot]:
        """Pointer up. Ends the active gesture.

        A blank drag shorter than MIN_LEN is discarded; a longer one is
        committed under a fresh id and selected. Returns the committed
        or edited slot, if any.
        """
        if x is not None:
            self.move(x)
        state = self.state
        self.state = Idle()

        if isinstance(state, Creating):
            provisional = state.provisional
            if not self.timebase.min_len_ok(provisional.start, provisional.end):
                logger.debug("Discarded provisional slot %.3f-%.3f",
                             provisional.start, provisional.end)
                return None
            self.model.colors.next()
            slot = self.model.insert(provisional)
            if slot is not None:
                self.selected_id = slot.id
            return slot

        if isinstance(state, (Moving, Resizing)):
            return self.model.get(state.target_id)
        return None

    # -- Palette drag ------------------------------------------------------

    def drag_over(self, x: float, payload: DropPayload) -> bool:
        """A palette chip hovers the track at *x*. Updates the preview only."""
        if payload is None or payload.is_empty:
            self.preview = None
            return False
        x = self.timebase.clamp_x(x)
        if self.preview is None:
            self.preview = DragPreview(start_x=x, current_x=self.timebase.clamp_x(x + DROP_PREVIEW_OFFSET_PX),
                                       payload=payload)
        else:
            self.preview = DragPreview(start_x=self.preview.start_x, current_x=x,
                                       payload=self.preview.payload)
        return True

    def drag_leave(self):
        self.preview = None

    def drop(self, x: float, payload: DropPayload) -> Optional[Slot]:
        """A palette chip was dropped at *x*.

        Uses the hover preview for the new slot's span when it is at
        least DROP_MIN_PREVIEW_PX wide, otherwise a default-width span
        around the drop point. The span only matters when the drop
        misses every slot; a hit merges into that slot instead.
        """
        preview = self.preview
        self.preview = None
        if payload is None or payload.is_empty:
            return None
        if not self.is_idle or not self.timebase.ready:
            return None

        tb = self.timebase
        drop_x = tb.clamp_x(x)
        if preview is not None and preview.width >= DROP_MIN_PREVIEW_PX:
            start_x, end_x = preview.left, preview.right
        else:
            start_x, end_x = drop_x - DROP_DEFAULT_LEFT_PX, drop_x + DROP_DEFAULT_RIGHT_PX

        upper = tb.upper_bound
        start = tb.snap_clamp(tb.to_seconds(max(0.0, start_x)), 0.0, max(0.0, upper - MIN_LEN))
        end = tb.snap_clamp(tb.to_seconds(end_x), start + MIN_LEN, upper)
        slot = self.model.merge_at_drop(drop_x, payload, start, end)
        logger.debug("Drop %s at x=%.1f -> %s", payload, drop_x, slot.id if slot else None)
        return slot

    # -- Keyboard ----------------------------------------------------------

    def nudge(self, direction: int, large: bool = False) -> bool:
        """Shift the selected slot by one nudge step (direction -1 or +1)."""
        slot = self.selected
        if slot is None or not self.is_idle:
            return False
        step = get_config().nudge_for(large)
        self.model.move_by(slot.id, step if direction > 0 else -step)
        return True

    def delete_selected(self) -> bool:
        slot = self.selected
        if slot is None or not self.is_idle:
            return False
        self.model.delete_by_id(slot.id)
        self.selected_id = None
        return True

    def key_press(self, key: str, modifier: bool = False) -> bool:
        """Arrow keys nudge the selection, Delete/Backspace removes it."""
        if key == KEY_LEFT:
            return self.nudge(-1, large=modifier)
        if key == KEY_RIGHT:
            return self.nudge(+1, large=modifier)
        if key == KEY_DELETE:
            return self.delete_selected()
        return False

    def select(self, slot_id: Optional[str]):
        if slot_id is None or self.model.get(slot_id) is not None:
            self.selected_id = slot_id
