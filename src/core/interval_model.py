"""
IntervalModel - The slot set of one editing session and its invariants.

Every stored slot satisfies:
  - 0 <= start and start + MIN_LEN <= end <= duration
  - start/end are multiples of the snap step
  - ids are unique within the set
  - the list is sorted by start (stable: ties keep their prior order)

Operations never raise on geometric input. Out-of-range values are
clamped; an insert that cannot reach MIN_LEN is rejected (returns None).
"""
import logging
import math
from typing import Callable, Iterable, List, Optional

from config import MIN_LEN, TIME_EPSILON
from core.palette import ColorCycle
from core.timebase import TimeBase
from models.palette import DropPayload
from models.timeline import Category, Slot, new_slot_id, unique_participants

logger = logging.getLogger(__name__)

BOUNDARY_START = "start"
BOUNDARY_END = "end"


def sort_by_start(slots: Iterable[Slot]) -> List[Slot]:
    """Stable sort on start time."""
    return sorted(slots, key=lambda s: s.start)


class IntervalModel:
    """Owns the slot list and every mutation applied to it.

    Mutations build a new sorted list and swap it in; the returned list
    is a copy the caller may keep. ``revision`` increases on every
    mutation so callers can tell whether a snapshot is still current.
    """

    def __init__(self, timebase: TimeBase, colors: Optional[ColorCycle] = None,
                 id_factory: Callable[[], str] = new_slot_id):
        self.timebase = timebase
        self.colors = colors or ColorCycle()
        self.revision = 0
        self._id_factory = id_factory
        self._slots: List[Slot] = []

    # -- Queries -----------------------------------------------------------

    @property
    def slots(self) -> List[Slot]:
        return list(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(list(self._slots))

    def get(self, slot_id: str) -> Optional[Slot]:
        for slot in self._slots:
            if slot.id == slot_id:
                return slot
        return None

    def hit_test(self, x: float) -> Optional[Slot]:
        """First slot (in start order) whose pixel span contains *x*."""
        tb = self.timebase
        for slot in self._slots:
            if tb.to_pixel(slot.start) <= x <= tb.to_pixel(slot.end):
                return slot
        return None

    # -- Normalization -----------------------------------------------------

    def normalize(self, slot: Slot) -> Optional[Slot]:
        """Clamp and snap *slot* into the track.

        Returns a copy with legal boundaries, or None when the clamped
        slot would be shorter than MIN_LEN.
        """
        if not (math.isfinite(slot.start) and math.isfinite(slot.end)):
            return None
        tb = self.timebase
        upper = tb.upper_bound
        start = tb.snap_clamp(slot.start, 0.0, max(0.0, upper - MIN_LEN))
        end = tb.snap_clamp(slot.end, MIN_LEN, upper)
        if end > upper + TIME_EPSILON or not tb.min_len_ok(start, end):
            return None
        return slot.copy(start=start, end=end)

    def normalize_all(self, slots: Iterable[Slot]) -> List[Slot]:
        """Normalize a batch, dropping slots that fall below MIN_LEN.

        Ids are kept when present and unique within the batch; clashes
        get a numeric suffix and missing ids a fresh one.
        """
        result: List[Slot] = []
        seen = set()
        dropped = 0
        for slot in slots:
            normalized = self.normalize(slot)
            if normalized is None:
                dropped += 1
                continue
            normalized.id = self._unique_id(normalized.id, seen)
            seen.add(normalized.id)
            result.append(normalized)
        if dropped:
            logger.info("Dropped %d slot(s) shorter than %.2fs after clamping", dropped, MIN_LEN)
        return sort_by_start(result)

    def _unique_id(self, wanted: Optional[str], taken) -> str:
        if not wanted:
            wanted = self._id_factory()
        candidate = wanted
        suffix = 1
        while candidate in taken:
            suffix += 1
            candidate = f"{wanted}-{suffix}"
        return candidate

    def _fresh_id(self) -> str:
        taken = {s.id for s in self._slots}
        return self._unique_id(self._id_factory(), taken)

    # -- Mutations ---------------------------------------------------------

    def _commit(self, slots: List[Slot]) -> List[Slot]:
        self._slots = sort_by_start(slots)
        self.revision += 1
        return list(self._slots)

    def _replace(self, updated: Slot) -> List[Slot]:
        return self._commit([updated if s.id == updated.id else s for s in self._slots])

    def insert(self, partial: Slot) -> Optional[Slot]:
        """Add a slot under a fresh id.

        Returns the stored slot, or None when the span is too short.
        """
        normalized = self.normalize(partial)
        if normalized is None:
            logger.warning("Rejected slot %.3f-%.3f: shorter than %.2fs",
                           partial.start, partial.end, MIN_LEN)
            return None
        normalized.id = self._fresh_id()
        self._commit(self._slots + [normalized])
        return normalized

    def move_by(self, slot_id: str, delta: float, origin: Optional[Slot] = None) -> List[Slot]:
        """Shift both boundaries by *delta* seconds, keeping the length.

        Args:
            slot_id: Slot to move.
            delta: Offset in seconds; clamped so the slot stays on the track.
            origin: Slot state to offset from. Defaults to the current
                state; gestures pass the snapshot taken at press time.
        """
        slot = self.get(slot_id)
        if slot is None:
            return self.slots
        base = origin or slot
        tb = self.timebase
        upper = tb.upper_bound
        length = base.end - base.start
        start = tb.snap_clamp(base.start + delta, 0.0, max(0.0, upper - length))
        # A slot longer than the track is cut at the end
        end = min(round(start + length, 6), upper)
        if not tb.min_len_ok(start, end):
            start = tb.snap_clamp(end - MIN_LEN, 0.0, end)
        return self._replace(slot.copy(start=start, end=end))

    def resize_boundary(self, slot_id: str, which: str, value: float) -> List[Slot]:
        """Set one boundary, clamped so the slot keeps MIN_LEN and stays on the track."""
        slot = self.get(slot_id)
        if slot is None:
            return self.slots
        tb = self.timebase
        if which == BOUNDARY_START:
            start = tb.snap_clamp(value, 0.0, slot.end - MIN_LEN)
            updated = slot.copy(start=start)
        elif which == BOUNDARY_END:
            end = tb.snap_clamp(value, slot.start + MIN_LEN, tb.upper_bound)
            updated = slot.copy(end=end)
        else:
            raise ValueError(f"Unknown boundary: {which!r}")
        return self._replace(updated)

    def set_span(self, slot_id: str, start: float, end: float) -> List[Slot]:
        """Write both boundaries at once; the span is normalized, not rejected."""
        slot = self.get(slot_id)
        if slot is None:
            return self.slots
        tb = self.timebase
        upper = tb.upper_bound
        start = tb.snap_clamp(start, 0.0, max(0.0, upper - MIN_LEN))
        end = tb.snap_clamp(end, start + MIN_LEN, upper)
        return self._replace(slot.copy(start=start, end=end))

    def patch(self, slot_id: str, **changes) -> List[Slot]:
        """Update metadata fields (label, participants, category, color)."""
        slot = self.get(slot_id)
        if slot is None:
            return self.slots
        allowed = {k: v for k, v in changes.items()
                   if k in ("label", "participants", "category", "color")}
        return self._replace(slot.copy(**allowed))

    def delete_by_id(self, slot_id: str) -> List[Slot]:
        if self.get(slot_id) is None:
            return self.slots
        return self._commit([s for s in self._slots if s.id != slot_id])

    def merge_at_drop(self, x: float, payload: DropPayload,
                      start: float, end: float) -> Optional[Slot]:
        """Apply a palette drop at pixel *x*.

        On a slot hit the drop merges metadata into that slot: the
        participant joins the slot's participants and a category
        replaces the slot's category and colour. Otherwise a new slot
        spanning [start, end] is inserted.

        Returns the merged or inserted slot (None if the insert was rejected).
        """
        target = self.hit_test(x)
        if target is not None:
            changes = {}
            if payload.participant:
                changes["participants"] = unique_participants(target.participants, [payload.participant])
            if payload.category is not None:
                changes["category"] = payload.category
                changes["color"] = payload.category.color
            merged = target.copy(**changes)
            self._replace(merged)
            logger.debug("Merged drop %s into slot %s", payload, target.id)
            return merged

        category = payload.category or Category.DIALOGUE
        color = payload.category.color if payload.category is not None else self.colors.next()
        return self.insert(Slot(
            start=start,
            end=end,
            label=payload.default_label,
            participants=[payload.participant] if payload.participant else [],
            category=category,
            color=color,
        ))

    def replace_all(self, slots: Iterable[Slot]) -> List[Slot]:
        """Swap in a whole new slot list (import / load)."""
        return self._commit(self.normalize_all(slots))
