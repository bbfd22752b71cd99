"""
Cast lanes - Per-participant views of a slot list.

Used by the single-lane cast editor: while one participant's slots are
edited, every other participant is shown as a read-only ghost lane.
"""
import re
from typing import Iterable, List, Optional

from config import AUTO_COLORS
from models.timeline import GhostLane, Slot


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")[:40]
    return slug or "cast"


def build_ghost_lanes(slots: Iterable[Slot], exclude: Optional[str] = None,
                      colors: Optional[List[str]] = None) -> List[GhostLane]:
    """Group slot spans by participant.

    Args:
        slots: Slot list (any order).
        exclude: Participant whose lane is being edited; left out.
        colors: Lane colours, assigned in first-seen participant order.

    Returns:
        One lane per participant, spans sorted by start.
    """
    colors = colors or AUTO_COLORS
    lanes: dict[str, GhostLane] = {}
    for slot in slots:
        if slot.end <= slot.start:
            continue
        for name in slot.participants:
            if name == exclude:
                continue
            lane = lanes.get(name)
            if lane is None:
                lane = GhostLane(
                    id=slugify(name),
                    name=name,
                    color=colors[len(lanes) % len(colors)],
                )
                lanes[name] = lane
            lane.spans.append((slot.start, slot.end))
    for lane in lanes.values():
        lane.spans.sort()
    return list(lanes.values())

