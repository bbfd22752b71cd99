"""
Timeline - Slots placed on a video's timebase.

A Slot marks "who speaks when": a time interval on the video with a
label, the participants voicing it and a category that drives its
display colour. Slots are plain data; every rule about where a slot may
sit on the track lives in core.interval_model.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from config import KIND_COLORS


def new_slot_id() -> str:
    return uuid.uuid4().hex[:8]


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------

class Category(str, Enum):
    """Annotation type of a slot."""
    DIALOGUE = "dialogue"
    MUSIC = "music"
    SFX = "sfx"
    FX = "fx"
    NOTE = "note"

    @property
    def color(self) -> str:
        """Canonical display colour of this category."""
        return KIND_COLORS[self.value]

    @classmethod
    def parse(cls, value) -> Optional["Category"]:
        """Return the category named by *value*, or None if unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

def unique_participants(*groups: Iterable[str]) -> List[str]:
    """Merge participant lists into one de-duplicated list.

    Names are stripped, blanks dropped, and the first-seen order kept.
    """
    seen = set()
    result: List[str] = []
    for group in groups:
        for name in group or ():
            if not isinstance(name, str):
                continue
            name = name.strip()
            if not name or name in seen:
                continue
            seen.add(name)
            result.append(name)
    return result


# ---------------------------------------------------------------------------
# Slot
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Slot:
    """A time interval annotated with participants and a category.

    Attributes:
        id: Unique identifier within the owning slot set.
        start: Start time on the video (seconds).
        end: End time on the video (seconds).
        label: Free text shown on the slot.
        participants: Ordered, de-duplicated participant names.
        category: Annotation type.
        color: Display colour (``#rrggbb``); None means "use the category colour".
    """
    id: str = field(default_factory=new_slot_id)
    start: float = 0.0
    end: float = 0.0
    label: str = ""
    participants: List[str] = field(default_factory=list)
    category: Category = Category.DIALOGUE
    color: Optional[str] = None

    def __post_init__(self):
        self.participants = unique_participants(self.participants)
        self.category = Category.parse(self.category) or Category.DIALOGUE

    def __eq__(self, other) -> bool:
        # Participant order does not matter for equality
        if not isinstance(other, Slot):
            return NotImplemented
        return (
            self.id == other.id
            and self.start == other.start
            and self.end == other.end
            and self.label == other.label
            and set(self.participants) == set(other.participants)
            and self.category == other.category
            and self.color == other.color
        )

    @property
    def length(self) -> float:
        return self.end - self.start

    @property
    def display_color(self) -> str:
        return self.color or self.category.color

    def contains(self, t: float) -> bool:
        """True when *t* lies inside the slot, boundaries included."""
        return self.start <= t <= self.end

    def copy(self, **changes) -> "Slot":
        """Return a detached copy with *changes* applied."""
        data = {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "label": self.label,
            "participants": list(self.participants),
            "category": self.category,
            "color": self.color,
        }
        data.update(changes)
        return Slot(**data)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "label": self.label,
            "participants": list(self.participants),
            "category": self.category.value,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Slot":
        participants = data.get("participants", data.get("cast", []))
        return cls(
            id=data.get("id") or new_slot_id(),
            start=float(data.get("start", 0.0)),
            end=float(data.get("end", 0.0)),
            label=data.get("label") or "",
            participants=participants if isinstance(participants, list) else [],
            category=Category.parse(data.get("category", data.get("kind"))) or Category.DIALOGUE,
            color=data.get("color"),
        )


# ---------------------------------------------------------------------------
# Ghost lanes
# ---------------------------------------------------------------------------

@dataclass
class GhostLane:
    """Read-only reference lane showing where one participant speaks.

    Drawn above the editable band of the single-lane cast editor so the
    other participants' timing is visible while editing.
    """
    id: str = ""
    name: str = ""
    color: str = "#bfb8d6"
    spans: List[tuple] = field(default_factory=list)  # [(start, end), ...]
