"""
Palette - Draggable source chips that seed new slots.
"""
from dataclasses import dataclass
from typing import Optional

from models.timeline import Category


@dataclass(frozen=True)
class DropPayload:
    """Metadata carried by a palette drag.

    A chip carries either a participant name or a category; the drop
    handler treats both fields independently.
    """
    participant: Optional[str] = None
    category: Optional[Category] = None

    @property
    def is_empty(self) -> bool:
        return not self.participant and self.category is None

    @property
    def default_label(self) -> str:
        if self.participant:
            return self.participant
        if self.category is not None:
            return self.category.value
        return ""

    def to_dict(self) -> dict:
        d = {}
        if self.participant:
            d["cast"] = self.participant
        if self.category is not None:
            d["kind"] = self.category.value
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "DropPayload":
        participant = data.get("cast", data.get("participant"))
        if not isinstance(participant, str) or not participant.strip():
            participant = None
        else:
            participant = participant.strip()
        return cls(
            participant=participant,
            category=Category.parse(data.get("kind", data.get("category"))),
        )


@dataclass(frozen=True)
class PaletteEntry:
    """One chip in the palette. Immutable reference data."""
    participant_name: Optional[str] = None
    category: Optional[Category] = None

    @property
    def title(self) -> str:
        if self.participant_name:
            return self.participant_name
        return self.category.value if self.category is not None else ""

    @property
    def color(self) -> Optional[str]:
        return self.category.color if self.category is not None else None

    def payload(self) -> DropPayload:
        """Drag payload produced when this chip is picked up."""
        return DropPayload(participant=self.participant_name, category=self.category)
