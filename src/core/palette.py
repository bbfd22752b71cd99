"""
Palette - Chip data for the editor and the per-session colour cycle.
"""
from typing import Iterable, List, Optional

from config import AUTO_COLORS, DEFAULT_CAST_PALETTE
from models.palette import PaletteEntry
from models.timeline import Category, unique_participants


class ColorCycle:
    """Hands out auto-assigned slot colours in a fixed rotation.

    Owned by one editing session; the index only ever moves forward so
    consecutive calls never repeat a colour until the cycle wraps.
    """

    def __init__(self, colors: Optional[List[str]] = None, start: int = 0):
        self.colors = list(colors or AUTO_COLORS)
        self.index = start

    def next(self) -> str:
        color = self.colors[self.index % len(self.colors)]
        self.index += 1
        return color

    def peek(self) -> str:
        return self.colors[self.index % len(self.colors)]


class Palette:
    """Ordered participant and category chips.

    Participants are de-duplicated in first-seen order and fall back to
    the built-in cast when the caller supplies none. Categories are
    restricted to the known enum and fall back to all of them.
    """

    def __init__(self, participants: Optional[Iterable[str]] = None,
                 categories: Optional[Iterable] = None):
        names = unique_participants(participants or [])
        self.participants: List[str] = names or list(DEFAULT_CAST_PALETTE)

        kinds: List[Category] = []
        for value in categories or []:
            kind = Category.parse(value)
            if kind is not None and kind not in kinds:
                kinds.append(kind)
        self.categories: List[Category] = kinds or list(Category)

    def participant_entries(self) -> List[PaletteEntry]:
        return [PaletteEntry(participant_name=name) for name in self.participants]

    def category_entries(self) -> List[PaletteEntry]:
        return [PaletteEntry(category=kind) for kind in self.categories]

    def entries(self) -> List[PaletteEntry]:
        """All chips: participants first, then categories."""
        return self.participant_entries() + self.category_entries()
