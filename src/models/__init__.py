"""
Slot Timeline Data Models.

Public API:

  Timeline:
    Category, Slot, GhostLane
    unique_participants, new_slot_id

  Palette:
    PaletteEntry, DropPayload

  Document:
    TimelineDocument
"""

from models.timeline import (
    Category,
    Slot,
    GhostLane,
    unique_participants,
    new_slot_id,
)
from models.palette import PaletteEntry, DropPayload
from models.project import TimelineDocument

__all__ = [
    # Timeline
    "Category",
    "Slot",
    "GhostLane",
    "unique_participants",
    "new_slot_id",
    # Palette
    "PaletteEntry",
    "DropPayload",
    # Document
    "TimelineDocument",
]
