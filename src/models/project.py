"""
TimelineDocument - The persisted timeline of one video.

Bundles what the editor saves for a video:
  1. Slots:        the annotated intervals
  2. Cast library: participant metadata shown in the palette
  3. updatedAt:    timestamp stamped by the store on every save
"""
from dataclasses import dataclass, field
from typing import List, Optional

from models.timeline import Slot


@dataclass
class TimelineDocument:
    """Snapshot of a video's slots as accepted by the store.

    Attributes:
        video_id: Identifier of the video the slots belong to.
        slots: Slot list, sorted by start.
        cast_library: Participant metadata dicts ({id, name, role, ...}).
        updated_at: ISO-8601 timestamp of the last accepted save.
    """
    video_id: str = ""
    slots: List[Slot] = field(default_factory=list)
    cast_library: List[dict] = field(default_factory=list)
    updated_at: Optional[str] = None

    @property
    def participant_names(self) -> List[str]:
        """Cast library names, in library order."""
        return [c.get("name", "") for c in self.cast_library if c.get("name")]

    # -- Serialization -----------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "slots": [s.to_dict() for s in self.slots],
            "castLibrary": [dict(c) for c in self.cast_library],
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, video_id: str, data: dict) -> "TimelineDocument":
        return cls(
            video_id=video_id,
            slots=[Slot.from_dict(s) for s in data.get("slots", [])],
            cast_library=[dict(c) for c in data.get("castLibrary", [])],
            updated_at=data.get("updatedAt"),
        )
