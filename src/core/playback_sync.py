"""
PlaybackSync - Which slots are active at the current playback time.

The Media Player is an outside collaborator: the editor reads its time
and duration and sends it seek requests, nothing else.
"""
import logging
from typing import Iterable, List, Optional, Protocol, Set

from core.timebase import clamp
from models.timeline import Slot

logger = logging.getLogger(__name__)


class MediaPlayer(Protocol):
    """What the editor needs from a media player."""

    @property
    def current_time(self) -> float: ...

    @property
    def duration(self) -> float: ...

    def seek(self, t: float) -> None: ...


def active_at(slots: Iterable[Slot], t: float) -> List[Slot]:
    """Slots containing *t*, boundaries included.

    A linear scan; slot lists are tens to a few hundred entries.
    """
    return [s for s in slots if s.start <= t <= s.end]


class PlaybackSync:
    """Tracks the active slot set as playback time advances."""

    def __init__(self, player: Optional[MediaPlayer] = None):
        self.player = player
        self.current_time = 0.0
        self.active_ids: Set[str] = set()

    @property
    def duration(self) -> float:
        if self.player is None:
            return 0.0
        return max(0.0, self.player.duration or 0.0)

    def active(self, slots: Iterable[Slot], t: Optional[float] = None) -> List[Slot]:
        """Active slots at *t* (defaults to the last known time)."""
        return active_at(slots, self.current_time if t is None else t)

    def update(self, slots: Iterable[Slot], t: Optional[float] = None) -> bool:
        """Recompute the active set for a time update.

        Args:
            slots: Current slot list.
            t: Playback time; read from the player when omitted.

        Returns:
            True when the active set changed.
        """
        if t is None:
            t = self.player.current_time if self.player is not None else self.current_time
        self.current_time = t
        ids = {s.id for s in active_at(slots, t)}
        changed = ids != self.active_ids
        self.active_ids = ids
        return changed

    def is_active(self, slot_id: str) -> bool:
        return slot_id in self.active_ids

    def seek(self, t: float) -> float:
        """Ask the player to jump to *t*, clamped to [0, duration]."""
        target = clamp(t, 0.0, self.duration)
        if self.player is not None:
            self.player.seek(target)
        else:
            logger.debug("Seek to %.3f ignored: no media player", target)
        self.current_time = target
        return target
