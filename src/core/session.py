"""
EditorSession - One editing session over a video's slot timeline.

Ties the editor core together and is the single owner of the slot set:

    TimeBase -> IntervalModel -> GestureController
                              -> PlaybackSync
                              -> BulkCodec (import / export)

The rendering layer reads state from the session and feeds events into
``session.gestures``; nothing else mutates the slots.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from config import DUPLICATE_GAP, MIN_LEN
from core import bulk_codec
from core.cast_lanes import build_ghost_lanes
from core.gesture import GestureController
from core.interval_model import IntervalModel
from core.palette import ColorCycle, Palette
from core.playback_sync import MediaPlayer, PlaybackSync
from core.timebase import TimeBase
from models.project import TimelineDocument
from models.timeline import Category, GhostLane, Slot, unique_participants
from persistence.timeline_store import PersistenceError
from runtime_config import get_config

logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"


@dataclass
class SaveTicket:
    """A snapshot handed to the store, tagged with the model revision it was taken at."""
    video_id: str
    slots: List[Slot]
    cast_library: list
    revision: int


class EditorSession:
    """Editing session for one video."""

    def __init__(self, video_id: str = "", player: Optional[MediaPlayer] = None,
                 palette: Optional[Palette] = None, pixel_width: float = 0.0):
        config = get_config()
        self.video_id = video_id
        self.colors = ColorCycle()
        self.timebase = TimeBase(pixel_width=pixel_width, snap_step=config.snap_step)
        self.model = IntervalModel(self.timebase, colors=self.colors)
        self.gestures = GestureController(self.model)
        self.playback = PlaybackSync(player)
        self.palette = palette or Palette()
        self.cast_library: list = []
        self.updated_at: Optional[str] = None

        self.save_status = SaveStatus.IDLE
        self.status_message = ""
        self.import_error: Optional[str] = None

        if player is not None:
            self.timebase.set_duration(player.duration)

    # -- Geometry / playback -------------------------------------------------

    @property
    def slots(self) -> List[Slot]:
        return self.model.slots

    def resize(self, pixel_width: float):
        self.timebase.resize(pixel_width)

    def set_duration(self, duration: float):
        """Media duration became known. Stored slots are re-clamped to it."""
        previous = self.timebase.duration
        self.timebase.set_duration(duration)
        if self.timebase.ready and self.timebase.duration != previous and len(self.model):
            selected = self.gestures.selected_id
            count = len(self.model)
            self.model.replace_all(self.model.slots)
            self.gestures.selected_id = selected if self.model.get(selected or "") else None
            if len(self.model) != count:
                logger.info("Dropped %d slot(s) past the new duration %.2fs",
                            count - len(self.model), self.timebase.duration)

    def on_time_update(self, t: Optional[float] = None) -> bool:
        """Playback time moved. Returns True when the active set changed."""
        return self.playback.update(self.model.slots, t)

    def active_slots(self) -> List[Slot]:
        return self.playback.active(self.model.slots)

    def seek(self, t: float) -> float:
        return self.playback.seek(t)

    def seek_to_x(self, x: float) -> float:
        """Double-click on the track: jump the player to that position."""
        return self.playback.seek(self.timebase.to_seconds(self.timebase.clamp_x(x)))

    def ghost_lanes(self, exclude: Optional[str] = None) -> List[GhostLane]:
        return build_ghost_lanes(self.model.slots, exclude=exclude)

    # -- Loading -------------------------------------------------------------

    def load_slots(self, slots: Iterable[Slot]):
        """Replace the slot set with initial data (no selection kept)."""
        self.model.replace_all(slots)
        self.gestures.selected_id = None

    def load_document(self, document: TimelineDocument):
        self.load_slots(document.slots)
        self.cast_library = list(document.cast_library)
        self.updated_at = document.updated_at
        names = document.participant_names
        if names:
            self.palette = Palette(participants=names, categories=self.palette.categories)

    # -- Editing commands ----------------------------------------------------

    def add_at_current(self, seconds: Optional[float] = None) -> Optional[Slot]:
        """Insert a dialogue slot starting at the current playback time."""
        if not self.gestures.is_idle:
            return None
        seconds = get_config().quick_add_seconds if seconds is None else seconds
        t = self.playback.player.current_time if self.playback.player is not None else self.playback.current_time
        upper = self.timebase.upper_bound
        start = self.timebase.snap_clamp(t, 0.0, max(0.0, upper - MIN_LEN))
        end = self.timebase.snap_clamp(t + seconds, start + MIN_LEN, upper)
        slot = self.model.insert(Slot(start=start, end=end, category=Category.DIALOGUE,
                                      color=self.colors.next()))
        if slot is not None:
            self.gestures.select(slot.id)
        return slot

    def duplicate_selected(self) -> Optional[Slot]:
        """Copy the selected slot to just after itself."""
        source = self.gestures.selected
        if source is None or not self.gestures.is_idle:
            return None
        length = source.length
        upper = self.timebase.upper_bound
        start = self.timebase.snap_clamp(source.end + DUPLICATE_GAP, 0.0, max(0.0, upper - length))
        end = self.timebase.snap_clamp(start + length, start + MIN_LEN, upper)
        slot = self.model.insert(source.copy(start=start, end=end))
        if slot is not None:
            self.gestures.select(slot.id)
        return slot

    def update_selected(self, **patch) -> Optional[Slot]:
        """Edit the selected slot's fields from the inspector.

        Accepts label, participants, category, color, start and end.
        A category change also resets the colour to the category colour.
        """
        slot = self.gestures.selected
        if slot is None:
            return None
        changes = {}
        if "label" in patch:
            changes["label"] = str(patch["label"] or "")
        if "participants" in patch:
            changes["participants"] = unique_participants(patch["participants"] or [])
        if "category" in patch:
            category = Category.parse(patch["category"])
            if category is not None:
                changes["category"] = category
                changes["color"] = category.color
        if "color" in patch and patch["color"]:
            changes["color"] = patch["color"]
        if changes:
            self.model.patch(slot.id, **changes)
        if "start" in patch or "end" in patch:
            start = float(patch.get("start", slot.start))
            end = float(patch.get("end", slot.end))
            self.model.set_span(slot.id, start, end)
        return self.model.get(slot.id)

    def delete_selected(self) -> bool:
        return self.gestures.delete_selected()

    # -- Bulk import / export -----------------------------------------------

    def preview_import(self, text: str) -> List[Slot]:
        """Decode and normalize pasted text without applying it.

        Raises:
            BulkFormatError: The text is neither JSON nor CSV.
        """
        # Previewing leaves the session colour cycle where it was
        colors = ColorCycle(self.colors.colors, start=self.colors.index)
        return self.model.normalize_all(bulk_codec.decode(text, colors))

    def import_text(self, text: str) -> bool:
        """Replace every slot with the pasted set.

        On a format error nothing changes and ``import_error`` holds the
        message for the user.
        """
        self.import_error = None
        if not self.gestures.is_idle:
            return False
        try:
            slots = bulk_codec.decode(text, self.colors)
        except bulk_codec.BulkFormatError as e:
            self.import_error = e.message
            logger.warning("Bulk import rejected: %s", e.message)
            return False
        self.model.replace_all(slots)
        self.gestures.selected_id = None
        logger.info("Imported %d slot(s)", len(self.model))
        return True

    def export_text(self) -> str:
        return bulk_codec.encode(self.model.slots)

    # -- Saving --------------------------------------------------------------

    def begin_save(self) -> SaveTicket:
        """Take the snapshot to hand to the store."""
        self.save_status = SaveStatus.SAVING
        self.status_message = "Saving..."
        return SaveTicket(
            video_id=self.video_id,
            slots=[s.copy() for s in self.model.slots],
            cast_library=list(self.cast_library),
            revision=self.model.revision,
        )

    def finish_save(self, ticket: SaveTicket, document: Optional[TimelineDocument],
                    error: Optional[str] = None) -> bool:
        """Record the outcome of a save.

        The accepted snapshot replaces the local slots only when nothing
        was edited since the ticket was taken and no gesture is running;
        otherwise the newer local state wins. A failure leaves the model
        untouched.

        Returns:
            True when the accepted snapshot was applied.
        """
        if document is None:
            self.save_status = SaveStatus.FAILED
            self.status_message = f"Save failed: {error}" if error else "Save failed"
            logger.warning("Saving timeline %s failed: %s", ticket.video_id, error)
            return False

        self.save_status = SaveStatus.SAVED
        self.status_message = "Saved"
        self.updated_at = document.updated_at
        if self.model.revision != ticket.revision or not self.gestures.is_idle:
            logger.debug("Local edits since save; keeping local slots")
            return False
        selected = self.gestures.selected_id
        self.model.replace_all(document.slots)
        self.cast_library = list(document.cast_library)
        self.gestures.select(selected if self.model.get(selected or "") else None)
        return True

    def save(self, store) -> bool:
        """Save synchronously through *store* (a TimelineStore-like object)."""
        ticket = self.begin_save()
        try:
            document = store.save(ticket.video_id, ticket.slots, ticket.cast_library)
        except PersistenceError as e:
            self.finish_save(ticket, None, str(e))
            return False
        self.finish_save(ticket, document)
        return True
