import logging

from PyQt6.QtCore import QThread, pyqtSignal

from core.session import SaveTicket
from persistence.timeline_store import PersistenceError, TimelineStore

logger = logging.getLogger(__name__)


class SaveTimelineThread(QThread):
    """Background thread writing a slot snapshot to the timeline store"""
    finished = pyqtSignal(bool, str, object)  # success, message, (ticket, document)

    def __init__(self, store: TimelineStore, ticket: SaveTicket):
        super().__init__()
        self.store = store
        self.ticket = ticket

    def run(self):
        try:
            document = self.store.save(self.ticket.video_id, self.ticket.slots, self.ticket.cast_library)
        except PersistenceError as e:
            logger.warning("Save thread failed: %s", e)
            self.finished.emit(False, str(e), (self.ticket, None))
            return
        except Exception as e:
            logger.exception("Unexpected error while saving %s", self.ticket.video_id)
            self.finished.emit(False, f"Unexpected error: {e}", (self.ticket, None))
            return
        self.finished.emit(True, f"Saved {len(document.slots)} slot(s)", (self.ticket, document))
