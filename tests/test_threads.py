import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from core.session import SaveTicket
from models.timeline import Slot
from persistence import PersistenceError, TimelineStore
from ui.threads import SaveTimelineThread

# Tests for the background save worker


class BrokenStore:
    def __init__(self, error):
        self.error = error

    def save(self, video_id, slots, cast_library=None):
        raise self.error


def make_ticket():
    return SaveTicket(video_id="v1", slots=[Slot(id="a", start=1, end=2)], cast_library=[], revision=3)


def run_thread(qtbot, store):
    thread = SaveTimelineThread(store, make_ticket())
    with qtbot.waitSignal(thread.finished, timeout=5000) as blocker:
        thread.start()
    thread.wait()
    return blocker.args


def test_save_success(qtbot, tmp_path):
    success, message, (ticket, document) = run_thread(qtbot, TimelineStore(tmp_path / "timelines.json"))
    assert success
    assert message == "Saved 1 slot(s)"
    assert ticket.revision == 3
    assert [s.id for s in document.slots] == ["a"]


def test_store_error_reported(qtbot):
    success, message, (ticket, document) = run_thread(qtbot, BrokenStore(PersistenceError("disk full")))
    assert not success
    assert message == "disk full"
    assert document is None


def test_unexpected_error_still_finishes(qtbot):
    success, message, (ticket, document) = run_thread(qtbot, BrokenStore(KeyError("slots")))
    assert not success
    assert "slots" in message
    assert document is None
    assert ticket.video_id == "v1"
