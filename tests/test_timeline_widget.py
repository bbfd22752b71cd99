import sys
import os

import pytest
from PyQt6.QtCore import Qt, QPoint, QPointF
from PyQt6.QtGui import QDropEvent

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from core.session import EditorSession
from models.palette import DropPayload
from models.timeline import Category, Slot
from ui.palette_widget import SLOT_MIME, PaletteWidget, payload_from_mime, payload_to_mime
from ui.timeline_widget import TimelineCanvas, TimelineWidget

# Tests for the slot canvas event wiring


class FakePlayer:
    def __init__(self, duration=10.0):
        self.duration = duration
        self.current_time = 0.0
        self.seeks = []

    def seek(self, t):
        self.seeks.append(t)
        self.current_time = t


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def canvas(qtbot, player):
    session = EditorSession(video_id="v1", player=player)
    widget = TimelineCanvas(session)
    qtbot.addWidget(widget)
    widget.resize(1000, 160)
    widget.show()
    qtbot.waitExposed(widget)
    session.resize(widget.width())
    return widget


def point(canvas, t):
    return QPoint(int(round(canvas.session.timebase.to_pixel(t))), canvas.BAND_TOP + 10)


def test_resize_updates_timebase(canvas):
    assert canvas.session.timebase.pixel_width == canvas.width()


def test_blank_drag_creates_slot(canvas, qtbot):
    qtbot.mousePress(canvas, Qt.MouseButton.LeftButton, pos=point(canvas, 1.0))
    with qtbot.waitSignal(canvas.slots_changed, timeout=1000):
        qtbot.mouseRelease(canvas, Qt.MouseButton.LeftButton, pos=point(canvas, 3.0))
    slots = canvas.session.slots
    assert len(slots) == 1
    assert slots[0].start == pytest.approx(1.0, abs=0.05)
    assert slots[0].end == pytest.approx(3.0, abs=0.05)
    assert canvas.session.gestures.selected_id == slots[0].id


def test_click_without_drag_creates_nothing(canvas, qtbot):
    qtbot.mouseClick(canvas, Qt.MouseButton.LeftButton, pos=point(canvas, 5.0))
    assert canvas.session.slots == []
    assert canvas.session.gestures.is_idle


def test_arrow_key_nudges_selection(canvas, qtbot):
    session = canvas.session
    session.load_slots([Slot(id="a", start=2.0, end=3.0)])
    session.gestures.select("a")
    qtbot.keyClick(canvas, Qt.Key.Key_Left)
    assert session.model.get("a").start == 1.9
    qtbot.keyClick(canvas, Qt.Key.Key_Left, Qt.KeyboardModifier.ShiftModifier)
    assert session.model.get("a").start == 1.4
    qtbot.keyClick(canvas, Qt.Key.Key_Delete)
    assert session.slots == []


def test_nudge_reports_selection(canvas, qtbot):
    session = canvas.session
    session.load_slots([Slot(id="a", start=2.0, end=3.0)])
    session.gestures.select("a")
    with qtbot.waitSignal(canvas.slot_selected, timeout=1000) as blocker:
        qtbot.keyClick(canvas, Qt.Key.Key_Right)
    assert blocker.args == ["a"]
    assert session.model.get("a").start == 2.1


def test_double_click_seeks(canvas, qtbot, player):
    with qtbot.waitSignal(canvas.seek_requested, timeout=1000) as blocker:
        qtbot.mouseDClick(canvas, Qt.MouseButton.LeftButton, pos=point(canvas, 4.0))
    assert blocker.args[0] == pytest.approx(4.0, abs=0.05)
    assert player.seeks[-1] == pytest.approx(4.0, abs=0.05)


def test_drop_from_palette(canvas):
    session = canvas.session
    session.load_slots([Slot(id="a", start=0, end=5), Slot(id="b", start=3, end=8)])
    mime = payload_to_mime(DropPayload(participant="Mert"))
    pos = QPointF(session.timebase.to_pixel(4.0), canvas.BAND_TOP + 10)
    event = QDropEvent(pos, Qt.DropAction.CopyAction, mime,
                       Qt.MouseButton.NoButton, Qt.KeyboardModifier.NoModifier)
    canvas.dropEvent(event)
    assert session.model.get("a").participants == ["Mert"]
    assert session.model.get("b").participants == []
    assert session.gestures.preview is None


def test_paint_with_everything(canvas, qtbot):
    session = canvas.session
    session.load_slots([Slot(id="a", start=1, end=4, label="Intro", participants=["Hannah"]),
                        Slot(id="b", start=2, end=6, category=Category.MUSIC, participants=["Mert"])])
    session.gestures.select("a")
    canvas.set_playhead(2.5)
    session.gestures.drag_over(600, DropPayload(category=Category.SFX))
    session.gestures.drag_over(700, DropPayload(category=Category.SFX))
    assert session.playback.is_active("a")
    assert not canvas.grab().isNull()


def test_mime_payload():
    mime = payload_to_mime(DropPayload(category=Category.NOTE))
    assert mime.hasFormat(SLOT_MIME)
    assert payload_from_mime(mime) == DropPayload(category=Category.NOTE)


def test_foreign_mime_ignored():
    from PyQt6.QtCore import QMimeData
    mime = QMimeData()
    mime.setText("hello")
    assert payload_from_mime(mime) is None


def test_palette_widget_chips(qtbot):
    from core.palette import Palette
    widget = PaletteWidget(Palette(participants=["Zed", "Amy"]))
    qtbot.addWidget(widget)
    assert [chip.text() for chip in widget.chips] == ["Zed", "Amy", "dialogue", "music", "sfx", "fx", "note"]
    widget.set_palette(Palette())
    assert len(widget.chips) == 11


def test_timeline_widget_time_label(qtbot, player):
    session = EditorSession(video_id="v1", player=player)
    widget = TimelineWidget(session)
    qtbot.addWidget(widget)
    widget.set_playhead(65.25)
    assert widget.time_label.text() == "1:05.250 / 0:10.000"
