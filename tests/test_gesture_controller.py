"""
Tests for the pointer / keyboard / drop state machine (core.gesture).

Track geometry in these tests: 10 s over 1000 px, so 100 px per second.
"""
import itertools
import sys
import os
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import AUTO_COLORS, KIND_COLORS
from core.gesture import (
    EDGE_LEFT, EDGE_RIGHT, KEY_DELETE, KEY_LEFT, KEY_RIGHT,
    Creating, GestureController, Idle, Moving, Resizing,
)
from core.interval_model import IntervalModel
from core.palette import ColorCycle
from core.timebase import TimeBase
from models.palette import DropPayload
from models.timeline import Category, Slot


def make_controller(duration=10.0, width=1000.0):
    counter = itertools.count(1)
    model = IntervalModel(
        TimeBase(pixel_width=width, duration=duration),
        colors=ColorCycle(),
        id_factory=lambda: f"s{next(counter)}",
    )
    return GestureController(model)


class TestBlankCreate(unittest.TestCase):
    def setUp(self):
        self.gc = make_controller()

    def test_drag_creates_slot(self):
        self.assertTrue(self.gc.press(100))
        self.assertIsInstance(self.gc.state, Creating)
        self.gc.move(300)
        slot = self.gc.release(300)
        self.assertEqual((slot.start, slot.end), (1.0, 3.0))
        self.assertEqual(slot.category, Category.DIALOGUE)
        self.assertEqual(self.gc.selected_id, slot.id)
        self.assertIsInstance(self.gc.state, Idle)

    def test_backwards_drag(self):
        self.gc.press(300)
        slot = self.gc.release(100)
        self.assertEqual((slot.start, slot.end), (1.0, 3.0))

    def test_short_drag_discarded(self):
        self.gc.press(100)
        self.assertIsNone(self.gc.release(105))
        self.assertEqual(self.gc.model.slots, [])
        self.assertTrue(self.gc.is_idle)

    def test_plain_click_creates_nothing(self):
        self.gc.press(400)
        self.assertIsNone(self.gc.release())
        self.assertEqual(len(self.gc.model), 0)

    def test_provisional_not_in_model(self):
        self.gc.press(100)
        self.gc.move(250)
        self.assertEqual(self.gc.model.slots, [])
        self.assertIs(self.gc.provisional, self.gc.visible_slots()[-1])
        self.assertEqual(self.gc.mode, "creating")

    def test_release_outside_track_clamps(self):
        self.gc.press(900)
        slot = self.gc.release(5000)
        self.assertEqual((slot.start, slot.end), (9.0, 10.0))

    def test_committed_slot_takes_cycle_color(self):
        self.gc.press(100)
        first = self.gc.release(300)
        self.gc.press(500)
        second = self.gc.release(700)
        self.assertEqual(first.color, AUTO_COLORS[0])
        self.assertEqual(second.color, AUTO_COLORS[1])

    def test_ignored_until_duration_known(self):
        gc = make_controller(duration=0)
        self.assertFalse(gc.press(100))
        self.assertTrue(gc.is_idle)

    def test_no_nested_gestures(self):
        self.gc.press(100)
        self.assertFalse(self.gc.press(500))
        self.assertIsInstance(self.gc.state, Creating)
        self.assertEqual(self.gc.state.anchor, 1.0)


class TestMoveResize(unittest.TestCase):
    def setUp(self):
        self.gc = make_controller()
        self.slot = self.gc.model.insert(Slot(start=2, end=4))

    def test_hit_classification(self):
        self.assertEqual(self.gc.hit(202)[1], EDGE_LEFT)
        self.assertEqual(self.gc.hit(398)[1], EDGE_RIGHT)
        self.assertEqual(self.gc.hit(300)[1], "body")
        self.assertEqual(self.gc.hit(600), (None, "blank"))

    def test_move_body(self):
        self.gc.press(300)
        self.assertIsInstance(self.gc.state, Moving)
        self.gc.move(550)
        self.gc.release()
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual((slot.start, slot.end), (4.5, 6.5))
        self.assertEqual(self.gc.selected_id, self.slot.id)

    def test_move_uses_total_delta(self):
        self.gc.press(300)
        for x in (301, 302, 303, 304, 305, 306, 307):
            self.gc.move(x)
        self.gc.release()
        self.assertEqual(self.gc.model.get(self.slot.id).start, 2.05)

    def test_move_clamped_at_end(self):
        self.gc.press(300)
        self.gc.release(2000)
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual((slot.start, slot.end), (8.0, 10.0))

    def test_resize_right(self):
        self.gc.press(398)
        self.assertIsInstance(self.gc.state, Resizing)
        self.assertEqual(self.gc.mode, "resizing-right")
        self.gc.release(600)
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual((slot.start, slot.end), (2.0, 6.0))

    def test_resize_left_to_zero(self):
        self.gc.press(202)
        self.gc.release(0)
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual((slot.start, slot.end), (0.0, 4.0))

    def test_resize_left_cannot_cross_end(self):
        self.gc.press(202)
        self.gc.release(900)
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual((slot.start, slot.end), (3.9, 4.0))


class TestKeyboard(unittest.TestCase):
    def setUp(self):
        self.gc = make_controller()
        self.slot = self.gc.model.insert(Slot(start=2.0, end=3.0))
        self.gc.select(self.slot.id)

    def test_nudge_left(self):
        self.assertTrue(self.gc.key_press(KEY_LEFT))
        slot = self.gc.model.get(self.slot.id)
        self.assertEqual(slot.start, 1.9)
        self.assertAlmostEqual(slot.end - slot.start, 1.0, places=6)

    def test_nudge_left_with_modifier(self):
        self.gc.key_press(KEY_LEFT, modifier=True)
        self.assertEqual(self.gc.model.get(self.slot.id).start, 1.5)

    def test_nudge_right(self):
        self.gc.key_press(KEY_RIGHT)
        self.assertEqual(self.gc.model.get(self.slot.id).start, 2.1)

    def test_delete(self):
        self.assertTrue(self.gc.key_press(KEY_DELETE))
        self.assertEqual(len(self.gc.model), 0)
        self.assertIsNone(self.gc.selected_id)

    def test_no_selection(self):
        self.gc.select(None)
        self.assertFalse(self.gc.key_press(KEY_LEFT))
        self.assertFalse(self.gc.key_press(KEY_DELETE))

    def test_ignored_during_gesture(self):
        self.gc.press(800)
        self.assertFalse(self.gc.key_press(KEY_LEFT))
        self.assertEqual(self.gc.model.get(self.slot.id).start, 2.0)

    def test_unknown_key(self):
        self.assertFalse(self.gc.key_press("escape"))

    def test_select_unknown_id_ignored(self):
        self.gc.select("missing")
        self.assertEqual(self.gc.selected_id, self.slot.id)


class TestPaletteDrop(unittest.TestCase):
    def setUp(self):
        self.gc = make_controller()

    def test_drop_without_preview_uses_default_span(self):
        slot = self.gc.drop(500, DropPayload(participant="Mert"))
        self.assertEqual((slot.start, slot.end), (4.8, 5.4))
        self.assertEqual(slot.participants, ["Mert"])
        self.assertEqual(slot.label, "Mert")
        self.assertIsNone(self.gc.preview)

    def test_drop_uses_preview_span(self):
        payload = DropPayload(category=Category.MUSIC)
        self.gc.drag_over(400, payload)
        self.gc.drag_over(200, payload)
        self.assertEqual((self.gc.preview.left, self.gc.preview.right), (200, 400))
        self.assertEqual(len(self.gc.model), 0)
        slot = self.gc.drop(200, payload)
        self.assertEqual((slot.start, slot.end), (2.0, 4.0))
        self.assertEqual(slot.color, KIND_COLORS["music"])

    def test_preview_opens_with_initial_width(self):
        payload = DropPayload(participant="Hannah")
        self.gc.drag_over(300, payload)
        self.assertEqual((self.gc.preview.left, self.gc.preview.right), (300, 330))
        slot = self.gc.drop(300, payload)
        self.assertEqual((slot.start, slot.end), (3.0, 3.3))

    def test_initial_preview_stays_on_track(self):
        self.gc.drag_over(990, DropPayload(participant="Hannah"))
        self.assertEqual(self.gc.preview.right, 1000)

    def test_collapsed_preview_falls_back(self):
        payload = DropPayload(participant="John")
        self.gc.drag_over(500, payload)
        self.gc.drag_over(504, payload)
        slot = self.gc.drop(504, payload)
        self.assertEqual((slot.start, slot.end), (4.85, 5.45))

    def test_drop_on_slot_merges(self):
        a = self.gc.model.insert(Slot(start=0, end=5))
        self.gc.model.insert(Slot(start=3, end=8))
        slot = self.gc.drop(400, DropPayload(category=Category.FX))
        self.assertEqual(slot.id, a.id)
        self.assertEqual(slot.category, Category.FX)
        self.assertEqual(len(self.gc.model), 2)

    def test_drag_leave_clears_preview(self):
        self.gc.drag_over(300, DropPayload(participant="Crowd"))
        self.gc.drag_leave()
        self.assertIsNone(self.gc.preview)

    def test_empty_payload_ignored(self):
        self.assertFalse(self.gc.drag_over(300, DropPayload()))
        self.assertIsNone(self.gc.drop(300, DropPayload()))
        self.assertEqual(len(self.gc.model), 0)

    def test_drop_near_start_is_clamped(self):
        slot = self.gc.drop(5, DropPayload(participant="Hannah"))
        self.assertEqual(slot.start, 0.0)
        self.assertEqual(slot.end, 0.45)
