"""
Tests for user-tunable editor settings (runtime_config).
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import NUDGE_STEP, NUDGE_STEP_LARGE, SNAP_STEP
from core.gesture import KEY_RIGHT, GestureController
from core.interval_model import IntervalModel
from core.timebase import TimeBase
from models.timeline import Slot
from runtime_config import RuntimeConfig, get_config, set_config


class TestRuntimeConfig(unittest.TestCase):
    def setUp(self):
        self._saved = get_config()

    def tearDown(self):
        set_config(self._saved)

    def test_defaults(self):
        config = RuntimeConfig()
        self.assertEqual(config.snap_step, SNAP_STEP)
        self.assertEqual(config.nudge_for(False), NUDGE_STEP)
        self.assertEqual(config.nudge_for(True), NUDGE_STEP_LARGE)

    def test_from_dict_ignores_unknown_keys(self):
        config = RuntimeConfig.from_dict({"nudge_step": 0.25, "zoom": 3})
        self.assertEqual(config.nudge_step, 0.25)
        self.assertFalse(hasattr(config, "zoom"))
        self.assertEqual(RuntimeConfig.from_dict(config.to_dict()), config)

    def test_reset_to_defaults(self):
        config = RuntimeConfig(quick_add_seconds=9, edge_handle_px=20)
        config.reset_to_defaults()
        self.assertEqual(config, RuntimeConfig())

    def test_singleton(self):
        config = RuntimeConfig(nudge_step=1.0)
        set_config(config)
        self.assertIs(get_config(), config)

    def test_nudge_step_is_read_at_key_press(self):
        set_config(RuntimeConfig(nudge_step=1.0))
        model = IntervalModel(TimeBase(pixel_width=1000, duration=10))
        slot = model.insert(Slot(start=2, end=3))
        gestures = GestureController(model)
        gestures.select(slot.id)
        gestures.key_press(KEY_RIGHT)
        self.assertEqual(model.get(slot.id).start, 3.0)
