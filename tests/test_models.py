"""
Unit tests for the data model layer (models package).

Tests cover:
  - Category: parsing and colours
  - Slot: equality, copies, serialization
  - DropPayload / PaletteEntry: drag metadata
  - TimelineDocument: round-trip
"""
import json
import sys
import os
import unittest

# Ensure src/ is on the path so that absolute imports within models work.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import KIND_COLORS
from models import (
    Category,
    DropPayload,
    PaletteEntry,
    Slot,
    TimelineDocument,
    new_slot_id,
    unique_participants,
)


# ---- Category ------------------------------------------------------------

class TestCategory(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(Category.parse("Music"), Category.MUSIC)
        self.assertEqual(Category.parse(" sfx "), Category.SFX)
        self.assertEqual(Category.parse(Category.FX), Category.FX)
        self.assertIsNone(Category.parse("opera"))
        self.assertIsNone(Category.parse(None))
        self.assertIsNone(Category.parse(3))

    def test_colors(self):
        for kind in Category:
            self.assertEqual(kind.color, KIND_COLORS[kind.value])


# ---- Slot ----------------------------------------------------------------

class TestSlot(unittest.TestCase):
    def test_participants_deduplicated(self):
        slot = Slot(start=0, end=1, participants=["A", " A", "", "B"])
        self.assertEqual(slot.participants, ["A", "B"])

    def test_equality_ignores_participant_order(self):
        a = Slot(id="x", start=0, end=1, participants=["A", "B"])
        b = Slot(id="x", start=0, end=1, participants=["B", "A"])
        self.assertEqual(a, b)
        self.assertNotEqual(a, b.copy(label="other"))

    def test_category_coerced(self):
        self.assertEqual(Slot(category="note").category, Category.NOTE)
        self.assertEqual(Slot(category="bogus").category, Category.DIALOGUE)

    def test_display_color(self):
        self.assertEqual(Slot(category=Category.MUSIC).display_color, KIND_COLORS["music"])
        self.assertEqual(Slot(color="#123456").display_color, "#123456")

    def test_copy_is_detached(self):
        slot = Slot(start=1, end=2, participants=["A"])
        copy = slot.copy(end=3)
        copy.participants.append("B")
        self.assertEqual(slot.participants, ["A"])
        self.assertEqual(slot.end, 2)
        self.assertEqual(copy.id, slot.id)

    def test_contains_inclusive(self):
        slot = Slot(start=1, end=2)
        self.assertTrue(slot.contains(1))
        self.assertTrue(slot.contains(2))
        self.assertFalse(slot.contains(2.01))
        self.assertAlmostEqual(slot.length, 1)

    def test_round_trip(self):
        slot = Slot(id="a1", start=1.5, end=2.0, label="Hi", participants=["Ayşe"],
                    category=Category.FX, color="#8ecae6")
        data = json.loads(json.dumps(slot.to_dict()))
        self.assertEqual(Slot.from_dict(data), slot)

    def test_from_dict_accepts_cast_and_kind(self):
        slot = Slot.from_dict({"start": "1", "end": 2, "cast": ["A"], "kind": "music"})
        self.assertEqual(slot.participants, ["A"])
        self.assertEqual(slot.category, Category.MUSIC)
        self.assertEqual(slot.start, 1.0)
        self.assertTrue(slot.id)

    def test_ids(self):
        self.assertEqual(len(new_slot_id()), 8)
        self.assertNotEqual(new_slot_id(), new_slot_id())

    def test_unique_participants_merges_groups(self):
        self.assertEqual(unique_participants(["A", "B"], ["B", "C"], None), ["A", "B", "C"])


# ---- Palette -------------------------------------------------------------

class TestDropPayload(unittest.TestCase):
    def test_empty(self):
        self.assertTrue(DropPayload().is_empty)
        self.assertFalse(DropPayload(participant="A").is_empty)
        self.assertFalse(DropPayload(category=Category.NOTE).is_empty)

    def test_default_label(self):
        self.assertEqual(DropPayload(participant="A", category=Category.SFX).default_label, "A")
        self.assertEqual(DropPayload(category=Category.SFX).default_label, "sfx")
        self.assertEqual(DropPayload().default_label, "")

    def test_dict_form(self):
        payload = DropPayload(participant="Mert", category=Category.MUSIC)
        self.assertEqual(payload.to_dict(), {"cast": "Mert", "kind": "music"})
        self.assertEqual(DropPayload.from_dict(payload.to_dict()), payload)
        self.assertEqual(DropPayload.from_dict({"cast": "  ", "kind": "zzz"}), DropPayload())


class TestPaletteEntry(unittest.TestCase):
    def test_participant_chip(self):
        entry = PaletteEntry(participant_name="Hannah")
        self.assertEqual(entry.title, "Hannah")
        self.assertIsNone(entry.color)
        self.assertEqual(entry.payload(), DropPayload(participant="Hannah"))

    def test_category_chip(self):
        entry = PaletteEntry(category=Category.NOTE)
        self.assertEqual(entry.title, "note")
        self.assertEqual(entry.color, KIND_COLORS["note"])
        self.assertEqual(entry.payload(), DropPayload(category=Category.NOTE))


# ---- Documents -----------------------------------------------------------

class TestTimelineDocument(unittest.TestCase):
    def test_round_trip(self):
        doc = TimelineDocument(
            video_id="v1",
            slots=[Slot(id="a", start=0, end=1, participants=["Hannah"])],
            cast_library=[{"id": "hannah", "name": "Hannah", "role": "Host", "photo": None}],
            updated_at="2026-10-18T12:00:00+00:00",
        )
        data = json.loads(json.dumps(doc.to_dict()))
        self.assertEqual(set(data), {"slots", "castLibrary", "updatedAt"})
        doc2 = TimelineDocument.from_dict("v1", data)
        self.assertEqual(doc2.slots, doc.slots)
        self.assertEqual(doc2.cast_library, doc.cast_library)
        self.assertEqual(doc2.updated_at, doc.updated_at)
        self.assertEqual(doc2.participant_names, ["Hannah"])

    def test_from_empty(self):
        doc = TimelineDocument.from_dict("v2", {})
        self.assertEqual(doc.slots, [])
        self.assertIsNone(doc.updated_at)


if __name__ == "__main__":
    unittest.main()
