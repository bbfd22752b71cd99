"""
Timeline Store - JSON-file persistence of per-video slot timelines.

File layout:

    {
      "videos": {
        "<video_id>": {"slots": [...], "castLibrary": [...], "updatedAt": "..."}
      }
    }

Every save normalizes the incoming slots the same way regardless of who
produced them and returns the snapshot as stored, so the editor can
reconcile with it.
"""
import json
import logging
import math
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from config import KIND_COLORS, MAX_PARTICIPANTS
from models.project import TimelineDocument
from models.timeline import Slot, unique_participants
from core.cast_lanes import slugify

logger = logging.getLogger(__name__)

_COLOR_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)


class PersistenceError(RuntimeError):
    """Reading or writing the timeline store failed."""


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _to_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _round_time(value: float) -> float:
    return round(value * 1000) / 1000


def _normalize_color(value, kind: str) -> Optional[str]:
    color = value.strip() if isinstance(value, str) else ""
    if _COLOR_PATTERN.match(color):
        return color.lower() if len(color) == 7 else color
    return KIND_COLORS.get(kind)


def _normalize_cast(value) -> List[str]:
    if isinstance(value, str):
        names = re.split(r"[;,|/]", value)
    elif isinstance(value, list):
        names = [str(v) for v in value if v is not None]
    elif isinstance(value, dict):
        names = [str(v) for v in value.values() if v is not None]
    else:
        names = []
    return unique_participants(names)[:MAX_PARTICIPANTS]


def normalize_slot(raw, index: int, seen_ids: set) -> Optional[dict]:
    """Sanitize one stored slot dict. Returns None if it has no usable start."""
    if not isinstance(raw, dict):
        return None
    start = _to_number(raw.get("start"))
    if start is None:
        return None
    end = _to_number(raw.get("end"))
    safe_start = _round_time(max(0.0, start))
    safe_end = _round_time(max(safe_start, safe_start if end is None else end))

    kind = str(raw.get("category", raw.get("kind")) or "").strip().lower()
    if kind not in KIND_COLORS:
        kind = ""

    base_id = str(raw.get("id") or f"slot-{index + 1}")
    slot_id = base_id
    suffix = 1
    while slot_id in seen_ids:
        suffix += 1
        slot_id = f"{base_id}-{suffix}"
    seen_ids.add(slot_id)

    return {
        "id": slot_id,
        "start": safe_start,
        "end": safe_end,
        "label": str(raw.get("label") or ""),
        "participants": _normalize_cast(raw.get("participants", raw.get("cast"))),
        "category": kind or "dialogue",
        "color": _normalize_color(raw.get("color"), kind),
    }


def normalize_slots(raw_slots) -> List[dict]:
    if not isinstance(raw_slots, list):
        return []
    seen: set = set()
    result = []
    for index, raw in enumerate(raw_slots):
        normalized = normalize_slot(raw, index, seen)
        if normalized is not None:
            result.append(normalized)
    result.sort(key=lambda s: (s["start"], s["end"]))
    return result


def normalize_cast_library(entries) -> List[dict]:
    """Sanitize cast library entries ({id, name, role, photo})."""
    if not isinstance(entries, list):
        return []
    result = []
    seen = set()
    for entry in entries:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("name") or "").strip()
        if not name:
            continue
        cast_id = str(entry.get("id") or slugify(name))
        if cast_id in seen:
            continue
        seen.add(cast_id)
        result.append({
            "id": cast_id,
            "name": name,
            "role": str(entry.get("role") or entry.get("description") or "Cast"),
            "photo": entry.get("photo") or None,
        })
    return result


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class TimelineStore:
    """File-backed store of one timeline per video.

    Saves replace the video's entry wholesale; the store may be called
    again before a previous save returned.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {"videos": {}}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read timeline store {self.path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("videos"), dict):
            return {"videos": {}}
        return data

    def _write(self, data: dict):
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceError(f"Could not write timeline store {self.path}: {e}") from e

    def load(self, video_id: str) -> Optional[TimelineDocument]:
        """Timeline of *video_id*, or None if nothing was saved yet."""
        if not video_id:
            return None
        entry = self._read()["videos"].get(video_id)
        if not isinstance(entry, dict):
            return None
        return TimelineDocument.from_dict(video_id, {
            "slots": normalize_slots(entry.get("slots")),
            "castLibrary": normalize_cast_library(entry.get("castLibrary")),
            "updatedAt": entry.get("updatedAt"),
        })

    def save(self, video_id: str, slots: Iterable[Slot],
             cast_library: Optional[list] = None) -> TimelineDocument:
        """Store the full slot list of *video_id*.

        Returns:
            The accepted snapshot, with normalized values and a fresh
            updatedAt timestamp.

        Raises:
            PersistenceError: The store could not be read or written.
        """
        if not video_id:
            raise PersistenceError("A video id is required to save a timeline")
        document = TimelineDocument.from_dict(video_id, {
            "slots": normalize_slots([s.to_dict() for s in slots]),
            "castLibrary": normalize_cast_library(cast_library or []),
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        })
        data = self._read()
        data["videos"][video_id] = document.to_dict()
        self._write(data)
        logger.info("Saved %d slot(s) for video %s", len(document.slots), video_id)
        return document

    def list_videos(self) -> List[tuple]:
        """(video_id, slot count, updatedAt) for every stored timeline."""
        videos = self._read()["videos"]
        result = []
        for video_id, entry in videos.items():
            if not isinstance(entry, dict):
                continue
            slots = entry.get("slots")
            result.append((video_id, len(slots) if isinstance(slots, list) else 0, entry.get("updatedAt")))
        return result
