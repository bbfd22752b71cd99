"""
Bulk Codec - Paste-in import and JSON export of slot lists.

Import accepts two formats, tried in order:

  1. JSON: a top-level array of objects
         [{"start": 1.2, "end": 3.4, "label": "...", "cast": ["A", "B"], "kind": "music"}]
  2. CSV: start,end,label,participants,category
         1.2,3.4,"Intro, Part 1",Alice|Bob,music

CSV quoting follows RFC 4180: a comma inside double quotes does not
split the cell, and a doubled quote ("") inside a quoted cell is a
literal quote character.

Decoded slots are raw; callers pass them through
IntervalModel.normalize_all / replace_all before showing or accepting
them.
"""
import csv
import json
import logging
import math
import re
from typing import List, Optional

from core.palette import ColorCycle
from models.timeline import Category, Slot, unique_participants

logger = logging.getLogger(__name__)

FORMAT_ERROR_MESSAGE = "Invalid JSON/CSV format."

# Separators between participant names inside one field
_PARTICIPANT_SPLIT = re.compile(r"[,;|/]")


class BulkFormatError(ValueError):
    """Pasted text is neither a JSON array of slots nor a slot CSV table."""

    def __init__(self, message: str = FORMAT_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


class _StrategyFailed(Exception):
    pass


def _to_number(value, default: float) -> float:
    """Parse a JSON/CSV time value. Blank/missing -> default."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise _StrategyFailed(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return default
        try:
            number = float(value.strip())
        except ValueError:
            raise _StrategyFailed(f"not a number: {value!r}")
    else:
        raise _StrategyFailed(f"not a number: {value!r}")
    if not math.isfinite(number):
        raise _StrategyFailed(f"not a finite number: {value!r}")
    return number


def split_participants(value) -> List[str]:
    """Accept a list of names or a delimiter-separated string."""
    if isinstance(value, list):
        names = [v for v in value if isinstance(v, str)]
    elif isinstance(value, str):
        names = _PARTICIPANT_SPLIT.split(value)
    else:
        names = []
    return unique_participants(names)


def _color_for(category: Optional[Category], colors: ColorCycle) -> str:
    if category is not None:
        return category.color
    return colors.next()


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def _decode_json(text: str, colors: ColorCycle) -> List[Slot]:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise _StrategyFailed(str(e))
    if not isinstance(data, list):
        raise _StrategyFailed("top-level value is not an array")

    slots = []
    for item in data:
        if not isinstance(item, dict):
            raise _StrategyFailed("array element is not an object")
        category = Category.parse(item.get("category", item.get("kind")))
        color = item.get("color")
        if not isinstance(color, str) or not color.strip():
            color = _color_for(category, colors)
        slot_id = item.get("id")
        slots.append(Slot(
            id=str(slot_id) if slot_id not in (None, "") else "",
            start=_to_number(item.get("start"), 0.0),
            end=_to_number(item.get("end"), 0.0),
            label=str(item.get("label") or ""),
            participants=split_participants(item.get("participants", item.get("cast"))),
            category=category or Category.DIALOGUE,
            color=color,
        ))
    return slots


def _split_csv_line(line: str) -> List[str]:
    """Split one CSV line. An unclosed quote runs to the end of its line only."""
    try:
        cells = next(csv.reader([line], skipinitialspace=True, strict=True))
    except csv.Error:
        if line.count('"') % 2:
            line += '"'
        cells = next(csv.reader([line], skipinitialspace=True))
    return [cell.strip() for cell in cells]


def _decode_csv(text: str, colors: ColorCycle) -> List[Slot]:
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        raise _StrategyFailed("no rows")

    rows = [_split_csv_line(line) for line in lines]
    if rows and rows[0] and "start" in rows[0][0].lower():
        rows = rows[1:]

    slots = []
    for row in rows:
        if not row or not any(row):
            continue
        cells = row + [""] * (5 - len(row))
        start = _to_number(cells[0], 0.0)
        end = _to_number(cells[1], start + 1.0)
        category = Category.parse(cells[4])
        slots.append(Slot(
            id="",
            start=start,
            end=end,
            label=cells[2],
            participants=split_participants(cells[3]),
            category=category or Category.DIALOGUE,
            color=_color_for(category, colors),
        ))
    return slots


def decode(text: str, colors: Optional[ColorCycle] = None) -> List[Slot]:
    """Parse pasted text into raw slots.

    Args:
        text: JSON array or CSV table.
        colors: Session colour cycle used for slots without a known category.

    Returns:
        Decoded slots (ids may be empty; boundaries not yet normalized).

    Raises:
        BulkFormatError: Neither format produced at least one slot.
    """
    colors = colors or ColorCycle()
    text = text or ""
    for name, strategy in (("json", _decode_json), ("csv", _decode_csv)):
        try:
            slots = strategy(text, colors)
        except _StrategyFailed as e:
            logger.debug("Bulk %s parse failed: %s", name, e)
            continue
        except csv.Error as e:
            logger.debug("Bulk %s parse failed: %s", name, e)
            continue
        if slots:
            logger.info("Decoded %d slot(s) as %s", len(slots), name.upper())
            return slots
    raise BulkFormatError()


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def encode(slots: List[Slot]) -> str:
    """Serialize slots as pretty-printed JSON (every field kept)."""
    return json.dumps([s.to_dict() for s in slots], ensure_ascii=False, indent=2)
