"""Daily time-slot catalog and spreadsheet column arithmetic.

Master timetable layout (row 5 onwards, zero-based columns):
  col 0      room name ("A101")
  cols 1-6   slots 0-5   (7:00 AM .. 1:00 PM)
  col 7      lunch break column, usually a merged "BREAK" cell
  cols 8-13  slots 6-11  (1:30 PM .. 7:30 PM)

The break column has no slot of its own, so every column after 6 is
shifted down by one when mapped to a slot index.
"""

import re

from src.timetable.models import TimeSlot

SLOT_LABELS: tuple[str, ...] = (
    "7:00-8:00 AM",
    "8:00-9:00 AM",
    "9:00-10:00 AM",
    "10:00-11:00 AM",
    "11:00-12:00 PM",
    "12:00-1:00 PM",
    # 1:00-1:30 PM is lunch
    "1:30-2:30 PM",
    "2:30-3:30 PM",
    "3:30-4:30 PM",
    "4:30-5:30 PM",
    "5:30-6:30 PM",
    "6:30-7:30 PM",
)

TIME_SLOTS: tuple[TimeSlot, ...] = tuple(
    TimeSlot(index=i, label=label) for i, label in enumerate(SLOT_LABELS)
)

SLOT_COUNT = len(TIME_SLOTS)

# Last column before the break column; columns after it shift by one.
BREAK_AFTER_COLUMN = 6

# Bare hours before the first class are afternoon hours ("1:30" is 13:30).
_FIRST_MORNING_HOUR = 7

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})")


def slot_label(index: int) -> str:
    """Return the catalog label for ``index``, or "" outside 0..11."""
    if 0 <= index < SLOT_COUNT:
        return SLOT_LABELS[index]
    return ""


def column_to_slot_index(column: int) -> int:
    """Map a zero-based sheet column (column 0 = room) to a slot index."""
    return column - 1 - (1 if column > BREAK_AFTER_COLUMN else 0)


def combine_range(start_index: int, end_index: int) -> str:
    """Label covering slots ``start_index``..``end_index`` inclusive.

    Single slots keep their catalog label; wider ranges take the start of
    the first slot and the end of the last ("8:00 - 10:00 AM"). A start
    beyond the end (malformed merge) falls back to the start slot's label.
    """
    start_index = max(0, start_index)
    end_index = min(SLOT_COUNT - 1, end_index)

    if start_index >= end_index:
        return slot_label(start_index)

    start_time = TIME_SLOTS[start_index].start
    end_time = TIME_SLOTS[end_index].end
    return f"{start_time} - {end_time}"


def clock_to_minutes(text: str) -> int | None:
    """Convert "8:00", "1:30 PM" or "12:00" to minutes since midnight.

    Catalog labels only carry a meridiem on the end time, so a bare hour
    is read as a teaching-day hour (7-12 morning/noon, 1-6 afternoon).
    """
    match = _CLOCK_RE.search(text)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = text[match.end():].strip().upper()
    if meridiem.startswith("PM"):
        if hour < 12:
            hour += 12
    elif meridiem.startswith("AM"):
        if hour == 12:
            hour = 0
    elif hour < _FIRST_MORNING_HOUR:
        hour += 12
    return hour * 60 + minute


def slot_bounds(slot: TimeSlot) -> tuple[int, int]:
    """(start, end) minutes of a catalog slot."""
    return clock_to_minutes(slot.start), clock_to_minutes(slot.end)


def range_to_slot_indices(time_range: str) -> list[int]:
    """Indices of catalog slots overlapping a slot label or combined range.

    Accepts either form produced by :func:`combine_range`. Returns [] for
    text that does not contain a start and end time.
    """
    parts = time_range.split("-")
    if len(parts) != 2:
        return []
    start = clock_to_minutes(parts[0])
    end = clock_to_minutes(parts[1])
    if start is None or end is None or start >= end:
        return []

    indices = []
    for slot in TIME_SLOTS:
        slot_start, slot_end = slot_bounds(slot)
        if slot_start < end and start < slot_end:
            indices.append(slot.index)
    return indices
