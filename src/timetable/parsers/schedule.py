"""ScheduleGridParser - normalizes the master timetable workbook.

Workbook structure (one sheet per weekday, sheet name = day):
  rows 0-4      title block (university, semester, slot headings)
  rows 5..      one row per room
    col 0       room name
    cols 1..    one column per slot, break column after col 6
    merged cell across N columns = one class spanning N slots

Cell text: course code(s) then lecturer, separated by newlines or commas.
Individual malformed cells are skipped; the sheet is hand-maintained and
never perfectly regular.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from src.timetable.courses import CourseCodeClassifier, decode_cell, is_break_cell
from src.timetable.errors import EmptyScheduleError, MalformedWorkbookError
from src.timetable.logging import get_logger
from src.timetable.models import ScheduleEntry
from src.timetable.slots import column_to_slot_index, combine_range
from src.timetable.workbook import SheetGrid, load_sheets

log = get_logger(__name__)

# Rows above this index are the sheet's title block
DATA_START_ROW = 5
ROOM_COLUMN = 0


@dataclass(frozen=True)
class OccupiedCell:
    """A non-blank, non-break cell located on the slot grid."""

    day: str
    room: str
    row: int
    column: int
    text: str
    span: int

    @property
    def first_slot(self) -> int:
        return column_to_slot_index(self.column)

    @property
    def last_slot(self) -> int:
        return self.first_slot + self.span - 1


def iter_occupied_cells(grid: SheetGrid) -> Iterator[OccupiedCell]:
    """Walk the data rows of one day sheet, yielding each booked cell once.

    Merged cells are reported at their top-left column with their span, and
    the columns they cover are not revisited.
    """
    for i in range(DATA_START_ROW, len(grid.rows)):
        row = grid.rows[i]
        room = grid.cell(i, ROOM_COLUMN).strip()
        if not room:
            continue

        j = ROOM_COLUMN + 1
        while j < len(row):
            text = row[j].strip()
            if not text or is_break_cell(text):
                j += 1
                continue

            span = grid.merge_span_at(i, j)
            yield OccupiedCell(day=grid.name, room=room, row=i, column=j, text=text, span=span)
            j += span


@dataclass
class ScheduleGridParser:
    """Turns day sheets into :class:`ScheduleEntry` lists."""

    classifier: CourseCodeClassifier = field(default_factory=CourseCodeClassifier)

    def parse_sheet(self, grid: SheetGrid) -> list[ScheduleEntry]:
        entries: list[ScheduleEntry] = []
        skipped = 0

        for cell in iter_occupied_cells(grid):
            decoded = decode_cell(cell.text)
            if decoded is None:
                skipped += 1
                continue
            raw_code, lecturer = decoded

            time = combine_range(cell.first_slot, cell.last_slot)
            if not time:
                log.debug(
                    "cell_outside_slot_grid",
                    day=cell.day,
                    room=cell.room,
                    row=cell.row,
                    column=cell.column,
                )
                skipped += 1
                continue

            classification = self.classifier.classify(raw_code)
            entries.append(
                ScheduleEntry(
                    day=cell.day,
                    room=cell.room,
                    time=time,
                    course_code=classification.course_code,
                    lecturer=lecturer,
                    level=classification.level,
                    departments=classification.departments,
                )
            )

        log.debug("sheet_parsed", day=grid.name, entries=len(entries), skipped=skipped)
        return entries

    def parse_workbook(self, grids: list[SheetGrid]) -> list[ScheduleEntry]:
        entries: list[ScheduleEntry] = []
        for grid in grids:
            entries.extend(self.parse_sheet(grid))
        return entries


def parse_schedule(
    data: bytes, *, parser: ScheduleGridParser | None = None
) -> list[ScheduleEntry]:
    """Parse master timetable workbook bytes into schedule entries.

    Args:
        data: Raw .xlsx bytes as uploaded.
        parser: Parser to use (defaults to the standard department table).

    Returns:
        Entries in sheet, row, column order.

    Raises:
        MalformedWorkbookError: If the bytes are not a readable workbook.
        EmptyScheduleError: If the workbook yields no entries.
    """
    parser = parser or ScheduleGridParser()
    try:
        grids = load_sheets(data)
    except MalformedWorkbookError:
        log.error("schedule_parse_failed", size=len(data))
        raise

    entries = parser.parse_workbook(grids)
    if not entries:
        log.warning("schedule_empty", sheets=[g.name for g in grids])
        raise EmptyScheduleError()

    log.info("schedule_parsed", sheets=len(grids), entries=len(entries))
    return entries
