"""End-of-semester exam and practical timetable import.

Workbook sheets:
  CLASS, GENERAL   header row "DATE | COURSE NO. | COURSE NAME | CLASS |
                   LECTURER | LECTURE HALL | INVIGILATOR | PERIOD"
  PRACTICAL        header row "DATE | CRS NO. | COURSE TITLE | CLASS |
                   EXAMINER | ROOM | INVIGILATOR | MORN/NOON"

Header rows sit below a free-text title block, so they are located by
their first two cells. Rows without a date or course code are ignored.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime

from src.timetable.courses import CourseCodeClassifier
from src.timetable.errors import HeaderNotFoundError, NoExamDataError
from src.timetable.logging import get_logger
from src.timetable.models import ExamEntry
from src.timetable.workbook import SheetGrid, load_sheets

log = get_logger(__name__)

EXAM_SHEETS: tuple[str, ...] = ("CLASS", "GENERAL")
PRACTICAL_SHEET = "PRACTICAL"

PERIODS = {"M": "Morning", "A": "Afternoon", "E": "Evening"}

_DATE_FORMATS = ("%d-%b-%Y", "%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d", "%Y-%m-%d %H:%M:%S")


def map_period(period: str) -> str:
    period = period.strip()
    if not period:
        return "Unknown"
    return PERIODS.get(period.upper(), period)


def clean_name(name: str) -> str:
    return re.sub(r"\s+", " ", name.strip())


def parse_exam_date(text: str) -> date | None:
    text = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


@dataclass(frozen=True)
class SheetLayout:
    """Which header row to look for and where each field lives."""

    is_header: Callable[[list[str]], bool]
    course_columns: tuple[str, ...]
    columns: dict[str, str] = field(default_factory=dict)
    is_practical: bool = False


def _upper(row: list[str], i: int) -> str:
    return row[i].strip().upper() if i < len(row) else ""


EXAM_LAYOUT = SheetLayout(
    is_header=lambda row: _upper(row, 0) == "DATE" and "COURSE" in _upper(row, 1),
    course_columns=("COURSE NO", "COURSE NO."),
    columns={
        "course_name": "COURSE NAME",
        "class_name": "CLASS",
        "lecturer": "LECTURER",
        "room": "LECTURE HALL",
        "invigilator": "INVIGILATOR",
        "period": "PERIOD",
    },
)

PRACTICAL_LAYOUT = SheetLayout(
    is_header=lambda row: _upper(row, 0) == "DATE" and _upper(row, 1) == "CRS NO.",
    course_columns=("CRS NO.",),
    columns={
        "course_name": "COURSE TITLE",
        "class_name": "CLASS",
        "lecturer": "EXAMINER",
        "room": "ROOM",
        "invigilator": "INVIGILATOR",
        "period": "MORN/NOON",
    },
    is_practical=True,
)


@dataclass
class ExamSheetParser:
    classifier: CourseCodeClassifier = field(default_factory=CourseCodeClassifier)

    def parse(self, grid: SheetGrid, layout: SheetLayout) -> list[ExamEntry] | None:
        """Entries of one sheet, or None when the sheet has no header row."""
        header_index = next(
            (i for i, row in enumerate(grid.rows) if layout.is_header(row)), None
        )
        if header_index is None:
            return None

        header = [c.strip().upper() for c in grid.rows[header_index]]
        positions = {name: i for i, name in enumerate(header) if name}

        def value(row: list[str], column: str) -> str:
            i = positions.get(column)
            return row[i].strip() if i is not None and i < len(row) else ""

        entries: list[ExamEntry] = []
        for row in grid.rows[header_index + 1 :]:
            raw_date = value(row, "DATE")
            course_code = next(
                (value(row, c) for c in layout.course_columns if value(row, c)), ""
            )
            if not raw_date or not course_code:
                continue

            parsed = parse_exam_date(raw_date)
            classification = self.classifier.classify(course_code)
            entries.append(
                ExamEntry(
                    date=parsed.strftime("%d-%m-%Y") if parsed else raw_date,
                    day=parsed.strftime("%A") if parsed else "",
                    course_code=course_code,
                    course_name=value(row, layout.columns["course_name"]),
                    class_name=value(row, layout.columns["class_name"]),
                    lecturer=clean_name(value(row, layout.columns["lecturer"])),
                    room=value(row, layout.columns["room"]),
                    invigilator=clean_name(value(row, layout.columns["invigilator"])),
                    period=map_period(value(row, layout.columns["period"])),
                    is_practical=layout.is_practical,
                    level=classification.level,
                    departments=classification.departments,
                )
            )

        log.debug("exam_sheet_parsed", sheet=grid.name, entries=len(entries))
        return entries


def _by_date(entries: list[ExamEntry]) -> list[ExamEntry]:
    # Unparseable dates go last, in their original order
    def key(entry: ExamEntry):
        parsed = parse_exam_date(entry.date)
        return (parsed is None, parsed or date.min)

    return sorted(entries, key=key)


def parse_exam_timetable(data: bytes) -> list[ExamEntry]:
    """Exams (CLASS and GENERAL sheets) followed by practicals, each sorted by date.

    Raises:
        MalformedWorkbookError: If the bytes are not a readable workbook.
        NoExamDataError: If no sheet yields any row.
    """
    grids = {g.name: g for g in load_sheets(data)}
    parser = ExamSheetParser()

    exams: list[ExamEntry] = []
    for name in EXAM_SHEETS:
        if name in grids:
            exams.extend(parser.parse(grids[name], EXAM_LAYOUT) or [])

    practicals: list[ExamEntry] = []
    if PRACTICAL_SHEET in grids:
        practicals = parser.parse(grids[PRACTICAL_SHEET], PRACTICAL_LAYOUT) or []

    if not exams and not practicals:
        log.warning("exam_timetable_empty", sheets=list(grids))
        raise NoExamDataError("No valid exam or practical data found in the file.")

    log.info("exam_timetable_parsed", exams=len(exams), practicals=len(practicals))
    return _by_date(exams) + _by_date(practicals)


def parse_practicals(data: bytes) -> list[ExamEntry]:
    """Practicals only. A workbook without a PRACTICAL sheet yields [].

    Raises:
        HeaderNotFoundError: If the PRACTICAL sheet has no header row.
    """
    grids = {g.name: g for g in load_sheets(data)}
    if PRACTICAL_SHEET not in grids:
        return []

    entries = ExamSheetParser().parse(grids[PRACTICAL_SHEET], PRACTICAL_LAYOUT)
    if entries is None:
        raise HeaderNotFoundError("Could not find the header row in the PRACTICAL sheet.")
    return _by_date(entries)
