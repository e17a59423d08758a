"""ResitRowValidator - strict import of the special resit exam export.

Export structure (CSV or the "SPECIAL RESIT" sheet of a workbook):
  free-text title rows, optionally "VENUE: <place>"
  header row: DATE | COURSE NO. | COURSE NAME | DEPARTMENT | NUMBER | ROOM |
              EXAMINER | SESSION (M/A)
  one row per exam, then a "FOR ANY ISSUES ..." footer

Unlike the master timetable, every field is checked. In strict mode a
single bad row fails the whole import.
"""

import re

from src.timetable.config import get_config
from src.timetable.errors import HeaderNotFoundError, ResitValidationError
from src.timetable.logging import get_logger
from src.timetable.models import ResitEntry, ResitSchedule
from src.timetable.workbook import read_table_rows

log = get_logger(__name__)

EXPECTED_HEADERS: tuple[str, ...] = (
    "DATE",
    "COURSE NO.",
    "COURSE NAME",
    "DEPARTMENT",
    "NUMBER",
    "ROOM",
    "EXAMINER",
    "SESSION",
)

OPTIONAL_FIELDS = frozenset({"EXAMINER"})
_RULED_FIELDS = frozenset({"DATE", "COURSE NO.", "NUMBER", "SESSION"})

FOOTER_MARKER = "FOR ANY ISSUES"
VENUE_MARKER = "VENUE"
DEFAULT_VENUE = "Not specified"

_COURSE_NO_RE = re.compile(r"^[A-Z]{2}\s\d{3}$")
_DATE_RE = re.compile(r"^\d{1,2}-[A-Z]{3}-\d{4}$")
_ORDINAL_RE = re.compile(r"(\d)(?:st|nd|rd|th)", re.IGNORECASE)
_POSITIVE_INT_RE = re.compile(r"^\+?\d+$")
_VENUE_PREFIX_RE = re.compile(r"VENUE\s*:?", re.IGNORECASE)


def _squash(text: str) -> str:
    return re.sub(r"\s", "", text).upper()


def find_header_row(rows: list[list[str]]) -> int | None:
    """Index of the first row whose leading cells contain the expected headers."""
    wanted = [_squash(h) for h in EXPECTED_HEADERS]
    for i, row in enumerate(rows):
        if len(row) < len(wanted):
            continue
        cells = [_squash(c) for c in row[: len(wanted)]]
        if all(w in c for w, c in zip(wanted, cells)):
            return i
    return None


def extract_venue(rows: list[list[str]]) -> str:
    for row in rows:
        first = row[0] if row else ""
        if VENUE_MARKER in first.upper():
            return _VENUE_PREFIX_RE.sub("", first, count=1).strip() or DEFAULT_VENUE
    return DEFAULT_VENUE


def normalize_date(value: str) -> str:
    """Strip ordinal suffixes and uppercase: 12th-Jan-2025 -> 12-JAN-2025."""
    return _ORDINAL_RE.sub(r"\1", value.strip()).upper()


class ResitRowValidator:
    """Validates data rows against the resit column rules.

    Row and column numbers in messages are 1-based, as shown by a
    spreadsheet application.
    """

    def __init__(self, headers: tuple[str, ...] = EXPECTED_HEADERS) -> None:
        self.headers = headers

    def validate(self, row: list[str], row_number: int) -> tuple[ResitEntry | None, list[str]]:
        """Validate one row.

        Returns:
            (entry, []) for a valid row, (None, errors) otherwise.
        """
        if len(row) < len(self.headers):
            return None, [
                f"Row {row_number}: expected {len(self.headers)} columns, "
                f"found {len(row)}"
            ]

        values = {h: row[i].strip() for i, h in enumerate(self.headers)}
        errors: list[str] = []

        def fail(header: str, message: str) -> None:
            column = self.headers.index(header) + 1
            errors.append(f"Row {row_number}, column {column} ({header}): {message}")

        number = values["NUMBER"]
        if not _POSITIVE_INT_RE.match(number) or int(number) <= 0:
            fail("NUMBER", f"Invalid NUMBER value {number!r}, expected a positive integer")

        course_no = values["COURSE NO."].upper()
        if not _COURSE_NO_RE.match(course_no):
            fail("COURSE NO.", f"Invalid COURSE NO. value {course_no!r}, expected e.g. 'CE 151'")

        session = values["SESSION"].upper()
        if session not in ("M", "A"):
            fail("SESSION", f"Invalid SESSION value {session!r}, expected 'M' or 'A'")

        date = normalize_date(values["DATE"])
        if not _DATE_RE.match(date):
            fail("DATE", f"Invalid DATE value {values['DATE']!r}, expected e.g. '12-JAN-2025'")

        for header in self.headers:
            if header in _RULED_FIELDS or header in OPTIONAL_FIELDS:
                continue
            if not values[header]:
                fail(header, f"Missing {header} value")

        if errors:
            return None, errors

        entry = ResitEntry(
            date=date,
            course_code=course_no,
            course_name=values["COURSE NAME"],
            department=values["DEPARTMENT"],
            number_of_students=int(number),
            room=values["ROOM"],
            examiner=values["EXAMINER"],
            session=session,
        )
        return entry, []


def _is_skippable(row: list[str]) -> bool:
    if not any(c.strip() for c in row):
        return True
    return FOOTER_MARKER in (row[0] if row else "").upper()


def parse_resit_rows(
    rows: list[list[str]],
    *,
    strict: bool = True,
    validator: ResitRowValidator | None = None,
) -> ResitSchedule:
    """Validate already-split rows. See :func:`parse_resit_schedule`."""
    validator = validator or ResitRowValidator()

    header_index = find_header_row(rows)
    if header_index is None:
        log.warning("resit_header_not_found", rows=len(rows))
        raise HeaderNotFoundError("Header row not found: expected " + ", ".join(EXPECTED_HEADERS))

    schedule = ResitSchedule(venue=extract_venue(rows[:header_index]))
    for i in range(header_index + 1, len(rows)):
        row = rows[i]
        if _is_skippable(row):
            continue
        entry, errors = validator.validate(row, row_number=i + 1)
        if entry is not None:
            schedule.entries.append(entry)
        schedule.errors.extend(errors)

    log.info(
        "resit_parsed",
        entries=len(schedule.entries),
        errors=len(schedule.errors),
        strict=strict,
    )
    if strict and schedule.errors:
        raise ResitValidationError(schedule.errors, schedule)
    return schedule


def parse_resit_schedule(data: bytes, *, strict: bool | None = None) -> ResitSchedule:
    """Parse a special resit export given as CSV or xlsx bytes.

    Args:
        data: Raw upload bytes.
        strict: Fail on any invalid row. Defaults to ``resit_strict`` config.

    Raises:
        MalformedWorkbookError: If xlsx bytes cannot be read.
        HeaderNotFoundError: If no header row is present.
        ResitValidationError: In strict mode, if any row is invalid.
    """
    config = get_config()
    if strict is None:
        strict = config.resit_strict
    rows = read_table_rows(data, sheet_name=config.resit_sheet_name)
    return parse_resit_rows(rows, strict=strict)
