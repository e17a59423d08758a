"""Error hierarchy for timetable ingestion.

Grid parsers are best-effort: malformed cells are skipped, and only
whole-workbook conditions surface as exceptions. The resit validator is
strict: row failures are collected and raised together.

Example usage at the upload boundary:
    try:
        entries = parse_schedule(data)
    except EmptyScheduleError:
        ...  # show "no valid schedule data"
    except MalformedWorkbookError:
        ...  # show generic "failed to parse"
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.timetable.models import ResitSchedule


class TimetableError(Exception):
    """Base exception for all ingestion errors."""

    pass


class MalformedWorkbookError(TimetableError):
    """The input could not be read as a spreadsheet at all.

    The underlying reader exception is chained as ``__cause__`` and logged;
    the message itself stays generic because it is shown to end users.
    """

    def __init__(self, message: str = "Failed to parse the Excel file. "
                 "Please ensure it is in the correct format.") -> None:
        super().__init__(message)


class EmptyScheduleError(TimetableError):
    """The workbook was read but produced zero schedule entries."""

    def __init__(self, message: str = "The uploaded file could not be parsed or "
                 "contains no valid schedule data. Please check the file format.") -> None:
        super().__init__(message)


class HeaderNotFoundError(TimetableError):
    """The resit export has no row matching the expected header sequence."""

    pass


class ResitValidationError(TimetableError):
    """One or more resit rows failed field validation.

    Raised only in strict mode. Carries every row error plus the partial
    schedule built from the rows that did validate.
    """

    def __init__(self, errors: list[str], schedule: ResitSchedule | None = None) -> None:
        self.errors = list(errors)
        self.schedule = schedule
        super().__init__("Parsing failed with errors: " + "; ".join(self.errors))


class NoExamDataError(TimetableError):
    """An exam workbook yielded neither exam nor practical rows."""

    pass
