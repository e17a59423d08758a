"""Pydantic models for timetable data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Models produced by a parse are frozen; downstream status updates belong to the caller.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TimeSlot(BaseModel):
    """One period of the fixed daily catalog, e.g. index 1 = "8:00-9:00 AM"."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    label: str

    @property
    def start(self) -> str:
        """Start time text without meridiem ("8:00")."""
        return self.label.split("-")[0].strip()

    @property
    def end(self) -> str:
        """End time text including meridiem ("9:00 AM")."""
        return self.label.split("-")[1].strip()


class MergeRegion(BaseModel):
    """A horizontally merged block of cells on one sheet row (zero-based)."""

    model_config = ConfigDict(frozen=True)

    row: int
    first_column: int
    last_column: int

    @property
    def column_span(self) -> int:
        return self.last_column - self.first_column + 1


class ScheduleEntry(BaseModel):
    """A single class booking from the master timetable.

    One entry per decoded cell. A cell merged over several columns yields
    one entry whose time covers the whole span ("8:00 - 10:00 AM").
    """

    model_config = ConfigDict(frozen=True)

    day: str  # Sheet name, verbatim ("Monday")
    room: str  # Column 0 of the row ("A101")
    time: str  # Slot label or combined range
    course_code: str  # Normalized "CE/EL 151", lecturer stripped
    lecturer: str  # Last line of a multi-line cell, else "TBA"
    level: int = 0  # 100, 200, ... or 0 when no digits
    departments: tuple[str, ...] = ()


class FreeSlot(BaseModel):
    """A (day, room, slot) with no booking."""

    model_config = ConfigDict(frozen=True)

    day: str
    location: str
    time: str  # Always a single slot label ("9:00-10:00 AM")


class ResitEntry(BaseModel):
    """One validated row of the special resit export."""

    model_config = ConfigDict(frozen=True)

    date: str  # "12-JAN-2025"
    course_code: str  # "CE 151"
    course_name: str
    department: str
    number_of_students: int = Field(gt=0)
    room: str
    examiner: str = ""
    session: Literal["M", "A"]


class ResitSchedule(BaseModel):
    """Result of a resit import: valid entries plus per-row errors."""

    venue: str = "Not specified"
    entries: list[ResitEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ExaminerCourses(BaseModel):
    """Resit entries grouped under one (fuzzy-matched) examiner."""

    lecturer: str
    courses: list[ResitEntry] = Field(default_factory=list)


class ExamEntry(BaseModel):
    """One row of the end-of-semester exam or practical timetable."""

    model_config = ConfigDict(frozen=True)

    date: str  # "dd-mm-yyyy"
    day: str  # Weekday name derived from date, "" if unknown
    course_code: str
    course_name: str = ""
    class_name: str = ""
    lecturer: str = ""
    room: str = ""
    invigilator: str = ""
    period: str = "Unknown"  # Morning / Afternoon / Evening
    is_practical: bool = False
    level: int = 0
    departments: tuple[str, ...] = ()
