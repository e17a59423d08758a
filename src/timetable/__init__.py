"""University master timetable ingestion.

Parses the day-per-sheet master timetable workbook into schedule entries,
computes free room slots, and validates special resit and exam exports.
"""

from src.timetable.models import (
    ExamEntry,
    ExaminerCourses,
    FreeSlot,
    ResitEntry,
    ResitSchedule,
    ScheduleEntry,
    TimeSlot,
)
from src.timetable.parsers.exams import parse_exam_timetable, parse_practicals
from src.timetable.parsers.free_slots import compute_free_slots, free_slots_from_entries
from src.timetable.parsers.resit import parse_resit_schedule
from src.timetable.parsers.schedule import ScheduleGridParser, parse_schedule

__all__ = [
    "ExamEntry",
    "ExaminerCourses",
    "FreeSlot",
    "ResitEntry",
    "ResitSchedule",
    "ScheduleEntry",
    "ScheduleGridParser",
    "TimeSlot",
    "compute_free_slots",
    "free_slots_from_entries",
    "parse_exam_timetable",
    "parse_practicals",
    "parse_resit_schedule",
    "parse_schedule",
]
