"""Decoding of timetable cell text into course codes, lecturers, levels and departments.

A master timetable cell holds one or more course codes optionally followed
by the lecturer, separated by newlines or commas:

    "CE 151\\nDr. Mensah"        -> course "CE 151", lecturer "Dr. Mensah"
    "CE 151"                    -> course "CE 151", lecturer "TBA"
    "CE 151, EL 151\\nDr. Boateng" -> course "CE 151 EL 151", lecturer "Dr. Boateng"
"""

import re
from dataclasses import dataclass, field

from src.timetable.departments import DepartmentTable

DEFAULT_LECTURER = "TBA"

_ENTRY_SPLIT_RE = re.compile(r"\n|,")
_DIGITS_RE = re.compile(r"\d+")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_INITIAL_PUNCTUATION_RE = re.compile(r"[.-]")
_COMPOUND_SPLIT_RE = re.compile(r"[/ ]+")


def is_break_cell(text: str) -> bool:
    return "break" in text.lower()


def split_lecturer(parts: list[str]) -> tuple[list[str], str]:
    """Separate the lecturer from the course parts of a cell.

    Positional rule: in a multi-entry cell the last entry is the lecturer.
    A cell written lecturer-first is therefore misread; that is a property
    of the source format, not something this function tries to detect.
    """
    if len(parts) > 1:
        return parts[:-1], parts[-1]
    return list(parts), DEFAULT_LECTURER


def decode_cell(text: str) -> tuple[str, str] | None:
    """Decode one cell into ``(raw_course_code, lecturer)``.

    Returns None for blank cells, break cells, and cells with nothing but
    separators in them.
    """
    text = (text or "").strip()
    if not text or is_break_cell(text):
        return None

    parts = [p.strip() for p in _ENTRY_SPLIT_RE.split(text)]
    parts = [p for p in parts if p]
    if not parts:
        return None

    course_parts, lecturer = split_lecturer(parts)
    return " ".join(course_parts), lecturer


def course_level(course_code: str) -> int:
    """First digit of the first number in the code, times 100 ("CE 351" -> 300)."""
    match = _DIGITS_RE.search(course_code)
    if not match:
        return 0
    return int(match.group(0)[0]) * 100


def _unique(items) -> list[str]:
    return list(dict.fromkeys(items))


@dataclass(frozen=True)
class Classification:
    course_code: str
    level: int
    departments: tuple[str, ...]


@dataclass(frozen=True)
class CourseCodeClassifier:
    """Derives level and departments from a raw course code and normalizes it.

    Tokens are classified independently: a token starting with a digit is a
    course number, a token containing a letter is a department initial, and
    a mixed token such as "1CE" counts as both.
    """

    departments: DepartmentTable = field(default_factory=DepartmentTable.default)

    def classify(self, raw_code: str) -> Classification:
        number_parts: list[str] = []
        initial_parts: list[str] = []

        for token in raw_code.split():
            if token[0].isdigit():
                number_parts.append(token)
            if _LETTER_RE.search(token):
                initial_parts.append(_INITIAL_PUNCTUATION_RE.sub("", token))

        initials = _unique(p for p in initial_parts if p)

        # "CE/EL" names two departments
        split_initials = [
            s.strip() for s in _COMPOUND_SPLIT_RE.split(" ".join(initials)) if s.strip()
        ]
        departments = tuple(_unique(self.departments.lookup(i) for i in split_initials))

        course_code = f"{' '.join(initials)} {' '.join(number_parts)}".strip()
        return Classification(
            course_code=course_code,
            level=course_level(raw_code),
            departments=departments,
        )
