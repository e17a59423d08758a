"""Grouping of resit entries by examiner, tolerant of how names are written.

The export spells the same person several ways ("Dumenya, James K.",
"James Dumenya", "Dumenya J."). Two spellings are the same examiner when
they share two name components, or one full name plus a matching initial
while both still carry a full name.
"""

import re
from dataclasses import dataclass

from src.timetable.models import ExaminerCourses, ResitEntry

UNASSIGNED = "Unassigned"

# Department-level placeholders that must not be merged with real people
PLACEHOLDER_EXAMINERS = frozenset({"department, gm"})

_PUNCTUATION_RE = re.compile(r"[.,]")
_TOKEN_SPLIT_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class NameComponent:
    kind: str  # "name" or "initial"
    value: str


@dataclass(frozen=True)
class ExaminerName:
    original: str
    key: str
    surname: str
    first_name: str
    initials: tuple[str, ...]
    components: tuple[NameComponent, ...]

    @property
    def variants(self) -> list[str]:
        variants = [self.key, f"{self.surname}{self.first_name}"]
        variants.extend(f"{self.surname}{i}" for i in self.initials)
        return [v for v in variants if v]


def parse_examiner_name(name: str | None) -> ExaminerName | None:
    """Tokenize "Surname, First I." or "First ... Surname"; None for blanks/placeholders."""
    if not name or not name.strip() or name.strip().lower() in PLACEHOLDER_EXAMINERS:
        return None

    normalized = re.sub(r"\s+", " ", _PUNCTUATION_RE.sub("", name.strip().lower()))
    tokens = [t for t in _TOKEN_SPLIT_RE.split(normalized) if t]
    if not tokens:
        return None

    if "," in name:
        surname = tokens[0]
        first_name = tokens[1] if len(tokens) > 1 else ""
        initials = tokens[2:]
    else:
        surname = tokens[-1]
        first_name = tokens[0]
        initials = tokens[1:-1]

    components: list[NameComponent] = []
    if len(surname) > 1:
        components.append(NameComponent("name", surname))
    if len(first_name) > 1:
        components.append(NameComponent("name", first_name))
    for token in initials:
        components.append(NameComponent("initial" if len(token) == 1 else "name", token))

    return ExaminerName(
        original=name,
        key=normalized.replace(" ", ""),
        surname=surname,
        first_name=first_name,
        initials=tuple(initials),
        components=tuple(components),
    )


def names_match(a: ExaminerName | None, b: ExaminerName | None) -> bool:
    if a is None or b is None:
        return False

    matches = 0
    used: set[str] = set()
    for ca in a.components:
        for cb in b.components:
            if ca.value in used or cb.value in used:
                continue
            if ca.kind == "name" and cb.kind == "name" and ca.value == cb.value:
                matches += 1
                used.add(ca.value)
            elif (ca.kind == "name" and cb.kind == "initial" and ca.value.startswith(cb.value)) or (
                cb.kind == "name" and ca.kind == "initial" and cb.value.startswith(ca.value)
            ):
                matches += 1
                used.update((ca.value, cb.value))

    has_names = any(c.kind == "name" for c in a.components) and any(
        c.kind == "name" for c in b.components
    )
    return matches >= 2 or (matches == 1 and has_names)


def group_by_examiner(entries: list[ResitEntry]) -> list[ExaminerCourses]:
    """Group resit entries under one lecturer per distinct examiner, sorted by name.

    The first spelling seen for an examiner is the one reported.
    """
    index: dict[str, ExaminerName] = {}
    groups: dict[str, ExaminerCourses] = {}

    for entry in entries:
        parsed = parse_examiner_name(entry.examiner)
        if parsed is None:
            label = entry.examiner.strip() or UNASSIGNED
            groups.setdefault(label, ExaminerCourses(lecturer=label)).courses.append(entry)
            continue

        match_key = None
        for variant in parsed.variants:
            known = index.get(variant)
            if known is not None and names_match(parsed, known):
                match_key = known.key
                break

        if match_key is None:
            for known in index.values():
                if names_match(parsed, known):
                    match_key = known.key
                    break

        if match_key is None:
            match_key = parsed.key
            for variant in parsed.variants:
                index[variant] = parsed

        groups.setdefault(match_key, ExaminerCourses(lecturer=parsed.original)).courses.append(entry)

    return sorted(groups.values(), key=lambda g: g.lecturer.casefold())
