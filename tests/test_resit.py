import pytest

from src.timetable.errors import HeaderNotFoundError, ResitValidationError
from src.timetable.parsers.resit import (
    ResitRowValidator,
    extract_venue,
    find_header_row,
    normalize_date,
    parse_resit_rows,
    parse_resit_schedule,
)

from .conftest import build_workbook

HEADER = "DATE,COURSE NO.,COURSE NAME,DEPARTMENT,NUMBER,ROOM,EXAMINER,SESSION (M/A)"

RESIT_CSV = f"""UNIVERSITY OF MINES AND TECHNOLOGY
SPECIAL RESIT EXAMINATION TIMETABLE
VENUE: Main Exam Hall
{HEADER}
12th-Jan-2025,CE 151,"Programming, Basic",Computer Science,14,LH1,"Mensah, Kofi",M
13-Jan-2025,el 251,Circuit Theory,Electrical,3,LH2,,a

FOR ANY ISSUES CONTACT THE EXAMS OFFICE,,,,,,,
"""


def _csv(*rows: str) -> bytes:
    return "\n".join([HEADER, *rows]).encode("utf-8")


def test_parse_valid_csv():
    schedule = parse_resit_schedule(RESIT_CSV.encode("utf-8"))

    assert schedule.venue == "Main Exam Hall"
    assert schedule.errors == []
    first, second = schedule.entries
    assert first.date == "12-JAN-2025"
    assert first.course_code == "CE 151"
    assert first.course_name == "Programming, Basic"
    assert first.examiner == "Mensah, Kofi"
    assert first.number_of_students == 14
    assert first.session == "M"
    assert second.course_code == "EL 251"
    assert second.examiner == ""
    assert second.session == "A"


def test_negative_number_is_rejected():
    schedule = parse_resit_schedule(
        _csv(
            "12-Jan-2025,CE 151,Programming,CS,-3,LH1,Dr. Mensah,M",
            "12-Jan-2025,CE 152,Data Structures,CS,5,LH1,Dr. Mensah,M",
        ),
        strict=False,
    )
    assert [e.course_code for e in schedule.entries] == ["CE 152"]
    assert len(schedule.errors) == 1
    assert "Invalid NUMBER value" in schedule.errors[0]
    assert schedule.errors[0].startswith("Row 2, column 5 (NUMBER)")


@pytest.mark.parametrize(
    "row, field",
    [
        ("12-Jan-2025,CE 151,Programming,CS,zero,LH1,,M", "Invalid NUMBER value"),
        ("12-Jan-2025,CE 151,Programming,CS,0,LH1,,M", "Invalid NUMBER value"),
        ("12-Jan-2025,CE151,Programming,CS,4,LH1,,M", "Invalid COURSE NO. value"),
        ("12-Jan-2025,CSE 151,Programming,CS,4,LH1,,M", "Invalid COURSE NO. value"),
        ("12-Jan-2025,CE 151,Programming,CS,4,LH1,,E", "Invalid SESSION value"),
        ("12/01/2025,CE 151,Programming,CS,4,LH1,,M", "Invalid DATE value"),
        ("12-January-2025,CE 151,Programming,CS,4,LH1,,M", "Invalid DATE value"),
        ("12-Jan-2025,CE 151,,CS,4,LH1,,M", "Missing COURSE NAME value"),
        ("12-Jan-2025,CE 151,Programming,,4,LH1,,M", "Missing DEPARTMENT value"),
        ("12-Jan-2025,CE 151,Programming,CS,4,,,M", "Missing ROOM value"),
    ],
)
def test_field_rules(row, field):
    schedule = parse_resit_schedule(_csv(row), strict=False)
    assert schedule.entries == []
    assert any(field in error for error in schedule.errors)


def test_every_failing_field_is_reported():
    schedule = parse_resit_schedule(_csv("someday,C 1,Programming,CS,-1,LH1,,X"), strict=False)
    assert len(schedule.errors) == 4


def test_short_row_is_rejected_with_position():
    schedule = parse_resit_schedule(_csv("12-Jan-2025,CE 151,Programming"), strict=False)
    assert schedule.errors == ["Row 2: expected 8 columns, found 3"]


def test_strict_mode_fails_whole_batch():
    data = _csv(
        "12-Jan-2025,CE 151,Programming,CS,4,LH1,,M",
        "12-Jan-2025,CE 152,Programming,CS,-3,LH1,,M",
    )
    with pytest.raises(ResitValidationError, match="Parsing failed with errors") as exc_info:
        parse_resit_schedule(data)

    error = exc_info.value
    assert len(error.errors) == 1
    assert [e.course_code for e in error.schedule.entries] == ["CE 151"]


def test_strict_default_comes_from_config(monkeypatch):
    monkeypatch.setenv("TIMETABLE_RESIT_STRICT", "false")
    schedule = parse_resit_schedule(_csv("12-Jan-2025,CE 152,Programming,CS,-3,LH1,,M"))
    assert schedule.entries == []
    assert len(schedule.errors) == 1


def test_missing_header_fails():
    data = b"DATE,COURSE,NAME\n12-Jan-2025,CE 151,Programming\n"
    with pytest.raises(HeaderNotFoundError):
        parse_resit_schedule(data)


def test_header_match_ignores_spacing_and_case():
    rows = [["title"], ["date", "Course No.", "COURSE  NAME", "Department", "number", "Room", "examiner", "Session(M/A)"]]
    assert find_header_row(rows) == 1


def test_venue_defaults_when_absent():
    assert extract_venue([["SPECIAL RESIT"], []]) == "Not specified"
    assert extract_venue([["Venue:  Block C "]]) == "Block C"


def test_normalize_date_strips_ordinals():
    assert normalize_date("1st-Feb-2025") == "1-FEB-2025"
    assert normalize_date(" 22nd-mar-2025 ") == "22-MAR-2025"


def test_parse_workbook_export():
    data = build_workbook(
        {
            "NOTES": [["ignore me"]],
            "SPECIAL RESIT": [
                ["VENUE: New Auditorium"],
                HEADER.split(","),
                ["14-Jan-2025", "MA 151", "Calculus", "Mathematics", 22, "NA1", "Dr. Asante", "A"],
            ],
        }
    )
    schedule = parse_resit_schedule(data)
    assert schedule.venue == "New Auditorium"
    (entry,) = schedule.entries
    assert entry.number_of_students == 22
    assert entry.room == "NA1"


def test_validator_accepts_custom_row_number():
    entry, errors = ResitRowValidator().validate(
        ["12-Jan-2025", "CE 151", "Programming", "CS", "4", "LH1", "", "m"], row_number=40
    )
    assert errors == []
    assert entry.session == "M"

    entry, errors = ResitRowValidator().validate(
        ["12-Jan-2025", "CE 151", "Programming", "CS", "-4", "LH1", "", "m"], row_number=40
    )
    assert entry is None
    assert errors[0].startswith("Row 40, column 5")


def test_blank_and_footer_rows_are_ignored():
    rows = [
        HEADER.split(","),
        ["", "", ""],
        ["For any issues contact the exams office"],
    ]
    schedule = parse_resit_rows(rows)
    assert schedule.entries == []
    assert schedule.errors == []
