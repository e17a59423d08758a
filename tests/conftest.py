import io
import zipfile

import pytest
from openpyxl import Workbook

from src.timetable.config import reset_config

# Zero-based column of the lunch break in the master timetable layout
BREAK_COLUMN = 7


def build_timetable(days: dict[str, dict[str, dict[int, object]]], *, with_break: bool = True) -> bytes:
    """Build master timetable workbook bytes.

    ``days`` maps sheet name -> room -> {zero-based column: text or (text, span)}.
    Rooms are written from row 5 down, below a five-row title block.
    """
    wb = Workbook()
    wb.remove(wb.active)

    for day, rooms in days.items():
        ws = wb.create_sheet(title=day)
        ws.cell(row=1, column=1, value="UNIVERSITY OF MINES AND TECHNOLOGY")
        ws.cell(row=2, column=1, value="LECTURE TIMETABLE - SECOND SEMESTER")
        ws.cell(row=3, column=1, value=day.upper())
        ws.cell(row=5, column=1, value="ROOM")
        ws.cell(row=5, column=2, value="7:00-8:00")

        for offset, (room, cells) in enumerate(rooms.items()):
            row = 6 + offset
            ws.cell(row=row, column=1, value=room)
            if with_break:
                ws.cell(row=row, column=BREAK_COLUMN + 1, value="BREAK")
            for column, content in cells.items():
                text, span = content if isinstance(content, tuple) else (content, 1)
                ws.cell(row=row, column=column + 1, value=text)
                if span > 1:
                    ws.merge_cells(
                        start_row=row,
                        start_column=column + 1,
                        end_row=row,
                        end_column=column + span,
                    )

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_workbook(sheets: dict[str, list[list[object]]]) -> bytes:
    """Workbook bytes with each sheet's rows written from A1."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def truncate_worksheet(data: bytes, part: str = "xl/worksheets/sheet1.xml") -> bytes:
    """Copy of workbook bytes with one worksheet part cut off mid-element."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as source, zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            content = source.read(item.filename)
            if item.filename == part:
                content = b"<worksheet><sheetData><row><c"
            target.writestr(item, content)
    return buffer.getvalue()


@pytest.fixture
def master_timetable() -> bytes:
    return build_timetable(
        {
            "Monday": {
                "A101": {
                    2: ("CE 151\nDr. Mensah", 2),
                    8: "MA 251",
                },
                "A102": {
                    4: "CE/EL 351, Prof. Boateng",
                },
                "A103": {},
            },
            "Tuesday": {
                "A101": {
                    1: "LT 451\nMr. Owusu",
                    10: ("GM 201\nDr. Asante", 3),
                },
            },
        }
    )


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from a developer .env and from each other."""
    monkeypatch.delenv("TIMETABLE_RESIT_STRICT", raising=False)
    monkeypatch.delenv("TIMETABLE_RESIT_SHEET_NAME", raising=False)
    reset_config()
    yield
    reset_config()
