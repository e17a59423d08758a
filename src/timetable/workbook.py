"""Spreadsheet reading: workbook bytes to row-major string grids.

Every parser works on :class:`SheetGrid` rather than on openpyxl objects,
so grids can be built directly in tests and the openpyxl dependency stays
in this module.
"""

import csv
import io
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime, time

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from src.timetable.errors import MalformedWorkbookError
from src.timetable.logging import get_logger
from src.timetable.models import MergeRegion

log = get_logger(__name__)

# xlsx files are zip archives
_ZIP_MAGIC = b"PK\x03\x04"

# What openpyxl raises for a damaged archive or part. XML parse errors from
# both ElementTree and lxml subclass SyntaxError.
_READ_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    KeyError,
    OSError,
    ValueError,
    SyntaxError,
)


@dataclass
class SheetGrid:
    """One sheet as strings, plus its merged regions keyed by top-left cell."""

    name: str
    rows: list[list[str]]
    merges: dict[tuple[int, int], MergeRegion] = field(default_factory=dict)

    def cell(self, row: int, column: int) -> str:
        if row >= len(self.rows) or column >= len(self.rows[row]):
            return ""
        return self.rows[row][column]

    def merge_span_at(self, row: int, column: int) -> int:
        """Columns covered by a merge starting at (row, column); 1 if none."""
        region = self.merges.get((row, column))
        return region.column_span if region else 1


def cell_text(value) -> str:
    """Render a cell value the way it reads on screen."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%d-%b-%Y").upper()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.strftime("%d-%b-%Y").upper()
    return str(value)


def is_workbook(data: bytes) -> bool:
    return data[:4] == _ZIP_MAGIC


def _open(data: bytes):
    # read_only worksheets do not expose merged cells
    try:
        return load_workbook(io.BytesIO(data), data_only=True)
    except _READ_ERRORS as e:
        log.exception("workbook_open_failed", size=len(data))
        raise MalformedWorkbookError() from e


def _sheet_grid(ws) -> SheetGrid:
    rows = [[cell_text(v) for v in row] for row in ws.iter_rows(values_only=True)]

    merges: dict[tuple[int, int], MergeRegion] = {}
    for rng in ws.merged_cells.ranges:
        region = MergeRegion(
            row=rng.min_row - 1,
            first_column=rng.min_col - 1,
            last_column=rng.max_col - 1,
        )
        # First region wins if a sheet lists overlapping merges
        merges.setdefault((region.row, region.first_column), region)

    return SheetGrid(name=ws.title, rows=rows, merges=merges)


def load_sheets(data: bytes) -> list[SheetGrid]:
    """Read every worksheet of an xlsx workbook, in workbook order.

    Raises:
        MalformedWorkbookError: If the bytes are not a readable workbook.
    """
    if not is_workbook(data):
        raise MalformedWorkbookError()

    wb = _open(data)
    try:
        grids = [_sheet_grid(ws) for ws in wb.worksheets]
    except _READ_ERRORS as e:
        log.exception("worksheet_read_failed", size=len(data))
        raise MalformedWorkbookError() from e
    finally:
        wb.close()

    log.debug("workbook_loaded", sheets=[g.name for g in grids])
    return grids


def read_table_rows(data: bytes, *, sheet_name: str | None = None) -> list[list[str]]:
    """Rows of a tabular export given as xlsx or CSV bytes.

    For workbooks, ``sheet_name`` is used when present, otherwise the first
    sheet. CSV follows the usual quoting convention: double-quoted fields may
    contain commas and doubled quotes.
    """
    if is_workbook(data):
        grids = load_sheets(data)
        if not grids:
            return []
        by_name = {g.name: g for g in grids}
        grid = by_name.get(sheet_name) if sheet_name else None
        if grid is None:
            if sheet_name:
                log.info("sheet_not_found_using_first", wanted=sheet_name, using=grids[0].name)
            grid = grids[0]
        return grid.rows

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = data.decode("latin-1")
    return [row for row in csv.reader(io.StringIO(text))]
