"""Parse university timetable uploads into JSON or a table.

Standalone CLI over the ingestion core. Reads a file, runs one parser,
and prints JSON (or a human-readable table) to stdout. Diagnostics and
logs go to stderr.

Run with: python scripts/parse_timetable.py schedule "Master Timetable.xlsx"
Table:    python scripts/parse_timetable.py schedule timetable.xlsx --table
Free:     python scripts/parse_timetable.py free-rooms timetable.xlsx --day Monday
Resit:    python scripts/parse_timetable.py resit resit.csv --lenient
Grouped:  python scripts/parse_timetable.py resit resit.xlsx --by-examiner
Exams:    python scripts/parse_timetable.py exams exams.xlsx --output data/exams.json

Exit codes:
  0 = success
  1 = error (message on stderr)
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.config import get_config  # noqa: E402
from src.timetable.errors import ResitValidationError, TimetableError  # noqa: E402
from src.timetable.examiners import group_by_examiner  # noqa: E402
from src.timetable.logging import setup_logging  # noqa: E402
from src.timetable.parsers.exams import parse_exam_timetable  # noqa: E402
from src.timetable.parsers.free_slots import compute_free_slots  # noqa: E402
from src.timetable.parsers.resit import parse_resit_schedule  # noqa: E402
from src.timetable.parsers.schedule import parse_schedule  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Parse timetable uploads into JSON or a table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=["schedule", "free-rooms", "resit", "exams"],
        help="Which parser to run.",
    )
    parser.add_argument("file", type=Path, help="Uploaded .xlsx (or .csv for resit).")
    parser.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table instead of JSON (schedule, free-rooms).",
    )
    parser.add_argument(
        "--day",
        type=str,
        default=None,
        help="Only report this day (sheet name), e.g. Monday.",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Resit: keep valid rows and report invalid ones instead of failing.",
    )
    parser.add_argument(
        "--by-examiner",
        action="store_true",
        help="Resit: group entries by examiner.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write JSON to this file instead of stdout.",
    )
    return parser.parse_args(argv)


def _format_table(headers: list[str], rows: list[list[str]]) -> str:
    """Format rows as a pipe-separated table with aligned columns."""
    if not rows:
        return "(nothing to show)"

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows]
    return "\n".join([header_line, separator, *row_lines])


def _run(args: argparse.Namespace) -> tuple[object, str | None]:
    """Run the chosen parser. Returns (json-ready result, optional table text)."""
    data = args.file.read_bytes()

    if args.command == "schedule":
        entries = [e for e in parse_schedule(data) if args.day in (None, e.day)]
        _log(f"  Parsed {len(entries)} schedule entries")
        table = _format_table(
            ["Day", "Room", "Time", "Course", "Lecturer", "Level"],
            [[e.day, e.room, e.time, e.course_code, e.lecturer, str(e.level)] for e in entries],
        )
        return [e.model_dump(mode="json") for e in entries], table

    if args.command == "free-rooms":
        slots = [s for s in compute_free_slots(data) if args.day in (None, s.day)]
        _log(f"  Found {len(slots)} free room slots")
        table = _format_table(
            ["Day", "Room", "Time"], [[s.day, s.location, s.time] for s in slots]
        )
        return [s.model_dump(mode="json") for s in slots], table

    if args.command == "resit":
        schedule = parse_resit_schedule(data, strict=False if args.lenient else None)
        for error in schedule.errors:
            _log(f"  {error}")
        _log(f"  Venue: {schedule.venue}, {len(schedule.entries)} valid rows")
        if args.by_examiner:
            groups = group_by_examiner(schedule.entries)
            return [g.model_dump(mode="json") for g in groups], None
        return schedule.model_dump(mode="json"), None

    entries = parse_exam_timetable(data)
    entries = [e for e in entries if args.day in (None, e.day)]
    _log(f"  Parsed {len(entries)} exam/practical entries")
    return [e.model_dump(mode="json") for e in entries], None


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    try:
        result, table = _run(args)
    except ResitValidationError as e:
        for error in e.errors:
            _log(f"  {error}")
        _log(f"ERROR: {len(e.errors)} invalid resit rows (use --lenient to import the rest)")
        return 1
    except (TimetableError, OSError) as e:
        _log(f"ERROR: {e}")
        return 1

    if args.table and table is not None:
        print(table)
    elif args.output:
        output_file = Path(args.output)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(result, indent=2, ensure_ascii=False), encoding="utf-8")
        _log(f"  Wrote {args.output}")
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))

    _log(f"parse_timetable {args.command}: done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
