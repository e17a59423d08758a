"""FreeSlotComputer - the complement of the master timetable.

A room is only known once it has been seen booked at least once on a day;
rooms that never appear booked produce no free slots for that day rather
than a fully free day.

Two ways to get occupancy, which must agree:
  from_grid            walk the sheets with the schedule parser's rules
  from_entries         map parsed entry time ranges back onto the catalog
"""

from collections.abc import Iterable

from src.timetable.courses import decode_cell
from src.timetable.logging import get_logger
from src.timetable.models import FreeSlot, ScheduleEntry
from src.timetable.parsers.schedule import iter_occupied_cells
from src.timetable.slots import SLOT_COUNT, TIME_SLOTS, range_to_slot_indices
from src.timetable.workbook import SheetGrid, load_sheets

log = get_logger(__name__)


class FreeSlotComputer:
    """Accumulates occupied slot indices per day and room.

    Days and rooms keep first-seen order so output is deterministic.
    """

    def __init__(self) -> None:
        self._occupancy: dict[str, dict[str, set[int]]] = {}

    def occupy(self, day: str, room: str, slot_indices: Iterable[int]) -> None:
        """Mark slots as booked. Out-of-catalog indices are ignored; a room is
        only registered when at least one index falls inside the catalog."""
        valid = {i for i in slot_indices if 0 <= i < SLOT_COUNT}
        if not valid:
            return
        rooms = self._occupancy.setdefault(day, {})
        rooms.setdefault(room, set()).update(valid)

    def occupied(self, day: str, room: str) -> set[int]:
        return set(self._occupancy.get(day, {}).get(room, set()))

    def free_slots(self) -> list[FreeSlot]:
        slots: list[FreeSlot] = []
        for day, rooms in self._occupancy.items():
            for room, taken in rooms.items():
                for slot in TIME_SLOTS:
                    if slot.index not in taken:
                        slots.append(FreeSlot(day=day, location=room, time=slot.label))
        return slots

    @classmethod
    def from_grid(cls, grids: list[SheetGrid]) -> "FreeSlotComputer":
        computer = cls()
        for grid in grids:
            for cell in iter_occupied_cells(grid):
                # Same acceptance rule as the schedule parser
                if decode_cell(cell.text) is None:
                    continue
                computer.occupy(cell.day, cell.room, range(cell.first_slot, cell.last_slot + 1))
        return computer

    @classmethod
    def from_entries(cls, entries: Iterable[ScheduleEntry]) -> "FreeSlotComputer":
        computer = cls()
        for entry in entries:
            computer.occupy(entry.day, entry.room, range_to_slot_indices(entry.time))
        return computer


def free_slots_from_entries(entries: Iterable[ScheduleEntry]) -> list[FreeSlot]:
    """Free slots derived from already-parsed schedule entries."""
    return FreeSlotComputer.from_entries(entries).free_slots()


def compute_free_slots(data: bytes) -> list[FreeSlot]:
    """Free (day, room, slot) triples of a master timetable workbook.

    Raises:
        MalformedWorkbookError: If the bytes are not a readable workbook.
    """
    grids = load_sheets(data)
    slots = FreeSlotComputer.from_grid(grids).free_slots()
    log.info("free_slots_computed", sheets=len(grids), free_slots=len(slots))
    return slots
