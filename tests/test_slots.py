import pytest

from src.timetable.slots import (
    SLOT_COUNT,
    TIME_SLOTS,
    clock_to_minutes,
    column_to_slot_index,
    combine_range,
    range_to_slot_indices,
    slot_bounds,
    slot_label,
)


def test_catalog_has_twelve_contiguous_slots():
    assert SLOT_COUNT == 12
    assert [s.index for s in TIME_SLOTS] == list(range(12))
    assert TIME_SLOTS[0].label == "7:00-8:00 AM"
    assert TIME_SLOTS[-1].label == "6:30-7:30 PM"


def test_slots_never_overlap_and_skip_lunch():
    bounds = [slot_bounds(s) for s in TIME_SLOTS]
    for (start, end), (next_start, _) in zip(bounds, bounds[1:]):
        assert start < end <= next_start
    # 1:00-1:30 PM lunch gap between slot 5 and slot 6
    assert bounds[5][1] == 13 * 60
    assert bounds[6][0] == 13 * 60 + 30


@pytest.mark.parametrize("column", range(1, 7))
def test_columns_up_to_six_map_directly(column):
    assert column_to_slot_index(column) == column - 1


@pytest.mark.parametrize("column", range(7, 14))
def test_columns_after_six_skip_break_column(column):
    assert column_to_slot_index(column) == column - 2


def test_slot_label_out_of_range_is_empty():
    assert slot_label(-1) == ""
    assert slot_label(12) == ""
    assert slot_label(2) == "9:00-10:00 AM"


@pytest.mark.parametrize("index", range(12))
def test_combine_single_slot_is_its_label(index):
    assert combine_range(index, index) == slot_label(index)


def test_combine_two_slots():
    assert combine_range(1, 2) == "8:00 - 10:00 AM"


def test_combine_across_lunch():
    assert combine_range(5, 6) == "12:00 - 2:30 PM"


def test_combine_clamps_end():
    assert combine_range(10, 14) == "5:30 - 7:30 PM"


def test_combine_reversed_falls_back_to_start():
    assert combine_range(4, 2) == "11:00-12:00 PM"


def test_combine_past_catalog_is_empty():
    assert combine_range(12, 12) == ""


def test_clock_to_minutes():
    assert clock_to_minutes("7:00") == 7 * 60
    assert clock_to_minutes("12:00 PM") == 12 * 60
    assert clock_to_minutes("1:30") == 13 * 60 + 30
    assert clock_to_minutes("7:30 PM") == 19 * 60 + 30
    assert clock_to_minutes("noon") is None


def test_range_to_indices_single_label():
    assert range_to_slot_indices("9:00-10:00 AM") == [2]


def test_range_to_indices_combined_range():
    assert range_to_slot_indices("8:00 - 10:00 AM") == [1, 2]
    assert range_to_slot_indices("3:30 - 6:30 PM") == [8, 9, 10]


def test_range_to_indices_round_trips_every_combination():
    for start in range(SLOT_COUNT):
        for end in range(start, SLOT_COUNT):
            assert range_to_slot_indices(combine_range(start, end)) == list(range(start, end + 1))


def test_range_to_indices_rejects_garbage():
    assert range_to_slot_indices("") == []
    assert range_to_slot_indices("TBA") == []
