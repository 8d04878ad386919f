from __future__ import annotations

from lesson_schedule.period_grid import PeriodGrid
from lesson_schedule.views import build_grid, project_by_class, project_by_room, project_by_teacher, room_occupancy
from tests.factories import ROOMS, TEACHERS, make_slot


def _grid() -> PeriodGrid:
    grid = PeriodGrid()
    for p in (1, 2, 3, 4, 5):
        grid.add_period(p, label=f"JP {p}")
    grid.add_period(4.5)
    return grid


def test_class_view_indexes_by_day_and_period_with_names():
    slots = [
        make_slot("a", day="Senin", period=1, class_name="X AKL 1", teacher_id="t1", room_id="r1"),
        make_slot("b", day="Selasa", period=2, class_name="X AKL 1", teacher_id="t2"),
        make_slot("c", day="Senin", period=1, class_name="X AKL 2", teacher_id="t2"),
    ]

    cells = project_by_class(slots, "X AKL 1", teachers=TEACHERS, rooms=ROOMS)

    assert set(cells) == {("Senin", 1), ("Selasa", 2)}
    entry = cells[("Senin", 1)][0]
    assert entry.teacher_name == "Dra. Sri Mularsih"
    assert entry.room_name == "R. 1"
    assert not entry.is_conflicting


def test_unknown_references_render_as_unknown():
    slots = [make_slot("a", teacher_id="unknown", room_id="r404")]
    entry = project_by_class(slots, "X AKL 1", teachers=TEACHERS, rooms=ROOMS)[("Senin", 1)][0]

    assert entry.teacher_name == "Unknown"
    assert entry.room_name == "Unknown"


def test_conflict_flag_comes_from_the_whole_schedule():
    # Only "a" is in the class view, but it collides with "b" from another class.
    slots = [
        make_slot("a", class_name="X AKL 1", teacher_id="t1"),
        make_slot("b", class_name="X PPLG 1", teacher_id="t1"),
    ]
    cells = project_by_class(slots, "X AKL 1", teachers=TEACHERS)
    assert cells[("Senin", 1)][0].is_conflicting


def test_teacher_view_surfaces_double_booking_in_one_cell():
    slots = [
        make_slot("a", class_name="X AKL 1", teacher_id="t1"),
        make_slot("b", class_name="X AKL 2", teacher_id="t1"),
        make_slot("c", class_name="X AKL 3", teacher_id="t2"),
    ]
    cells = project_by_teacher(slots, "t1", teachers=TEACHERS)

    assert [e.slot.id for e in cells[("Senin", 1)]] == ["a", "b"]
    assert all(e.is_conflicting for e in cells[("Senin", 1)])


def test_room_view_ignores_roomless_slots():
    slots = [
        make_slot("a", room_id="r1"),
        make_slot("b", room_id=None, class_name="X AKL 2", teacher_id="t2"),
    ]
    cells = project_by_room(slots, "r1", teachers=TEACHERS, rooms=ROOMS)
    assert [e.slot.id for es in cells.values() for e in es] == ["a"]


def test_build_grid_rows_follow_ascending_periods_with_break_rows():
    slots = [make_slot("a", day="Rabu", period=5), make_slot("z", day="Rabu", period=9)]
    cells = project_by_class(slots, "X AKL 1", teachers=TEACHERS)

    rows = build_grid(cells, _grid(), days=["Senin", "Rabu"])

    assert [r.period for r in rows] == [1, 2, 3, 4, 4.5, 5]
    assert [r.is_break for r in rows] == [False, False, False, False, True, False]
    assert rows[4].label == "ISTIRAHAT"
    row5 = rows[5]
    assert [c.day for c in row5.cells] == ["Senin", "Rabu"]
    assert row5.cells[0].is_empty
    assert row5.cells[1].entries[0].slot.id == "a"


def test_room_occupancy_groups_by_room_then_period():
    slots = [
        make_slot("a", day="Senin", period=1, class_name="X AKL 1", teacher_id="t1", room_id="r1"),
        make_slot("b", day="Senin", period=1, class_name="X AKL 2", teacher_id="t2", room_id="r1"),
        make_slot("c", day="Senin", period=2, class_name="X AKL 3", teacher_id="t2", room_id="r2"),
        make_slot("d", day="Selasa", period=1, class_name="X AKL 4", teacher_id="t1", room_id="r2"),
        make_slot("e", day="Senin", period=3, class_name="X AKL 5", teacher_id="t1", room_id="gym"),
    ]

    rows = room_occupancy(slots, "Senin", rooms=ROOMS, teachers=TEACHERS, grid=_grid())
    by_room = {r.room_id: r for r in rows}

    assert [r.room_id for r in rows] == ["r1", "r2", "lab1", "gym"]
    assert by_room["gym"].room_name == "Unknown"

    r1_cells = {c.period: c for c in by_room["r1"].cells}
    assert r1_cells[1].is_double_booked
    assert [e.slot.id for e in r1_cells[1].entries] == ["a", "b"]
    assert by_room["r1"].double_booked_periods == [1]

    r2_cells = {c.period: c for c in by_room["r2"].cells}
    assert [e.slot.id for e in r2_cells[2].entries] == ["c"]
    assert not r2_cells[2].is_double_booked
    # Tuesday's slot is not part of Monday's occupancy.
    assert r2_cells[1].entries == ()

    assert [c.period for c in by_room["lab1"].cells] == [1, 2, 3, 4, 4.5, 5]
    assert all(not c.entries for c in by_room["lab1"].cells)


def test_room_occupancy_without_grid_lists_used_periods_only():
    slots = [make_slot("a", period=3, room_id="r2"), make_slot("b", period=1, room_id="r2", class_name="X AKL 2", teacher_id="t2")]
    rows = room_occupancy(slots, "Senin", rooms=ROOMS[:2])
    r2 = [r for r in rows if r.room_id == "r2"][0]
    assert [c.period for c in r2.cells] == [1, 3]
