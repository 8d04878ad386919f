from __future__ import annotations

import itertools

from lesson_schedule.conflicts import (
    ROOM_DOUBLE_BOOKED,
    TEACHER_DOUBLE_BOOKED,
    conflict_count,
    describe_conflicts,
    find_conflicts,
    is_slot_conflicting,
)
from tests.factories import make_slot


def _pairwise(slots):
    """Reference definition: check every pair."""
    ids = set()
    for a, b in itertools.combinations(slots, 2):
        if a.id == b.id or a.day != b.day or a.period != b.period:
            continue
        if a.teacher_id == b.teacher_id or (a.room_id and a.room_id == b.room_id):
            ids.update({a.id, b.id})
    return ids


def test_room_conflict_even_when_teachers_differ():
    slots = [
        make_slot("a", period=2, teacher_id="t1", room_id="r1", class_name="X AKL 1"),
        make_slot("b", period=2, teacher_id="t9", room_id="r1", class_name="X AKL 2"),
    ]
    assert find_conflicts(slots) == {"a", "b"}


def test_teacher_conflict_across_classes():
    slots = [
        make_slot("a", class_name="X AKL 1", teacher_id="t1", room_id="r1"),
        make_slot("b", class_name="X PPLG 1", teacher_id="t1", room_id="r2"),
        make_slot("c", class_name="X PPLG 2", teacher_id="t2", room_id="r3"),
    ]
    assert find_conflicts(slots) == {"a", "b"}


def test_slots_without_room_never_room_conflict():
    slots = [
        make_slot("a", class_name="X AKL 1", teacher_id="t1", room_id=None),
        make_slot("b", class_name="X AKL 2", teacher_id="t2", room_id=""),
        make_slot("c", class_name="X AKL 3", teacher_id="t3"),
    ]
    assert find_conflicts(slots) == set()
    assert not any(is_slot_conflicting(slots, s) for s in slots)


def test_unique_slots_are_not_flagged():
    slots = [
        make_slot("a", day="Senin", period=1, teacher_id="t1", room_id="r1"),
        make_slot("b", day="Senin", period=2, teacher_id="t1", room_id="r1"),
        make_slot("c", day="Selasa", period=1, teacher_id="t1", room_id="r1"),
        make_slot("d", day="Senin", period=1, teacher_id="t2", room_id="r2"),
    ]
    assert find_conflicts(slots) == set()


def test_fractional_and_integral_periods_are_distinct_times():
    slots = [
        make_slot("a", period=4, teacher_id="t1"),
        make_slot("b", period=4.5, teacher_id="t1"),
        make_slot("c", period=4.0, teacher_id="t1", class_name="X AKL 2"),
    ]
    assert find_conflicts(slots) == {"a", "c"}


def test_unknown_teacher_sentinel_collides_with_itself():
    slots = [
        make_slot("a", class_name="X AKL 1", teacher_id="unknown"),
        make_slot("b", class_name="X AKL 2", teacher_id="unknown"),
    ]
    assert find_conflicts(slots) == {"a", "b"}


def test_is_slot_conflicting_matches_full_scan():
    slots = [
        make_slot("a", period=1, teacher_id="t1", room_id="r1"),
        make_slot("b", period=1, teacher_id="t2", room_id="r1", class_name="X AKL 2"),
        make_slot("c", period=1, teacher_id="t3", room_id="r2", class_name="X AKL 3"),
        make_slot("d", period=2, teacher_id="t3", room_id=None, class_name="X AKL 3"),
        make_slot("e", period=2, teacher_id="t3", room_id=None, class_name="X AKL 4"),
    ]
    found = find_conflicts(slots)
    assert found == {"a", "b", "d", "e"}
    for s in slots:
        assert is_slot_conflicting(slots, s) == (s.id in found)


def test_matches_pairwise_definition_on_a_busy_week():
    days = ["Senin", "Selasa"]
    slots = []
    n = 0
    for day in days:
        for period in (1, 2, 3):
            for k in range(4):
                n += 1
                slots.append(
                    make_slot(
                        f"s{n}",
                        day=day,
                        period=period,
                        class_name=f"X C{k}",
                        teacher_id=f"t{(n * 7) % 5}",
                        room_id=None if n % 3 == 0 else f"r{(n * 3) % 4}",
                    )
                )
    assert find_conflicts(slots) == _pairwise(slots)
    assert conflict_count(slots) == len(_pairwise(slots))


def test_describe_conflicts_reports_each_resource_once():
    slots = [
        make_slot("a", period=3, teacher_id="t1", room_id="r1", class_name="X AKL 1"),
        make_slot("b", period=3, teacher_id="t1", room_id="r1", class_name="X AKL 2"),
        make_slot("c", period=3, teacher_id="t2", room_id="r1", class_name="X AKL 3"),
    ]
    conflicts = describe_conflicts(slots)
    by_type = {c.conflict_type: c for c in conflicts}

    assert len(conflicts) == 2
    assert set(by_type[TEACHER_DOUBLE_BOOKED].slot_ids) == {"a", "b"}
    assert by_type[TEACHER_DOUBLE_BOOKED].teacher_id == "t1"
    assert set(by_type[ROOM_DOUBLE_BOOKED].slot_ids) == {"a", "b", "c"}
    assert by_type[ROOM_DOUBLE_BOOKED].room_id == "r1"
    assert by_type[ROOM_DOUBLE_BOOKED].metadata["class_names"] == ["X AKL 1", "X AKL 2", "X AKL 3"]


def test_empty_schedule_has_no_conflicts():
    assert find_conflicts([]) == set()
    assert describe_conflicts([]) == []
