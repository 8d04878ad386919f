from __future__ import annotations

from lesson_schedule.merge import merge_slots
from lesson_schedule.slots import ScheduleSlot
from tests.factories import make_slot


def test_candidate_replaces_same_class_and_time():
    existing = [
        ScheduleSlot(id="a", day="Senin", period=1, class_name="X A", subject="Matematika", teacher_id="t1"),
    ]
    batch = [
        ScheduleSlot(id="b", day="Senin", period=1, class_name="X A", subject="Fisika", teacher_id="t2"),
    ]

    result = merge_slots(existing, batch)

    assert result.slots == (
        ScheduleSlot(id="b", day="Senin", period=1, class_name="X A", subject="Fisika", teacher_id="t2"),
    )
    assert [s.id for s in result.superseded] == ["a"]
    assert result.added == ()


def test_replacement_keeps_position_and_new_keys_append():
    existing = [
        make_slot("a", period=1, class_name="X AKL 1"),
        make_slot("b", period=2, class_name="X AKL 1"),
        make_slot("c", period=1, class_name="X AKL 2"),
    ]
    batch = [
        make_slot("n1", period=2, class_name="X AKL 1", teacher_id="t2"),
        make_slot("n2", period=3, class_name="X AKL 1"),
        make_slot("n3", period=1, class_name="X AKL 3"),
    ]

    result = merge_slots(existing, batch)

    assert [s.id for s in result.slots] == ["a", "n1", "c", "n2", "n3"]
    assert len(result.slots) == len(existing) + 2
    assert [s.id for s in result.added] == ["n2", "n3"]
    assert [(old.id, new.id) for old, new in result.replaced] == [("b", "n1")]


def test_key_ignores_teacher_and_room():
    existing = [make_slot("a", teacher_id="t1", room_id="r1", subject="Matematika")]
    batch = [make_slot("b", teacher_id="t9", room_id=None, subject="Seni Budaya")]

    result = merge_slots(existing, batch)

    assert [s.id for s in result.slots] == ["b"]
    assert result.slots[0].room_id is None


def test_last_candidate_for_a_key_wins():
    batch = [
        make_slot("x1", period=5, subject="Matematika"),
        make_slot("x2", period=5, subject="Informatika"),
    ]

    result = merge_slots([], batch)

    assert [s.id for s in result.slots] == ["x2"]
    assert result.slots[0].subject == "Informatika"


def test_empty_batch_changes_nothing():
    existing = [make_slot("a"), make_slot("b", period=2)]
    result = merge_slots(existing, [])

    assert result.slots == tuple(existing)
    assert not result.changed


def test_merging_same_batch_twice_is_idempotent():
    existing = [make_slot("a", period=1), make_slot("b", period=2, class_name="X AKL 2")]
    batch = [
        make_slot("n1", period=1, teacher_id="t2"),
        make_slot("n2", period=4, class_name="X AKL 2"),
    ]

    once = merge_slots(existing, batch)
    twice = merge_slots(once.slots, batch)

    assert twice.slots == once.slots
    assert not twice.changed


def test_conflicting_candidates_are_kept():
    existing = [make_slot("a", class_name="X AKL 1", teacher_id="t1")]
    batch = [make_slot("b", class_name="X AKL 2", teacher_id="t1")]

    result = merge_slots(existing, batch)

    assert [s.id for s in result.slots] == ["a", "b"]


def test_reused_id_moves_the_record():
    existing = [
        make_slot("a", period=1),
        make_slot("b", period=2),
    ]
    batch = [make_slot("a", period=3)]

    result = merge_slots(existing, batch)

    assert [(s.id, s.period) for s in result.slots] == [("b", 2), ("a", 3)]
    assert [s.period for s in result.moved] == [1]
    assert len({s.id for s in result.slots}) == len(result.slots)


def test_existing_input_is_not_mutated():
    existing = [make_slot("a")]
    merge_slots(existing, [make_slot("b")])
    assert [s.id for s in existing] == ["a"]
