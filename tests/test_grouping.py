"""Tests for location grouping and ranking."""

from scene_scheduler.grouping import group_by_location, rank_locations
from tests.conftest import make_scene


def test_group_by_location_keeps_positions():
    scenes = [
        make_scene(1, "PARK"),
        make_scene(2, "DINER"),
        make_scene(3, "PARK"),
        make_scene(4, ""),
    ]

    groups = group_by_location(scenes)

    assert list(groups) == ["PARK", "DINER", ""]
    assert groups["PARK"].pending == [0, 2]
    assert groups["DINER"].pending == [1]
    assert groups[""].pending == [3]
    assert groups["DINER"].first_seen == 1


def test_duplicate_scene_numbers_stay_distinct():
    scenes = [make_scene(1, "PARK"), make_scene(1, "PARK")]

    groups = group_by_location(scenes)

    assert groups["PARK"].pending == [0, 1]


def test_rank_locations_by_count_then_first_seen():
    scenes = [
        make_scene(1, "A"),
        make_scene(2, "B"),
        make_scene(3, "C"),
        make_scene(4, "C"),
        make_scene(5, "B"),
        make_scene(6, "D"),
    ]

    ranked = rank_locations(group_by_location(scenes))

    assert [group.location_name for group in ranked] == ["B", "C", "A", "D"]


def test_rank_locations_skips_empty_groups():
    groups = group_by_location([make_scene(1, "A"), make_scene(2, "B"), make_scene(3, "B")])
    groups["B"].pending.clear()

    ranked = rank_locations(groups)

    assert [group.location_name for group in ranked] == ["A"]


def test_rank_reflects_consumed_scenes():
    groups = group_by_location([
        make_scene(1, "A"), make_scene(2, "A"), make_scene(3, "A"),
        make_scene(4, "B"), make_scene(5, "B"),
    ])
    del groups["A"].pending[:2]

    ranked = rank_locations(groups)

    assert [group.location_name for group in ranked] == ["B", "A"]


def test_empty_input():
    assert group_by_location([]) == {}
    assert rank_locations({}) == []
