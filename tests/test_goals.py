"""Pure goal operations: creation rules, toggles, edits, deletes and no-op behaviour."""

from datetime import date

import pytest

from goaltracker.services import goals as ops


def test_parse_number_is_lenient():
    assert ops.parse_number("12km") == 12.0
    assert ops.parse_number(" 3.5") == 3.5
    assert ops.parse_number(".5") == 0.5
    assert ops.parse_number("1e3") == 1000.0
    assert ops.parse_number(-4) == -4.0
    for bad in ("abc", "", None, True, float("nan"), float("inf"), "nan", [1]):
        assert ops.parse_number(bad) is None


@pytest.mark.parametrize("name", ["", "   ", "\t\n", None])
def test_create_rejects_blank_names(name):
    with pytest.raises(ValueError):
        ops.create_habit(name, "")
    with pytest.raises(ValueError):
        ops.create_task(name, "")
    with pytest.raises(ValueError):
        ops.create_progress_goal(name)


def test_create_habit():
    h = ops.create_habit("  Read ", None)
    assert h.name == "Read"
    assert h.description == ""
    assert h.completed_dates == frozenset()
    assert h.id
    assert h.created_at.tzinfo is not None
    assert ops.create_habit("Read").id != h.id


def test_toggle_habit_day_twice_restores_original():
    habits = (ops.create_habit("Read"),)
    day = date(2024, 3, 5)
    once = ops.toggle_habit_day(habits, habits[0].id, day)
    assert once[0].completed_dates == {"2024-03-05"}
    assert habits[0].completed_dates == frozenset()     # input untouched
    twice = ops.toggle_habit_day(once, habits[0].id, day)
    assert twice[0].completed_dates == habits[0].completed_dates


def test_toggle_habit_day_accepts_date_keys():
    habits = (ops.create_habit("Read"),)
    out = ops.toggle_habit_day(habits, habits[0].id, "2024-02-29")
    assert out[0].is_done_on("2024-02-29")
    with pytest.raises(ValueError):
        ops.toggle_habit_day(habits, habits[0].id, "2024-02-30")


def test_toggle_unknown_ids_are_noops():
    habits = (ops.create_habit("Read"),)
    tasks = (ops.create_task("Pay bills"),)
    assert ops.toggle_habit_day(habits, "missing", date(2024, 3, 5)) is habits
    assert ops.toggle_task(tasks, "missing") is tasks


def test_toggle_only_touches_matching_habit():
    a, b = ops.create_habit("A"), ops.create_habit("B")
    out = ops.toggle_habit_day((a, b), b.id, date(2024, 1, 1))
    assert out[0] is a
    assert out[1].completed_dates == {"2024-01-01"}


def test_task_toggle():
    tasks = (ops.create_task("Pay bills", "rent"),)
    assert tasks[0].completed is False
    flipped = ops.toggle_task(tasks, tasks[0].id)
    assert flipped[0].completed is True
    assert ops.toggle_task(flipped, tasks[0].id)[0].completed is False


@pytest.mark.parametrize(
    "current, target, expected",
    [
        (0, 50, (0.0, 50.0)),
        ("abc", "xyz", (0.0, 100.0)),
        ("7", "0", (7.0, 100.0)),
        (None, -5, (0.0, 100.0)),
        ("3 km", "50km", (3.0, 50.0)),
    ],
)
def test_create_progress_goal_defaults(current, target, expected):
    p = ops.create_progress_goal("Run", "", current, target, None)
    assert (p.current, p.target) == expected
    assert p.unit == ""


def test_update_progress_current_never_clamps():
    goals = (ops.create_progress_goal("Run", "", 0, 50, "km"),)
    gid = goals[0].id
    assert ops.update_progress_current(goals, gid, "25")[0].current == 25.0
    assert ops.update_progress_current(goals, gid, 80)[0].current == 80.0
    assert ops.update_progress_current(goals, gid, -3)[0].current == -3.0


def test_update_progress_current_rejects_garbage():
    goals = (ops.create_progress_goal("Run", "", 10, 50, "km"),)
    assert ops.update_progress_current(goals, goals[0].id, "abc") is goals
    assert ops.update_progress_current(goals, goals[0].id, None) is goals
    assert ops.update_progress_current(goals, "missing", 5) is goals


def test_increment_progress_caps_at_target():
    goals = (ops.create_progress_goal("Run", "", 10, 50, "km"),)
    gid = goals[0].id
    assert ops.increment_progress(goals, gid)[0].current == 11.0
    near = ops.update_progress_current(goals, gid, 49.5)
    assert ops.increment_progress(near, gid)[0].current == 50.0


def test_edit_keeps_tracking_state():
    habit = ops.create_habit("Read")
    habits = ops.toggle_habit_day((habit,), habit.id, date(2024, 3, 5))
    edited = ops.edit_goal(habits, habit.id, "Read books", "20 pages", target=10, unit="pages")
    h = edited[0]
    assert (h.name, h.description) == ("Read books", "20 pages")
    assert h.completed_dates == {"2024-03-05"}
    assert (h.id, h.created_at) == (habit.id, habit.created_at)
    assert not hasattr(h, "target")

    tasks = (ops.create_task("Pay bills"),)
    tasks = ops.toggle_task(tasks, tasks[0].id)
    assert ops.edit_goal(tasks, tasks[0].id, "Pay all bills")[0].completed is True


def test_edit_progress_goal_fields():
    goals = (ops.create_progress_goal("Run", "", 20, 50, "km"),)
    gid = goals[0].id
    edited = ops.edit_goal(goals, gid, "Run more", "", target="80", unit="miles")[0]
    assert (edited.target, edited.unit, edited.current) == (80.0, "miles", 20.0)
    assert ops.edit_goal(goals, gid, "Run", target="oops")[0].target == 100.0
    kept = ops.edit_goal(goals, gid, "Run")[0]
    assert (kept.target, kept.unit) == (50.0, "km")


def test_edit_rejects_blank_name_and_ignores_unknown_id():
    goals = (ops.create_task("Pay bills"),)
    with pytest.raises(ValueError):
        ops.edit_goal(goals, goals[0].id, "  ")
    assert ops.edit_goal(goals, "missing", "Other") is goals


def test_delete_goal():
    a, b = ops.create_habit("A"), ops.create_habit("B")
    habits = (a, b)
    assert ops.delete_goal(habits, a.id) == (b,)
    assert ops.delete_goal(habits, "missing") is habits
    assert habits == (a, b)
