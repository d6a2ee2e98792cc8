"""
Pure goal operations.

Every function takes a collection (tuple of entities) and returns a new one;
nothing is modified in place. When nothing matches, the input collection is
returned as-is, so callers can use identity to tell a no-op from a change.
"""
from datetime import date
from typing import Any, Callable, Sequence, TypeVar

from ..datekeys import date_key, parse_date_key
from ..entities import (
    DEFAULT_CURRENT,
    DEFAULT_TARGET,
    GoalBase,
    Habit,
    ProgressGoal,
    Task,
    parse_current,
    parse_number,
    parse_target,
)

G = TypeVar("G", bound=GoalBase)


def _require_name(name: str | None) -> str:
    if name is None or not str(name).strip():
        raise ValueError("Goal name cannot be empty")
    return str(name).strip()


def _replace_by_id(collection: Sequence[G], goal_id: str, fn: Callable[[G], G]) -> Sequence[G]:
    out = []
    hit = False
    for g in collection:
        if g.id == goal_id:
            out.append(fn(g))
            hit = True
        else:
            out.append(g)
    return tuple(out) if hit else collection


# ---------- habits ----------
def create_habit(name: str, description: str | None = "") -> Habit:
    return Habit(name=_require_name(name), description=description or "")


def toggle_habit_day(habits: Sequence[Habit], habit_id: str, day: date | str) -> Sequence[Habit]:
    key = date_key(parse_date_key(day)) if isinstance(day, str) else date_key(day)

    def _flip(h: Habit) -> Habit:
        if key in h.completed_dates:
            dates = h.completed_dates - {key}
        else:
            dates = h.completed_dates | {key}
        return h.model_copy(update={"completed_dates": dates})

    return _replace_by_id(habits, habit_id, _flip)


# ---------- tasks ----------
def create_task(name: str, description: str | None = "") -> Task:
    return Task(name=_require_name(name), description=description or "", completed=False)


def toggle_task(tasks: Sequence[Task], task_id: str) -> Sequence[Task]:
    return _replace_by_id(tasks, task_id, lambda t: t.model_copy(update={"completed": not t.completed}))


# ---------- progress goals ----------
def create_progress_goal(
    name: str,
    description: str | None = "",
    current: Any = DEFAULT_CURRENT,
    target: Any = DEFAULT_TARGET,
    unit: str | None = "",
) -> ProgressGoal:
    return ProgressGoal(
        name=_require_name(name),
        description=description or "",
        current=parse_current(current),
        target=parse_target(target),
        unit=unit or "",
    )


def update_progress_current(progress: Sequence[ProgressGoal], goal_id: str, new_current: Any) -> Sequence[ProgressGoal]:
    """Set current as typed, no clamping. Unparseable input leaves the collection untouched."""
    value = parse_number(new_current)
    if value is None:
        return progress
    return _replace_by_id(progress, goal_id, lambda p: p.model_copy(update={"current": value}))


def increment_progress(progress: Sequence[ProgressGoal], goal_id: str, step: float = 1.0) -> Sequence[ProgressGoal]:
    """The "+1" shortcut: add step, capped at target."""
    return _replace_by_id(
        progress, goal_id, lambda p: p.model_copy(update={"current": min(p.current + step, p.target)})
    )


# ---------- any kind ----------
def edit_goal(
    collection: Sequence[G],
    goal_id: str,
    name: str,
    description: str | None = "",
    target: Any = None,
    unit: str | None = None,
) -> Sequence[G]:
    """Replace name/description (and target/unit on progress goals). Tracking state is never touched."""
    clean_name = _require_name(name)
    parsed_target = None if target is None else parse_target(target)
    return _replace_by_id(
        collection,
        goal_id,
        lambda g: g.with_details(clean_name, description or "", target=parsed_target, unit=unit),
    )


def delete_goal(collection: Sequence[G], goal_id: str) -> Sequence[G]:
    if not any(g.id == goal_id for g in collection):
        return collection
    return tuple(g for g in collection if g.id != goal_id)
