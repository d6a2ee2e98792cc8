"""
GoalStore: the one owner of the habit, task and progress collections.

Collections are tuples of frozen entities. Every mutation swaps in a new tuple
and notifies subscribers with (kind, new_collection); operations that match
nothing keep the old tuple and notify nobody.
"""
import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional

from .datekeys import YearMonth
from .entities import Goal, GoalKind, Habit, ProgressGoal, Task
from .services import goals as ops
from .services import statistics as stats

logger = logging.getLogger(__name__)

Listener = Callable[[GoalKind, tuple], None]


class GoalStore:
    def __init__(
        self,
        habits: Iterable[Habit] = (),
        tasks: Iterable[Task] = (),
        progress: Iterable[ProgressGoal] = (),
    ) -> None:
        self._collections: dict[GoalKind, tuple] = {
            GoalKind.HABIT: tuple(habits),
            GoalKind.TASK: tuple(tasks),
            GoalKind.PROGRESS: tuple(progress),
        }
        self._listeners: list[Listener] = []

    # ---------- collections ----------
    @property
    def habits(self) -> tuple[Habit, ...]:
        return self._collections[GoalKind.HABIT]

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._collections[GoalKind.TASK]

    @property
    def progress(self) -> tuple[ProgressGoal, ...]:
        return self._collections[GoalKind.PROGRESS]

    def collection(self, kind: GoalKind) -> tuple:
        return self._collections[GoalKind(kind)]

    def get(self, kind: GoalKind, goal_id: str) -> Optional[Goal]:
        return next((g for g in self.collection(kind) if g.id == goal_id), None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def replace(self, kind: GoalKind, items) -> bool:
        """Swap a whole collection. True when the value actually changed."""
        kind = GoalKind(kind)
        if items is self._collections[kind]:
            return False
        new = tuple(items)
        self._collections[kind] = new
        logger.debug("%s collection replaced (%d items)", kind.value, len(new))
        for listener in list(self._listeners):
            listener(kind, new)
        return True

    # ---------- habits ----------
    def add_habit(self, name: str, description: str | None = "") -> Habit:
        habit = ops.create_habit(name, description)
        self.replace(GoalKind.HABIT, self.habits + (habit,))
        return habit

    def toggle_habit_day(self, habit_id: str, day: date | str) -> bool:
        return self.replace(GoalKind.HABIT, ops.toggle_habit_day(self.habits, habit_id, day))

    # ---------- tasks ----------
    def add_task(self, name: str, description: str | None = "") -> Task:
        task = ops.create_task(name, description)
        self.replace(GoalKind.TASK, self.tasks + (task,))
        return task

    def toggle_task(self, task_id: str) -> bool:
        return self.replace(GoalKind.TASK, ops.toggle_task(self.tasks, task_id))

    # ---------- progress ----------
    def add_progress_goal(
        self,
        name: str,
        description: str | None = "",
        current: Any = ops.DEFAULT_CURRENT,
        target: Any = ops.DEFAULT_TARGET,
        unit: str | None = "",
    ) -> ProgressGoal:
        goal = ops.create_progress_goal(name, description, current, target, unit)
        self.replace(GoalKind.PROGRESS, self.progress + (goal,))
        return goal

    def update_progress_current(self, goal_id: str, new_current: Any) -> bool:
        return self.replace(GoalKind.PROGRESS, ops.update_progress_current(self.progress, goal_id, new_current))

    def increment_progress(self, goal_id: str, step: float = 1.0) -> bool:
        return self.replace(GoalKind.PROGRESS, ops.increment_progress(self.progress, goal_id, step))

    # ---------- any kind ----------
    def edit_goal(
        self,
        kind: GoalKind,
        goal_id: str,
        name: str,
        description: str | None = "",
        target: Any = None,
        unit: str | None = None,
    ) -> bool:
        return self.replace(kind, ops.edit_goal(self.collection(kind), goal_id, name, description, target, unit))

    def delete_goal(self, kind: GoalKind, goal_id: str) -> bool:
        return self.replace(kind, ops.delete_goal(self.collection(kind), goal_id))

    # ---------- statistics ----------
    def habit_month_stats(self, habit_id: str, ym: YearMonth) -> Optional[stats.HabitMonthStats]:
        habit = self.get(GoalKind.HABIT, habit_id)
        return stats.habit_month_stats(habit, ym) if habit else None

    def task_summary(self) -> stats.TaskSummary:
        return stats.task_summary(self.tasks)

    def dashboard_average(self) -> int:
        return stats.dashboard_average(self.progress)

    def dashboard_summary(self, ym: YearMonth) -> stats.DashboardSummary:
        return stats.dashboard_summary(self.habits, self.tasks, self.progress, ym)

    @staticmethod
    def month_grid(ym: YearMonth, today: Optional[date] = None) -> tuple[stats.GridCell, ...]:
        return stats.month_grid(ym, today)
