import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..datekeys import YearMonth, date_key, days_in_month, first_weekday_of_month
from ..entities import Habit, ProgressGoal, Task


def round_half_up(x: float) -> int:
    # builtin round() is banker's rounding; percentages on screen round .5 up
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class HabitMonthStats:
    completed: int
    total: int

    @property
    def percentage(self) -> int:
        return round_half_up(self.completed / self.total * 100)


@dataclass(frozen=True)
class TaskSummary:
    completed_count: int
    total: int

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        return round_half_up(self.completed_count / self.total * 100)


@dataclass(frozen=True)
class GridCell:
    day: Optional[int]             # None = leading blank before the 1st
    date_key: Optional[str] = None
    is_today: bool = False


@dataclass(frozen=True)
class DashboardSummary:
    period: str
    habit_count: int
    habit_completions: int
    tasks_completed: int
    task_total: int
    task_percentage: int
    progress_average: int
    progress_count: int


def habit_month_stats(habit: Habit, ym: YearMonth) -> HabitMonthStats:
    total = days_in_month(ym)
    completed = sum(1 for n in range(1, total + 1) if date_key(ym.day(n)) in habit.completed_dates)
    return HabitMonthStats(completed=completed, total=total)


def task_summary(tasks: Iterable[Task]) -> TaskSummary:
    tasks = list(tasks)
    return TaskSummary(completed_count=sum(1 for t in tasks if t.completed), total=len(tasks))


def progress_percentage(goal: ProgressGoal) -> float:
    """Raw current/target ratio in percent. Can exceed 100 or go negative."""
    return goal.current / goal.target * 100


def progress_bar_width(goal: ProgressGoal) -> int:
    return min(round_half_up(progress_percentage(goal)), 100)


def dashboard_average(progress: Sequence[ProgressGoal]) -> int:
    if not progress:
        return 0
    return round_half_up(sum(progress_percentage(p) for p in progress) / len(progress))


def month_grid(ym: YearMonth, today: Optional[date] = None) -> tuple[GridCell, ...]:
    """Cells for a Sunday-first 7-column calendar: blanks, then 1..N."""
    today_key = date_key(today) if today else None
    blanks = tuple(GridCell(day=None) for _ in range(first_weekday_of_month(ym)))
    days = []
    for n in range(1, days_in_month(ym) + 1):
        key = date_key(ym.day(n))
        days.append(GridCell(day=n, date_key=key, is_today=key == today_key))
    return blanks + tuple(days)


def dashboard_summary(
    habits: Sequence[Habit],
    tasks: Sequence[Task],
    progress: Sequence[ProgressGoal],
    ym: YearMonth,
) -> DashboardSummary:
    ts = task_summary(tasks)
    return DashboardSummary(
        period=str(ym),
        habit_count=len(habits),
        habit_completions=sum(habit_month_stats(h, ym).completed for h in habits),
        tasks_completed=ts.completed_count,
        task_total=ts.total,
        task_percentage=ts.percentage,
        progress_average=dashboard_average(progress),
        progress_count=len(progress),
    )
