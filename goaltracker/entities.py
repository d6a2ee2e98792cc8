import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .datekeys import is_date_key

DEFAULT_CURRENT = 0.0
DEFAULT_TARGET = 100.0

# leading numeric prefix: "12km" -> 12, " .5" -> 0.5
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float | None:
    """Best-effort float parse. None when nothing numeric (or not finite) can be read."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
    elif isinstance(value, str):
        m = _NUMBER_PREFIX.match(value)
        if not m:
            return None
        f = float(m.group(0))
    else:
        return None
    return f if math.isfinite(f) else None


def parse_current(value: Any) -> float:
    f = parse_number(value)
    return DEFAULT_CURRENT if f is None else f


def parse_target(value: Any) -> float:
    """Targets are always > 0; anything else falls back to the default."""
    f = parse_number(value)
    if f is None or f <= 0:
        return DEFAULT_TARGET
    return f


class GoalKind(str, Enum):
    HABIT = "habit"
    TASK = "task"
    PROGRESS = "progress"


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GoalBase(BaseModel):
    # camelCase on the wire; existing goals_* snapshots use these names
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    kind: ClassVar[GoalKind]

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("description", mode="before")
    @classmethod
    def _description_or_empty(cls, v):
        return "" if v is None else v

    def with_details(self, name: str, description: str, target: float | None = None, unit: str | None = None):
        """Copy with new descriptive fields. target/unit only mean something for progress goals."""
        return self.model_copy(update={"name": name, "description": description or ""})


class Habit(GoalBase):
    kind: ClassVar[GoalKind] = GoalKind.HABIT

    completed_dates: frozenset[str] = frozenset()

    @field_validator("completed_dates", mode="before")
    @classmethod
    def _dates_from_wire(cls, v):
        # stored form is {"YYYY-MM-DD": true}; a falsy value means "not completed"
        if v is None:
            return frozenset()
        if isinstance(v, dict):
            keys = {k for k, done in v.items() if done}
        else:
            keys = set(v)
        bad = sorted(k for k in keys if not is_date_key(k))
        if bad:
            raise ValueError(f"Malformed date keys: {bad[:5]}")
        return frozenset(keys)

    @field_serializer("completed_dates")
    def _dates_to_wire(self, v: frozenset[str]) -> dict[str, bool]:
        return {k: True for k in sorted(v)}

    def is_done_on(self, key: str) -> bool:
        return key in self.completed_dates


class Task(GoalBase):
    kind: ClassVar[GoalKind] = GoalKind.TASK

    completed: bool = False


class ProgressGoal(GoalBase):
    kind: ClassVar[GoalKind] = GoalKind.PROGRESS

    current: float = 0.0
    target: float = 100.0
    unit: str = ""

    @field_validator("current", mode="before")
    @classmethod
    def _current_or_zero(cls, v):
        # snapshots carry null where a number failed to parse
        return 0.0 if v is None else v

    @field_validator("target", mode="before")
    @classmethod
    def _target_or_default(cls, v):
        # a zero or negative target would break every percentage
        return parse_target(v)

    @field_validator("unit", mode="before")
    @classmethod
    def _unit_or_empty(cls, v):
        return "" if v is None else v

    def with_details(self, name: str, description: str, target: float | None = None, unit: str | None = None):
        update = {"name": name, "description": description or ""}
        if target is not None:
            update["target"] = target
        if unit is not None:
            update["unit"] = unit
        return self.model_copy(update=update)


Goal = Union[Habit, Task, ProgressGoal]

ENTITY_TYPES: dict[GoalKind, type[GoalBase]] = {
    GoalKind.HABIT: Habit,
    GoalKind.TASK: Task,
    GoalKind.PROGRESS: ProgressGoal,
}
