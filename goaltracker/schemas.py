from pydantic import BaseModel, Field
from datetime import date

# numbers arrive straight from form fields, so strings are accepted and parsed leniently
NumberInput = float | str | None

class HabitCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None

class HabitDayToggle(BaseModel):
    date: date             # "YYYY-MM-DD"

class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None

class ProgressCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    current: NumberInput = 0
    target: NumberInput = 100
    unit: str | None = ""

class ProgressCurrentUpdate(BaseModel):
    current: NumberInput

class ProgressIncrement(BaseModel):
    step: float = 1.0

class GoalEdit(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    target: NumberInput = None    # progress goals only
    unit: str | None = None       # progress goals only
