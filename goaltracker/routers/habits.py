from fastapi import APIRouter, Depends, HTTPException, Query
from datetime import date
from ..deps import get_store, require_api_key, resolve_month
from ..datekeys import YearMonth, date_key
from ..entities import GoalKind, Habit
from ..services import statistics as stats
from ..store import GoalStore
from .. import schemas

router = APIRouter(prefix="/habits", tags=["habits"], dependencies=[Depends(require_api_key)])

# ---------- helpers ----------
def habit_out(h: Habit, ym: YearMonth) -> dict:
    s = stats.habit_month_stats(h, ym)
    return {
        **h.model_dump(mode="json", by_alias=True),
        "stats": {"completed": s.completed, "total": s.total, "percentage": s.percentage},
    }

# ---------- routes ----------
@router.get("")
def list_habits(
    month: str | None = Query(None, description="YYYY-MM (default: this month)"),
    store: GoalStore = Depends(get_store),
):
    ym = resolve_month(month)
    return {"period": str(ym), "label": ym.label(), "habits": [habit_out(h, ym) for h in store.habits]}

@router.post("")
async def create_habit(payload: schemas.HabitCreate, store: GoalStore = Depends(get_store)):
    try:
        h = store.add_habit(payload.name, payload.description)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "habit_id": h.id}

@router.post("/{habit_id}/toggle")
async def toggle_habit_day(habit_id: str, payload: schemas.HabitDayToggle, store: GoalStore = Depends(get_store)):
    changed = store.toggle_habit_day(habit_id, payload.date)
    h = store.get(GoalKind.HABIT, habit_id)
    return {"ok": True, "changed": changed, "completed": bool(h and h.is_done_on(date_key(payload.date)))}

@router.get("/{habit_id}/calendar")
def habit_calendar(
    habit_id: str,
    month: str | None = Query(None, description="YYYY-MM (default: this month)"),
    store: GoalStore = Depends(get_store),
):
    h = store.get(GoalKind.HABIT, habit_id)
    if not h:
        raise HTTPException(404, "Habit not found")
    ym = resolve_month(month)
    cells = [
        {
            "day": c.day,
            "date": c.date_key,
            "is_today": c.is_today,
            "completed": c.date_key is not None and h.is_done_on(c.date_key),
        }
        for c in store.month_grid(ym, today=date.today())
    ]
    return {
        "habit": habit_out(h, ym),
        "period": str(ym),
        "label": ym.label(),
        "prev": str(ym.previous()),
        "next": str(ym.next()),
        "cells": cells,
    }

@router.patch("/{habit_id}")
async def edit_habit(habit_id: str, payload: schemas.GoalEdit, store: GoalStore = Depends(get_store)):
    try:
        changed = store.edit_goal(GoalKind.HABIT, habit_id, payload.name, payload.description)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "changed": changed}

@router.delete("/{habit_id}")
async def delete_habit(habit_id: str, store: GoalStore = Depends(get_store)):
    return {"ok": True, "changed": store.delete_goal(GoalKind.HABIT, habit_id)}
