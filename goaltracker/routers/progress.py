from fastapi import APIRouter, Depends, HTTPException
from ..deps import get_store, require_api_key
from ..entities import GoalKind, ProgressGoal
from ..services import statistics as stats
from ..store import GoalStore
from .. import schemas

router = APIRouter(prefix="/progress", tags=["progress"], dependencies=[Depends(require_api_key)])

def progress_out(p: ProgressGoal) -> dict:
    return {
        **p.model_dump(mode="json", by_alias=True),
        "percentage": stats.progress_percentage(p),
        "bar_width": stats.progress_bar_width(p),
    }

@router.get("")
def list_progress(store: GoalStore = Depends(get_store)):
    return {
        "average": store.dashboard_average(),
        "goals": [progress_out(p) for p in store.progress],
    }

@router.post("")
async def create_progress(payload: schemas.ProgressCreate, store: GoalStore = Depends(get_store)):
    try:
        p = store.add_progress_goal(
            payload.name,
            payload.description,
            current=payload.current,
            target=payload.target,
            unit=payload.unit,
        )
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "goal_id": p.id}

@router.put("/{goal_id}/current")
async def set_current(goal_id: str, payload: schemas.ProgressCurrentUpdate, store: GoalStore = Depends(get_store)):
    changed = store.update_progress_current(goal_id, payload.current)
    return {"ok": True, "changed": changed}

@router.post("/{goal_id}/increment")
async def increment(goal_id: str, payload: schemas.ProgressIncrement | None = None, store: GoalStore = Depends(get_store)):
    step = payload.step if payload else 1.0
    changed = store.increment_progress(goal_id, step)
    p = store.get(GoalKind.PROGRESS, goal_id)
    return {"ok": True, "changed": changed, "current": p.current if p else None}

@router.patch("/{goal_id}")
async def edit_progress(goal_id: str, payload: schemas.GoalEdit, store: GoalStore = Depends(get_store)):
    try:
        changed = store.edit_goal(
            GoalKind.PROGRESS, goal_id, payload.name, payload.description,
            target=payload.target, unit=payload.unit,
        )
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "changed": changed}

@router.delete("/{goal_id}")
async def delete_progress(goal_id: str, store: GoalStore = Depends(get_store)):
    return {"ok": True, "changed": store.delete_goal(GoalKind.PROGRESS, goal_id)}
