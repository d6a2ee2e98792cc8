from fastapi import APIRouter, Depends, HTTPException, Query
from ..deps import get_store, require_api_key
from ..entities import GoalKind
from ..store import GoalStore
from .. import schemas

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(require_api_key)])

@router.get("")
def list_tasks(
    status: str | None = Query(None, description='"open" or "done"'),
    store: GoalStore = Depends(get_store),
):
    if status not in (None, "open", "done"):
        raise HTTPException(422, 'status must be "open" or "done"')
    rows = store.tasks
    if status:
        rows = [t for t in rows if t.completed == (status == "done")]
    summary = store.task_summary()
    return {
        "summary": {
            "completed_count": summary.completed_count,
            "total": summary.total,
            "percentage": summary.percentage,
        },
        "tasks": [t.model_dump(mode="json", by_alias=True) for t in rows],
    }

@router.post("")
async def create_task(payload: schemas.TaskCreate, store: GoalStore = Depends(get_store)):
    try:
        t = store.add_task(payload.name, payload.description)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "task_id": t.id}

@router.post("/{task_id}/toggle")
async def toggle_task(task_id: str, store: GoalStore = Depends(get_store)):
    changed = store.toggle_task(task_id)
    t = store.get(GoalKind.TASK, task_id)
    return {"ok": True, "changed": changed, "completed": bool(t and t.completed)}

@router.patch("/{task_id}")
async def edit_task(task_id: str, payload: schemas.GoalEdit, store: GoalStore = Depends(get_store)):
    try:
        changed = store.edit_goal(GoalKind.TASK, task_id, payload.name, payload.description)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return {"ok": True, "changed": changed}

@router.delete("/{task_id}")
async def delete_task(task_id: str, store: GoalStore = Depends(get_store)):
    return {"ok": True, "changed": store.delete_goal(GoalKind.TASK, task_id)}
