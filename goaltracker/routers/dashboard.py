from dataclasses import asdict
from fastapi import APIRouter, Depends, Query
from ..deps import get_store, require_api_key, resolve_month
from ..store import GoalStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_api_key)])

@router.get("")
def dashboard(
    month: str | None = Query(None, description="YYYY-MM (default: this month)"),
    store: GoalStore = Depends(get_store),
):
    """
    Headline numbers for one month:
      - habits: how many, and completions inside the month
      - tasks: done / total and percent
      - progress: unclamped average of current/target
    """
    ym = resolve_month(month)
    return {
        **asdict(store.dashboard_summary(ym)),
        "label": ym.label(),
        "prev": str(ym.previous()),
        "next": str(ym.next()),
    }
