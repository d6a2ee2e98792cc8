from fastapi import Header, HTTPException, Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .config import Settings, settings
from .datekeys import YearMonth
from .storage import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore
from .store import GoalStore
from . import models

def make_engine(database_url: str):
    # saves run in worker threads, sqlite must allow that
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)

engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def build_kv_store(cfg: Settings) -> KeyValueStore:
    backend = cfg.storage_backend.lower()
    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "sql":
        if cfg.database_url == settings.database_url:
            eng, factory = engine, SessionLocal
        else:
            eng = make_engine(cfg.database_url)
            factory = sessionmaker(bind=eng, autocommit=False, autoflush=False)
        models.Base.metadata.create_all(bind=eng)
        return SqlKeyValueStore(factory)
    raise ValueError(f"Unknown storage_backend {cfg.storage_backend!r} (expected 'sql' or 'memory')")

def get_store(request: Request) -> GoalStore:
    return request.app.state.goal_store

def require_api_key(request: Request, x_api_key: str | None = Header(default=None)):
    if not x_api_key or x_api_key != request.app.state.settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")

def resolve_month(period: str | None) -> YearMonth:
    """'YYYY-MM' query value -> YearMonth; missing means the current month."""
    if not period:
        return YearMonth.current()
    try:
        ym = YearMonth.parse(period)
        # responses link to both neighbours, so they must exist too
        ym.previous(), ym.next()
        return ym
    except ValueError:
        raise HTTPException(400, "Invalid period, expected YYYY-MM")
