import importlib
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .deps import build_kv_store
from .services.sync import PersistenceSynchronizer
from .storage import KeyValueStore
from .store import GoalStore

logger = logging.getLogger(__name__)

ROUTERS = ["habits", "tasks", "progress", "dashboard"]

def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    # 1) storage backend (creates tables for the sql one)
    if app.state.kv is None:
        app.state.kv = build_kv_store(app.state.settings)
    # 2) load saved collections; saves are held back until this finishes
    app.state.sync = PersistenceSynchronizer(app.state.goal_store, app.state.kv)
    await app.state.sync.load()
    yield
    # 3) let pending saves land before the loop goes away
    await app.state.sync.flush()
    app.state.sync.close()

def create_app(cfg: Settings | None = None, kv: KeyValueStore | None = None) -> FastAPI:
    """
    One app = one GoalStore. The store lives on app.state and reaches routes
    through deps.get_store; persistence is wired up in lifespan().
    """
    cfg = cfg or get_settings()
    setup_logging(cfg.log_level)

    app = FastAPI(title="Goal Tracker API", version="0.1.0", lifespan=lifespan)
    app.state.settings = cfg
    app.state.goal_store = GoalStore()
    app.state.kv = kv
    app.state.sync = None

    # CORS (dev-friendly; tighten later)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.get("/health")
    def health():
        sync = app.state.sync
        return {"ok": True, "state": sync.state.value if sync else "unloaded"}

    _include_routers(app)
    return app

def _include_routers(app: FastAPI) -> None:
    for modname in ROUTERS:
        mod = importlib.import_module(f"{__package__}.routers.{modname}")
        app.include_router(mod.router)
        logger.info("[routers] mounted %s", modname)

app = create_app()
