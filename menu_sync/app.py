from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_user
from .auth.users import authenticate
from .catalog.config import DEFAULT_CATALOG_CONFIG
from .catalog.models import MenuItem, Restaurant
from .sheets.config import DEFAULT_SHEETS_CONFIG
from .sync.config import DEFAULT_SCHEDULER_CONFIG
from .sync.history import get_runs
from .sync.report import SyncReport, SyncStatus
from .sync.scheduler import PeriodicSync
from .sync.service import SyncService, build_sync_service

logger = logging.getLogger(__name__)

_service: SyncService | None = None


def sync_configured() -> bool:
    return DEFAULT_SHEETS_CONFIG.is_configured and DEFAULT_CATALOG_CONFIG.is_configured


def get_sync_service() -> SyncService:
    """Return the process-wide SyncService, building it on first use."""
    global _service
    if _service is None:
        _service = build_sync_service()
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler: PeriodicSync | None = None
    if sync_configured() and DEFAULT_SCHEDULER_CONFIG.enabled:
        scheduler = PeriodicSync(get_sync_service())
        scheduler.start()
    else:
        logger.info("Menu sync scheduler disabled or not configured")
    yield
    if scheduler is not None:
        await scheduler.stop()
    if _service is not None:
        # Let a run started by the scheduler finish before its client is closed.
        await _service.wait_idle()
        await _service.catalog.aclose()


app = FastAPI(title="Menu Sync API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "menu-sync-secret-change-in-production"),
)


class LoginRequest(BaseModel):
    username: str
    password: str


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/sync/status", response_model=SyncStatus)
def sync_status(service: SyncService = Depends(get_sync_service)) -> SyncStatus:
    return service.status


@app.get("/restaurants", response_model=list[Restaurant])
def restaurants(service: SyncService = Depends(get_sync_service)) -> list[Restaurant]:
    return service.snapshot.restaurants


@app.get("/restaurants/{restaurant_id}/menu", response_model=list[MenuItem])
def restaurant_menu(
    restaurant_id: str,
    service: SyncService = Depends(get_sync_service),
) -> list[MenuItem]:
    snapshot = service.snapshot
    if restaurant_id not in snapshot.menu_items:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return snapshot.items_for(restaurant_id)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.post("/sync", response_model=SyncReport)
async def trigger_sync(
    user: dict = Depends(require_admin),
    service: SyncService = Depends(get_sync_service),
) -> SyncReport:
    if not sync_configured():
        raise HTTPException(status_code=503, detail="Sync source is not configured")
    return await service.run_sync(trigger="manual")


@app.get("/sync/history")
def sync_history(user: dict = Depends(require_admin)) -> list[dict]:
    return get_runs()
