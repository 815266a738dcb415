from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, computed_field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RestaurantState(str, Enum):
    pending = "pending"
    resolving = "resolving"
    writing = "writing"
    menu_resolved = "menu_resolved"
    done = "done"
    failed = "failed"


class SyncAction(str, Enum):
    created = "created"
    updated = "updated"


class RestaurantOutcome(BaseModel):
    name: str
    local_id: str
    state: RestaurantState = RestaurantState.pending
    action: SyncAction | None = None
    remote_id: str | None = None
    menu_id: str | None = None
    items_synced: int = 0
    error: str | None = None
    # State the restaurant was in when it failed.
    failed_at: RestaurantState | None = None


class SyncReport(BaseModel):
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime | None = None
    outcomes: list[RestaurantOutcome] = Field(default_factory=list)
    # Set when the run itself failed (e.g. the spreadsheet was unreachable).
    error: str | None = None

    @computed_field
    @property
    def created(self) -> list[str]:
        return [o.name for o in self.outcomes if o.state == RestaurantState.done and o.action == SyncAction.created]

    @computed_field
    @property
    def updated(self) -> list[str]:
        return [o.name for o in self.outcomes if o.state == RestaurantState.done and o.action == SyncAction.updated]

    @computed_field
    @property
    def failed(self) -> list[str]:
        return [o.name for o in self.outcomes if o.state == RestaurantState.failed]

    @computed_field
    @property
    def synced_count(self) -> int:
        return sum(1 for o in self.outcomes if o.state == RestaurantState.done)

    @computed_field
    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "ok": self.ok,
            "error": self.error,
            "synced": self.synced_count,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
        }


class RunState(str, Enum):
    idle = "idle"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"


class SyncStatus(BaseModel):
    state: RunState = RunState.idle
    changed_at: datetime = Field(default_factory=utcnow)
    last_success_at: datetime | None = None
    last_error: str | None = None
    last_report: SyncReport | None = None

    @computed_field
    @property
    def in_progress(self) -> bool:
        return self.state == RunState.running
