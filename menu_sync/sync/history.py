from __future__ import annotations

from collections import deque
from typing import Any

from .config import DEFAULT_SCHEDULER_CONFIG
from .report import SyncReport

_runs: deque[dict[str, Any]] = deque(maxlen=DEFAULT_SCHEDULER_CONFIG.history_size)


def record_run(report: SyncReport, trigger: str) -> None:
    _runs.append({"trigger": trigger, **report.summary()})


def get_runs() -> list[dict[str, Any]]:
    """Return recorded runs, newest first."""
    return list(reversed(_runs))


def clear_runs() -> None:
    _runs.clear()
