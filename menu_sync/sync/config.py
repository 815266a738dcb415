from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class SchedulerConfig:
    interval_seconds: float = float(os.getenv("SYNC_INTERVAL_SECONDS", "300"))  # 5 minutes
    enabled: bool = os.getenv("SYNC_SCHEDULER_ENABLED", "true").lower() not in ("0", "false", "no")
    history_size: int = 50


DEFAULT_SCHEDULER_CONFIG = SchedulerConfig()
