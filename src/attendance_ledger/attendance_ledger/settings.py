from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .common.validators import require_int
from .core.constants import (
    DEFAULT_GRACE_MINUTES,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_PAGE_SIZE,
    MAX_BATCH_OPERATIONS,
    OPERATIONS_PER_CLOSURE,
)
from .core.exceptions import ConfigurationError


@dataclass(frozen=True)
class WorkerSettings:
    db_config: dict = field(default_factory=dict)
    grace_minutes: int = DEFAULT_GRACE_MINUTES
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    page_size: int = DEFAULT_PAGE_SIZE
    organization_id: Optional[str] = None
    max_batch_operations: int = MAX_BATCH_OPERATIONS
    log_level: str = "INFO"
    auto_init_db: bool = False


def load_worker_settings(settings: Any) -> WorkerSettings:
    """Validate a settings module (or any object with the same attributes).

    Raises ``ConfigurationError`` for missing or invalid values.
    """
    db_config = getattr(settings, "DB_CONFIG", None)
    if not isinstance(db_config, dict) or not db_config.get("host") or not db_config.get("database"):
        raise ConfigurationError("DB_CONFIG must define at least host and database")

    organization_id = getattr(settings, "RECONCILE_ORGANIZATION_ID", None)
    if organization_id is not None:
        organization_id = str(organization_id).strip() or None

    return WorkerSettings(
        db_config=dict(db_config),
        grace_minutes=require_int(
            getattr(settings, "AUTO_CLOCKOUT_GRACE_MINUTES", DEFAULT_GRACE_MINUTES),
            "AUTO_CLOCKOUT_GRACE_MINUTES",
        ),
        interval_minutes=require_int(
            getattr(settings, "RECONCILE_INTERVAL_MINUTES", DEFAULT_INTERVAL_MINUTES),
            "RECONCILE_INTERVAL_MINUTES",
            min_value=1,
        ),
        page_size=require_int(
            getattr(settings, "RECONCILE_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            "RECONCILE_PAGE_SIZE",
            min_value=1,
        ),
        organization_id=organization_id,
        max_batch_operations=require_int(
            getattr(settings, "MAX_BATCH_OPERATIONS", MAX_BATCH_OPERATIONS),
            "MAX_BATCH_OPERATIONS",
            min_value=OPERATIONS_PER_CLOSURE,
        ),
        log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
    )
