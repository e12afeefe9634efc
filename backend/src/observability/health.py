"""Liveness and readiness probes for the database and the Celery broker.

Each probe returns a ComponentHealth; the broker probe degrades instead
of failing since only background matching depends on it.
"""

import time
from enum import Enum
from typing import Callable, Dict, Optional
from dataclasses import dataclass, asdict

import redis
from sqlalchemy import text
from sqlalchemy.orm import Session

from config import get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Probe result for one dependency."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def _probe(name: str, ping: Callable[[], object], on_error: HealthStatus) -> ComponentHealth:
    started = time.perf_counter()
    try:
        ping()
    except Exception as e:
        log = logger.error if on_error == HealthStatus.UNHEALTHY else logger.warning
        log(f"{name} health check failed: {e}")
        return ComponentHealth(status=on_error, message=f"{name} error: {e}")

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message=f"{name} connection OK",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )


def check_database_health(db: Session) -> ComponentHealth:
    return _probe("Database", lambda: db.execute(text("SELECT 1")), HealthStatus.UNHEALTHY)


def check_broker_health() -> ComponentHealth:
    settings = get_settings()

    def ping():
        client = redis.from_url(
            settings.CELERY_BROKER_URL,
            socket_connect_timeout=settings.STORE_TIMEOUT_SECONDS,
            socket_timeout=settings.STORE_TIMEOUT_SECONDS,
        )
        client.ping()

    return _probe("Broker", ping, HealthStatus.DEGRADED)


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst component status wins."""
    statuses = {c.status for c in components.values()}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY
