"""Operational endpoints: Prometheus scrape, health and readiness probes."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from database import get_db
from .health import (
    check_database_health,
    check_broker_health,
    get_overall_health,
    HealthStatus,
)

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Component health")
def health_check(db: Session = Depends(get_db)):
    """Database and broker status; 503 only when a component is unhealthy."""
    components = {
        "database": check_database_health(db),
        "broker": check_broker_health(),
    }
    overall = get_overall_health(components)

    return JSONResponse(
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
        content={
            "status": overall.value,
            "components": {name: comp.to_dict() for name, comp in components.items()},
        },
    )


@router.get("/ready", summary="Readiness probe")
def readiness_check(db: Session = Depends(get_db)):
    database = check_database_health(db)
    if database.status != HealthStatus.HEALTHY:
        return JSONResponse(status_code=503, content={"status": "not_ready", "message": database.message})
    return {"status": "ready"}
