"""Database session factory and configuration.

Provides database connectivity and session management for the TradeMatch
backend. Every connection carries a bounded timeout so that no store call
blocks indefinitely.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import get_settings


def build_engine(database_url: str, timeout_seconds: Optional[float] = None) -> Engine:
    """Create an engine with connection pooling and bounded timeouts.

    PostgreSQL gets a server-side statement_timeout plus connect and pool
    timeouts. SQLite (tests, local tooling) gets the driver busy timeout;
    in-memory SQLite shares one connection across threads.

    Args:
        database_url: SQLAlchemy database URL
        timeout_seconds: Upper bound for a single store call

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if timeout_seconds is None:
        timeout_seconds = get_settings().STORE_TIMEOUT_SECONDS

    engine_kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": timeout_seconds,
        }
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        timeout_ms = int(timeout_seconds * 1000)
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10
        engine_kwargs["pool_timeout"] = timeout_seconds
        engine_kwargs["connect_args"] = {
            "connect_timeout": max(1, int(timeout_seconds)),
            "options": f"-c statement_timeout={timeout_ms}",
        }

    return create_engine(database_url, **engine_kwargs)


engine = build_engine(get_settings().DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@contextmanager
def get_db_session(session_factory: Optional[Callable[[], Session]] = None) -> Generator[Session, None, None]:
    """Context manager for a unit of work.

    Usage:
        with get_db_session(factory) as session:
            session.add(notification)

    Commits on success, rolls back on exception. Defaults to SessionLocal.
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/matches")
        def list_matches(db: Session = Depends(get_db)):
            return db.query(Match).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Dependency returning the session factory used by the matching engine.

    The engine opens one short session per store call; endpoints that run
    matching pass this factory instead of a request-scoped session.
    """
    return SessionLocal
