"""SQLAlchemy adapters for the matching ports.

Each call opens its own short-lived session, so one adapter instance can be
shared by concurrent matching runs. create_match commits immediately: a
returned MatchRecord is always durable before any notification about it is
built.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Iterator, List, Optional
from uuid import UUID

from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session

from database import get_db_session
from models.buy_request import BuyRequest
from models.enums import Category, Urgency, ListingStatus
from models.match import Match
from models.notification import Notification
from models.product import Product
from models.user import User
from .ports import (
    BuyRequestData,
    ListingData,
    MatchRecord,
    MatchStorePort,
    NotificationIntent,
    NotificationSink,
    DuplicateMatchError,
    MatchWriteError,
    StoreUnavailableError,
)
from .status import MatchStatus

logger = logging.getLogger(__name__)

CONNECTION_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def buy_request_to_data(row: BuyRequest) -> BuyRequestData:
    """Convert a BuyRequest row to the engine's read-only view."""
    return BuyRequestData(
        id=row.id,
        owner_id=row.user_id,
        category=Category(row.category),
        title=row.title,
        description=row.description or "",
        location=row.location,
        urgency=Urgency(row.urgency),
        status=ListingStatus(row.status),
        min_budget=_to_float(row.min_budget),
        max_budget=_to_float(row.max_budget),
        quantity=row.quantity,
        unit=row.unit,
        title_am=row.title_am,
    )


def product_to_data(row: Product, seller_verified: bool) -> ListingData:
    """Convert a Product row to the engine's read-only view."""
    return ListingData(
        id=row.id,
        owner_id=row.user_id,
        category=Category(row.category),
        title=row.title,
        description=row.description or "",
        price=float(row.price),
        currency=row.currency,
        quantity=row.quantity,
        unit=row.unit,
        seller_verified=bool(seller_verified),
        status=ListingStatus(row.status),
        title_am=row.title_am,
    )


def match_to_record(row: Match) -> MatchRecord:
    """Convert a Match row to a MatchRecord."""
    return MatchRecord(
        id=row.id,
        buy_request_id=row.buy_request_id,
        product_id=row.product_id,
        buyer_id=row.buyer_id,
        seller_id=row.seller_id,
        score=row.ai_score,
        reason=row.match_reason,
        status=MatchStatus(row.status),
        created_at=row.created_at,
    )


class SqlMatchStore(MatchStorePort):
    """MatchStorePort backed by the relational database."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize store.

        Args:
            session_factory: Callable returning a new Session (e.g. SessionLocal)
        """
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
        except CONNECTION_ERRORS as e:
            session.rollback()
            raise StoreUnavailableError(f"{operation} failed: {e}") from e
        finally:
            session.close()

    def get_active_buy_request(self, buy_request_id: UUID) -> Optional[BuyRequestData]:
        with self._session("get_active_buy_request") as session:
            row = session.query(BuyRequest).filter(
                BuyRequest.id == buy_request_id,
                BuyRequest.status == ListingStatus.ACTIVE.value
            ).first()
            return buy_request_to_data(row) if row else None

    def list_active_listings(self, category: Category, exclude_owner_id: UUID) -> List[ListingData]:
        with self._session("list_active_listings") as session:
            rows = session.query(Product, User.is_verified).join(
                User, Product.user_id == User.id
            ).filter(
                Product.status == ListingStatus.ACTIVE.value,
                Product.category == category.value,
                Product.user_id != exclude_owner_id
            ).order_by(Product.created_at, Product.id).all()

            return [product_to_data(product, is_verified) for product, is_verified in rows]

    def create_match(
        self,
        buy_request_id: UUID,
        product_id: UUID,
        buyer_id: UUID,
        seller_id: UUID,
        score: int,
        reason: str
    ) -> MatchRecord:
        with self._session("create_match") as session:
            match = Match(
                buy_request_id=buy_request_id,
                product_id=product_id,
                buyer_id=buyer_id,
                seller_id=seller_id,
                ai_score=score,
                match_reason=reason,
                status=MatchStatus.PENDING.value,
            )
            session.add(match)

            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if self._pair_exists(session, buy_request_id, product_id):
                    raise DuplicateMatchError(buy_request_id, product_id) from e
                raise MatchWriteError(f"Match insert rejected: {e.orig}") from e
            except CONNECTION_ERRORS:
                raise
            except SQLAlchemyError as e:
                session.rollback()
                raise MatchWriteError(f"Match insert failed: {e}") from e

            session.refresh(match)
            return match_to_record(match)

    def list_active_buy_request_ids(self) -> List[UUID]:
        with self._session("list_active_buy_request_ids") as session:
            rows = session.query(BuyRequest.id).filter(
                BuyRequest.status == ListingStatus.ACTIVE.value
            ).order_by(BuyRequest.created_at, BuyRequest.id).all()
            return [row[0] for row in rows]

    def _pair_exists(self, session: Session, buy_request_id: UUID, product_id: UUID) -> bool:
        return session.query(Match.id).filter(
            Match.buy_request_id == buy_request_id,
            Match.product_id == product_id
        ).first() is not None


class SqlNotificationSink(NotificationSink):
    """Persists notification intents as in-app Notification rows."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def emit(self, intent: NotificationIntent) -> None:
        with get_db_session(self.session_factory) as session:
            session.add(Notification(
                user_id=intent.user_id,
                type=intent.type,
                title=intent.title,
                title_am=intent.title_am,
                message=intent.message,
                message_am=intent.message_am,
                action_url=intent.action_url,
                metadata_json=dict(intent.metadata),
            ))
