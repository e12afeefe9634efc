"""Match service: wiring of the engine and match lifecycle operations.

Used by the HTTP router and the Celery tasks.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from config import get_settings
from models.buy_request import BuyRequest
from models.match import Match
from .batch import BatchRematcher
from .notifications import build_acceptance_notification, dispatch_notifications
from .orchestrator import MatchingOrchestrator
from .ports import MatchingOutcome, NotificationIntent
from .scorer import MatchScorer, ScoringWeights
from .sql_store import SqlMatchStore, SqlNotificationSink
from .status import MatchStatus, StateTransitionError, validate_transition

logger = logging.getLogger(__name__)


class MatchNotFoundError(Exception):
    """Raised when a match does not exist."""
    pass


class BuyRequestNotFoundError(Exception):
    """Raised when a buy request does not exist."""
    pass


class AccessDeniedError(Exception):
    """Raised when the actor may not act on a match or buy request."""
    pass


def build_orchestrator(session_factory: Callable[[], Session]) -> MatchingOrchestrator:
    """Create an orchestrator backed by the SQL store and configured threshold."""
    settings = get_settings()
    scorer = MatchScorer(ScoringWeights(min_score=settings.MATCHING_MIN_SCORE))
    return MatchingOrchestrator(SqlMatchStore(session_factory), scorer)


def build_rematcher(session_factory: Callable[[], Session]) -> BatchRematcher:
    """Create a batch re-matcher that dispatches intents to in-app notifications."""
    orchestrator = build_orchestrator(session_factory)
    return BatchRematcher(
        orchestrator=orchestrator,
        store=orchestrator.store,
        notification_sink=SqlNotificationSink(session_factory),
        max_workers=get_settings().REMATCH_MAX_WORKERS,
    )


def run_matching_and_notify(
    session_factory: Callable[[], Session],
    buy_request_id: UUID
) -> MatchingOutcome:
    """Run matching for one buy request and dispatch its notification intents.

    Raises:
        StoreUnavailableError: If the store is unreachable
    """
    outcome = build_orchestrator(session_factory).run_matching(buy_request_id)
    dispatch_notifications(SqlNotificationSink(session_factory), outcome.notifications)
    return outcome


def list_matches_for_user(
    db: Session,
    user_id: UUID,
    status: Optional[MatchStatus] = None,
    limit: int = 20,
    offset: int = 0
) -> Tuple[List[Match], int]:
    """List matches where the user is buyer or seller, newest first.

    Returns:
        (page of matches, total count)
    """
    query = db.query(Match).filter(
        or_(Match.buyer_id == user_id, Match.seller_id == user_id)
    )
    if status is not None:
        query = query.filter(Match.status == status.value)

    total = query.count()
    matches = query.order_by(Match.created_at.desc(), Match.id).offset(offset).limit(limit).all()
    return matches, total


def get_match_for_user(db: Session, match_id: UUID, user_id: UUID) -> Match:
    """Load a match the user is party to.

    Raises:
        MatchNotFoundError: If the match does not exist
        AccessDeniedError: If the user is not buyer or seller
    """
    match = db.query(Match).filter(Match.id == match_id).first()
    if not match:
        raise MatchNotFoundError(f"Match {match_id} not found")
    if user_id not in (match.buyer_id, match.seller_id):
        raise AccessDeniedError(f"User {user_id} is not a party to match {match_id}")
    return match


def mark_viewed(match: Match, user_id: UUID) -> bool:
    """Mark the match viewed by the given party.

    Returns:
        True if a flag changed (caller commits)
    """
    now = datetime.now(timezone.utc)
    if user_id == match.buyer_id and not match.buyer_viewed:
        match.buyer_viewed = True
        match.buyer_viewed_at = now
        return True
    if user_id == match.seller_id and not match.seller_viewed:
        match.seller_viewed = True
        match.seller_viewed_at = now
        return True
    return False


def respond_to_match(
    db: Session,
    match_id: UUID,
    user_id: UUID,
    accept: bool
) -> Tuple[Match, List[NotificationIntent]]:
    """Accept or reject a pending match on behalf of one party.

    Returns:
        (updated match, intents for the caller to dispatch)

    Raises:
        MatchNotFoundError: If the match does not exist
        AccessDeniedError: If the user is not a party
        StateTransitionError: If the match is no longer PENDING
    """
    match = get_match_for_user(db, match_id, user_id)
    new_status = MatchStatus.ACCEPTED if accept else MatchStatus.REJECTED
    current_status = MatchStatus(match.status)
    validate_transition(current_status, new_status)

    # Conditional on the status just validated; a concurrent response wins the row
    result = db.execute(
        update(Match)
        .where(Match.id == match.id, Match.status == current_status.value)
        .values(status=new_status.value, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        db.refresh(match)
        logger.warning(f"Match {match_id} changed to {match.status} before {new_status.value} was applied")
        raise StateTransitionError(
            f"Invalid transition: {match.status} -> {new_status.value}. "
            f"Match {match_id} was already answered"
        )

    mark_viewed(match, user_id)
    db.commit()
    db.refresh(match)

    logger.info(f"Match {match_id} {new_status.value.lower()} by user {user_id}")

    intents: List[NotificationIntent] = []
    if accept:
        by_buyer = user_id == match.buyer_id
        recipient = match.seller_id if by_buyer else match.buyer_id
        intents.append(build_acceptance_notification(match.id, recipient, accepted_by_buyer=by_buyer))

    return match, intents


def get_buy_request_for_owner(db: Session, buy_request_id: UUID, user_id: UUID) -> BuyRequest:
    """Load a buy request owned by the user.

    Raises:
        BuyRequestNotFoundError: If the buy request does not exist
        AccessDeniedError: If the user does not own it
    """
    buy_request = db.query(BuyRequest).filter(BuyRequest.id == buy_request_id).first()
    if not buy_request:
        raise BuyRequestNotFoundError(f"Buy request {buy_request_id} not found")
    if buy_request.user_id != user_id:
        raise AccessDeniedError(f"User {user_id} does not own buy request {buy_request_id}")
    return buy_request
