"""Matching API endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, sessionmaker

from auth.dependencies import get_current_user
from database import get_db, get_session_factory
from models.user import User
from .notifications import dispatch_notifications
from .schemas import (
    MatchSchema,
    MatchListResponse,
    MatchActionRequest,
    CreatedMatchSchema,
    MatchRunResponse,
)
from .service import (
    AccessDeniedError,
    BuyRequestNotFoundError,
    MatchNotFoundError,
    get_buy_request_for_owner,
    get_match_for_user,
    list_matches_for_user,
    mark_viewed,
    respond_to_match,
    run_matching_and_notify,
)
from .sql_store import SqlNotificationSink
from .status import MatchStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/matches", tags=["matching"])


@router.get("", response_model=MatchListResponse)
def list_matches(
    match_status: Optional[MatchStatus] = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List matches where the current user is buyer or seller, newest first.

    Args:
        match_status: Optional status filter
        limit: Page size
        offset: Page offset
        db: Database session
        current_user: Authenticated user

    Returns:
        Paginated matches with total count
    """
    matches, total = list_matches_for_user(
        db, current_user.id, status=match_status, limit=limit, offset=offset
    )
    return MatchListResponse(
        matches=[MatchSchema.model_validate(match) for match in matches],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{match_id}", response_model=MatchSchema)
def get_match(
    match_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get one match and mark it viewed by the current party.

    Raises:
        HTTPException 404: Match not found
        HTTPException 403: Current user is not buyer or seller
    """
    try:
        match = get_match_for_user(db, match_id, current_user.id)
    except MatchNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    except AccessDeniedError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")

    if mark_viewed(match, current_user.id):
        db.commit()
        db.refresh(match)

    return MatchSchema.model_validate(match)


@router.patch("/{match_id}", response_model=MatchSchema)
def update_match(
    match_id: UUID,
    request: MatchActionRequest,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
    current_user: User = Depends(get_current_user)
):
    """Accept or reject a pending match.

    On accept, the other party is notified.

    Raises:
        HTTPException 404: Match not found
        HTTPException 403: Current user is not buyer or seller
        HTTPException 409: Match is no longer PENDING (via exception handler)
    """
    try:
        match, intents = respond_to_match(
            db, match_id, current_user.id, accept=request.action == "accept"
        )
    except MatchNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    except AccessDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized to modify this match"
        )

    dispatch_notifications(SqlNotificationSink(session_factory), intents)
    return MatchSchema.model_validate(match)


@router.post("/trigger/{buy_request_id}", response_model=MatchRunResponse)
def trigger_matching(
    buy_request_id: UUID,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
    current_user: User = Depends(get_current_user)
):
    """Run matching now for one of the current user's buy requests.

    Raises:
        HTTPException 404: Buy request not found
        HTTPException 403: Current user does not own the buy request
        HTTPException 503: Store unavailable (via exception handler)
    """
    try:
        get_buy_request_for_owner(db, buy_request_id, current_user.id)
    except BuyRequestNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Buy request not found")
    except AccessDeniedError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")

    outcome = run_matching_and_notify(session_factory, buy_request_id)

    return MatchRunResponse(
        buy_request_id=buy_request_id,
        matches_found=outcome.matches_found,
        candidates_scored=outcome.candidates_scored,
        duplicates_skipped=outcome.duplicates_skipped,
        failed_writes=len(outcome.failures),
        matches=[CreatedMatchSchema.model_validate(match) for match in outcome.matches],
    )
