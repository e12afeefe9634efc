"""Celery tasks for background matching.

Tasks:
- matching.run_for_request: per-event matching after a buy request is created
- matching.rematch_all_active: periodic catalog-wide re-matching (Celery beat)
"""

import logging
from typing import Dict, Any
from uuid import UUID

from celery import shared_task

from database import SessionLocal
from observability.request_id import correlation_scope
from .ports import StoreUnavailableError
from .service import build_rematcher, run_matching_and_notify

logger = logging.getLogger(__name__)


def parse_buy_request_id(buy_request_id: str) -> UUID:
    """Parse a task argument into a UUID.

    Raises:
        ValueError: If the id is not a valid UUID
    """
    try:
        return UUID(buy_request_id)
    except (ValueError, AttributeError, TypeError) as e:
        raise ValueError(f"Invalid buy_request_id format '{buy_request_id}': {str(e)}")


@shared_task(
    name="matching.run_for_request",
    bind=True,
    autoretry_for=(StoreUnavailableError,),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_jitter=True,
    max_retries=3,
)
def run_matching_for_request_task(self, buy_request_id: str) -> Dict[str, Any]:
    """Match one buy request and deliver the resulting notifications.

    Enqueued by the buy request creation flow. Re-running is safe: pairs
    that already have a match are skipped by the store's uniqueness rule.

    Args:
        buy_request_id: UUID string of the buy request

    Returns:
        Dict with buy_request_id, matches_found, duplicates_skipped, failed_writes

    Raises:
        ValueError: If buy_request_id is not a UUID
        StoreUnavailableError: After retries are exhausted
    """
    request_uuid = parse_buy_request_id(buy_request_id)

    with correlation_scope(self.request.id):
        outcome = run_matching_and_notify(SessionLocal, request_uuid)

    return {
        "status": "completed",
        "buy_request_id": buy_request_id,
        "matches_found": outcome.matches_found,
        "duplicates_skipped": outcome.duplicates_skipped,
        "failed_writes": len(outcome.failures),
    }


@shared_task(name="matching.rematch_all_active", bind=True)
def rematch_all_active_task(self) -> Dict[str, Any]:
    """Re-match every active buy request against the current catalog.

    Scheduled by Celery beat every REMATCH_SCHEDULE_MINUTES. A store outage
    aborts the sweep; the next scheduled run starts over.

    Returns:
        Dict with status, requests_processed, matches_found and per-request results
    """
    logger.info("Re-matching sweep started")

    with correlation_scope(self.request.id):
        try:
            entries = build_rematcher(SessionLocal).run_all_active()
        except StoreUnavailableError as e:
            logger.error("Re-matching sweep aborted: store unavailable", exc_info=True)
            return {
                "status": "failed",
                "error": str(e),
                "requests_processed": 0,
                "matches_found": 0,
            }

    result = {
        "status": "completed",
        "requests_processed": len(entries),
        "matches_found": sum(entry.matches_found for entry in entries),
        "results": [entry.to_dict() for entry in entries],
    }
    logger.info(
        f"Re-matching sweep completed: {result['matches_found']} matches "
        f"across {result['requests_processed']} requests"
    )
    return result
