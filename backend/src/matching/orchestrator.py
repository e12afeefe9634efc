"""Matching orchestrator: scores every eligible listing for one buy request.

Pipeline:
1. Load the buy request (missing or not ACTIVE -> empty outcome)
2. Load ACTIVE same-category listings owned by someone else
3. Score each candidate once; keep those at or above the threshold
4. Persist a PENDING match per admitted candidate, isolated per candidate
5. Build buyer and seller notification intents for each committed match

Notification intents are returned, not sent; the caller dispatches them.
"""

import logging
import time
from typing import Optional
from uuid import UUID

from observability.metrics import (
    matching_runs_total,
    matching_run_duration_seconds,
    matches_created_total,
    match_write_failures_total,
    match_score,
)
from .ports import (
    MatchStorePort,
    MatchingOutcome,
    CandidateFailure,
    DuplicateMatchError,
    MatchWriteError,
    StoreUnavailableError,
)
from .scorer import MatchScorer
from .reasons import compose_reason
from .notifications import build_match_notifications

logger = logging.getLogger(__name__)


class MatchingOrchestrator:
    """Runs matching for a single buy request against the live catalog.

    The store is injected; the orchestrator holds no mutable state between
    runs, so one instance may serve concurrent callers.
    """

    def __init__(self, store: MatchStorePort, scorer: Optional[MatchScorer] = None):
        """Initialize orchestrator.

        Args:
            store: Store port for buy requests, listings and matches
            scorer: Compatibility scorer (defaults to the standard policy)
        """
        self.store = store
        self.scorer = scorer or MatchScorer()

    def run_matching(self, buy_request_id: UUID) -> MatchingOutcome:
        """Match one buy request against all eligible listings.

        Args:
            buy_request_id: Buy request UUID

        Returns:
            MatchingOutcome with created matches and notification intents

        Raises:
            StoreUnavailableError: If loading the request or candidates fails,
                or the store becomes unreachable mid-run
        """
        start_time = time.time()
        outcome = MatchingOutcome(buy_request_id=buy_request_id)

        logger.info(f"Matching started for buy request {buy_request_id}")

        try:
            request = self.store.get_active_buy_request(buy_request_id)
            if request is None:
                logger.info(f"Buy request {buy_request_id} missing or not active, skipping matching")
                matching_runs_total.labels(outcome="skipped").inc()
                return outcome

            candidates = self.store.list_active_listings(
                request.category, exclude_owner_id=request.owner_id
            )
            logger.debug(f"Buy request {buy_request_id}: {len(candidates)} candidate listings")

            for listing in candidates:
                # Category and ownership are hard gates, re-checked on store output
                if listing.category != request.category or listing.owner_id == request.owner_id:
                    logger.warning(
                        f"Store returned ineligible listing {listing.id} for request {buy_request_id}"
                    )
                    continue

                result = self.scorer.score(request, listing)
                outcome.candidates_scored += 1

                if not self.scorer.is_admissible(result.total):
                    continue

                reason = compose_reason(request, listing, result.total)

                try:
                    match = self.store.create_match(
                        buy_request_id=request.id,
                        product_id=listing.id,
                        buyer_id=request.owner_id,
                        seller_id=listing.owner_id,
                        score=result.total,
                        reason=reason,
                    )
                except DuplicateMatchError:
                    logger.info(
                        f"Match for request {request.id} and product {listing.id} already exists, skipping"
                    )
                    outcome.duplicates_skipped += 1
                    match_write_failures_total.labels(kind="duplicate").inc()
                    continue
                except MatchWriteError as e:
                    logger.error(
                        f"Failed to persist match for request {request.id} and product {listing.id}: {e}",
                        exc_info=True
                    )
                    outcome.failures.append(CandidateFailure(
                        product_id=listing.id,
                        score=result.total,
                        error=str(e),
                    ))
                    match_write_failures_total.labels(kind="write_error").inc()
                    continue

                outcome.matches.append(match)
                outcome.notifications.extend(build_match_notifications(match, request, listing))
                matches_created_total.inc()
                match_score.observe(match.score)

        except StoreUnavailableError:
            logger.error(f"Store unavailable while matching buy request {buy_request_id}", exc_info=True)
            matching_runs_total.labels(outcome="store_error").inc()
            raise
        finally:
            matching_run_duration_seconds.observe(time.time() - start_time)

        matching_runs_total.labels(outcome="completed").inc()
        logger.info(
            f"Matching completed for buy request {buy_request_id}: "
            f"{outcome.matches_found} created, {outcome.duplicates_skipped} duplicates, "
            f"{len(outcome.failures)} failed of {outcome.candidates_scored} scored"
        )
        return outcome
