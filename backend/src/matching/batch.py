"""Catalog-wide re-matching of every active buy request."""

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from observability.metrics import rematch_requests_processed_total
from .ports import MatchStorePort, MatchingOutcome, NotificationSink
from .orchestrator import MatchingOrchestrator
from .notifications import dispatch_notifications

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchRunEntry:
    """Per-request result of a re-matching sweep."""
    buy_request_id: UUID
    matches_found: int

    def to_dict(self):
        return {"buy_request_id": str(self.buy_request_id), "matches_found": self.matches_found}


class BatchRematcher:
    """Invokes the orchestrator once for every ACTIVE buy request.

    With max_workers > 1 requests are processed by a bounded thread pool;
    each orchestrator run stays sequential internally. Duplicate protection
    comes from the store's pair uniqueness, not from locking.
    """

    def __init__(
        self,
        orchestrator: MatchingOrchestrator,
        store: MatchStorePort,
        notification_sink: Optional[NotificationSink] = None,
        max_workers: int = 1
    ):
        """Initialize re-matcher.

        Args:
            orchestrator: Orchestrator used per request
            store: Store port (source of active buy request ids)
            notification_sink: Optional sink for the intents of each run
            max_workers: Worker pool size (1 = sequential)
        """
        self.orchestrator = orchestrator
        self.store = store
        self.notification_sink = notification_sink
        self.max_workers = max(1, max_workers)

    def run_all_active(self) -> List[BatchRunEntry]:
        """Re-match all active buy requests.

        Returns:
            One entry per active request, in store order

        Raises:
            StoreUnavailableError: If the store is unreachable; aborts the sweep
        """
        buy_request_ids = self.store.list_active_buy_request_ids()
        logger.info(f"Re-matching {len(buy_request_ids)} active buy requests")

        if self.max_workers == 1 or len(buy_request_ids) <= 1:
            entries = [self._run_one(buy_request_id) for buy_request_id in buy_request_ids]
        else:
            # Each pooled run executes in its own copy of the caller's context
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="rematch") as pool:
                futures = [
                    pool.submit(contextvars.copy_context().run, self._run_one, buy_request_id)
                    for buy_request_id in buy_request_ids
                ]
                entries = [future.result() for future in futures]

        total = sum(entry.matches_found for entry in entries)
        logger.info(f"Re-matching completed: {total} matches across {len(entries)} requests")
        return entries

    def _run_one(self, buy_request_id: UUID) -> BatchRunEntry:
        outcome: MatchingOutcome = self.orchestrator.run_matching(buy_request_id)
        if self.notification_sink is not None and outcome.notifications:
            dispatch_notifications(self.notification_sink, outcome.notifications)
        rematch_requests_processed_total.inc()
        return BatchRunEntry(buy_request_id=buy_request_id, matches_found=outcome.matches_found)
