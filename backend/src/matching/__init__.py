"""Matching engine for TradeMatch.

Pairs buy requests with product listings:
- Keyword overlap text similarity
- Additive compatibility scoring (category, budget, quantity, text, trust, urgency)
- Tiered match explanations
- Per-request orchestration with per-candidate write isolation
- Catalog-wide batch re-matching
"""

from .ports import (
    MatchStorePort,
    NotificationSink,
    BuyRequestData,
    ListingData,
    MatchRecord,
    NotificationIntent,
    MatchingOutcome,
    MatchingError,
    StoreUnavailableError,
    DuplicateMatchError,
    MatchWriteError,
)
from .text_similarity import similarity
from .scorer import MatchScorer, ScoringWeights, ScoreResult, ScoreBreakdown
from .reasons import compose_reason
from .orchestrator import MatchingOrchestrator
from .batch import BatchRematcher, BatchRunEntry
from .status import MatchStatus

__all__ = [
    "MatchStorePort",
    "NotificationSink",
    "BuyRequestData",
    "ListingData",
    "MatchRecord",
    "NotificationIntent",
    "MatchingOutcome",
    "MatchingError",
    "StoreUnavailableError",
    "DuplicateMatchError",
    "MatchWriteError",
    "similarity",
    "MatchScorer",
    "ScoringWeights",
    "ScoreResult",
    "ScoreBreakdown",
    "compose_reason",
    "MatchingOrchestrator",
    "BatchRematcher",
    "BatchRunEntry",
    "MatchStatus",
]
