"""Compatibility scoring of a buy request against a product listing.

Additive point budget, capped at 100:

    category        40   (candidates are pre-filtered to the same category)
    budget          20 if price <= max_budget
                    10 if price <= max_budget * 1.2
                    15 if the request declares no max budget
    quantity        15 if listing quantity >= requested
                     8 if listing quantity >= 50% of requested
                    10 if either side omits quantity
    text            15 * keyword overlap of title + description
    trust            5 if the seller is verified
    urgency          5 if the request is URGENT and listing quantity > 0

The total is rounded half-up once, after summing, and clamped to 0..100.
"""

import math
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

from models.enums import Urgency
from .ports import BuyRequestData, ListingData
from .text_similarity import similarity


@dataclass(frozen=True)
class ScoringWeights:
    """Point weights and thresholds of the scoring policy.

    One global policy; pass a custom instance to MatchScorer to tune it.
    """
    category: float = 40.0
    budget_within: float = 20.0
    budget_tolerance: float = 10.0
    budget_unspecified: float = 15.0
    budget_tolerance_ratio: float = 1.2
    quantity_full: float = 15.0
    quantity_partial: float = 8.0
    quantity_unspecified: float = 10.0
    quantity_partial_ratio: float = 0.5
    text: float = 15.0
    verified_seller: float = 5.0
    urgency: float = 5.0
    min_score: int = 50


DEFAULT_WEIGHTS = ScoringWeights()

MAX_SCORE = 100
MIN_SCORE = 0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions of a score, kept for explainability.

    Attributes:
        category: Category points
        budget: Budget fit points
        quantity: Quantity fit points
        text_similarity: Raw keyword overlap (0.0-1.0)
        text: Weighted text points (unrounded)
        trust: Verified-seller points
        urgency: Urgency points
        raw_total: Unrounded sum of all contributions
    """
    category: float
    budget: float
    quantity: float
    text_similarity: float
    text: float
    trust: float
    urgency: float
    raw_total: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreResult:
    """Final integer score (0-100) and its breakdown."""
    total: int
    breakdown: ScoreBreakdown


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class MatchScorer:
    """Calculate compatibility scores between buy requests and listings.

    Pure and total: inputs are taken at face value and scoring never raises
    for numeric edge cases such as zero or negative prices and quantities.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        """Initialize scorer with a scoring policy.

        Args:
            weights: Scoring policy (defaults to DEFAULT_WEIGHTS)
        """
        self.weights = weights or DEFAULT_WEIGHTS

    def score(self, request: BuyRequestData, listing: ListingData) -> ScoreResult:
        """Score one request/listing pair.

        Args:
            request: Buy request
            listing: Candidate listing (same category, different owner)

        Returns:
            ScoreResult with total in 0..100 and the per-factor breakdown
        """
        category = self.weights.category
        budget = self._calculate_budget_fit(request, listing)
        quantity = self._calculate_quantity_fit(request, listing)

        text_similarity = similarity(
            f"{request.title} {request.description or ''}",
            f"{listing.title} {listing.description or ''}"
        )
        text = text_similarity * self.weights.text

        trust = self.weights.verified_seller if listing.seller_verified else 0.0
        urgency = self._calculate_urgency_bonus(request, listing)

        raw_total = category + budget + quantity + text + trust + urgency
        total = max(MIN_SCORE, min(MAX_SCORE, round_half_up(raw_total)))

        return ScoreResult(
            total=total,
            breakdown=ScoreBreakdown(
                category=category,
                budget=budget,
                quantity=quantity,
                text_similarity=text_similarity,
                text=text,
                trust=trust,
                urgency=urgency,
                raw_total=raw_total,
            )
        )

    def is_admissible(self, score: int) -> bool:
        """Check a score against the admission threshold."""
        return score >= self.weights.min_score

    def _calculate_budget_fit(self, request: BuyRequestData, listing: ListingData) -> float:
        if request.max_budget is None:
            return self.weights.budget_unspecified

        if listing.price is None:
            return 0.0

        if listing.price <= request.max_budget:
            return self.weights.budget_within
        if listing.price <= request.max_budget * self.weights.budget_tolerance_ratio:
            return self.weights.budget_tolerance
        return 0.0

    def _calculate_quantity_fit(self, request: BuyRequestData, listing: ListingData) -> float:
        if request.quantity is None or listing.quantity is None:
            return self.weights.quantity_unspecified

        if listing.quantity >= request.quantity:
            return self.weights.quantity_full
        if listing.quantity >= request.quantity * self.weights.quantity_partial_ratio:
            return self.weights.quantity_partial
        return 0.0

    def _calculate_urgency_bonus(self, request: BuyRequestData, listing: ListingData) -> float:
        if request.urgency != Urgency.URGENT:
            return 0.0
        if listing.quantity is None or listing.quantity <= 0:
            return 0.0
        return self.weights.urgency
