"""Human-readable match explanations."""

from decimal import Decimal
from typing import List, Union

from .ports import BuyRequestData, ListingData

EXCELLENT_MATCH_SCORE = 80
GOOD_MATCH_SCORE = 65


def format_amount(value: Union[int, float, Decimal]) -> str:
    """Render a number without a trailing '.0' for whole values."""
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def tier_label(score: int) -> str:
    """Map a score to its tier prefix."""
    if score >= EXCELLENT_MATCH_SCORE:
        return "Excellent match!"
    if score >= GOOD_MATCH_SCORE:
        return "Good match."
    return "Potential match."


def compose_reason(request: BuyRequestData, listing: ListingData, score: int) -> str:
    """Explain a match in one English sentence group.

    Clauses, in order: category relevance, budget fit (only when the price
    is within the declared max budget), quantity fit (only when the listing
    covers the requested quantity), verified seller.

    Example:
        "Excellent match! Teff grain matches your agricultural products
        requirement. Price (900 ETB) is within your budget. Sufficient
        quantity available (600 kg). Verified seller."
    """
    reasons: List[str] = [
        f"{listing.title} matches your {request.category.label} requirement"
    ]

    if (
        request.max_budget is not None
        and listing.price is not None
        and listing.price <= request.max_budget
    ):
        reasons.append(f"Price ({format_amount(listing.price)} {listing.currency}) is within your budget")

    if (
        request.quantity is not None
        and listing.quantity is not None
        and listing.quantity >= request.quantity
    ):
        unit = f" {listing.unit}" if listing.unit else ""
        reasons.append(f"Sufficient quantity available ({format_amount(listing.quantity)}{unit})")

    if listing.seller_verified:
        reasons.append("Verified seller")

    return f"{tier_label(score)} {'. '.join(reasons)}."
