"""Builders for engine-level buy requests and listings."""

from uuid import UUID, uuid4

from matching.ports import BuyRequestData, ListingData
from models.enums import Category

BUYER_ID = UUID("00000000-0000-0000-0000-0000000000b1")
SELLER_ID = UUID("00000000-0000-0000-0000-000000000051")


def make_request(**overrides) -> BuyRequestData:
    """Agricultural request for 500 kg of teff with a 1000 ETB budget."""
    values = dict(
        id=uuid4(),
        owner_id=BUYER_ID,
        category=Category.AGRICULTURAL_PRODUCTS,
        title="White teff grain",
        description="Need premium white teff grain for export",
        location="Addis Ababa",
        max_budget=1000.0,
        quantity=500,
        unit="kg",
    )
    values.update(overrides)
    return BuyRequestData(**values)


def make_listing(**overrides) -> ListingData:
    """Agricultural teff listing at 900 ETB with 600 kg available."""
    values = dict(
        id=uuid4(),
        owner_id=SELLER_ID,
        category=Category.AGRICULTURAL_PRODUCTS,
        title="White teff grain",
        description="Premium white teff grain, export quality",
        price=900.0,
        currency="ETB",
        quantity=600,
        unit="kg",
        seller_verified=True,
    )
    values.update(overrides)
    return ListingData(**values)
