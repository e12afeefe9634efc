"""Marketplace enumerations shared by models, schemas and the matching engine."""

from enum import Enum


class Category(str, Enum):
    """Trade category of a buy request or listing."""
    AGRICULTURAL_PRODUCTS = "AGRICULTURAL_PRODUCTS"
    LIVESTOCK = "LIVESTOCK"
    MACHINERY_EQUIPMENT = "MACHINERY_EQUIPMENT"
    CONSTRUCTION_MATERIALS = "CONSTRUCTION_MATERIALS"
    TEXTILES_CLOTHING = "TEXTILES_CLOTHING"
    FOOD_BEVERAGES = "FOOD_BEVERAGES"
    TECHNOLOGY_ELECTRONICS = "TECHNOLOGY_ELECTRONICS"
    AUTOMOTIVE = "AUTOMOTIVE"
    REAL_ESTATE = "REAL_ESTATE"
    SERVICES = "SERVICES"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        """Lower-case, space separated form used in human-readable text."""
        return self.value.replace("_", " ").lower()


class Urgency(str, Enum):
    """Buy request urgency, ordered LOW < NORMAL < HIGH < URGENT."""
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    Urgency.LOW: 0,
    Urgency.NORMAL: 1,
    Urgency.HIGH: 2,
    Urgency.URGENT: 3,
}


class ListingStatus(str, Enum):
    """Lifecycle status shared by buy requests and product listings."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    CLOSED = "CLOSED"
    FULFILLED = "FULFILLED"
    EXPIRED = "EXPIRED"
