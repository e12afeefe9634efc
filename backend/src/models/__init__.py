"""SQLAlchemy Models for TradeMatch"""

from .base import Base
from .enums import Category, Urgency, ListingStatus
from .user import User
from .product import Product
from .buy_request import BuyRequest
from .match import Match
from .notification import Notification

__all__ = [
    "Base",
    "Category",
    "Urgency",
    "ListingStatus",
    "User",
    "Product",
    "BuyRequest",
    "Match",
    "Notification",
]
