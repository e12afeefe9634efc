"""Matching ports and interfaces for hexagonal architecture.

The matching engine talks to persistence and notification delivery only
through the ports below, so it can run against SQLAlchemy in production
and against an in-memory fake in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any
from uuid import UUID

from models.enums import Category, Urgency, ListingStatus
from .status import MatchStatus


@dataclass(frozen=True)
class BuyRequestData:
    """Read-only view of a buy request as seen by the engine.

    Attributes:
        id: Buy request UUID
        owner_id: Buyer user UUID
        category: Trade category
        title: Free-text title
        description: Free-text description
        location: Delivery location
        urgency: Urgency level
        status: Lifecycle status
        min_budget: Optional lower budget bound
        max_budget: Optional upper budget bound
        quantity: Optional requested quantity
        unit: Optional quantity unit
        title_am: Optional Amharic title
    """
    id: UUID
    owner_id: UUID
    category: Category
    title: str
    description: str
    location: str
    urgency: Urgency = Urgency.NORMAL
    status: ListingStatus = ListingStatus.ACTIVE
    min_budget: Optional[float] = None
    max_budget: Optional[float] = None
    quantity: Optional[int] = None
    unit: Optional[str] = None
    title_am: Optional[str] = None


@dataclass(frozen=True)
class ListingData:
    """Read-only view of a product listing as seen by the engine.

    Attributes:
        id: Product UUID
        owner_id: Seller user UUID
        category: Trade category
        title: Free-text title
        description: Free-text description
        price: Unit price
        currency: Currency code
        quantity: Available quantity (None if unspecified)
        unit: Quantity unit
        seller_verified: Whether the owning seller is verified
        status: Lifecycle status
        title_am: Optional Amharic title
    """
    id: UUID
    owner_id: UUID
    category: Category
    title: str
    description: str
    price: float
    currency: str
    quantity: Optional[int] = None
    unit: Optional[str] = None
    seller_verified: bool = False
    status: ListingStatus = ListingStatus.ACTIVE
    title_am: Optional[str] = None


@dataclass(frozen=True)
class MatchRecord:
    """Persisted match as returned by the store."""
    id: UUID
    buy_request_id: UUID
    product_id: UUID
    buyer_id: UUID
    seller_id: UUID
    score: int
    reason: str
    status: MatchStatus
    created_at: datetime


@dataclass(frozen=True)
class NotificationIntent:
    """Structured request to inform one user of an event.

    Produced by the engine, delivered by a NotificationSink.
    """
    user_id: UUID
    type: str
    title: str
    title_am: str
    message: str
    message_am: str
    action_url: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CandidateFailure:
    """A candidate whose match write failed for a non-duplicate reason."""
    product_id: UUID
    score: int
    error: str


@dataclass
class MatchingOutcome:
    """Result of one matching run for a buy request.

    Attributes:
        buy_request_id: The request that was matched
        matches: Newly persisted matches, in candidate order
        notifications: Intents for the caller to dispatch (two per match)
        candidates_scored: Number of candidates passed through the scorer
        duplicates_skipped: Candidates whose pair already had a match
        failures: Candidates whose match write failed
    """
    buy_request_id: UUID
    matches: List[MatchRecord] = field(default_factory=list)
    notifications: List[NotificationIntent] = field(default_factory=list)
    candidates_scored: int = 0
    duplicates_skipped: int = 0
    failures: List[CandidateFailure] = field(default_factory=list)

    @property
    def matches_found(self) -> int:
        return len(self.matches)


class MatchStorePort(ABC):
    """Port interface for the marketplace store used by matching.

    Every call is bounded by a timeout. Connection-level failures surface
    as StoreUnavailableError.
    """

    @abstractmethod
    def get_active_buy_request(self, buy_request_id: UUID) -> Optional[BuyRequestData]:
        """Load a buy request if it exists and is ACTIVE.

        Returns:
            BuyRequestData, or None when missing or not ACTIVE

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    def list_active_listings(self, category: Category, exclude_owner_id: UUID) -> List[ListingData]:
        """List ACTIVE listings of a category not owned by exclude_owner_id.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    def create_match(
        self,
        buy_request_id: UUID,
        product_id: UUID,
        buyer_id: UUID,
        seller_id: UUID,
        score: int,
        reason: str
    ) -> MatchRecord:
        """Durably persist a new PENDING match.

        Raises:
            DuplicateMatchError: If a match for the pair already exists
            MatchWriteError: If the write fails for any other reason
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    def list_active_buy_request_ids(self) -> List[UUID]:
        """List ids of all ACTIVE buy requests.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        pass


class NotificationSink(ABC):
    """Port interface for notification delivery (fire-and-forget)."""

    @abstractmethod
    def emit(self, intent: NotificationIntent) -> None:
        """Hand one intent to the delivery mechanism."""
        pass


class MatchingError(Exception):
    """Base exception for matching errors."""
    pass


class StoreUnavailableError(MatchingError):
    """Raised when the store cannot be reached or a call times out."""
    pass


class DuplicateMatchError(MatchingError):
    """Raised when a match for the (buy request, listing) pair already exists."""

    def __init__(self, buy_request_id: UUID, product_id: UUID):
        self.buy_request_id = buy_request_id
        self.product_id = product_id
        super().__init__(f"Match already exists for request {buy_request_id} and product {product_id}")


class MatchWriteError(MatchingError):
    """Raised when a single match write fails for a non-duplicate reason."""
    pass
