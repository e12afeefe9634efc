"""Notification intents produced by matching, and their dispatch."""

import logging
from typing import Iterable, List
from uuid import UUID

from observability.metrics import notifications_dispatched_total
from .ports import (
    BuyRequestData,
    ListingData,
    MatchRecord,
    NotificationIntent,
    NotificationSink,
)

logger = logging.getLogger(__name__)

NEW_MATCH = "NEW_MATCH"
MATCH_ACCEPTED = "MATCH_ACCEPTED"


def match_action_url(match_id: UUID) -> str:
    return f"/dashboard/matches/{match_id}"


def build_match_notifications(
    match: MatchRecord,
    request: BuyRequestData,
    listing: ListingData
) -> List[NotificationIntent]:
    """Build the buyer and seller intents for a newly created match.

    Returns:
        [buyer intent, seller intent]
    """
    metadata = {"match_id": str(match.id), "score": match.score}
    action_url = match_action_url(match.id)

    buyer = NotificationIntent(
        user_id=match.buyer_id,
        type=NEW_MATCH,
        title="New Match Found!",
        title_am="አዲስ ተዛማጅ ተገኝቷል!",
        message=f"We found a match for your request: {request.title}",
        message_am=f"ለጥያቄዎ ተዛማጅ አግኝተናል: {request.title_am or request.title}",
        action_url=action_url,
        metadata=dict(metadata),
    )

    seller = NotificationIntent(
        user_id=match.seller_id,
        type=NEW_MATCH,
        title="New Buyer Match!",
        title_am="አዲስ ገዢ ተገኝቷል!",
        message=f"A buyer is interested in: {listing.title}",
        message_am=f"ገዢ ፍላጎት አለው: {listing.title_am or listing.title}",
        action_url=action_url,
        metadata=dict(metadata),
    )

    return [buyer, seller]


def build_acceptance_notification(
    match_id: UUID,
    recipient_id: UUID,
    accepted_by_buyer: bool
) -> NotificationIntent:
    """Build the intent telling the other party a match was accepted."""
    if accepted_by_buyer:
        title, title_am = "Buyer Accepted Match!", "ገዢው ተስማምቷል!"
        actor, actor_am = "The buyer", "ገዢው"
    else:
        title, title_am = "Seller Accepted Match!", "ሻጭ ተስማምቷል!"
        actor, actor_am = "The seller", "ሻጭ"

    return NotificationIntent(
        user_id=recipient_id,
        type=MATCH_ACCEPTED,
        title=title,
        title_am=title_am,
        message=f"{actor} has accepted your match. You can now start negotiating!",
        message_am=f"{actor_am} ተስማምተዋል። አሁን መደራደር ይችላሉ!",
        action_url=match_action_url(match_id),
        metadata={"match_id": str(match_id), "action": "accepted"},
    )


def dispatch_notifications(sink: NotificationSink, intents: Iterable[NotificationIntent]) -> int:
    """Hand intents to a sink, fire-and-forget.

    Delivery failures are logged per intent and never retried.

    Returns:
        Number of intents the sink accepted
    """
    delivered = 0
    for intent in intents:
        try:
            sink.emit(intent)
            delivered += 1
            notifications_dispatched_total.labels(status="success").inc()
        except Exception as e:
            notifications_dispatched_total.labels(status="error").inc()
            logger.error(
                f"Notification delivery failed for user {intent.user_id}: {e}",
                exc_info=True,
                extra={"user_id": intent.user_id, "notification_type": intent.type}
            )
    return delivered
