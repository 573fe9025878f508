"""Recommendation feedback — fire-and-forget analytics side channel.

Delivery never affects recommendation computation; failures are logged.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

from app.services.budget.types import EventType, ServiceCategory

logger = logging.getLogger(__name__)


class FeedbackRating(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class FeedbackEvent:
    event_type: EventType
    service_category: ServiceCategory
    rating: FeedbackRating
    comment: str | None = None
    event_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "service_category": self.service_category.value,
            "rating": self.rating.value,
            "comment": self.comment,
            "event_id": self.event_id,
            "created_at": self.created_at.isoformat(),
        }


class FeedbackSink(Protocol):
    async def deliver(self, event: FeedbackEvent) -> None: ...


class LoggingFeedbackSink:
    """Writes feedback to the application log only."""

    async def deliver(self, event: FeedbackEvent) -> None:
        logger.info(
            f"Recommendation feedback: {event.rating.value} on "
            f"{event.event_type.value}/{event.service_category.value}"
            + (f" (event {event.event_id})" if event.event_id else "")
        )


async def deliver_feedback(sink: FeedbackSink, event: FeedbackEvent) -> None:
    """Background-task entry point. Swallows and logs delivery errors."""
    try:
        await sink.deliver(event)
    except Exception as e:
        logger.warning(
            f"Feedback delivery failed for {event.event_type.value}/"
            f"{event.service_category.value}: {e}"
        )
