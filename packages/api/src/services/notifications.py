# This project was developed with assistance from AI tools.
"""In-process publish/subscribe for workflow notifications.

Topics are ``user:<id>`` and ``role:<role>``. Every WebSocket connection
owns one bounded ``asyncio.Queue``; ``publish`` never blocks and never
raises into the caller, so a slow or vanished subscriber cannot affect the
state transition that produced the event. Delivery is best effort: events
for a full queue are dropped and logged.

Services publish only after their transaction has committed.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any

from db.enums import UserRole

from ..core.config import settings

logger = logging.getLogger(__name__)


def user_topic(user_id: int) -> str:
    return f"user:{user_id}"


def role_topic(role: UserRole | str) -> str:
    value = role.value if isinstance(role, UserRole) else role
    return f"role:{value}"


ADMIN_TOPIC = role_topic(UserRole.ADMIN)


class Subscription:
    """One subscriber's queue plus the topics it listens on."""

    def __init__(self, topics: frozenset[str], maxsize: int):
        self.topics = topics
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    async def next_event(self) -> dict[str, Any]:
        return await self.queue.get()


class NotificationHub:
    """Topic-addressed fan-out to in-process subscribers."""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._topics: dict[str, set[Subscription]] = defaultdict(set)

    def subscribe(self, *topics: str) -> Subscription:
        sub = Subscription(frozenset(topics), self._queue_size)
        for topic in sub.topics:
            self._topics[topic].add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        for topic in sub.topics:
            subscribers = self._topics.get(topic)
            if subscribers is None:
                continue
            subscribers.discard(sub)
            if not subscribers:
                del self._topics[topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._topics.get(topic, ()))

    def publish(self, topics: str | list[str], event: str, data: dict[str, Any] | None = None) -> int:
        """Queue ``{"event", "data"}`` for every subscriber of ``topics``.

        A subscriber listening on several of the topics receives the event
        once. Returns the number of subscribers the event was queued for.
        """
        if isinstance(topics, str):
            topics = [topics]
        message = {"event": event, "data": data or {}}

        recipients: set[Subscription] = set()
        for topic in topics:
            recipients.update(self._topics.get(topic, ()))

        delivered = 0
        for sub in recipients:
            try:
                sub.queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                sub.dropped += 1
                logger.warning(
                    "Notification dropped: event=%s topics=%s (subscriber queue full)",
                    event,
                    sorted(sub.topics),
                )
        return delivered


def topics_for(user_id: int, role: UserRole) -> list[str]:
    """Topics a connected user listens on. Superadmins also follow the admin queue."""
    topics = [user_topic(user_id), role_topic(role)]
    if role == UserRole.SUPERADMIN:
        topics.append(ADMIN_TOPIC)
    return topics


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_hub: NotificationHub | None = None


def init_notification_hub(queue_size: int | None = None) -> NotificationHub:
    """Initialise the singleton (called once from app lifespan)."""
    global _hub  # noqa: PLW0603
    _hub = NotificationHub(queue_size or settings.NOTIFICATION_QUEUE_SIZE)
    logger.info("NotificationHub initialised (queue_size=%d)", _hub._queue_size)
    return _hub


def get_notification_hub() -> NotificationHub:
    """Return the hub, creating it on first use outside the app lifespan."""
    global _hub  # noqa: PLW0603
    if _hub is None:
        _hub = NotificationHub(settings.NOTIFICATION_QUEUE_SIZE)
    return _hub


def notify(topics: str | list[str], event: str, data: dict[str, Any] | None = None) -> None:
    """Fire-and-forget publish used by the services after commit."""
    try:
        get_notification_hub().publish(topics, event, data)
    except Exception:
        logger.warning("Notification publish failed for event=%s", event, exc_info=True)
