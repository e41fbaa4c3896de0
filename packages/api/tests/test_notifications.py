# This project was developed with assistance from AI tools.
"""Tests for the in-process notification hub."""

from unittest.mock import patch

import pytest
from db.enums import UserRole

from src.services.notifications import (
    ADMIN_TOPIC,
    NotificationHub,
    notify,
    role_topic,
    topics_for,
    user_topic,
)


def test_topic_names():
    assert user_topic(7) == "user:7"
    assert role_topic(UserRole.FOUNDER) == "role:founder"
    assert ADMIN_TOPIC == "role:admin"


def test_topics_for_superadmin_includes_admin_queue():
    assert topics_for(1, UserRole.SUPERADMIN) == ["user:1", "role:superadmin", "role:admin"]
    assert topics_for(2, UserRole.INVESTOR) == ["user:2", "role:investor"]


@pytest.mark.asyncio
async def test_publish_reaches_topic_subscribers_only():
    hub = NotificationHub(queue_size=5)
    founder = hub.subscribe("user:2", "role:founder")
    investor = hub.subscribe("user:1", "role:investor")

    delivered = hub.publish("user:2", "investor-query-approved", {"queryId": 100})

    assert delivered == 1
    assert await founder.next_event() == {
        "event": "investor-query-approved",
        "data": {"queryId": 100},
    }
    assert investor.queue.empty()


def test_subscriber_on_several_topics_receives_once():
    hub = NotificationHub(queue_size=5)
    sub = hub.subscribe("user:1", "role:admin")

    hub.publish(["user:1", "role:admin"], "query-rejected")

    assert sub.queue.qsize() == 1


def test_full_queue_drops_without_raising():
    hub = NotificationHub(queue_size=1)
    sub = hub.subscribe("role:admin")

    assert hub.publish("role:admin", "first") == 1
    assert hub.publish("role:admin", "second") == 0
    assert sub.dropped == 1
    assert sub.queue.get_nowait()["event"] == "first"


def test_unsubscribe_removes_empty_topics():
    hub = NotificationHub()
    sub = hub.subscribe("user:3")
    assert hub.subscriber_count("user:3") == 1

    hub.unsubscribe(sub)

    assert hub.subscriber_count("user:3") == 0
    assert hub.publish("user:3", "anything") == 0


def test_notify_never_raises_into_caller():
    with patch("src.services.notifications.get_notification_hub") as mock_get:
        mock_get.return_value.publish.side_effect = RuntimeError("boom")
        notify("user:1", "call-scheduled", {})
    mock_get.return_value.publish.assert_called_once()
