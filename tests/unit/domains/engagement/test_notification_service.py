"""
Unit tests for notifications: producers, feed ownership, the sweep and the
post-commit event handlers.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.domain import DomainEventPublisher, EntityNotFoundException, EventOutbox, utcnow
from app.domains.commerce.domain.events import OrderPlaced, OrderStatusChanged
from app.domains.engagement.application.event_handlers import NotificationEventHandlers
from app.domains.engagement.application.services import NotificationService
from app.domains.engagement.domain.entities import Notification
from app.domains.engagement.domain.events import ReviewSubmitted
from app.domains.engagement.domain.value_objects import NotificationType
from app.domains.identity.domain.events import UserRegistered


@pytest.fixture
def mock_notification_repository():
    repo = AsyncMock()
    repo.create.side_effect = lambda notification: notification
    repo.save.side_effect = lambda notification: notification
    return repo


@pytest.fixture
def notification_service(mock_notification_repository):
    return NotificationService(notification_repository=mock_notification_repository)


@pytest.fixture(autouse=True)
def clean_publisher():
    DomainEventPublisher.clear_handlers()
    yield
    DomainEventPublisher.clear_handlers()


# ============================================================================
# Producers
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_order_placed_goes_to_admin_feed(notification_service):
    order_id = uuid4()

    notification = await notification_service.notify_order_placed(
        OrderPlaced(order_id=order_id, order_number="ORD-1", customer_name="Rahim Uddin", total=1260.0,
                    summary="Cotton Panjabi")
    )

    assert notification.for_admin
    assert notification.type == NotificationType.ORDER
    assert notification.message == 'Rahim Uddin placed an order of ৳1260.0 - "Cotton Panjabi"'
    assert notification.data["orderId"] == str(order_id)
    assert "userId" not in notification.data


@pytest.mark.unit
@pytest.mark.asyncio
async def test_order_status_goes_to_customer(notification_service):
    user_id = uuid4()

    notification = await notification_service.notify_order_status(
        OrderStatusChanged(order_id=uuid4(), order_number="ORD-1", user_id=user_id, new_status="shipped")
    )

    assert notification.for_user == user_id
    assert not notification.for_admin
    assert notification.title == "Order shipped"
    assert notification.message == "Your order #ORD-1 has been shipped"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_status_uses_generic_text(notification_service):
    notification = await notification_service.notify_order_status(
        OrderStatusChanged(order_id=uuid4(), order_number="ORD-2", user_id=uuid4(), new_status="pending")
    )

    assert notification.title == "Order update"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_review_and_registration_notifications(notification_service):
    review = await notification_service.notify_review_submitted(
        ReviewSubmitted(review_id=uuid4(), product_name="Cotton Panjabi", rating=5)
    )
    user = await notification_service.notify_user_registered(
        UserRegistered(user_id=uuid4(), email="rahim@example.com", full_name="Rahim Uddin")
    )

    assert review.title == "New 5-star review"
    assert review.message == 'A customer reviewed "Cotton Panjabi"'
    assert user.message == "Rahim Uddin (rahim@example.com) registered"


# ============================================================================
# Feeds
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_cannot_read_someone_elses_notification(notification_service, mock_notification_repository):
    mine = Notification.for_customer(uuid4(), NotificationType.ORDER_STATUS, "t", "m")
    mock_notification_repository.get_by_id.return_value = mine

    with pytest.raises(EntityNotFoundException, match="Notification not found"):
        await notification_service.mark_read(mine.id, uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_reads_admin_notification(notification_service, mock_notification_repository):
    note = Notification.for_admins(NotificationType.USER, "New user", "m")
    mock_notification_repository.get_by_id.return_value = note

    result = await notification_service.mark_read(note.id, uuid4(), is_admin=True)

    assert result.is_read


@pytest.mark.unit
@pytest.mark.asyncio
async def test_customer_cannot_reach_admin_feed_item(notification_service, mock_notification_repository):
    note = Notification.for_admins(NotificationType.USER, "New user", "m")
    mock_notification_repository.get_by_id.return_value = note

    with pytest.raises(EntityNotFoundException):
        await notification_service.delete(note.id, uuid4())

    mock_notification_repository.delete.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sweep_deletes_read_older_than_retention(notification_service, mock_notification_repository):
    mock_notification_repository.delete_read_before.return_value = 3
    before = utcnow()

    removed = await notification_service.sweep_read()

    assert removed == 3
    cutoff = mock_notification_repository.delete_read_before.await_args.args[0]
    assert before - timedelta(days=30, seconds=5) < cutoff <= utcnow() - timedelta(days=30)


# ============================================================================
# Event handlers
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_outbox_flush_reaches_notification_handlers():
    service = AsyncMock()
    sessions = []

    @asynccontextmanager
    async def session_factory():
        session = MagicMock()
        sessions.append(session)
        yield session

    NotificationEventHandlers(session_factory=session_factory, service_factory=lambda s: service).register()

    outbox = EventOutbox()
    event = OrderPlaced(order_id=uuid4(), order_number="ORD-1")
    outbox.record(event)
    await outbox.flush()

    service.notify_order_placed.assert_awaited_once_with(event)
    assert len(sessions) == 1
    assert len(outbox) == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_failure_does_not_propagate():
    service = AsyncMock()
    service.notify_user_registered.side_effect = RuntimeError("db down")

    @asynccontextmanager
    async def session_factory():
        yield MagicMock()

    NotificationEventHandlers(session_factory=session_factory, service_factory=lambda s: service).register()

    await DomainEventPublisher.publish(UserRegistered(user_id=uuid4(), email="a@b.com", full_name="A"))

    service.notify_user_registered.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_discarded_outbox_publishes_nothing():
    handler = AsyncMock()
    DomainEventPublisher.subscribe(OrderPlaced, handler)
    outbox = EventOutbox()
    outbox.record(OrderPlaced(order_id=uuid4()))

    outbox.discard()
    await outbox.flush()

    handler.assert_not_awaited()
