"""Notification decisions. Delivery belongs to a transport supplied by the caller."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from .types import Notification, User

logger = logging.getLogger(__name__)

SMS_THRESHOLD = 100


class NotificationTransport(Protocol):
    def send(self, notification: Notification) -> None: ...


class LoggingTransport:
    """Logs each intent instead of delivering it."""

    def send(self, notification: Notification) -> None:
        if notification.type == "email":
            logger.info("Sending confirmation email to %s", notification.recipient)
        else:
            logger.info("Sending SMS to %s", notification.recipient)


def plan_notifications(user: User, total: float) -> List[Notification]:
    notifications: List[Notification] = []
    if user.email:
        notifications.append(Notification(type="email", recipient=user.email))
    if user.phone and total > SMS_THRESHOLD:
        notifications.append(Notification(type="sms", recipient=user.phone))
    return notifications


def dispatch_notifications(notifications: Iterable[Notification], transport: Optional[NotificationTransport]) -> int:
    """Hand intents to ``transport``. Returns how many were accepted.

    A failing send is logged and skipped; it never changes the order outcome.
    """
    if transport is None:
        return 0
    delivered = 0
    for notification in notifications:
        try:
            transport.send(notification)
        except Exception as exc:
            logger.warning("Failed to send %s notification to %s: %s", notification.type, notification.recipient, exc)
            continue
        delivered += 1
    return delivered
