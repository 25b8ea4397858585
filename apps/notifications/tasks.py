"""Celery tasks for notification delivery."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from shared.domain.exceptions import NotificationDeliveryError

from .models import Notification
from .services import deliver_to_devices

logger = logging.getLogger(__name__)

MAX_PUSH_RETRIES = 3


@shared_task(bind=True, name="notifications.deliver_push", max_retries=MAX_PUSH_RETRIES)
def deliver_push(self, notification_id: int) -> dict[str, int]:
    """
    Push a stored notification to the recipient's devices.

    Transient gateway failures are retried with exponential backoff; any
    other failure is logged and dropped. The notification row stays either way.

    Returns:
        dict: {"sent": number of device tokens addressed}
    """
    try:
        notification = Notification.objects.get(pk=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} not found, nothing to deliver")
        return {"sent": 0}

    try:
        sent = deliver_to_devices(notification)
    except NotificationDeliveryError as exc:
        if exc.transient and self.request.retries < self.max_retries:
            logger.warning(
                f"Push for notification {notification_id} failed ({exc.message}), "
                f"retry {self.request.retries + 1}/{self.max_retries}"
            )
            raise self.retry(exc=exc, countdown=30 * 2 ** self.request.retries)
        logger.error(f"Push for notification {notification_id} dropped: {exc.message}")
        return {"sent": 0}

    return {"sent": sent}
