"""Notification services: durable history plus best-effort push delivery.

``NotificationDispatcher.notify`` is the only entry point the booking
lifecycle uses. It never raises: the notification row is written in its
own savepoint and push delivery is handed to a Celery task once the
surrounding transaction has committed.
"""

from __future__ import annotations

import logging
from typing import Iterable

import requests  # type: ignore
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore

from apps.users.models import DeviceToken
from shared.domain.exceptions import NotificationDeliveryError

from .models import Notification

logger = logging.getLogger(__name__)


class PushGateway:
    """HTTP client for the push provider configured in ``PUSH_GATEWAY_URL``."""

    def __init__(
        self,
        url: str | None = None,
        server_key: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url if url is not None else getattr(settings, "PUSH_GATEWAY_URL", "")
        self.server_key = server_key if server_key is not None else getattr(settings, "PUSH_SERVER_KEY", "")
        self.timeout = timeout or getattr(settings, "PUSH_TIMEOUT_SECONDS", 5)
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    def send(self, tokens: Iterable[str], title: str, body: str, data: dict | None = None) -> int:
        """Push one message to every token; returns how many tokens were addressed."""
        tokens = list(tokens)
        if not tokens:
            return 0
        if not self.is_configured:
            logger.info("Push gateway not configured, skipping delivery")
            return 0

        payload = {
            "registration_ids": tokens,
            "notification": {"title": title, "body": body},
            "data": data or {},
        }
        headers = {"Authorization": f"key={self.server_key}"}
        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise NotificationDeliveryError(f"Push gateway unreachable: {exc}", transient=True) from exc
        except requests.RequestException as exc:
            raise NotificationDeliveryError(f"Push request failed: {exc}") from exc

        if response.status_code >= 500:
            raise NotificationDeliveryError(
                f"Push gateway error {response.status_code}", transient=True
            )
        if response.status_code >= 400:
            raise NotificationDeliveryError(
                f"Push rejected with {response.status_code}: {response.text[:200]}"
            )
        return len(tokens)


def deliver_to_devices(notification: Notification, gateway: PushGateway | None = None) -> int:
    """Send a stored notification to the recipient's active device tokens."""
    tokens = DeviceToken.tokens_for(notification.user_id)
    if not tokens:
        logger.debug(f"User {notification.user_id} has no device tokens")
        return 0
    gateway = gateway or PushGateway()
    return gateway.send(
        tokens,
        notification.title,
        notification.message,
        data={"notification_id": str(notification.id), "type": notification.type},
    )


class NotificationDispatcher:
    """Record a notification and schedule its push delivery. Never fails the caller."""

    def notify(self, user_id, title: str, body: str, type: str = Notification.Type.BOOKING):
        if user_id is None:
            return None
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user_id=user_id,
                    title=title,
                    message=body,
                    type=type,
                )
        except Exception as e:
            logger.error(f"Failed to record notification for user {user_id}: {e}", exc_info=True)
            return None

        logger.info(f"Notification {notification.id} recorded for user {user_id}: {title}")
        transaction.on_commit(lambda: self._enqueue_push(notification.id))
        return notification

    @staticmethod
    def _enqueue_push(notification_id: int) -> None:
        from .tasks import deliver_push

        try:
            deliver_push.delay(notification_id)
        except Exception as e:
            logger.error(f"Could not enqueue push for notification {notification_id}: {e}", exc_info=True)
