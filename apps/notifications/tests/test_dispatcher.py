"""Tests for notification recording and push delivery."""

from __future__ import annotations

from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import Notification
from apps.notifications.services import NotificationDispatcher, PushGateway, deliver_to_devices
from apps.notifications.tasks import deliver_push
from apps.users.models import DeviceToken
from shared.domain.exceptions import NotificationDeliveryError

User = get_user_model()


def fake_session(status_code=200, exc=None):
    session = mock.Mock(spec=requests.Session)
    if exc is not None:
        session.post.side_effect = exc
    else:
        session.post.return_value = mock.Mock(status_code=status_code, text="nope")
    return session


class PushGatewayTests(TestCase):
    def gateway(self, session):
        return PushGateway(url="https://push.example.com/send", server_key="secret", session=session)

    def test_unconfigured_gateway_skips(self) -> None:
        session = fake_session()
        gateway = PushGateway(url="", session=session)

        self.assertEqual(gateway.send(["tok"], "Hi", "There"), 0)
        session.post.assert_not_called()

    def test_successful_send_addresses_every_token(self) -> None:
        session = fake_session(200)

        sent = self.gateway(session).send(["a", "b"], "Booking Confirmed! 🎉", "See you", {"k": "v"})

        self.assertEqual(sent, 2)
        _, kwargs = session.post.call_args
        self.assertEqual(kwargs["json"]["registration_ids"], ["a", "b"])
        self.assertEqual(kwargs["json"]["notification"]["title"], "Booking Confirmed! 🎉")
        self.assertEqual(kwargs["headers"]["Authorization"], "key=secret")

    def test_server_errors_and_timeouts_are_transient(self) -> None:
        for session in (fake_session(503), fake_session(exc=requests.Timeout("slow"))):
            with self.assertRaises(NotificationDeliveryError) as ctx:
                self.gateway(session).send(["a"], "t", "b")
            self.assertTrue(ctx.exception.transient)

    def test_client_errors_are_permanent(self) -> None:
        with self.assertRaises(NotificationDeliveryError) as ctx:
            self.gateway(fake_session(401)).send(["a"], "t", "b")

        self.assertFalse(ctx.exception.transient)


class DispatcherTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(username="asha", password="GuestPass123")

    def test_notify_records_and_schedules_push(self) -> None:
        with mock.patch("apps.notifications.tasks.deliver_push.delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                notification = NotificationDispatcher().notify(self.user.id, "Hello", "World")

        self.assertEqual(notification.type, Notification.Type.BOOKING)
        self.assertTrue(Notification.objects.filter(user=self.user, title="Hello").exists())
        delay.assert_called_once_with(notification.id)

    def test_notify_without_recipient_does_nothing(self) -> None:
        self.assertIsNone(NotificationDispatcher().notify(None, "Hello", "World"))
        self.assertFalse(Notification.objects.exists())

    def test_store_failure_never_reaches_the_caller(self) -> None:
        with mock.patch.object(Notification.objects, "create", side_effect=DatabaseError("down")):
            with self.assertLogs("apps.notifications.services", level="ERROR"):
                result = NotificationDispatcher().notify(self.user.id, "Hello", "World")

        self.assertIsNone(result)

    def test_broker_failure_is_logged(self) -> None:
        with mock.patch(
            "apps.notifications.tasks.deliver_push.delay", side_effect=ConnectionError("no broker")
        ):
            with self.assertLogs("apps.notifications.services", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    notification = NotificationDispatcher().notify(self.user.id, "Hello", "World")

        self.assertIsNotNone(notification)

    def test_deliver_to_devices_uses_active_tokens(self) -> None:
        DeviceToken.objects.create(user=self.user, token="active-token")
        DeviceToken.objects.create(user=self.user, token="stale-token", is_active=False)
        notification = Notification.objects.create(user=self.user, title="t", message="m")
        gateway = mock.Mock(spec=PushGateway)
        gateway.send.return_value = 1

        self.assertEqual(deliver_to_devices(notification, gateway), 1)
        args, kwargs = gateway.send.call_args
        self.assertEqual(args[0], ["active-token"])

    def test_task_drops_permanent_failures(self) -> None:
        notification = Notification.objects.create(user=self.user, title="t", message="m")
        with mock.patch(
            "apps.notifications.tasks.deliver_to_devices",
            side_effect=NotificationDeliveryError("rejected"),
        ):
            result = deliver_push.apply(args=[notification.id]).get()

        self.assertEqual(result, {"sent": 0})
        self.assertTrue(Notification.objects.filter(pk=notification.pk).exists())

    def test_task_for_missing_notification(self) -> None:
        self.assertEqual(deliver_push.apply(args=[987654]).get(), {"sent": 0})


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(username="asha", password="GuestPass123")
        self.other = User.objects.create_user(username="ravi", password="GuestPass123")
        self.mine = Notification.objects.create(user=self.user, title="Mine", message="m")
        Notification.objects.create(user=self.other, title="Theirs", message="m")
        self.client.force_authenticate(self.user)

    def test_lists_only_own_notifications(self) -> None:
        response = self.client.get(reverse("notification-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["title"] for row in response.data], ["Mine"])

    def test_mark_read(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.mine.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.mine.refresh_from_db()
        self.assertTrue(self.mine.is_read)
        unread = self.client.get(reverse("notification-list"), {"unread": "true"})
        self.assertEqual(unread.data, [])
