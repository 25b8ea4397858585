"""User-side records read by the booking core."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class DeviceToken(models.Model):
    """Push-delivery token registered by one of the user's devices."""

    class Platform(models.TextChoices):
        WEB = "web", _("Web")
        ANDROID = "android", _("Android")
        IOS = "ios", _("iOS")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="device_tokens",
    )
    token = models.CharField(max_length=512, unique=True)
    platform = models.CharField(max_length=16, choices=Platform.choices, default=Platform.WEB)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Device token")
        verbose_name_plural = _("Device tokens")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.platform} token for user {self.user_id}"

    @classmethod
    def tokens_for(cls, user_id: int) -> list[str]:
        return list(
            cls.objects.filter(user_id=user_id, is_active=True).values_list("token", flat=True)
        )
