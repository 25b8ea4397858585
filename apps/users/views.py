"""User API views."""

from __future__ import annotations

from rest_framework import mixins, permissions, viewsets  # type: ignore

from .models import DeviceToken
from .serializers import DeviceTokenSerializer


class DeviceTokenViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Register, list and revoke push tokens of the current user."""

    serializer_class = DeviceTokenSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return DeviceToken.objects.filter(user=self.request.user)
