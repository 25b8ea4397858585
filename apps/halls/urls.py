"""URL routing for the halls domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import HallViewSet

router = DefaultRouter()
router.register(r"", HallViewSet, basename="hall")

urlpatterns = [
    path("", include(router.urls)),
]
