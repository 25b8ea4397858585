"""DRF exception handler translating domain errors into HTTP responses."""

from __future__ import annotations

import logging

from django.db import InterfaceError, OperationalError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    ConcurrentUpdateError,
    DateUnavailable,
    DomainError,
    NotFoundError,
    StoreUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DateUnavailable, status.HTTP_409_CONFLICT),
    (ConcurrentUpdateError, status.HTTP_409_CONFLICT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def domain_exception_handler(exc, context):  # type: ignore
    """Map the domain error taxonomy; defer everything else to DRF."""

    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error(f"Database unavailable while serving request: {exc}")
        exc = StoreUnavailable()

    if isinstance(exc, DomainError):
        http_status = status.HTTP_400_BAD_REQUEST
        for error_type, code in STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                http_status = code
                break
        payload = {"detail": exc.message}
        if isinstance(exc, ValidationError) and exc.errors:
            payload["errors"] = exc.errors
        return Response(payload, status=http_status)

    return drf_exception_handler(exc, context)
