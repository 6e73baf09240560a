# PATH: apps/api/common/exception_handler.py
from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.common.exceptions import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    - DomainError → {"detail", "code"} + http_status
    - 나머지는 DRF 기본 처리. DRF가 처리하지 못하는 예외는 None 반환 → 미들웨어(500)로 전파.
    """
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "[domain_error] view=%s code=%s status=%s message=%s",
            type(view).__name__ if view is not None else None,
            exc.code,
            exc.http_status,
            exc.message,
        )
        return Response({"detail": exc.message, "code": exc.code}, status=exc.http_status)

    return drf_exception_handler(exc, context)
