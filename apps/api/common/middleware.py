# PATH: apps/api/common/middleware.py
# DRF 밖(일반 Django 뷰, admin)에서 올라온 예외를 JSON 으로 변환.
# DRF 뷰의 DomainError 는 exception_handler 에서 이미 처리된다.
# process_exception 응답은 CorsMiddleware를 거치지 않으므로 여기서 CORS 헤더를 붙인다.
from __future__ import annotations

import logging

from django.conf import settings
from django.http import JsonResponse

from apps.api.common.exceptions import DomainError

logger = logging.getLogger(__name__)


def _add_cors_headers_to_response(request, response):
    origin = (request.META.get("HTTP_ORIGIN") or "").strip()
    if getattr(settings, "CORS_ALLOW_ALL_ORIGINS", False):
        if origin:
            response["Access-Control-Allow-Origin"] = origin
    else:
        allowed = getattr(settings, "CORS_ALLOWED_ORIGINS", []) or []
        if origin and origin in allowed:
            response["Access-Control-Allow-Origin"] = origin
    if getattr(settings, "CORS_ALLOW_CREDENTIALS", False):
        response["Access-Control-Allow-Credentials"] = "true"
    return response


class UnhandledExceptionMiddleware:
    """
    - DomainError → {"detail", "code"} + http_status (예: admin 에서 감사 이력 수정 시도 → 409)
    - 그 외 → 500 {"detail", "code": "internal"}. 예외 문자열은 DEBUG 에서만 노출.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, DomainError):
            logger.warning(
                "[middleware] domain error path=%s method=%s code=%s message=%s",
                request.path,
                request.method,
                exception.code,
                exception.message,
            )
            resp = JsonResponse(
                {"detail": exception.message, "code": exception.code},
                status=exception.http_status,
            )
            return _add_cors_headers_to_response(request, resp)

        logger.exception(
            "[middleware] unhandled exception path=%s method=%s",
            request.path,
            request.method,
        )
        body = {"detail": "서버 오류가 발생했습니다.", "code": "internal"}
        if settings.DEBUG:
            body["error"] = str(exception)
        return _add_cors_headers_to_response(request, JsonResponse(body, status=500))
