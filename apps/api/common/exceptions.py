# PATH: apps/api/common/exceptions.py
from __future__ import annotations


class DomainError(Exception):
    """
    서비스 계층 도메인 오류 (ops-friendly, 명시적).

    code:
      - not_found
      - validation_failed
      - conflict

    뷰에서는 apps.api.common.exception_handler 가 http_status 로 변환한다.
    배치 작업(평가/승급 실행)에서는 학생 단위로 잡아서 결과 row 로 기록한다.
    """

    default_code = "error"
    default_http_status = 400

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = str(message)
        self.code = str(code or self.default_code)
        self.http_status = int(http_status or self.default_http_status)


class NotFoundError(DomainError):
    default_code = "not_found"
    default_http_status = 404


class ValidationFailure(DomainError):
    default_code = "validation_failed"
    default_http_status = 400


class ConflictError(DomainError):
    default_code = "conflict"
    default_http_status = 409


class ImmutableRecordError(ConflictError):
    default_code = "immutable_record"
