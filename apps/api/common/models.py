# PATH: apps/api/common/models.py
from django.db import models

from apps.api.common.exceptions import ImmutableRecordError


class TimestampModel(models.Model):
    """
    생성 / 수정 시간 자동 기록 추상 모델
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AppendOnlyModel(models.Model):
    """
    감사(audit) 기록용 추상 모델.

    - INSERT만 허용한다. 한 번 저장된 row는 수정/삭제 불가.
    - 이력은 이후 규칙/데이터 변경과 무관하게 "그 시점에 일어난 일" 그대로 남는다.
    """
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(
                message=f"{type(self).__name__}(id={self.pk}) is append-only and cannot be modified.",
            )
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(
            message=f"{type(self).__name__}(id={self.pk}) is append-only and cannot be deleted.",
        )
