# PATH: apps/domains/credits/services/ledger.py
"""
학생 학점 원장(StudentCreditLedger) 서비스.

수강(CourseEnrollment) 상태별 기여분:
  planned / active  → in_progress += credits
  completed         → earned      += credits
  failed / withdrawn→ 기여 없음

상태가 바뀔 때 호출자는 (new - old) 기여분만 apply_delta 로 넘긴다.
카운터는 UPDATE ... SET col = col + delta 한 문장으로만 변경되므로
동시 호출이 있어도 증분이 유실되지 않는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F

from apps.domains.credits.models import StudentCreditLedger

logger = logging.getLogger(__name__)


IN_PROGRESS_STATUSES = ("planned", "active")
EARNED_STATUSES = ("completed",)


def default_required_credits() -> int:
    return int(getattr(settings, "PROMOTION_DEFAULT_REQUIRED_CREDITS", 60))


@dataclass(frozen=True)
class Contribution:
    in_progress: int = 0
    earned: int = 0

    def __sub__(self, other: "Contribution") -> "Contribution":
        return Contribution(
            in_progress=self.in_progress - other.in_progress,
            earned=self.earned - other.earned,
        )


def contribution_for_status(status: str, credits: int) -> Contribution:
    credits = int(credits or 0)
    return Contribution(
        in_progress=credits if status in IN_PROGRESS_STATUSES else 0,
        earned=credits if status in EARNED_STATUSES else 0,
    )


def ensure_ledger(
    student_id: int,
    academic_year_id: int,
    required_credits: int | None = None,
) -> StudentCreditLedger:
    """
    (student, academic_year) row 보장. 이미 있으면 그대로 반환(required_credits 변경 없음).
    """
    if required_credits is None:
        required_credits = default_required_credits()

    try:
        with transaction.atomic():
            ledger, created = StudentCreditLedger.objects.get_or_create(
                student_id=student_id,
                academic_year_id=academic_year_id,
                defaults={"required_credits": required_credits},
            )
    except IntegrityError:
        # 동시 생성 경합: 먼저 만든 쪽 row 사용
        ledger = StudentCreditLedger.objects.get(
            student_id=student_id,
            academic_year_id=academic_year_id,
        )
        created = False

    if created:
        logger.debug(
            "[credit_ledger] created student_id=%s academic_year_id=%s required=%s",
            student_id,
            academic_year_id,
            required_credits,
        )
    return ledger


def apply_delta(
    student_id: int,
    academic_year_id: int,
    in_progress_delta: int,
    earned_delta: int,
    required_credits: int | None = None,
) -> StudentCreditLedger:
    ledger = ensure_ledger(student_id, academic_year_id, required_credits)

    if in_progress_delta == 0 and earned_delta == 0:
        return ledger

    StudentCreditLedger.objects.filter(id=ledger.id).update(
        credits_in_progress=F("credits_in_progress") + int(in_progress_delta),
        credits_earned=F("credits_earned") + int(earned_delta),
    )
    ledger.refresh_from_db()

    logger.debug(
        "[credit_ledger] delta student_id=%s academic_year_id=%s in_progress=%+d earned=%+d",
        student_id,
        academic_year_id,
        in_progress_delta,
        earned_delta,
    )
    return ledger


def list_by_student(student_id: int) -> List[StudentCreditLedger]:
    return list(
        StudentCreditLedger.objects
        .filter(student_id=student_id)
        .select_related("academic_year")
        .order_by("academic_year__start_date", "id")
    )


def summarize_student(student_id: int) -> dict:
    """
    전 학년도 합계.
    required_credits 는 기본값과 각 row 값 중 최댓값.
    """
    ledgers = list_by_student(student_id)

    credits_earned = 0
    credits_in_progress = 0
    required_credits = default_required_credits()
    for ledger in ledgers:
        credits_earned += ledger.credits_earned
        credits_in_progress += ledger.credits_in_progress
        required_credits = max(required_credits, ledger.required_credits)

    return {
        "ledgers": ledgers,
        "credits_earned": credits_earned,
        "credits_in_progress": credits_in_progress,
        "required_credits": required_credits,
    }
