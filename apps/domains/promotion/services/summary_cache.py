# PATH: apps/domains/promotion/services/summary_cache.py
"""
승급 facts 캐시 (StudentPromotionSummary).

- refresh_* 만 쓴다. 성적/수강이 바뀌어도 자동 무효화 없음.
- 같은 (학생, 학년도) 동시 refresh 는 마지막 쓰기가 남는다.
- 반 단위 refresh 가 중간에 실패하면 이미 쓴 row 는 그대로 남는다. 다시 호출하면 된다.
"""

from __future__ import annotations

import logging

from django.utils import timezone

from apps.api.common.exceptions import NotFoundError
from apps.domains.academics.models import AcademicYear, SchoolClass
from apps.domains.promotion.exceptions import PromotionSummaryMissing
from apps.domains.promotion.facts import StudentPromotionFacts
from apps.domains.promotion.models import StudentPromotionSummary
from apps.domains.promotion.services.facts_builder import compute_student_facts
from apps.domains.students.models import Student

logger = logging.getLogger(__name__)


def refresh_student_summary(student_id: int, academic_year_id: int) -> StudentPromotionFacts:
    if not AcademicYear.objects.filter(id=academic_year_id).exists():
        raise NotFoundError(f"Academic year not found (id={academic_year_id})")

    facts = compute_student_facts(student_id, academic_year_id)

    StudentPromotionSummary.objects.update_or_create(
        student_id=student_id,
        academic_year_id=academic_year_id,
        defaults={
            "overall_average": facts.overall_average,
            "credits_earned": facts.credits_earned,
            "credits_in_progress": facts.credits_in_progress,
            "required_credits": facts.required_credits,
            "success_rate": facts.success_rate,
            "eliminatory_failures": facts.eliminatory_failures,
            "performance_index": facts.performance_index,
            "is_on_track": facts.is_on_track,
            "facts": facts.to_facts(),
            "refreshed_at": timezone.now(),
        },
    )
    return facts


def refresh_class_summaries(class_id: int, academic_year_id: int) -> dict:
    if not SchoolClass.objects.filter(id=class_id).exists():
        raise NotFoundError(f"Class not found (id={class_id})")

    student_ids = list(
        Student.objects
        .filter(school_class_id=class_id)
        .order_by("id")
        .values_list("id", flat=True)
    )

    for student_id in student_ids:
        refresh_student_summary(student_id, academic_year_id)

    logger.info(
        "[summary_cache] class refreshed class_id=%s academic_year_id=%s students=%s",
        class_id,
        academic_year_id,
        len(student_ids),
    )
    return {"classId": class_id, "studentCount": len(student_ids)}


def find_student_promotion_facts(student_id: int, academic_year_id: int) -> dict | None:
    """캐시 facts dict. 없으면 None (배치에서 학생 단위 분기용)."""
    row = (
        StudentPromotionSummary.objects
        .filter(student_id=student_id, academic_year_id=academic_year_id)
        .only("facts")
        .first()
    )
    return dict(row.facts) if row else None


def get_student_promotion_facts(student_id: int, academic_year_id: int) -> StudentPromotionFacts:
    data = find_student_promotion_facts(student_id, academic_year_id)
    if data is None:
        raise PromotionSummaryMissing(student_id, academic_year_id)
    return StudentPromotionFacts.from_dict(data)
