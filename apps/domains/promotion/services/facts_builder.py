# PATH: apps/domains/promotion/services/facts_builder.py
"""
StudentPromotionFacts 생성 (live, 캐시 미사용).

성적(transcript) + 학점 원장 + 수강 시도 통계 + 반 등록 이력 + 입학 정보를 합쳐
(학생, 학년도) 1건의 지표를 만든다. 하위 집계는 데이터가 없으면 0/빈 dict 를 돌려주고,
학생 자체가 없을 때만 NotFoundError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.api.common.exceptions import NotFoundError
from apps.domains.credits.models import StudentCreditLedger
from apps.domains.credits.services.ledger import default_required_credits
from apps.domains.promotion.facts import StudentPromotionFacts
from apps.domains.promotion.services.enrollment_history import (
    read_course_enrollment_stats,
    read_enrollment_history,
)
from apps.domains.promotion.services.transcript_aggregator import (
    build_transcript,
    passing_grade,
)
from apps.domains.students.models import Student

logger = logging.getLogger(__name__)


ON_TRACK_COMPLETION_RATE = 0.75


@dataclass(frozen=True)
class CreditSummary:
    credits_earned: int = 0
    credits_earned_this_year: int = 0
    credits_in_progress: int = 0
    credits_attempted: int = 0
    required_credits: int = 0
    credit_completion_rate: float = 0.0
    credit_success_rate: float = 0.0


def read_credit_summary(student_id: int, academic_year_id: int) -> CreditSummary:
    ledgers = list(
        StudentCreditLedger.objects
        .filter(student_id=student_id)
        .order_by("id")
    )
    current = next((l for l in ledgers if l.academic_year_id == academic_year_id), None)

    credits_earned = sum(l.credits_earned for l in ledgers)
    credits_in_progress = sum(l.credits_in_progress for l in ledgers)

    earned_this_year = current.credits_earned if current else 0
    attempted = (current.credits_earned + current.credits_in_progress) if current else 0

    if current is not None:
        required = current.required_credits
    elif ledgers:
        required = ledgers[0].required_credits
    else:
        required = default_required_credits()

    return CreditSummary(
        credits_earned=credits_earned,
        credits_earned_this_year=earned_this_year,
        credits_in_progress=credits_in_progress,
        credits_attempted=attempted,
        required_credits=required,
        credit_completion_rate=min(1.0, credits_earned / required) if required > 0 else 0.0,
        credit_success_rate=earned_this_year / attempted if attempted > 0 else 0.0,
    )


def compute_performance_index(
    overall_average: float,
    credit_completion_rate: float,
    success_rate: float,
) -> float:
    # 0~20 평균 가정. 별도 clamp 없음.
    return (overall_average / 20) * 50 + credit_completion_rate * 30 + success_rate * 20


def compute_student_facts(student_id: int, academic_year_id: int) -> StudentPromotionFacts:
    student = (
        Student.objects
        .select_related("school_class", "school_class__program")
        .filter(id=student_id)
        .first()
    )
    if not student:
        raise NotFoundError(f"Student not found (id={student_id})")

    transcript = build_transcript(student.id)
    credits = read_credit_summary(student.id, academic_year_id)
    stats = read_course_enrollment_stats(student.id, academic_year_id)
    history = read_enrollment_history(student.id)

    school_class = student.school_class
    projected = credits.credits_earned + credits.credits_in_progress

    facts = StudentPromotionFacts(
        student_id=student.id,
        registration_number=student.registration_number,
        class_id=school_class.id,
        class_name=school_class.name,
        program_id=school_class.program_id,
        program_code=school_class.program.code,
        academic_year_id=academic_year_id,

        overall_average=transcript.overall_average,
        overall_average_unweighted=transcript.overall_average_unweighted,
        average_by_teaching_unit=transcript.average_by_teaching_unit,
        average_by_course=transcript.average_by_course,

        lowest_score=transcript.lowest_score,
        highest_score=transcript.highest_score,
        lowest_unit_average=transcript.lowest_unit_average,
        scores_above10=transcript.scores_above10,
        scores_below10=transcript.scores_below10,
        scores_below8=transcript.scores_below8,

        failed_courses_count=transcript.failed_courses_count,
        failed_teaching_units_count=transcript.failed_teaching_units_count,
        compensable_failures=transcript.compensable_failures,
        eliminatory_failures=transcript.eliminatory_failures,
        validated_courses_count=transcript.validated_courses_count,
        validated_units_count=transcript.validated_units_count,
        success_rate=transcript.success_rate,
        unit_validation_rate=transcript.unit_validation_rate,

        credits_earned=credits.credits_earned,
        credits_earned_this_year=credits.credits_earned_this_year,
        credits_in_progress=credits.credits_in_progress,
        credits_attempted=credits.credits_attempted,
        required_credits=credits.required_credits,
        credit_deficit=max(0, credits.required_credits - credits.credits_earned),
        credit_completion_rate=credits.credit_completion_rate,
        credit_success_rate=credits.credit_success_rate,

        courses_with_multiple_attempts=stats.courses_with_multiple_attempts,
        max_attempt_count=stats.max_attempt_count,
        total_attempts=stats.total_attempts,
        active_courses=stats.active_courses,
        completed_courses=stats.completed_courses,
        withdrawn_courses=stats.withdrawn_courses,
        failed_course_attempts=stats.failed_course_attempts,
        first_attempt_success_rate=stats.first_attempt_success_rate,
        retake_success_rate=stats.retake_success_rate,

        enrollment_status=history.current_status,
        previous_enrollments_count=history.previous_enrollments_count,
        completed_years=history.completed_years,
        active_years_count=history.active_years_count,

        performance_index=compute_performance_index(
            transcript.overall_average,
            credits.credit_completion_rate,
            transcript.success_rate,
        ),
        is_on_track=(
            credits.credit_completion_rate >= ON_TRACK_COMPLETION_RATE
            and transcript.overall_average >= passing_grade()
        ),
        progression_rate=(
            credits.credits_earned / history.active_years_count
            if history.active_years_count > 0 else 0.0
        ),
        projected_credits_end_of_year=projected,
        can_reach_required_credits=projected >= credits.required_credits,

        admission_type=student.admission_type,
        is_transfer_student=student.admission_type == Student.ADMISSION_TRANSFER,
        is_direct_admission=student.admission_type == Student.ADMISSION_DIRECT,
        has_academic_history=(
            history.previous_enrollments_count > 0 or student.transfer_credits > 0
        ),
        transfer_credits=student.transfer_credits,
        transfer_institution=student.transfer_institution,
        transfer_level=student.transfer_level,
    )

    logger.debug(
        "[facts_builder] student_id=%s academic_year_id=%s courses=%s avg=%.2f credits=%s/%s",
        student.id,
        academic_year_id,
        transcript.course_count,
        facts.overall_average,
        facts.credits_earned,
        facts.required_credits,
    )
    return facts
