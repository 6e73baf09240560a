# PATH: apps/domains/promotion/services/enrollment_history.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from apps.domains.enrollment.models import CourseEnrollment, Enrollment


@dataclass(frozen=True)
class EnrollmentHistory:
    current_status: str = Enrollment.STATUS_PENDING
    previous_enrollments_count: int = 0
    completed_years: int = 0
    active_years_count: int = 0


@dataclass(frozen=True)
class CourseEnrollmentStats:
    courses_with_multiple_attempts: int = 0
    max_attempt_count: int = 0
    total_attempts: int = 0
    active_courses: int = 0
    completed_courses: int = 0
    withdrawn_courses: int = 0
    failed_course_attempts: int = 0
    first_attempt_success_rate: float = 0.0
    retake_success_rate: float = 0.0


def read_enrollment_history(student_id: int) -> EnrollmentHistory:
    """
    반 등록 이력(enrolled_at 순).
    현재 상태 = 마지막 등록의 상태, 등록이 없으면 pending.
    """
    statuses = list(
        Enrollment.objects
        .filter(student_id=student_id)
        .order_by("enrolled_at", "id")
        .values_list("status", flat=True)
    )
    if not statuses:
        return EnrollmentHistory()

    return EnrollmentHistory(
        current_status=statuses[-1],
        previous_enrollments_count=max(0, len(statuses) - 1),
        completed_years=sum(1 for s in statuses if s == Enrollment.STATUS_COMPLETED),
        active_years_count=sum(
            1 for s in statuses
            if s in (Enrollment.STATUS_ACTIVE, Enrollment.STATUS_PENDING)
        ),
    )


def read_course_enrollment_stats(student_id: int, academic_year_id: int) -> CourseEnrollmentStats:
    rows = list(
        CourseEnrollment.objects
        .filter(student_id=student_id, academic_year_id=academic_year_id)
        .values_list("course_id", "attempt", "status")
    )
    if not rows:
        return CourseEnrollmentStats()

    attempts_per_course = Counter(course_id for course_id, _, _ in rows)
    statuses = Counter(status for _, _, status in rows)

    # 한 번만 수강한 과목 수 대비 1차 시도 이수
    single_attempt_courses = sum(1 for n in attempts_per_course.values() if n == 1)
    first_attempt_successes = sum(
        1 for _, attempt, status in rows
        if attempt == 1 and status == CourseEnrollment.STATUS_COMPLETED
    )

    retakes = [status for _, attempt, status in rows if attempt > 1]
    retake_successes = sum(1 for s in retakes if s == CourseEnrollment.STATUS_COMPLETED)

    return CourseEnrollmentStats(
        courses_with_multiple_attempts=sum(1 for n in attempts_per_course.values() if n > 1),
        max_attempt_count=max(attempts_per_course.values()),
        total_attempts=len(rows),
        active_courses=statuses[CourseEnrollment.STATUS_ACTIVE] + statuses[CourseEnrollment.STATUS_PLANNED],
        completed_courses=statuses[CourseEnrollment.STATUS_COMPLETED],
        withdrawn_courses=statuses[CourseEnrollment.STATUS_WITHDRAWN],
        failed_course_attempts=statuses[CourseEnrollment.STATUS_FAILED],
        first_attempt_success_rate=(
            min(1.0, first_attempt_successes / single_attempt_courses) if single_attempt_courses else 0.0
        ),
        retake_success_rate=retake_successes / len(retakes) if retakes else 0.0,
    )
