# PATH: apps/domains/enrollment/services.py
# 반 등록(Enrollment) / 과목 수강(CourseEnrollment) 상태 전이. API 뷰와 승급 실행에서 공통 사용

from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from apps.api.common.exceptions import ConflictError, NotFoundError, ValidationFailure
from apps.domains.academics.models import AcademicYear, ClassCourse, SchoolClass
from apps.domains.credits.services import ledger as credit_ledger
from apps.domains.students.models import Student

from .models import CourseEnrollment, Enrollment

logger = logging.getLogger(__name__)


COURSE_STATUSES = {choice for choice, _ in CourseEnrollment.STATUS_CHOICES}
ENROLLMENT_STATUSES = {choice for choice, _ in Enrollment.STATUS_CHOICES}


def _get_student(student_id: int) -> Student:
    student = (
        Student.objects
        .select_related("school_class")
        .filter(id=student_id)
        .first()
    )
    if not student:
        raise NotFoundError(f"Student not found (id={student_id})")
    return student


def _check_course_status(status: str) -> None:
    if status not in COURSE_STATUSES:
        raise ValidationFailure(f"Unknown course enrollment status: {status!r}")


def _resolve_credits_earned(status: str, credits_attempted: int) -> int:
    return credits_attempted if status == CourseEnrollment.STATUS_COMPLETED else 0


def _resolve_completed_at(status: str):
    return timezone.now() if status in CourseEnrollment.FINAL_STATUSES else None


# ========================================================
# Enrollment (반 등록)
# ========================================================

def create_enrollment(
    *,
    student_id: int,
    class_id: int,
    academic_year_id: int,
    status: str = Enrollment.STATUS_ACTIVE,
) -> Enrollment:
    if status not in ENROLLMENT_STATUSES:
        raise ValidationFailure(f"Unknown enrollment status: {status!r}")

    _get_student(student_id)
    if not SchoolClass.objects.filter(id=class_id).exists():
        raise NotFoundError(f"Class not found (id={class_id})")
    if not AcademicYear.objects.filter(id=academic_year_id).exists():
        raise NotFoundError(f"Academic year not found (id={academic_year_id})")

    enrollment = Enrollment.objects.create(
        student_id=student_id,
        school_class_id=class_id,
        academic_year_id=academic_year_id,
        status=status,
    )
    logger.info(
        "[enrollment] created id=%s student_id=%s class_id=%s status=%s",
        enrollment.id,
        student_id,
        class_id,
        status,
    )
    return enrollment


def update_enrollment_status(enrollment_id: int, status: str) -> Enrollment:
    if status not in ENROLLMENT_STATUSES:
        raise ValidationFailure(f"Unknown enrollment status: {status!r}")

    enrollment = Enrollment.objects.filter(id=enrollment_id).first()
    if not enrollment:
        raise NotFoundError(f"Enrollment not found (id={enrollment_id})")

    enrollment.status = status
    enrollment.exited_at = timezone.now()
    enrollment.save(update_fields=["status", "exited_at", "updated_at"])
    return enrollment


def close_active_enrollment(
    student_id: int,
    status: str = Enrollment.STATUS_COMPLETED,
) -> Optional[Enrollment]:
    """
    학생의 진행 중(active / pending) 반 등록을 닫는다.
    여러 개면 가장 최근 것만. 없으면 None.
    """
    enrollment = (
        Enrollment.objects
        .filter(
            student_id=student_id,
            status__in=[Enrollment.STATUS_ACTIVE, Enrollment.STATUS_PENDING],
        )
        .order_by("-enrolled_at", "-id")
        .first()
    )
    if not enrollment:
        return None

    enrollment.status = status
    enrollment.exited_at = timezone.now()
    enrollment.save(update_fields=["status", "exited_at", "updated_at"])
    return enrollment


# ========================================================
# CourseEnrollment (과목 수강) + 학점 원장
# ========================================================

@transaction.atomic
def create_course_enrollment(
    *,
    student_id: int,
    class_course_id: int,
    status: str = CourseEnrollment.STATUS_PLANNED,
    attempt: int = 1,
) -> CourseEnrollment:
    _check_course_status(status)
    if attempt < 1:
        raise ValidationFailure("attempt must be >= 1")

    student = _get_student(student_id)
    class_course = (
        ClassCourse.objects
        .select_related("school_class", "course")
        .filter(id=class_course_id)
        .first()
    )
    if not class_course:
        raise NotFoundError(f"Class course not found (id={class_course_id})")

    if student.school_class.program_id != class_course.course.program_id:
        raise ValidationFailure("Student cannot enroll in a course from another program")

    academic_year_id = class_course.school_class.academic_year_id
    if CourseEnrollment.objects.filter(
        student_id=student.id,
        course_id=class_course.course_id,
        academic_year_id=academic_year_id,
        attempt=attempt,
    ).exists():
        raise ConflictError("Enrollment attempt already exists for this student/course/year")

    credits = class_course.course.credits
    record = CourseEnrollment.objects.create(
        student_id=student.id,
        class_course_id=class_course.id,
        course_id=class_course.course_id,
        source_class_id=class_course.school_class_id,
        academic_year_id=academic_year_id,
        status=status,
        attempt=attempt,
        credits_attempted=credits,
        credits_earned=_resolve_credits_earned(status, credits),
        started_at=timezone.now() if status == CourseEnrollment.STATUS_ACTIVE else None,
        completed_at=_resolve_completed_at(status),
    )

    contribution = credit_ledger.contribution_for_status(status, credits)
    credit_ledger.apply_delta(
        record.student_id,
        record.academic_year_id,
        contribution.in_progress,
        contribution.earned,
    )
    return record


def bulk_enroll(
    *,
    student_id: int,
    class_course_ids: Iterable[int],
    status: str = CourseEnrollment.STATUS_ACTIVE,
    attempt: int = 1,
) -> dict:
    """
    여러 과목 일괄 수강 등록. 같은 시도가 이미 있는 과목은 건너뛴다(skipped).
    그 외 오류는 그대로 올린다.
    """
    unique_ids = list(dict.fromkeys(class_course_ids))
    if not unique_ids:
        raise ValidationFailure("No class courses provided")

    created: list[CourseEnrollment] = []
    skipped: list[dict] = []
    for class_course_id in unique_ids:
        try:
            created.append(
                create_course_enrollment(
                    student_id=student_id,
                    class_course_id=class_course_id,
                    status=status,
                    attempt=attempt,
                )
            )
        except ConflictError:
            skipped.append({"class_course_id": class_course_id, "reason": "conflict"})

    logger.info(
        "[course_enrollment] bulk student_id=%s created=%s skipped=%s",
        student_id,
        len(created),
        len(skipped),
    )
    return {"created": created, "skipped": skipped}


@transaction.atomic
def update_course_enrollment_status(enrollment_id: int, status: str) -> CourseEnrollment:
    """
    상태 전이 + 원장에 (new - old) 기여분 반영.
    """
    _check_course_status(status)

    record = (
        CourseEnrollment.objects
        .select_for_update()
        .filter(id=enrollment_id)
        .first()
    )
    if not record:
        raise NotFoundError(f"Course enrollment not found (id={enrollment_id})")

    previous = credit_ledger.contribution_for_status(record.status, record.credits_attempted)
    following = credit_ledger.contribution_for_status(status, record.credits_attempted)

    record.status = status
    record.credits_earned = _resolve_credits_earned(status, record.credits_attempted)
    record.completed_at = _resolve_completed_at(status)
    if status == CourseEnrollment.STATUS_ACTIVE and record.started_at is None:
        record.started_at = timezone.now()
    record.save(
        update_fields=[
            "status",
            "credits_earned",
            "completed_at",
            "started_at",
            "updated_at",
        ]
    )

    delta = following - previous
    credit_ledger.apply_delta(
        record.student_id,
        record.academic_year_id,
        delta.in_progress,
        delta.earned,
    )
    return record


def close_course_enrollments_for_student(
    student_id: int,
    status: str = CourseEnrollment.STATUS_WITHDRAWN,
    *,
    source_class_id: int | None = None,
) -> int:
    """
    planned / active 수강을 모두 status 로 닫는다. 닫은 개수 반환.
    source_class_id 가 있으면 그 반에서 시작한 수강만.
    """
    qs = CourseEnrollment.objects.filter(
        student_id=student_id,
        status__in=CourseEnrollment.OPEN_STATUSES,
    )
    if source_class_id is not None:
        qs = qs.filter(source_class_id=source_class_id)

    ids = list(qs.order_by("id").values_list("id", flat=True))
    for enrollment_id in ids:
        update_course_enrollment_status(enrollment_id, status)
    return len(ids)
