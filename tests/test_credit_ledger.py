import pytest
from django.contrib import admin
from django.db.models import ProtectedError
from django.test import RequestFactory

from apps.api.common.exceptions import ConflictError, ValidationFailure
from apps.domains.credits.models import StudentCreditLedger
from apps.domains.credits.services import ledger
from apps.domains.enrollment import services as enrollment_services
from apps.domains.enrollment.admin import CourseEnrollmentAdmin
from apps.domains.enrollment.models import CourseEnrollment

pytestmark = pytest.mark.django_db


def _ledger(student, year):
    return StudentCreditLedger.objects.get(student=student, academic_year=year)


def _expected_from_enrollments(student, year):
    in_progress = earned = 0
    for record in CourseEnrollment.objects.filter(student=student, academic_year=year):
        c = ledger.contribution_for_status(record.status, record.credits_attempted)
        in_progress += c.in_progress
        earned += c.earned
    return in_progress, earned


def test_contribution_for_status():
    assert ledger.contribution_for_status("planned", 6) == ledger.Contribution(6, 0)
    assert ledger.contribution_for_status("active", 6) == ledger.Contribution(6, 0)
    assert ledger.contribution_for_status("completed", 6) == ledger.Contribution(0, 6)
    assert ledger.contribution_for_status("failed", 6) == ledger.Contribution(0, 0)
    assert ledger.contribution_for_status("withdrawn", 6) == ledger.Contribution(0, 0)


def test_ensure_ledger_creates_once_with_default_required(student, year):
    first = ledger.ensure_ledger(student.id, year.id)
    second = ledger.ensure_ledger(student.id, year.id, required_credits=90)

    assert first.id == second.id
    assert second.required_credits == 60
    assert StudentCreditLedger.objects.count() == 1


def test_apply_delta_zero_creates_row_without_change(student, year):
    row = ledger.apply_delta(student.id, year.id, 0, 0)

    assert row.credits_in_progress == 0
    assert row.credits_earned == 0


def test_create_course_enrollment_adds_in_progress(student, year, class_course):
    record = enrollment_services.create_course_enrollment(
        student_id=student.id,
        class_course_id=class_course.id,
        status="active",
    )

    assert record.credits_attempted == 6
    assert record.academic_year_id == year.id
    assert record.source_class_id == class_course.school_class_id
    row = _ledger(student, year)
    assert (row.credits_in_progress, row.credits_earned) == (6, 0)


def test_status_transitions_keep_ledger_consistent(student, year, class_course, make_course):
    other = make_course("EC2", credits=4)
    a = enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="planned"
    )
    b = enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=other.id, status="active"
    )

    for record_id, status in [
        (a.id, "active"),
        (a.id, "completed"),
        (b.id, "failed"),
        (a.id, "completed"),
        (b.id, "active"),
        (b.id, "withdrawn"),
    ]:
        enrollment_services.update_course_enrollment_status(record_id, status)
        row = _ledger(student, year)
        assert (row.credits_in_progress, row.credits_earned) == _expected_from_enrollments(student, year)

    row = _ledger(student, year)
    assert (row.credits_in_progress, row.credits_earned) == (0, 6)


def test_completed_to_failed_removes_earned(student, year, class_course):
    record = enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="completed"
    )
    assert _ledger(student, year).credits_earned == 6

    record = enrollment_services.update_course_enrollment_status(record.id, "failed")

    assert record.credits_earned == 0
    row = _ledger(student, year)
    assert (row.credits_in_progress, row.credits_earned) == (0, 0)


def test_unknown_status_rejected(student, class_course):
    with pytest.raises(ValidationFailure):
        enrollment_services.create_course_enrollment(
            student_id=student.id, class_course_id=class_course.id, status="graduated"
        )


def test_duplicate_attempt_conflicts(student, class_course):
    enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id
    )
    with pytest.raises(ConflictError):
        enrollment_services.create_course_enrollment(
            student_id=student.id, class_course_id=class_course.id
        )

    retake = enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, attempt=2
    )
    assert retake.attempt == 2


def test_other_program_course_rejected(student, school_class):
    from apps.domains.academics.models import ClassCourse, Course, Program, TeachingUnit

    other = Program.objects.create(code="MATH", name="Maths")
    unit = TeachingUnit.objects.create(program=other, code="UE9", name="UE9", credits=3)
    course = Course.objects.create(program=other, teaching_unit=unit, code="M1", name="M1", credits=3)
    cc = ClassCourse.objects.create(school_class=school_class, course=course, code="L1A-M1")

    with pytest.raises(ValidationFailure):
        enrollment_services.create_course_enrollment(student_id=student.id, class_course_id=cc.id)


def test_bulk_enroll_skips_existing(student, year, class_course, make_course):
    other = make_course("EC2", credits=4)
    enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="active"
    )

    result = enrollment_services.bulk_enroll(
        student_id=student.id,
        class_course_ids=[class_course.id, other.id, other.id],
    )

    assert [r.class_course_id for r in result["created"]] == [other.id]
    assert result["skipped"] == [{"class_course_id": class_course.id, "reason": "conflict"}]
    assert _ledger(student, year).credits_in_progress == 10


def test_summarize_student_sums_years(student, year, next_year):
    ledger.apply_delta(student.id, year.id, 0, 30)
    ledger.apply_delta(student.id, next_year.id, 12, 20, required_credits=120)

    summary = ledger.summarize_student(student.id)

    assert summary["credits_earned"] == 50
    assert summary["credits_in_progress"] == 12
    assert summary["required_credits"] == 120
    assert [l.academic_year_id for l in summary["ledgers"]] == [year.id, next_year.id]


def test_course_enrollment_references_cannot_be_deleted(student, year, class_course, course):
    enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="active"
    )

    with pytest.raises(ProtectedError):
        class_course.delete()
    with pytest.raises(ProtectedError):
        course.delete()

    assert CourseEnrollment.objects.filter(student=student).count() == 1
    assert (_ledger(student, year).credits_in_progress, _ledger(student, year).credits_earned) == (6, 0)
    assert _expected_from_enrollments(student, year) == (6, 0)


def test_admin_cannot_add_or_delete_course_enrollments(student, class_course, admin_user):
    record = enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="active"
    )
    request = RequestFactory().get("/admin/")
    request.user = admin_user
    model_admin = CourseEnrollmentAdmin(CourseEnrollment, admin.site)

    assert model_admin.has_add_permission(request) is False
    assert model_admin.has_delete_permission(request) is False
    assert model_admin.has_delete_permission(request, record) is False
