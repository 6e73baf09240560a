import pytest

from apps.api.common.exceptions import ImmutableRecordError, NotFoundError, ValidationFailure
from apps.domains.credits.models import StudentCreditLedger
from apps.domains.enrollment import services as enrollment_services
from apps.domains.enrollment.models import CourseEnrollment, Enrollment
from apps.domains.promotion.models import PromotionExecution, PromotionExecutionResult
from apps.domains.promotion.services import promotion_executor, rule_service, summary_cache
from apps.domains.promotion.services.rule_evaluator import SUMMARY_MISSING_REASON
from apps.domains.students.models import Student

pytestmark = pytest.mark.django_db


@pytest.fixture
def rule(passing_ruleset):
    return rule_service.create_rule({"name": "Standard", "ruleset": passing_ruleset})


def _apply(rule, source, target, year, student_ids, user):
    return promotion_executor.apply_promotion(
        source_class_id=source.id,
        target_class_id=target.id,
        rule_id=rule.id,
        academic_year_id=year.id,
        student_ids=student_ids,
        executed_by=user,
    )


def test_promotes_selected_students_only(
    rule, student, make_student, school_class, target_class, year, next_year, admin_user
):
    stay = make_student("Stay")
    enrollment_services.create_enrollment(
        student_id=student.id, class_id=school_class.id, academic_year_id=year.id
    )
    summary_cache.refresh_class_summaries(school_class.id, year.id)

    execution = _apply(rule, school_class, target_class, year, [student.id], admin_user)

    student.refresh_from_db()
    stay.refresh_from_db()
    assert student.school_class_id == target_class.id
    assert stay.school_class_id == school_class.id

    assert execution.students_evaluated == 1
    assert execution.students_promoted == 1
    assert execution.metadata == {
        "ruleName": "Standard",
        "sourceClassName": "L1 A",
        "targetClassName": "L2 A",
    }

    enrollments = list(Enrollment.objects.filter(student=student).order_by("id"))
    assert [e.status for e in enrollments] == [Enrollment.STATUS_COMPLETED, Enrollment.STATUS_ACTIVE]
    assert enrollments[0].exited_at is not None
    assert enrollments[1].school_class_id == target_class.id
    assert enrollments[1].academic_year_id == next_year.id

    result = PromotionExecutionResult.objects.get(execution=execution)
    assert result.student_id == student.id
    assert result.was_promoted is True
    assert result.evaluation_data["studentId"] == student.id


def test_promotion_is_not_gated_by_eligibility(rule, student, school_class, target_class, year, admin_user):
    execution = _apply(rule, school_class, target_class, year, [student.id], admin_user)

    result = execution.results.get()
    assert result.was_promoted is True
    assert result.evaluation_data is None
    assert result.reasons == [SUMMARY_MISSING_REASON]


def test_open_course_enrollments_are_withdrawn(rule, student, class_course, school_class, target_class, year, admin_user):
    enrollment_services.create_course_enrollment(
        student_id=student.id, class_course_id=class_course.id, status="active"
    )

    _apply(rule, school_class, target_class, year, [student.id], admin_user)

    record = CourseEnrollment.objects.get(student=student)
    assert record.status == CourseEnrollment.STATUS_WITHDRAWN
    ledger = StudentCreditLedger.objects.get(student=student, academic_year=year)
    assert ledger.credits_in_progress == 0


def test_student_failures_are_recorded_not_raised(
    rule, student, make_student, school_class, target_class, year, admin_user
):
    outsider = make_student("Outsider", school_class=target_class)

    execution = _apply(
        rule, school_class, target_class, year, [student.id, outsider.id, 987654], admin_user
    )

    assert execution.students_evaluated == 3
    assert execution.students_promoted == 1
    results = {r.requested_student_id: r for r in execution.results.all()}
    assert results[student.id].was_promoted is True
    assert results[outsider.id].was_promoted is False
    assert "already in target class" in results[outsider.id].reasons[0]
    assert results[987654].student_id is None
    assert "not found" in results[987654].reasons[0]


def test_rerun_records_failures(rule, student, school_class, target_class, year, admin_user):
    _apply(rule, school_class, target_class, year, [student.id], admin_user)

    second = _apply(rule, school_class, target_class, year, [student.id], admin_user)

    assert second.students_promoted == 0
    assert second.results.get().was_promoted is False
    assert Enrollment.objects.filter(student=student, school_class=target_class).count() == 1
    assert PromotionExecution.objects.count() == 2


def test_student_in_another_class_is_not_moved(rule, make_student, school_class, target_class, program, year, admin_user):
    from apps.domains.academics.models import SchoolClass

    other = SchoolClass.objects.create(program=program, academic_year=year, code="L1B", name="L1 B")
    elsewhere = make_student("Elsewhere", school_class=other)

    execution = _apply(rule, school_class, target_class, year, [elsewhere.id], admin_user)

    elsewhere.refresh_from_db()
    assert elsewhere.school_class_id == other.id
    assert "not in source class" in execution.results.get().reasons[0]


@pytest.mark.parametrize("student_ids", [[], None])
def test_empty_selection_rejected(rule, school_class, target_class, year, admin_user, student_ids):
    with pytest.raises(ValidationFailure):
        _apply(rule, school_class, target_class, year, student_ids, admin_user)
    assert PromotionExecution.objects.count() == 0


def test_same_source_and_target_rejected(rule, student, school_class, year, admin_user):
    with pytest.raises(ValidationFailure):
        _apply(rule, school_class, school_class, year, [student.id], admin_user)


def test_unknown_rule_rejected_before_any_change(student, school_class, target_class, year, admin_user):
    with pytest.raises(NotFoundError):
        promotion_executor.apply_promotion(
            source_class_id=school_class.id,
            target_class_id=target_class.id,
            rule_id=424242,
            academic_year_id=year.id,
            student_ids=[student.id],
            executed_by=admin_user,
        )
    assert Student.objects.get(id=student.id).school_class_id == school_class.id


def test_execution_history_is_append_only(rule, student, school_class, target_class, year, admin_user):
    execution = _apply(rule, school_class, target_class, year, [student.id], admin_user)
    result = execution.results.get()

    execution.students_promoted = 0
    with pytest.raises(ImmutableRecordError):
        execution.save()
    with pytest.raises(ImmutableRecordError):
        execution.delete()
    with pytest.raises(ImmutableRecordError):
        result.delete()


def test_rule_is_locked_after_execution(rule, student, school_class, target_class, year, admin_user, passing_ruleset):
    from apps.api.common.exceptions import ConflictError

    _apply(rule, school_class, target_class, year, [student.id], admin_user)

    with pytest.raises(ConflictError):
        rule_service.update_rule(rule.id, {"ruleset": passing_ruleset})


def test_execution_details(rule, student, school_class, target_class, year, admin_user):
    execution = _apply(rule, school_class, target_class, year, [student.id], admin_user)

    details = promotion_executor.get_execution_details(execution.id)

    assert details["execution"].id == execution.id
    assert [r.requested_student_id for r in details["results"]] == [student.id]
    assert list(promotion_executor.list_executions(rule_id=rule.id)) == [execution]

    with pytest.raises(NotFoundError):
        promotion_executor.get_execution_details(999999)


def test_unexpected_error_still_records_execution(
    rule, student, make_student, school_class, target_class, year, admin_user, monkeypatch
):
    second = make_student("Bob")
    original = promotion_executor._promote_student

    def flaky(**kwargs):
        if kwargs["student_id"] == second.id:
            raise RuntimeError("boom")
        return original(**kwargs)

    monkeypatch.setattr(promotion_executor, "_promote_student", flaky)

    with pytest.raises(RuntimeError):
        _apply(rule, school_class, target_class, year, [student.id, second.id], admin_user)

    student.refresh_from_db()
    second.refresh_from_db()
    assert student.school_class_id == target_class.id
    assert second.school_class_id == school_class.id

    execution = PromotionExecution.objects.get()
    assert execution.students_evaluated == 2
    assert execution.students_promoted == 1
    assert execution.metadata["aborted"] is True
    results = {r.requested_student_id: r for r in execution.results.all()}
    assert results[student.id].was_promoted is True
    assert results[second.id].was_promoted is False
    assert results[second.id].reasons == ["Internal error: RuntimeError"]
