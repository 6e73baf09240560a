import pytest

from apps.api.common.exceptions import NotFoundError, ValidationFailure
from apps.domains.credits.services import ledger
from apps.domains.promotion.services import rule_service, summary_cache
from apps.domains.promotion.services.rule_evaluator import (
    SUMMARY_MISSING_REASON,
    evaluate_class_for_promotion,
    evaluate_student_credit_progress,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def rule(passing_ruleset):
    return rule_service.create_rule({"name": "Standard", "ruleset": passing_ruleset})


def test_class_evaluation_splits_students(rule, student, make_student, school_class, year, class_course, grade):
    weak = make_student("Weak")
    grade(student, class_course, 14)
    grade(weak, class_course, 6)
    summary_cache.refresh_class_summaries(school_class.id, year.id)

    evaluation = evaluate_class_for_promotion(rule.id, school_class.id, year.id)

    assert evaluation.total_students == 2
    assert [r.student_id for r in evaluation.eligible] == [student.id]
    assert [r.student_id for r in evaluation.not_eligible] == [weak.id]

    passed = evaluation.eligible[0]
    assert passed.matched_rules == ["promotion-eligible"]
    assert passed.reasons == ["Meets criteria"]
    assert passed.facts["overallAverage"] == pytest.approx(14)

    failed = evaluation.not_eligible[0]
    assert failed.failed_rules == ["promotion-eligible"]
    assert failed.reasons == ["overallAverage (6) is not greaterThanInclusive 10"]


def test_missing_summary_is_not_eligible(rule, student, school_class, year, class_course, grade):
    grade(student, class_course, 18)

    evaluation = evaluate_class_for_promotion(rule.id, school_class.id, year.id)

    assert evaluation.eligible == []
    result = evaluation.not_eligible[0]
    assert result.facts is None
    assert result.reasons == [SUMMARY_MISSING_REASON]


def test_to_dict_shape(rule, student, school_class, year):
    summary_cache.refresh_student_summary(student.id, year.id)

    data = evaluate_class_for_promotion(rule.id, school_class.id, year.id).to_dict()

    assert data["ruleId"] == rule.id
    assert data["sourceClassName"] == "L1 A"
    assert data["totalStudents"] == 1
    assert data["eligibleCount"] + data["notEligibleCount"] == 1
    assert data["notEligible"][0]["student"] == {
        "id": student.id,
        "registrationNumber": "S001",
        "name": "Alice",
    }
    assert "evaluatedAt" in data


def test_empty_class(rule, school_class, year):
    evaluation = evaluate_class_for_promotion(rule.id, school_class.id, year.id)

    assert evaluation.total_students == 0


def test_unknown_rule_or_class(rule, school_class, year):
    with pytest.raises(NotFoundError):
        evaluate_class_for_promotion(999999, school_class.id, year.id)
    with pytest.raises(NotFoundError):
        evaluate_class_for_promotion(rule.id, 999999, year.id)


def test_inactive_rule_rejected(rule, school_class, year):
    rule_service.update_rule(rule.id, {"is_active": False})

    with pytest.raises(ValidationFailure):
        evaluate_class_for_promotion(rule.id, school_class.id, year.id)


def test_rule_scoped_to_other_class_rejected(passing_ruleset, school_class, target_class, year):
    scoped = rule_service.create_rule(
        {"name": "L2 only", "ruleset": passing_ruleset, "source_class_id": target_class.id}
    )

    with pytest.raises(ValidationFailure):
        evaluate_class_for_promotion(scoped.id, school_class.id, year.id)


def test_rule_scoped_to_cycle_level(passing_ruleset, school_class, year, level1, level2):
    ok = rule_service.create_rule(
        {"name": "L1", "ruleset": passing_ruleset, "cycle_level_id": level1.id}
    )
    wrong = rule_service.create_rule(
        {"name": "L2", "ruleset": passing_ruleset, "cycle_level_id": level2.id}
    )

    assert evaluate_class_for_promotion(ok.id, school_class.id, year.id).total_students == 0
    with pytest.raises(ValidationFailure):
        evaluate_class_for_promotion(wrong.id, school_class.id, year.id)


def test_evaluation_does_not_write(rule, student, school_class, year):
    from apps.domains.promotion.models import PromotionExecution, StudentPromotionSummary

    evaluate_class_for_promotion(rule.id, school_class.id, year.id)

    assert StudentPromotionSummary.objects.count() == 0
    assert PromotionExecution.objects.count() == 0


def test_credit_progress_check(student, year, next_year):
    ledger.apply_delta(student.id, year.id, 0, 40)
    assert evaluate_student_credit_progress(student.id)["eligible"] is False

    ledger.apply_delta(student.id, next_year.id, 6, 20)
    result = evaluate_student_credit_progress(student.id)

    assert result["eligible"] is True
    assert result["totalCreditsEarned"] == 60
    assert result["creditsInProgress"] == 6
    assert result["requiredCredits"] == 60
    assert result["reasons"] == ["Student meets minimum credits"]


def test_credit_progress_unknown_student(db):
    with pytest.raises(NotFoundError):
        evaluate_student_credit_progress(123456)
