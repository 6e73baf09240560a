import pytest

from apps.domains.promotion.services.transcript_aggregator import build_transcript

pytestmark = pytest.mark.django_db


def test_no_grades_returns_empty_transcript(student):
    transcript = build_transcript(student.id)

    assert transcript.course_count == 0
    assert transcript.overall_average == 0
    assert transcript.success_rate == 0
    assert transcript.average_by_course == {}


def test_course_score_is_weighted_by_exam_percentage(student, class_course, grade):
    grade(student, class_course, 12, percentage=40)
    grade(student, class_course, 16, percentage=60)

    transcript = build_transcript(student.id)

    assert transcript.course_count == 1
    assert transcript.overall_average == pytest.approx(14.4)
    entry = transcript.average_by_course[str(class_course.course_id)]
    assert entry["average"] == pytest.approx(14.4)
    assert entry["code"] == "EC1"


def test_partial_percentages_are_not_rescaled(student, class_course, grade):
    grade(student, class_course, 15, percentage=50)

    transcript = build_transcript(student.id)

    assert transcript.overall_average == pytest.approx(7.5)
    assert transcript.eliminatory_failures == 1


def test_overall_average_weighted_by_unit_credits(student, make_course, grade):
    a = make_course("A1", unit_code="UE-A", unit_credits=6)
    b = make_course("B1", unit_code="UE-B", unit_credits=3)
    grade(student, a, 12)
    grade(student, b, 6)

    transcript = build_transcript(student.id)

    # (12*6 + 6*3) / 9
    assert transcript.overall_average == pytest.approx(10.0)
    assert transcript.overall_average_unweighted == pytest.approx(9.0)
    assert transcript.unit_count == 2


def test_failure_classification(student, make_course, grade):
    passed = make_course("P1", unit_code="UE-A")
    compensable = make_course("C1", unit_code="UE-A")
    eliminatory = make_course("E1", unit_code="UE-B")
    grade(student, passed, 13)
    grade(student, compensable, 9)
    grade(student, eliminatory, 5)

    t = build_transcript(student.id)

    assert t.validated_courses_count == 1
    assert t.failed_courses_count == 2
    assert t.compensable_failures == 1
    assert t.eliminatory_failures == 1
    assert t.scores_above10 == 1
    assert t.scores_below10 == 2
    assert t.scores_below8 == 1
    assert t.lowest_score == pytest.approx(5)
    assert t.highest_score == pytest.approx(13)
    assert t.success_rate == pytest.approx(1 / 3)

    # UE-A 평균 11 (통과), UE-B 평균 5 (미통과)
    assert t.validated_units_count == 1
    assert t.failed_teaching_units_count == 1
    assert t.unit_validation_rate == pytest.approx(0.5)
    assert t.lowest_unit_average == pytest.approx(5)


def test_score_exactly_at_pass_mark_is_validated(student, class_course, grade):
    grade(student, class_course, 10)

    t = build_transcript(student.id)

    assert t.validated_courses_count == 1
    assert t.compensable_failures == 0


@pytest.mark.parametrize("score, compensable, eliminatory", [(8, 1, 0), ("7.99", 0, 1)])
def test_compensable_boundary(student, class_course, grade, score, compensable, eliminatory):
    grade(student, class_course, score)

    t = build_transcript(student.id)

    assert t.compensable_failures == compensable
    assert t.eliminatory_failures == eliminatory


def test_zero_credit_units_give_zero_weighted_average(student, make_course, grade):
    cc = make_course("Z1", unit_code="UE-Z", unit_credits=0)
    grade(student, cc, 15)

    t = build_transcript(student.id)

    assert t.overall_average == 0
    assert t.overall_average_unweighted == pytest.approx(15)
