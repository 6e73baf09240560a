import pytest

from apps.api.common.exceptions import NotFoundError
from apps.domains.promotion.exceptions import PromotionSummaryMissing
from apps.domains.promotion.models import StudentPromotionSummary
from apps.domains.promotion.services import summary_cache
from apps.domains.promotion.services.facts_builder import compute_student_facts

pytestmark = pytest.mark.django_db


def test_missing_summary_raises(student, year):
    assert summary_cache.find_student_promotion_facts(student.id, year.id) is None

    with pytest.raises(PromotionSummaryMissing) as exc:
        summary_cache.get_student_promotion_facts(student.id, year.id)

    assert exc.value.http_status == 404


def test_refresh_stores_facts_and_columns(student, year, class_course, grade):
    grade(student, class_course, 13)

    facts = summary_cache.refresh_student_summary(student.id, year.id)

    row = StudentPromotionSummary.objects.get(student=student, academic_year=year)
    assert row.facts == facts.to_facts()
    assert row.overall_average == pytest.approx(13)
    assert row.required_credits == facts.required_credits
    assert row.is_on_track == facts.is_on_track
    assert summary_cache.get_student_promotion_facts(student.id, year.id) == facts


def test_cache_is_not_invalidated_until_refresh(student, year, class_course, grade):
    grade(student, class_course, 9)
    summary_cache.refresh_student_summary(student.id, year.id)

    grade(student, class_course, 20, name="Retake")
    stale = summary_cache.get_student_promotion_facts(student.id, year.id)
    assert stale.overall_average == pytest.approx(9)

    summary_cache.refresh_student_summary(student.id, year.id)
    fresh = summary_cache.get_student_promotion_facts(student.id, year.id)
    assert fresh == compute_student_facts(student.id, year.id)
    assert StudentPromotionSummary.objects.count() == 1


def test_refresh_class_covers_every_student(student, make_student, school_class, year):
    make_student("Bob")
    make_student("Chloe")

    result = summary_cache.refresh_class_summaries(school_class.id, year.id)

    assert result == {"classId": school_class.id, "studentCount": 3}
    assert StudentPromotionSummary.objects.filter(academic_year=year).count() == 3


def test_refresh_unknown_class_or_year(student, year):
    with pytest.raises(NotFoundError):
        summary_cache.refresh_class_summaries(424242, year.id)
    with pytest.raises(NotFoundError):
        summary_cache.refresh_student_summary(student.id, 424242)
