# PATH: apps/domains/promotion/services/transcript_aggregator.py
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from django.conf import settings

from apps.domains.exams.models import Grade


def passing_grade() -> float:
    return float(getattr(settings, "PROMOTION_PASSING_GRADE", 10))


def compensable_threshold() -> float:
    return float(getattr(settings, "PROMOTION_COMPENSABLE_THRESHOLD", 8))


@dataclass(frozen=True)
class Transcript:
    """
    학생 1명의 성적 집계.

    course_count == 0 이면 "성적 없음". 평균 0 과 구분할 때는 반드시 count 를 본다.
    """

    course_count: int = 0
    unit_count: int = 0

    overall_average: float = 0.0
    overall_average_unweighted: float = 0.0
    average_by_teaching_unit: Dict[str, dict] = field(default_factory=dict)
    average_by_course: Dict[str, dict] = field(default_factory=dict)

    lowest_score: float = 0.0
    highest_score: float = 0.0
    lowest_unit_average: float = 0.0

    scores_above10: int = 0
    scores_below10: int = 0
    scores_below8: int = 0

    failed_courses_count: int = 0
    failed_teaching_units_count: int = 0
    compensable_failures: int = 0
    eliminatory_failures: int = 0
    validated_courses_count: int = 0
    validated_units_count: int = 0

    success_rate: float = 0.0
    unit_validation_rate: float = 0.0


def _course_scores(student_id: int) -> "OrderedDict[int, dict]":
    """
    과목별 점수 = Σ(grade.score × exam.percentage / 100).
    시험 비중 합이 100% 미만이면 부분 점수 그대로 둔다.
    """
    grades = (
        Grade.objects
        .filter(student_id=student_id)
        .select_related(
            "exam",
            "exam__class_course__course",
            "exam__class_course__course__teaching_unit",
        )
        .order_by("exam__class_course__course_id", "id")
    )

    courses: "OrderedDict[int, dict]" = OrderedDict()
    for grade in grades:
        course = grade.exam.class_course.course
        unit = course.teaching_unit

        row = courses.get(course.id)
        if row is None:
            row = {
                "course_id": course.id,
                "course_code": course.code,
                "course_name": course.name,
                "unit_id": unit.id,
                "unit_code": unit.code,
                "unit_name": unit.name,
                "unit_credits": int(unit.credits or 0),
                "score": Decimal("0"),
            }
            courses[course.id] = row

        row["score"] += Decimal(grade.score) * Decimal(grade.exam.percentage) / Decimal("100")

    return courses


def build_transcript(student_id: int) -> Transcript:
    courses = _course_scores(student_id)
    if not courses:
        return Transcript()

    pass_mark = Decimal(str(passing_grade()))
    compensable = Decimal(str(compensable_threshold()))

    average_by_course: Dict[str, dict] = {}
    units: "OrderedDict[int, dict]" = OrderedDict()

    total_score = Decimal("0")
    weighted_score = Decimal("0")
    total_credits = 0

    for row in courses.values():
        score = row["score"]
        average_by_course[str(row["course_id"])] = {
            "average": float(score),
            "code": row["course_code"],
            "name": row["course_name"],
        }

        unit = units.setdefault(
            row["unit_id"],
            {
                "code": row["unit_code"],
                "name": row["unit_name"],
                "credits": row["unit_credits"],
                "scores": [],
            },
        )
        unit["scores"].append(score)

        total_score += score
        weighted_score += score * row["unit_credits"]
        total_credits += row["unit_credits"]

    # 단원(UE) 평균: 소속 과목 점수의 단순 평균
    average_by_teaching_unit: Dict[str, dict] = {}
    unit_averages: List[Decimal] = []
    for unit_id, unit in units.items():
        avg = sum(unit["scores"], Decimal("0")) / len(unit["scores"])
        unit_averages.append(avg)
        average_by_teaching_unit[str(unit_id)] = {
            "average": float(avg),
            "code": unit["code"],
            "name": unit["name"],
            "credits": unit["credits"],
        }

    scores = [row["score"] for row in courses.values()]
    course_count = len(scores)
    unit_count = len(unit_averages)

    validated = sum(1 for s in scores if s >= pass_mark)
    below_pass = course_count - validated
    eliminatory = sum(1 for s in scores if s < compensable)
    compensable_failures = sum(1 for s in scores if compensable <= s < pass_mark)
    validated_units = sum(1 for a in unit_averages if a >= pass_mark)

    overall = weighted_score / total_credits if total_credits > 0 else Decimal("0")

    return Transcript(
        course_count=course_count,
        unit_count=unit_count,
        overall_average=float(overall),
        overall_average_unweighted=float(total_score / course_count),
        average_by_teaching_unit=average_by_teaching_unit,
        average_by_course=average_by_course,
        lowest_score=float(min(scores)),
        highest_score=float(max(scores)),
        lowest_unit_average=float(min(unit_averages)),
        scores_above10=validated,
        scores_below10=below_pass,
        scores_below8=eliminatory,
        failed_courses_count=below_pass,
        failed_teaching_units_count=unit_count - validated_units,
        compensable_failures=compensable_failures,
        eliminatory_failures=eliminatory,
        validated_courses_count=validated,
        validated_units_count=validated_units,
        success_rate=validated / course_count,
        unit_validation_rate=validated_units / unit_count,
    )
