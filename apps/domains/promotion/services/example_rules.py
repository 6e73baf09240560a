# PATH: apps/domains/promotion/services/example_rules.py
"""
규칙 템플릿. 관리자가 복사해서 기준값만 바꿔 쓰는 용도.
seed_promotion_rules 명령과 GET promotion/rules/templates/ 에서 사용.
"""

from __future__ import annotations

from typing import Any, Dict, List

ELIGIBLE = "promotion-eligible"


def _cond(fact: str, operator: str, value: Any) -> Dict[str, Any]:
    return {"fact": fact, "operator": operator, "value": value}


def _rule(name: str, conditions: Dict[str, Any], message: str, event_type: str = ELIGIBLE) -> Dict[str, Any]:
    return {
        "name": name,
        "conditions": conditions,
        "event": {"type": event_type, "params": {"message": message}},
    }


# 원장 합계만으로 도는 기본 규칙 (rule_evaluator.evaluate_student_credit_progress)
DEFAULT_CREDIT_THRESHOLD_RULE = _rule(
    "default-credit-threshold",
    {"all": [_cond("creditsEarned", "greaterThanInclusive", {"fact": "requiredCredits"})]},
    "Student meets minimum credits",
)


EXAMPLE_RULES: List[Dict[str, Any]] = [
    # 평균 >= 10, 학점 >= 30, 과락(<8) 없음
    _rule(
        "standard-promotion",
        {"all": [
            _cond("overallAverage", "greaterThanInclusive", 10),
            _cond("creditsEarned", "greaterThanInclusive", 30),
            _cond("eliminatoryFailures", "equal", 0),
        ]},
        "Student meets standard promotion criteria",
    ),
    # 보상: 미이수 최대 2과목, 최저점 8 이상
    _rule(
        "compensation-promotion",
        {"all": [
            _cond("overallAverage", "greaterThanInclusive", 10),
            _cond("creditsEarned", "greaterThanInclusive", 28),
            _cond("failedCoursesCount", "lessThanInclusive", 2),
            _cond("lowestScore", "greaterThanInclusive", 8),
        ]},
        "Student eligible with compensation",
    ),
    # 조건부 (학점 부채 10 이하)
    _rule(
        "conditional-promotion",
        {"all": [
            _cond("overallAverage", "greaterThanInclusive", 10),
            _cond("creditDeficit", "lessThanInclusive", 10),
            _cond("successRate", "greaterThanInclusive", 0.75),
        ]},
        "Student eligible with conditional promotion",
    ),
    _rule(
        "excellence-promotion",
        {"all": [
            _cond("overallAverage", "greaterThanInclusive", 14),
            _cond("creditsEarned", "greaterThanInclusive", 40),
            _cond("failedCoursesCount", "equal", 0),
        ]},
        "Student qualifies for excellence promotion",
    ),
    # 유급 판정 (any)
    _rule(
        "repeat-year",
        {"any": [
            _cond("eliminatoryFailures", "greaterThan", 0),
            _cond("creditCompletionRate", "lessThan", 0.5),
            _cond("overallAverage", "lessThan", 8),
        ]},
        "Student must repeat the year",
        event_type="repeat-year-required",
    ),
    _rule(
        "credit-based-promotion",
        {"all": [
            _cond("creditsEarned", "greaterThanInclusive", 35),
            _cond("creditCompletionRate", "greaterThanInclusive", 0.85),
            _cond("overallAverage", "greaterThanInclusive", 9),
        ]},
        "Student meets credit-based promotion criteria",
    ),
    _rule(
        "unit-based-promotion",
        {"all": [
            _cond("failedTeachingUnitsCount", "equal", 0),
            _cond("unitValidationRate", "equal", 1),
            _cond("lowestUnitAverage", "greaterThanInclusive", 10),
        ]},
        "Student validated all teaching units",
    ),
    _rule(
        "progressive-promotion",
        {"all": [
            _cond("isOnTrack", "equal", True),
            _cond("canReachRequiredCredits", "equal", True),
            _cond("performanceIndex", "greaterThanInclusive", 60),
        ]},
        "Student on track for promotion",
    ),
    _rule(
        "comprehensive-promotion",
        {"all": [
            _cond("overallAverage", "greaterThanInclusive", 10),
            _cond("creditsEarned", "greaterThanInclusive", 30),
            _cond("eliminatoryFailures", "equal", 0),
            _cond("failedCoursesCount", "lessThanInclusive", 3),
            _cond("successRate", "greaterThanInclusive", 0.75),
            _cond("isOnTrack", "equal", True),
        ]},
        "Student meets comprehensive promotion criteria",
    ),
]


def get_example_rule(name: str) -> Dict[str, Any] | None:
    return next((r for r in EXAMPLE_RULES if r["name"] == name), None)
