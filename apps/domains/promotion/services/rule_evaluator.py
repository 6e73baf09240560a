# PATH: apps/domains/promotion/services/rule_evaluator.py
"""
반 단위 승급 평가 (읽기 전용).

facts 는 캐시(StudentPromotionSummary)에서만 읽는다. 캐시가 없는 학생은 live 계산으로
대체하지 않고 "summary missing" 사유로 not eligible 처리한다. 평가 전에 refresh 필요.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.utils import timezone

from apps.api.common.exceptions import NotFoundError, ValidationFailure
from apps.domains.academics.models import SchoolClass
from apps.domains.credits.services.ledger import summarize_student
from apps.domains.promotion.models import PromotionRule
from apps.domains.promotion.services.condition_engine import RuleOutcome, run_ruleset
from apps.domains.promotion.services.example_rules import DEFAULT_CREDIT_THRESHOLD_RULE
from apps.domains.promotion.services.rule_service import get_rule
from apps.domains.promotion.services.summary_cache import find_student_promotion_facts
from apps.domains.students.models import Student

logger = logging.getLogger(__name__)


SUMMARY_MISSING_REASON = "Promotion summary missing: refresh required"


@dataclass(frozen=True)
class StudentEvaluationResult:
    student_id: int
    registration_number: str
    name: str
    facts: Optional[Dict[str, Any]]
    eligible: bool
    matched_rules: List[str] = field(default_factory=list)
    failed_rules: List[str] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student": {
                "id": self.student_id,
                "registrationNumber": self.registration_number,
                "name": self.name,
            },
            "facts": self.facts,
            "eligible": self.eligible,
            "matchedRules": list(self.matched_rules),
            "failedRules": list(self.failed_rules),
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class ClassPromotionEvaluation:
    rule_id: int
    rule_name: str
    source_class_id: int
    source_class_name: str
    academic_year_id: int
    eligible: List[StudentEvaluationResult]
    not_eligible: List[StudentEvaluationResult]
    evaluated_at: datetime

    @property
    def total_students(self) -> int:
        return len(self.eligible) + len(self.not_eligible)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "sourceClassId": self.source_class_id,
            "sourceClassName": self.source_class_name,
            "academicYearId": self.academic_year_id,
            "totalStudents": self.total_students,
            "eligibleCount": len(self.eligible),
            "notEligibleCount": len(self.not_eligible),
            "eligible": [r.to_dict() for r in self.eligible],
            "notEligible": [r.to_dict() for r in self.not_eligible],
            "evaluatedAt": self.evaluated_at.isoformat(),
        }


def check_rule_scope(rule: PromotionRule, school_class: SchoolClass) -> None:
    """규칙에 범위(반/프로그램/과정 단계)가 지정돼 있으면 원본 반이 그 안에 있어야 한다."""
    if rule.source_class_id and rule.source_class_id != school_class.id:
        raise ValidationFailure(
            f"Rule {rule.id} is scoped to class {rule.source_class_id}, not {school_class.id}"
        )
    if rule.program_id and rule.program_id != school_class.program_id:
        raise ValidationFailure(
            f"Rule {rule.id} is scoped to program {rule.program_id}, not {school_class.program_id}"
        )
    if rule.cycle_level_id and rule.cycle_level_id != school_class.cycle_level_id:
        raise ValidationFailure(
            f"Rule {rule.id} is scoped to cycle level {rule.cycle_level_id}, not {school_class.cycle_level_id}"
        )


def evaluate_cached_facts(rule: PromotionRule, student_id: int, academic_year_id: int):
    """
    (facts | None, RuleOutcome). 캐시 없으면 facts=None + summary missing 사유.
    """
    facts = find_student_promotion_facts(student_id, academic_year_id)
    if facts is None:
        return None, RuleOutcome(eligible=False, reasons=[SUMMARY_MISSING_REASON])
    return facts, run_ruleset(rule.ruleset, facts)


def evaluate_class_for_promotion(
    rule_id: int,
    source_class_id: int,
    academic_year_id: int,
) -> ClassPromotionEvaluation:
    rule = get_rule(rule_id)
    if not rule.is_active:
        raise ValidationFailure(f"Rule {rule.id} is inactive")

    school_class = SchoolClass.objects.filter(id=source_class_id).first()
    if not school_class:
        raise NotFoundError(f"Source class not found (id={source_class_id})")
    check_rule_scope(rule, school_class)

    students = (
        Student.objects
        .filter(school_class_id=school_class.id)
        .order_by("id")
        .only("id", "registration_number", "name")
    )

    eligible: List[StudentEvaluationResult] = []
    not_eligible: List[StudentEvaluationResult] = []
    for student in students:
        facts, outcome = evaluate_cached_facts(rule, student.id, academic_year_id)
        result = StudentEvaluationResult(
            student_id=student.id,
            registration_number=student.registration_number,
            name=student.name,
            facts=facts,
            eligible=outcome.eligible,
            matched_rules=outcome.matched_rules,
            failed_rules=outcome.failed_rules,
            reasons=outcome.reasons,
        )
        (eligible if result.eligible else not_eligible).append(result)

    logger.info(
        "[rule_evaluator] rule_id=%s class_id=%s academic_year_id=%s eligible=%s not_eligible=%s",
        rule.id,
        school_class.id,
        academic_year_id,
        len(eligible),
        len(not_eligible),
    )
    return ClassPromotionEvaluation(
        rule_id=rule.id,
        rule_name=rule.name,
        source_class_id=school_class.id,
        source_class_name=school_class.name,
        academic_year_id=academic_year_id,
        eligible=eligible,
        not_eligible=not_eligible,
        evaluated_at=timezone.now(),
    )


def evaluate_student_credit_progress(student_id: int) -> Dict[str, Any]:
    """
    학점 기준 빠른 점검: 전 학년도 누적 이수 학점 >= 요구 학점.
    캐시/규칙 저장 없이 원장 합계만으로 기본 규칙을 돌린다.
    """
    if not Student.objects.filter(id=student_id).exists():
        raise NotFoundError(f"Student not found (id={student_id})")

    summary = summarize_student(student_id)
    outcome = run_ruleset(
        DEFAULT_CREDIT_THRESHOLD_RULE,
        {
            "creditsEarned": summary["credits_earned"],
            "requiredCredits": summary["required_credits"],
        },
    )
    return {
        "studentId": student_id,
        "totalCreditsEarned": summary["credits_earned"],
        "creditsInProgress": summary["credits_in_progress"],
        "requiredCredits": summary["required_credits"],
        "eligible": outcome.eligible,
        "reasons": outcome.reasons,
    }
