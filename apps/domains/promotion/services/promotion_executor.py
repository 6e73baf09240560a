# PATH: apps/domains/promotion/services/promotion_executor.py
"""
승급 실행 (관리자가 고른 학생들을 target 반으로 이동).

- 전체 전제조건(규칙/반/학년도, 학생 목록)은 학생 처리 전에 검사하고 바로 raise.
- 학생별 처리는 각자 transaction.atomic. 한 학생 실패가 다른 학생을 되돌리지 않는다.
- DomainError 는 학생 단위 실패 결과로 기록. 그 외 예외는 그대로 올린다.
- 실행 row 는 학생 루프가 끝난 뒤 한 번만 쓴다 (결과 row 와 같은 트랜잭션).
- 같은 입력으로 재실행하면 학생들이 이미 source 반에 없으므로 전원 실패 결과로 남는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import QuerySet

from apps.api.common.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationFailure,
)
from apps.domains.academics.models import AcademicYear, SchoolClass
from apps.domains.enrollment import services as enrollment_services
from apps.domains.enrollment.models import CourseEnrollment, Enrollment
from apps.domains.promotion.models import (
    PromotionExecution,
    PromotionExecutionResult,
    PromotionRule,
)
from apps.domains.promotion.services.rule_evaluator import evaluate_cached_facts
from apps.domains.promotion.services.rule_service import get_rule
from apps.domains.students.models import Student

logger = logging.getLogger(__name__)


@dataclass
class _StudentOutcome:
    student_id: int
    student: Optional[Student] = None
    was_promoted: bool = False
    facts: Optional[Dict[str, Any]] = None
    rules_matched: List[str] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)


def _get_class(class_id: int, label: str) -> SchoolClass:
    school_class = SchoolClass.objects.filter(id=class_id).first()
    if not school_class:
        raise NotFoundError(f"{label} class not found (id={class_id})")
    return school_class


def _promote_student(
    *,
    student_id: int,
    rule: PromotionRule,
    source: SchoolClass,
    target: SchoolClass,
    academic_year_id: int,
) -> _StudentOutcome:
    student = (
        Student.objects
        .select_for_update()
        .filter(id=student_id)
        .first()
    )
    if not student:
        raise NotFoundError(f"Student not found (id={student_id})")

    if student.school_class_id == target.id:
        raise ConflictError(f"Student {student.id} is already in target class {target.id}")
    if student.school_class_id != source.id:
        raise ValidationFailure(f"Student {student.id} is not in source class {source.id}")
    if Enrollment.objects.filter(
        student_id=student.id,
        school_class_id=target.id,
        status__in=[Enrollment.STATUS_ACTIVE, Enrollment.STATUS_PENDING],
    ).exists():
        raise ConflictError(f"Student {student.id} already has an open enrollment in target class {target.id}")

    facts, outcome = evaluate_cached_facts(rule, student.id, academic_year_id)

    # source 반 과목 수강 정리 → 반 등록 종료 → target 반 등록
    enrollment_services.close_course_enrollments_for_student(
        student.id,
        CourseEnrollment.STATUS_WITHDRAWN,
        source_class_id=source.id,
    )
    enrollment_services.close_active_enrollment(student.id, Enrollment.STATUS_COMPLETED)
    enrollment_services.create_enrollment(
        student_id=student.id,
        class_id=target.id,
        academic_year_id=target.academic_year_id,
        status=Enrollment.STATUS_ACTIVE,
    )

    student.school_class = target
    student.save(update_fields=["school_class", "updated_at"])

    return _StudentOutcome(
        student_id=student.id,
        student=student,
        was_promoted=True,
        facts=facts,
        rules_matched=list(outcome.matched_rules),
        reasons=list(outcome.reasons),
    )


def apply_promotion(
    *,
    source_class_id: int,
    target_class_id: int,
    rule_id: int,
    academic_year_id: int,
    student_ids: Iterable[int],
    executed_by,
) -> PromotionExecution:
    ordered_ids = list(dict.fromkeys(int(sid) for sid in (student_ids or [])))
    if not ordered_ids:
        raise ValidationFailure("studentIds must not be empty")

    rule = get_rule(rule_id)
    if not rule.is_active:
        raise ValidationFailure(f"Rule {rule.id} is inactive")
    source = _get_class(source_class_id, "Source")
    target = _get_class(target_class_id, "Target")
    if source.id == target.id:
        raise ValidationFailure("Source and target class must differ")
    if not AcademicYear.objects.filter(id=academic_year_id).exists():
        raise NotFoundError(f"Academic year not found (id={academic_year_id})")

    outcomes: List[_StudentOutcome] = []
    failure: Optional[Exception] = None
    for student_id in ordered_ids:
        try:
            with transaction.atomic():
                outcome = _promote_student(
                    student_id=student_id,
                    rule=rule,
                    source=source,
                    target=target,
                    academic_year_id=academic_year_id,
                )
        except DomainError as e:
            logger.warning(
                "[promotion_executor] student_id=%s not promoted code=%s reason=%s",
                student_id,
                e.code,
                e.message,
            )
            outcome = _StudentOutcome(
                student_id=student_id,
                student=Student.objects.filter(id=student_id).first(),
                reasons=[e.message],
            )
        except Exception as e:
            # 앞 학생들의 이동은 이미 commit 됨 → 여기까지의 이력을 남긴 뒤 다시 올린다
            logger.exception(
                "[promotion_executor] unexpected failure rule_id=%s student_id=%s",
                rule.id,
                student_id,
            )
            failure = e
            outcomes.append(
                _StudentOutcome(
                    student_id=student_id,
                    student=Student.objects.filter(id=student_id).first(),
                    reasons=[f"Internal error: {type(e).__name__}"],
                )
            )
            break
        outcomes.append(outcome)

    execution = _record_execution(
        rule=rule,
        source=source,
        target=target,
        academic_year_id=academic_year_id,
        executed_by=executed_by,
        outcomes=outcomes,
        aborted=failure is not None,
    )
    if failure is not None:
        raise failure
    return execution


def _record_execution(
    *,
    rule: PromotionRule,
    source: SchoolClass,
    target: SchoolClass,
    academic_year_id: int,
    executed_by,
    outcomes: List[_StudentOutcome],
    aborted: bool,
) -> PromotionExecution:
    promoted = sum(1 for o in outcomes if o.was_promoted)
    metadata = {
        "ruleName": rule.name,
        "sourceClassName": source.name,
        "targetClassName": target.name,
    }
    if aborted:
        metadata["aborted"] = True

    with transaction.atomic():
        execution = PromotionExecution.objects.create(
            rule=rule,
            source_class=source,
            target_class=target,
            academic_year_id=academic_year_id,
            executed_by=executed_by,
            students_evaluated=len(outcomes),
            students_promoted=promoted,
            metadata=metadata,
        )
        PromotionExecutionResult.objects.bulk_create([
            PromotionExecutionResult(
                execution=execution,
                requested_student_id=o.student_id,
                student=o.student,
                was_promoted=o.was_promoted,
                evaluation_data=o.facts,
                rules_matched=o.rules_matched,
                reasons=o.reasons,
            )
            for o in outcomes
        ])

    logger.info(
        "[promotion_executor] execution_id=%s rule_id=%s %s -> %s promoted=%s/%s",
        execution.id,
        rule.id,
        source.id,
        target.id,
        promoted,
        len(outcomes),
    )
    return execution


def list_executions(
    *,
    rule_id: int | None = None,
    source_class_id: int | None = None,
    target_class_id: int | None = None,
    academic_year_id: int | None = None,
    executed_by_id: int | None = None,
) -> QuerySet:
    qs = PromotionExecution.objects.select_related(
        "rule",
        "source_class",
        "target_class",
        "executed_by",
    )
    if rule_id is not None:
        qs = qs.filter(rule_id=rule_id)
    if source_class_id is not None:
        qs = qs.filter(source_class_id=source_class_id)
    if target_class_id is not None:
        qs = qs.filter(target_class_id=target_class_id)
    if academic_year_id is not None:
        qs = qs.filter(academic_year_id=academic_year_id)
    if executed_by_id is not None:
        qs = qs.filter(executed_by_id=executed_by_id)
    return qs.order_by("-executed_at", "-id")


def get_execution_details(execution_id: int) -> dict:
    execution = list_executions().filter(id=execution_id).first()
    if not execution:
        raise NotFoundError(f"Execution not found (id={execution_id})")

    results = list(
        PromotionExecutionResult.objects
        .filter(execution_id=execution.id)
        .select_related("student")
        .order_by("id")
    )
    return {"execution": execution, "results": results}
