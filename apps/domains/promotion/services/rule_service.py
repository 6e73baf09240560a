# PATH: apps/domains/promotion/services/rule_service.py
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from django.db.models import QuerySet

from apps.api.common.exceptions import ConflictError, NotFoundError, ValidationFailure
from apps.domains.academics.models import CycleLevel, Program, SchoolClass
from apps.domains.promotion.models import PromotionExecution, PromotionRule
from apps.domains.promotion.services.condition_engine import validate_ruleset

logger = logging.getLogger(__name__)


EDITABLE_FIELDS = (
    "name",
    "description",
    "source_class_id",
    "program_id",
    "cycle_level_id",
    "ruleset",
    "is_active",
)

# 실행 이력이 생긴 규칙에서도 바꿀 수 있는 필드
MUTABLE_AFTER_EXECUTION = frozenset({"is_active"})

_SCOPE_MODELS = {
    "source_class_id": (SchoolClass, "Source class"),
    "program_id": (Program, "Program"),
    "cycle_level_id": (CycleLevel, "Cycle level"),
}


def _check_scope(data: Mapping[str, Any]) -> None:
    for key, (model, label) in _SCOPE_MODELS.items():
        value = data.get(key)
        if value is not None and not model.objects.filter(id=value).exists():
            raise NotFoundError(f"{label} not found (id={value})")


def _has_executions(rule_id: int) -> bool:
    return PromotionExecution.objects.filter(rule_id=rule_id).exists()


def get_rule(rule_id: int) -> PromotionRule:
    rule = PromotionRule.objects.filter(id=rule_id).first()
    if not rule:
        raise NotFoundError(f"Rule not found (id={rule_id})")
    return rule


def list_rules(
    *,
    program_id: int | None = None,
    source_class_id: int | None = None,
    cycle_level_id: int | None = None,
    is_active: bool | None = None,
) -> QuerySet:
    qs = PromotionRule.objects.all()
    if program_id is not None:
        qs = qs.filter(program_id=program_id)
    if source_class_id is not None:
        qs = qs.filter(source_class_id=source_class_id)
    if cycle_level_id is not None:
        qs = qs.filter(cycle_level_id=cycle_level_id)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs.order_by("-created_at", "-id")


def create_rule(data: Mapping[str, Any]) -> PromotionRule:
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationFailure("Rule name is required")

    ruleset = data.get("ruleset")
    validate_ruleset(ruleset)
    _check_scope(data)

    rule = PromotionRule.objects.create(
        name=name,
        description=data.get("description") or "",
        source_class_id=data.get("source_class_id"),
        program_id=data.get("program_id"),
        cycle_level_id=data.get("cycle_level_id"),
        ruleset=ruleset,
        is_active=bool(data.get("is_active", True)),
    )
    logger.info("[promotion_rule] created id=%s name=%r", rule.id, rule.name)
    return rule


@transaction.atomic
def update_rule(rule_id: int, data: Mapping[str, Any]) -> PromotionRule:
    """
    부분 수정. 실행 이력이 있는 규칙은 is_active 토글만 허용
    (이력의 rules_matched / metadata 가 가리키는 규칙 내용이 바뀌지 않도록).
    """
    rule = (
        PromotionRule.objects
        .select_for_update()
        .filter(id=rule_id)
        .first()
    )
    if not rule:
        raise NotFoundError(f"Rule not found (id={rule_id})")

    changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    if not changes:
        return rule

    locked = set(changes) - MUTABLE_AFTER_EXECUTION
    if locked and _has_executions(rule.id):
        raise ConflictError(
            f"Rule has executions; only is_active can be changed (got: {', '.join(sorted(locked))})"
        )

    if "name" in changes:
        changes["name"] = str(changes["name"] or "").strip()
        if not changes["name"]:
            raise ValidationFailure("Rule name is required")
    if "ruleset" in changes:
        validate_ruleset(changes["ruleset"])
    if "description" in changes:
        changes["description"] = changes["description"] or ""
    _check_scope(changes)

    for key, value in changes.items():
        setattr(rule, key, value)
    rule.save()

    logger.info("[promotion_rule] updated id=%s fields=%s", rule.id, sorted(changes))
    return rule


@transaction.atomic
def delete_rule(rule_id: int) -> None:
    rule = get_rule(rule_id)
    if _has_executions(rule.id):
        raise ConflictError("Cannot delete rule with existing executions")
    rule.delete()
    logger.info("[promotion_rule] deleted id=%s", rule_id)
