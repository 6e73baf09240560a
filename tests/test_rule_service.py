import pytest

from apps.api.common.exceptions import ConflictError, NotFoundError, ValidationFailure
from apps.domains.promotion.models import PromotionExecution, PromotionRule
from apps.domains.promotion.services import rule_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def rule(passing_ruleset):
    return rule_service.create_rule({"name": "Standard", "ruleset": passing_ruleset})


@pytest.fixture
def executed_rule(rule, school_class, target_class, year, admin_user):
    PromotionExecution.objects.create(
        rule=rule,
        source_class=school_class,
        target_class=target_class,
        academic_year=year,
        executed_by=admin_user,
    )
    return rule


def test_create_rule_defaults(rule):
    assert rule.is_active is True
    assert rule.description == ""
    assert rule.program_id is None


def test_create_rule_rejects_invalid_ruleset():
    with pytest.raises(ValidationFailure):
        rule_service.create_rule({"name": "Broken", "ruleset": {"conditions": {}}})
    assert PromotionRule.objects.count() == 0


def test_create_rule_requires_name(passing_ruleset):
    with pytest.raises(ValidationFailure):
        rule_service.create_rule({"name": "  ", "ruleset": passing_ruleset})


def test_create_rule_with_unknown_scope(passing_ruleset):
    with pytest.raises(NotFoundError):
        rule_service.create_rule({"name": "X", "ruleset": passing_ruleset, "program_id": 999})


def test_list_rules_filters(rule, passing_ruleset, program):
    scoped = rule_service.create_rule(
        {"name": "Scoped", "ruleset": passing_ruleset, "program_id": program.id, "is_active": False}
    )

    assert list(rule_service.list_rules(program_id=program.id)) == [scoped]
    assert list(rule_service.list_rules(is_active=True)) == [rule]


def test_update_rule_without_executions(rule):
    updated = rule_service.update_rule(rule.id, {"name": "Renamed", "description": None})

    assert updated.name == "Renamed"
    assert updated.description == ""


def test_update_rule_validates_new_ruleset(rule):
    with pytest.raises(ValidationFailure):
        rule_service.update_rule(rule.id, {"ruleset": {"conditions": {"all": []}, "event": {"type": "x"}}})


def test_executed_rule_only_allows_toggle(executed_rule, passing_ruleset):
    with pytest.raises(ConflictError):
        rule_service.update_rule(executed_rule.id, {"ruleset": passing_ruleset})
    with pytest.raises(ConflictError):
        rule_service.update_rule(executed_rule.id, {"name": "New", "is_active": False})

    toggled = rule_service.update_rule(executed_rule.id, {"is_active": False})
    assert toggled.is_active is False


def test_delete_rule(rule):
    rule_service.delete_rule(rule.id)

    assert not PromotionRule.objects.filter(id=rule.id).exists()
    with pytest.raises(NotFoundError):
        rule_service.get_rule(rule.id)


def test_delete_executed_rule_conflicts(executed_rule):
    with pytest.raises(ConflictError):
        rule_service.delete_rule(executed_rule.id)
    assert PromotionRule.objects.filter(id=executed_rule.id).exists()
