# PATH: apps/domains/promotion/services/condition_engine.py
"""
규칙 조건 트리 해석기.

ruleset 형태:
    {
      "conditions": <node>,
      "event": {"type": "promotion-eligible", "params": {"message": "..."}},
    }

node:
    {"all": [node, ...]}     AND, 첫 false 에서 멈춤
    {"any": [node, ...]}     OR, 첫 true 에서 멈춤
    {"not": node}
    {"fact": "overallAverage", "operator": "greaterThanInclusive", "value": 10, "path": "..."}

value 는 다른 fact 참조도 가능: {"fact": "requiredCredits"}

평가 중에는 절대 raise 하지 않는다.
모르는 fact / 경로 / 타입 불일치 → 해당 leaf 는 false + 사람이 읽을 수 있는 설명.
구조 오류는 저장 시점(validate_ruleset)에 ValidationFailure 로 막는다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Callable, Dict, List, Mapping, Tuple

from apps.api.common.exceptions import ValidationFailure


_MISSING = object()


class _Mismatch(Exception):
    pass


def _is_number(v: Any) -> bool:
    return isinstance(v, Number) and not isinstance(v, bool)


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def op(left: Any, right: Any) -> bool:
        if _is_number(left) and _is_number(right):
            return compare(left, right)
        if isinstance(left, str) and isinstance(right, str):
            return compare(left, right)
        raise _Mismatch(f"cannot compare {type(left).__name__} with {type(right).__name__}")
    return op


def _same(left: Any, right: Any) -> bool:
    # bool 과 숫자는 서로 같지 않다 (True != 1)
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _membership(left: Any, right: Any) -> bool:
    if not isinstance(right, (list, tuple)):
        raise _Mismatch("value must be a list")
    return any(_same(left, item) for item in right)


def _containment(left: Any, right: Any) -> bool:
    if isinstance(left, str):
        if not isinstance(right, str):
            raise _Mismatch("value must be a string")
        return right in left
    if isinstance(left, (list, tuple)):
        return any(_same(item, right) for item in left)
    raise _Mismatch(f"fact of type {type(left).__name__} is not a list")


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equal": _same,
    "notEqual": lambda a, b: not _same(a, b),
    "lessThan": _ordered(lambda a, b: a < b),
    "lessThanInclusive": _ordered(lambda a, b: a <= b),
    "greaterThan": _ordered(lambda a, b: a > b),
    "greaterThanInclusive": _ordered(lambda a, b: a >= b),
    "in": _membership,
    "notIn": lambda a, b: not _membership(a, b),
    "contains": _containment,
    "doesNotContain": lambda a, b: not _containment(a, b),
}

BOOLEAN_KEYS = ("all", "any", "not")


# ========================================================
# 검증 (저장 시점)
# ========================================================

def _validate_node(node: Any, where: str) -> None:
    if not isinstance(node, Mapping):
        raise ValidationFailure(f"{where}: condition must be an object")

    keys = [k for k in BOOLEAN_KEYS if k in node]
    if len(keys) > 1:
        raise ValidationFailure(f"{where}: use only one of all/any/not per condition")

    if keys:
        key = keys[0]
        if key == "not":
            _validate_node(node["not"], f"{where}.not")
            return
        children = node[key]
        if not isinstance(children, list) or not children:
            raise ValidationFailure(f"{where}.{key}: condition list must not be empty")
        for i, child in enumerate(children):
            _validate_node(child, f"{where}.{key}[{i}]")
        return

    fact = node.get("fact")
    if not isinstance(fact, str) or not fact:
        raise ValidationFailure(f"{where}: condition requires a fact name")
    operator = node.get("operator")
    if operator not in OPERATORS:
        raise ValidationFailure(f"{where}: unknown operator {operator!r}")
    if "value" not in node:
        raise ValidationFailure(f"{where}: condition requires a value")
    value = node["value"]
    if isinstance(value, Mapping) and "fact" in value:
        if not isinstance(value["fact"], str) or not value["fact"]:
            raise ValidationFailure(f"{where}.value: fact reference requires a fact name")
    path = node.get("path")
    if path is not None and not isinstance(path, str):
        raise ValidationFailure(f"{where}.path: must be a string")


def validate_ruleset(ruleset: Any) -> None:
    if not isinstance(ruleset, Mapping):
        raise ValidationFailure("Invalid ruleset format: ruleset must be an object")

    conditions = ruleset.get("conditions")
    if not conditions:
        raise ValidationFailure("Invalid ruleset format: conditions are required")
    _validate_node(conditions, "conditions")

    event = ruleset.get("event")
    if not isinstance(event, Mapping):
        raise ValidationFailure("Invalid ruleset format: event is required")
    event_type = event.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise ValidationFailure("Invalid ruleset format: event.type is required")
    params = event.get("params")
    if params is not None and not isinstance(params, Mapping):
        raise ValidationFailure("Invalid ruleset format: event.params must be an object")


# ========================================================
# 평가
# ========================================================

@dataclass(frozen=True)
class ConditionResult:
    passed: bool
    failures: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RuleOutcome:
    eligible: bool
    matched_rules: List[str] = field(default_factory=list)
    failed_rules: List[str] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)


def _walk_path(value: Any, path: str) -> Any:
    """ "a.b.0" / "$.a.b" 형태 경로 따라가기. 못 찾으면 _MISSING."""
    cleaned = path[2:] if path.startswith("$.") else path.lstrip("$")
    for part in filter(None, cleaned.split(".")):
        if isinstance(value, Mapping):
            if part not in value:
                return _MISSING
            value = value[part]
        elif isinstance(value, (list, tuple)) and part.lstrip("-").isdigit():
            idx = int(part)
            if not -len(value) <= idx < len(value):
                return _MISSING
            value = value[idx]
        else:
            return _MISSING
    return value


def _resolve(facts: Mapping[str, Any], name: str, path: str | None) -> Any:
    if name not in facts:
        return _MISSING
    value = facts[name]
    if path:
        return _walk_path(value, path)
    return value


def _fmt(v: Any) -> str:
    if isinstance(v, float):
        return f"{v:.2f}".rstrip("0").rstrip(".")
    return repr(v) if isinstance(v, str) else str(v)


def _evaluate_leaf(node: Mapping[str, Any], facts: Mapping[str, Any]) -> ConditionResult:
    name = node.get("fact")
    operator = node.get("operator")
    path = node.get("path") if isinstance(node.get("path"), str) else None
    label = f"{name}.{path.lstrip('$.')}" if path else str(name)

    compare = OPERATORS.get(operator) if isinstance(operator, str) else None
    if compare is None:
        return ConditionResult(False, (f"{label}: unknown operator {operator!r}",))

    left = _resolve(facts, name, path) if isinstance(name, str) else _MISSING
    if left is _MISSING:
        return ConditionResult(False, (f"{label}: fact is not available",))

    expected = node.get("value")
    target = _fmt(expected)
    if isinstance(expected, Mapping) and "fact" in expected:
        ref = expected.get("fact")
        ref_path = expected.get("path") if isinstance(expected.get("path"), str) else None
        right = _resolve(facts, ref, ref_path) if isinstance(ref, str) else _MISSING
        if right is _MISSING:
            return ConditionResult(False, (f"{label}: referenced fact {ref!r} is not available",))
        target = f"{ref} ({_fmt(right)})"
    else:
        right = expected

    try:
        ok = bool(compare(left, right))
    except (_Mismatch, TypeError) as e:
        return ConditionResult(False, (f"{label}: {operator} not applicable ({e})",))

    if ok:
        return ConditionResult(True)
    return ConditionResult(False, (f"{label} ({_fmt(left)}) is not {operator} {target}",))


def evaluate_conditions(node: Any, facts: Mapping[str, Any]) -> ConditionResult:
    if not isinstance(node, Mapping):
        return ConditionResult(False, ("malformed condition",))

    if "all" in node:
        children = node["all"]
        if not isinstance(children, list) or not children:
            return ConditionResult(False, ("empty 'all' condition",))
        for child in children:
            result = evaluate_conditions(child, facts)
            if not result.passed:
                return result
        return ConditionResult(True)

    if "any" in node:
        children = node["any"]
        if not isinstance(children, list) or not children:
            return ConditionResult(False, ("empty 'any' condition",))
        failures: List[str] = []
        for child in children:
            result = evaluate_conditions(child, facts)
            if result.passed:
                return ConditionResult(True)
            failures.extend(result.failures)
        return ConditionResult(False, (f"none of: {'; '.join(failures)}",))

    if "not" in node:
        inner = evaluate_conditions(node["not"], facts)
        if inner.passed:
            return ConditionResult(False, ("negated condition was satisfied",))
        return ConditionResult(True)

    return _evaluate_leaf(node, facts)


def run_ruleset(ruleset: Mapping[str, Any], facts: Mapping[str, Any]) -> RuleOutcome:
    """
    조건 트리 평가 + event 해석.
    통과: reasons = [event.params.message 또는 event.type], matched_rules = [event.type]
    실패: reasons = 실패한 조건 설명, failed_rules = [event.type]
    """
    event = ruleset.get("event") if isinstance(ruleset, Mapping) else None
    event = event if isinstance(event, Mapping) else {}
    event_type = str(event.get("type") or "")
    params = event.get("params") if isinstance(event.get("params"), Mapping) else {}

    conditions = ruleset.get("conditions") if isinstance(ruleset, Mapping) else None
    result = evaluate_conditions(conditions, facts)

    if result.passed:
        return RuleOutcome(
            eligible=True,
            matched_rules=[event_type],
            reasons=[str(params.get("message") or event_type)],
        )
    return RuleOutcome(
        eligible=False,
        failed_rules=[event_type],
        reasons=list(result.failures),
    )
