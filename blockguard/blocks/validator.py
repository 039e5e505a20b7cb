"""Structural validation of block payloads against a rule set.

Validation is fail-fast and deterministic: at every level the required-field
pass runs first, then the extra-field pass, then the per-value pass, each
visiting keys in declaration/insertion order. The first violation is raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import (
    ConfigError,
    InvalidEnumValue,
    InvalidType,
    MissingRequiredField,
    UnhandledType,
    UnknownField,
    format_path,
)
from .schema import (
    WILDCARD_KEY,
    FieldKey,
    FieldRule,
    PayloadKind,
    classify,
    expand_rule,
    iter_fields,
    resolve_rule,
)


def validate(rule_set: Mapping[str, Any], data: Any, path: tuple[Any, ...] = ()) -> bool:
    """Validate `data` against `rule_set`; returns True or raises."""
    if classify(data) not in (PayloadKind.MAPPING, PayloadKind.SEQUENCE):
        path = path or ("data",)
        raise InvalidType(path[-1], data, "array", path)

    _check_required(rule_set, data, path)
    _check_extra(rule_set, data, path)

    for key, value in iter_fields(data):
        raw_rule = resolve_rule(rule_set, key)
        if raw_rule is None:
            raise UnknownField(
                key.raw,
                path + (key.raw,),
                reason=f"no `{WILDCARD_KEY}` rule for positional elements",
            )
        _check_value(key, expand_rule(raw_rule), value, path + (key.raw,))

    return True


def _check_required(rule_set: Mapping[str, Any], data: Any, path: tuple[Any, ...]) -> None:
    present = _present_names(data)
    for name, raw_rule in rule_set.items():
        if name == WILDCARD_KEY:
            continue
        if not expand_rule(raw_rule).required:
            continue
        # A null value counts as absent for required fields.
        if name not in present or present[name] is None:
            raise MissingRequiredField(name, path + (name,))


def _check_extra(rule_set: Mapping[str, Any], data: Any, path: tuple[Any, ...]) -> None:
    for key, _ in iter_fields(data):
        if key.positional:
            continue
        if key.name not in rule_set:
            raise UnknownField(key.name, path + (key.name,))


def _present_names(data: Any) -> dict[Any, Any]:
    return {key.name: value for key, value in iter_fields(data) if not key.positional}


def _check_value(key: FieldKey, rule: FieldRule, value: Any, path: tuple[Any, ...]) -> None:
    if rule.can_be_only is not None:
        if not is_literal_member(value, rule.can_be_only):
            raise InvalidEnumValue(key.raw, value, path)
        # canBeOnly is terminal: no type check follows an enum match.
        return

    kind = classify(value)
    if rule.nullable and kind is PayloadKind.NULL:
        return

    element_type = rule.type
    if element_type == "string":
        if kind is not PayloadKind.STRING:
            raise InvalidType(key.raw, value, "string", path)
    elif element_type == "integer":
        if kind is not PayloadKind.INTEGER:
            raise InvalidType(key.raw, value, "integer", path)
    elif element_type == "boolean":
        if kind is not PayloadKind.BOOLEAN:
            raise InvalidType(key.raw, value, "boolean", path)
    elif element_type == "array":
        validate(_nested_rules(rule, path), value, path)
    else:
        raise UnhandledType(element_type, path)


def _nested_rules(rule: FieldRule, path: tuple[Any, ...]) -> Mapping[str, Any]:
    if isinstance(rule.data, Mapping):
        return rule.data
    if isinstance(rule.data, list) and not rule.data:
        return {}
    raise ConfigError(f"Rule for `{format_path(path)}` is an array without a `data` rule set")


def is_literal_member(value: Any, options: tuple[Any, ...]) -> bool:
    """Strict membership: same type and equal, so `1` never matches `True` or `"1"`."""
    return any(type(option) is type(value) and option == value for option in options)
