"""Field rules: expanding the shorthand rule forms and classifying payload values.

A rule is a bare type name (`"string"`), a list of allowed literals
(`["a", "b"]`), or an object with `type`, `required`, `allow_null`,
`allowedTags`, `canBeOnly` and, for arrays, a nested `data` rule set.
Positional payload elements are matched by the `-` rule.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from ..errors import ConfigError

# Rule key used for elements of a positional (list-like) payload.
WILDCARD_KEY = "-"

# Value of `allowedTags` that leaves a string field untouched.
ALLOW_ALL_TAGS = "*"

TYPE_ALIASES: dict[str, str] = {
    "int": "integer",
    "bool": "boolean",
}


@dataclass(frozen=True)
class FieldRule:
    """Canonical per-field constraint.

    `data` is the nested rule set for `array` rules and is left raw; its own
    field rules are expanded lazily as the payload is walked.
    """

    type: str | None
    required: bool = True
    allow_null: bool = False
    allowed_tags: Any = None
    can_be_only: tuple[Any, ...] | None = None
    data: Any = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def nullable(self) -> bool:
        return self.required is False and self.allow_null is True


@dataclass(frozen=True)
class FieldKey:
    """A payload key: either a named field or a positional index."""

    name: str | None = None
    index: int | None = None

    @property
    def positional(self) -> bool:
        return self.index is not None

    @property
    def rule_key(self) -> str:
        return WILDCARD_KEY if self.positional else str(self.name)

    @property
    def raw(self) -> Any:
        return self.index if self.positional else self.name

    def __str__(self) -> str:
        return str(self.raw)


class PayloadKind(Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NUMBER = "number"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NULL = "null"
    OTHER = "other"


def classify(value: Any) -> PayloadKind:
    """Map a decoded payload value onto its structural kind."""
    if value is None:
        return PayloadKind.NULL
    # bool is a subclass of int, so it has to be tested first.
    if isinstance(value, bool):
        return PayloadKind.BOOLEAN
    if isinstance(value, int):
        return PayloadKind.INTEGER
    if isinstance(value, float):
        return PayloadKind.NUMBER
    if isinstance(value, str):
        return PayloadKind.STRING
    if isinstance(value, Mapping):
        return PayloadKind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return PayloadKind.SEQUENCE
    return PayloadKind.OTHER


def is_container(value: Any) -> bool:
    return classify(value) in (PayloadKind.MAPPING, PayloadKind.SEQUENCE)


def iter_fields(data: Any) -> Iterator[tuple[FieldKey, Any]]:
    """Yield `(FieldKey, value)` pairs of a mapping or list payload in order."""
    kind = classify(data)
    if kind is PayloadKind.SEQUENCE:
        for index, value in enumerate(data):
            yield FieldKey(index=index), value
    elif kind is PayloadKind.MAPPING:
        for key, value in data.items():
            # Integer keys only appear in payloads built in Python; treat them as positions.
            if isinstance(key, int) and not isinstance(key, bool):
                yield FieldKey(index=key), value
            else:
                yield FieldKey(name=key), value


def is_associative(rule: Any) -> bool:
    """True for explicitly keyed collections.

    An empty collection is deliberately classified as positional, so `[]`
    and `{}` both expand to an (empty) `canBeOnly` shorthand.
    """
    if isinstance(rule, Mapping):
        if not rule:
            return False
        return list(rule.keys()) != list(range(len(rule)))
    return False


def expand_rule(rule: Any) -> FieldRule:
    """Normalize a raw field rule into its canonical `FieldRule`.

    Accepted shapes:
      "string"                       -> {type: "string"}
      ["left", "right"]              -> {type: "string", canBeOnly: [...]}
      {"type": ..., "required": ...} -> taken as canonical
    """
    if isinstance(rule, str):
        return FieldRule(type=_normalize_type(rule))

    if isinstance(rule, Mapping) and is_associative(rule):
        return _from_mapping(rule)

    if isinstance(rule, (Mapping, list, tuple)):
        values = tuple(rule.values()) if isinstance(rule, Mapping) else tuple(rule)
        return FieldRule(type="string", can_be_only=values)

    raise ConfigError(f"Cannot determine element type of the rule {rule!r}")


def _normalize_type(name: Any) -> str | None:
    if name is None:
        return None
    if not isinstance(name, str):
        return name
    return TYPE_ALIASES.get(name, name)


_CANONICAL_KEYS = {"type", "required", "allow_null", "allowedTags", "canBeOnly", "data"}


def _from_mapping(rule: Mapping[str, Any]) -> FieldRule:
    can_be_only = rule.get("canBeOnly")
    if can_be_only is not None:
        if isinstance(can_be_only, Mapping):
            can_be_only = tuple(can_be_only.values())
        elif isinstance(can_be_only, (list, tuple, set, frozenset)):
            can_be_only = tuple(can_be_only)
        else:
            raise ConfigError(f"canBeOnly must be a list of values, got {can_be_only!r}")

    return FieldRule(
        type=_normalize_type(rule.get("type")),
        required=True if rule.get("required") is None else rule["required"],
        allow_null=False if rule.get("allow_null") is None else rule["allow_null"],
        allowed_tags=rule.get("allowedTags"),
        can_be_only=can_be_only,
        data=rule.get("data"),
        extra={k: v for k, v in rule.items() if k not in _CANONICAL_KEYS},
    )


def resolve_rule(rule_set: Mapping[str, Any], key: FieldKey) -> Any:
    """Return the raw rule for `key`, or None when the rule set has no entry."""
    return rule_set.get(key.rule_key)
