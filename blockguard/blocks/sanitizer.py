"""Markup sanitization of validated block payloads.

`sanitize` assumes `data` already passed `validate` against the same rule
set. It does not re-check required or extra fields: a missing rule raises a
plain lookup error and malformed payloads give undefined results. Callers
must validate first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from .schema import ALLOW_ALL_TAGS, PayloadKind, classify, expand_rule, iter_fields


class Purifier(Protocol):
    def purify(self, text: str, allowed_tags: Any) -> str:
        ...


def sanitize(rule_set: Mapping[str, Any], data: Any, purifier: Purifier) -> Any:
    """Return a copy of `data` with every string field run through `purifier`."""
    kind = classify(data)
    if kind is PayloadKind.NULL:
        return data

    result: dict[Any, Any] | list[Any] = [] if kind is PayloadKind.SEQUENCE else {}
    for key, value in iter_fields(data):
        rule = expand_rule(rule_set[key.rule_key])

        if value is None:
            clean = value
        elif rule.type == "string":
            clean = _sanitize_string(value, rule.allowed_tags, purifier)
        elif rule.type == "array":
            clean = sanitize(rule.data or {}, value, purifier)
        else:
            clean = value

        if isinstance(result, list):
            result.append(clean)
        else:
            result[key.raw] = clean

    return result


def _sanitize_string(value: Any, allowed_tags: Any, purifier: Purifier) -> Any:
    if allowed_tags == ALLOW_ALL_TAGS:
        return value
    if not isinstance(value, str):
        # A canBeOnly match may carry a non-string literal; leave it as declared.
        return value
    return purifier.purify(value, allowed_tags or "")
