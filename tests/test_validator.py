"""Structural validation of block payloads."""

from __future__ import annotations

import pytest

from blockguard.blocks.handler import BlockHandler
from blockguard.blocks.validator import is_literal_member, validate
from blockguard.errors import (
    ConfigError,
    InvalidEnumValue,
    InvalidType,
    MissingRequiredField,
    UnhandledType,
    UnknownBlockType,
    UnknownField,
    ValidationError,
)


def test_valid_paragraph(handler: BlockHandler) -> None:
    assert handler.validate_block("paragraph", {"text": "Hello <b>world</b>"}) is True


def test_unknown_block_type_is_rejected_before_fields(handler: BlockHandler) -> None:
    with pytest.raises(UnknownBlockType, match="noSuchType"):
        handler.validate_block("noSuchType", {})


def test_missing_required_field() -> None:
    with pytest.raises(MissingRequiredField) as exc:
        validate({"text": "string"}, {})
    assert exc.value.key == "text"


def test_first_declared_missing_field_is_reported() -> None:
    with pytest.raises(MissingRequiredField) as exc:
        validate({"x": "string", "y": "string"}, {})
    assert exc.value.key == "x"

    with pytest.raises(MissingRequiredField) as exc:
        validate({"y": "string", "x": "string"}, {})
    assert exc.value.key == "y"


def test_null_value_counts_as_missing_for_required_field() -> None:
    with pytest.raises(MissingRequiredField):
        validate({"text": "string"}, {"text": None})


def test_optional_field_may_be_absent() -> None:
    assert validate({"a": "string", "b": {"type": "string", "required": False}}, {"a": "x"})


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(UnknownField) as exc:
        validate({"a": "string"}, {"a": "x", "b": "y"})
    assert exc.value.key == "b"


def test_required_check_runs_before_extra_check() -> None:
    with pytest.raises(MissingRequiredField):
        validate({"a": "string"}, {"b": "y"})


def test_extra_check_runs_before_type_check() -> None:
    with pytest.raises(UnknownField):
        validate({"a": "string"}, {"a": 1, "b": "y"})


@pytest.mark.parametrize(
    "rule,value",
    [
        ("string", 1),
        ("string", None),
        ("integer", "1"),
        ("integer", 1.0),
        ("integer", True),
        ("boolean", 1),
        ("boolean", "true"),
    ],
)
def test_primitive_type_mismatch(rule: str, value: object) -> None:
    payload = {"f": value}
    if value is None:
        # Nulls are reported as missing for required fields.
        with pytest.raises(MissingRequiredField):
            validate({"f": rule}, payload)
        return
    with pytest.raises(InvalidType) as exc:
        validate({"f": rule}, payload)
    assert exc.value.key == "f"


@pytest.mark.parametrize("rule,value", [("string", ""), ("integer", 0), ("integer", -5), ("boolean", False)])
def test_primitive_type_match(rule: str, value: object) -> None:
    assert validate({"f": rule}, {"f": value})


def test_can_be_only_rejects_values_outside_the_set(handler: BlockHandler) -> None:
    with pytest.raises(InvalidEnumValue) as exc:
        handler.validate_block("header", {"text": "Title", "level": 5})
    assert exc.value.key == "level"
    assert exc.value.value == 5


def test_can_be_only_short_circuits_type_checks() -> None:
    rules = {"f": {"type": "integer", "canBeOnly": ["a", "b"]}}
    assert validate(rules, {"f": "a"})


def test_can_be_only_membership_is_strict() -> None:
    rules = {"f": {"type": "integer", "canBeOnly": [1, 2]}}
    with pytest.raises(InvalidEnumValue):
        validate(rules, {"f": True})
    with pytest.raises(InvalidEnumValue):
        validate(rules, {"f": "1"})
    assert not is_literal_member(1.0, (1,))
    assert is_literal_member("x", ("x",))


def test_list_shorthand_is_an_enum(handler: BlockHandler) -> None:
    assert handler.validate_block("list", {"style": "ordered", "items": []})
    with pytest.raises(InvalidEnumValue):
        handler.validate_block("list", {"style": "dotted", "items": []})


def test_empty_list_shorthand_accepts_nothing() -> None:
    with pytest.raises(InvalidEnumValue):
        validate({"f": []}, {"f": ""})


def test_nullable_field(handler: BlockHandler) -> None:
    data = {"url": "https://example.com/a.png", "caption": None, "withBorder": False}
    assert handler.validate_block("image", data)


def test_null_requires_both_optional_and_allow_null() -> None:
    with pytest.raises(InvalidType):
        validate({"a": "string", "f": {"type": "string", "required": False}}, {"a": "x", "f": None})


def test_shorthand_and_canonical_rules_validate_alike() -> None:
    for value in ("text", 1, True):
        outcomes = []
        for rule in ("string", {"type": "string"}):
            try:
                outcomes.append(validate({"f": rule}, {"f": value}))
            except ValidationError as e:
                outcomes.append(type(e))
        assert outcomes[0] == outcomes[1]


def test_positional_items_use_the_wildcard_rule(handler: BlockHandler) -> None:
    assert handler.validate_block("list", {"style": "unordered", "items": ["one", "<b>two</b>"]})
    with pytest.raises(InvalidType) as exc:
        handler.validate_block("list", {"style": "unordered", "items": ["one", 2]})
    assert exc.value.path == ("items", 1)


def test_nested_arrays_are_validated_recursively(handler: BlockHandler) -> None:
    data = {"items": [{"text": "Buy milk", "checked": True}, {"text": "Call", "checked": False}]}
    assert handler.validate_block("checklist", data)

    with pytest.raises(MissingRequiredField) as exc:
        handler.validate_block("checklist", {"items": [{"text": "Buy milk"}]})
    assert exc.value.path == ("items", 0, "checked")
    assert "items.0.checked" in str(exc.value)


def test_positional_element_without_wildcard_rule() -> None:
    rules = {"items": {"type": "array", "data": {"title": {"type": "string", "required": False}}}}
    with pytest.raises(UnknownField) as exc:
        validate(rules, {"items": [{"title": "x"}]})
    assert exc.value.path == ("items", 0)


def test_array_rule_rejects_scalar_values() -> None:
    rules = {"items": {"type": "array", "data": {"-": "string"}}}
    with pytest.raises(InvalidType) as exc:
        validate(rules, {"items": "not a list"})
    assert exc.value.expected == "array"


def test_block_data_must_be_a_container(handler: BlockHandler) -> None:
    with pytest.raises(InvalidType):
        handler.validate_block("paragraph", "text")


def test_unhandled_type_surfaces_at_validation_time() -> None:
    handler = BlockHandler({"tools": {"odd": {"f": "float"}}})
    with pytest.raises(UnhandledType, match="float"):
        handler.validate_block("odd", {"f": 1.5})


def test_malformed_rule_surfaces_at_validation_time() -> None:
    handler = BlockHandler({"tools": {"odd": {"f": 42}}})
    with pytest.raises(ConfigError):
        handler.validate_block("odd", {"f": "x"})


def test_array_rule_without_nested_rules() -> None:
    with pytest.raises(ConfigError, match="data"):
        validate({"items": {"type": "array"}}, {"items": ["a"]})
