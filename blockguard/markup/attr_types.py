"""Attribute value types for the markup grammar.

Each type answers one question: may this attribute value be kept? Values
that fail are dropped by the sanitizer along with the attribute.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlsplit

from ..errors import ConfigError

ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto", "tel"})

_TOKEN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.:-]*$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_LENGTH_RE = re.compile(r"^\d+(\.\d+)?(px|%)?$")
_MULTI_LENGTH_RE = re.compile(r"^(\d+(\.\d+)?(px|%)?|\d*\*)$")
_PIXELS_RE = re.compile(r"^\d+(px)?$")
_COLOR_RE = re.compile(r"^(#[0-9A-Fa-f]{3}|#[0-9A-Fa-f]{6}|[A-Za-z]+)$")
_LANGUAGE_RE = re.compile(r"^[A-Za-z]{1,8}(-[A-Za-z0-9]{1,8})*$")


@dataclass(frozen=True)
class AttrType:
    name: str
    check: Callable[[str], bool]

    def accepts(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return self.check(value.strip())


def _any(value: str) -> bool:
    return True


def _tokens(value: str) -> bool:
    parts = value.split()
    return bool(parts) and all(_TOKEN_RE.match(p) for p in parts)


def _uri(value: str) -> bool:
    if any(ch in value for ch in "\x00\t\n\r"):
        return False
    try:
        scheme = urlsplit(value).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in ALLOWED_SCHEMES


def _matches(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda value: bool(pattern.match(value))


def enum_type(options: Any, *, name: str = "Enum") -> AttrType:
    """Case-insensitive enumeration; options are a list or a comma-separated string."""
    if isinstance(options, str):
        options = options.split(",")
    if not isinstance(options, (list, tuple, set, frozenset)):
        raise ConfigError(f"Enum options must be a list or comma-separated string, got {options!r}")
    allowed = frozenset(str(o).strip().lower() for o in options if str(o).strip())
    if not allowed:
        raise ConfigError("Enum attribute declares no options")
    return AttrType(name, lambda value: value.lower() in allowed)


def integer_type(
    allow_negative: bool = True,
    allow_zero: bool = True,
    allow_positive: bool = True,
    *,
    name: str = "Number",
) -> AttrType:
    def check(value: str) -> bool:
        if not _INTEGER_RE.match(value):
            return False
        number = int(value)
        if number < 0:
            return allow_negative
        if number == 0:
            return allow_zero
        return allow_positive

    return AttrType(name, check)


BASE_TYPES: dict[str, AttrType] = {
    "Text": AttrType("Text", _any),
    "CDATA": AttrType("CDATA", _any),
    # Declarations are filtered by bleach's CSS sanitizer, not here.
    "CSS": AttrType("CSS", _any),
    "URI": AttrType("URI", _uri),
    "ID": AttrType("ID", _matches(_TOKEN_RE)),
    "Class": AttrType("Class", _tokens),
    "NMTOKENS": AttrType("NMTOKENS", _tokens),
    "Number": integer_type(name="Number"),
    "Integer": integer_type(name="Integer"),
    "Pixels": AttrType("Pixels", _matches(_PIXELS_RE)),
    "Length": AttrType("Length", _matches(_LENGTH_RE)),
    "MultiLength": AttrType("MultiLength", _matches(_MULTI_LENGTH_RE)),
    "Color": AttrType("Color", _matches(_COLOR_RE)),
    "LanguageCode": AttrType("LanguageCode", _matches(_LANGUAGE_RE)),
    "FrameTarget": enum_type(["_blank", "_self", "_parent", "_top"], name="FrameTarget"),
}


def _bool_type(attr_name: str) -> AttrType:
    # Boolean attributes only accept their own name (or an empty value).
    return AttrType("Bool", lambda value: value == "" or value.lower() == attr_name.lower())


def resolve_attr_type(spec: Any, attr_name: str) -> AttrType:
    """Turn an attribute declaration into an `AttrType`.

    Accepted forms:
      "Text"                                  a named base type
      "Enum#a,b,c"                            inline enumeration
      "Bool"                                  boolean attribute
      {"type": "Enum", "options": [...]}      enumeration
      {"type": "Number", "options": [neg, zero, pos]}
    """
    if isinstance(spec, str):
        type_name, _, inline_options = spec.partition("#")
        if type_name == "Enum":
            return enum_type(inline_options)
        if type_name == "Bool":
            return _bool_type(attr_name)
        if type_name in BASE_TYPES and not inline_options:
            return BASE_TYPES[type_name]
        raise ConfigError(f"Unknown attribute type `{spec}` for attribute `{attr_name}`")

    if isinstance(spec, Mapping) and isinstance(spec.get("type"), str):
        type_name = spec["type"]
        options = spec.get("options")
        if type_name == "Enum":
            return enum_type(options if options is not None else [])
        if type_name in ("Number", "Integer"):
            flags = list(options) if isinstance(options, (list, tuple)) else []
            flags += [None] * (3 - len(flags))
            negative, zero, positive = (True if f is None else bool(f) for f in flags[:3])
            return integer_type(negative, zero, positive, name=type_name)
        if options is None:
            return resolve_attr_type(type_name, attr_name)
        raise ConfigError(f"Attribute type `{type_name}` for `{attr_name}` does not take options")

    raise ConfigError(f"Cannot interpret attribute definition {spec!r} for `{attr_name}`")
