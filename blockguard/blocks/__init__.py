"""Rule expansion, validation and sanitization of block payloads."""

from .handler import Block, BlockHandler
from .sanitizer import sanitize
from .schema import WILDCARD_KEY, FieldKey, FieldRule, expand_rule
from .validator import validate

__all__ = [
    "Block",
    "BlockHandler",
    "FieldKey",
    "FieldRule",
    "WILDCARD_KEY",
    "expand_rule",
    "sanitize",
    "validate",
]
