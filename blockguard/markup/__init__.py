"""Markup grammar and the bleach-backed string sanitizer."""

from .grammar import AllowedMarkup, ElementDef, MarkupGrammar, default_grammar, parse_allowed_tags
from .purifier import MarkupSanitizer

__all__ = [
    "AllowedMarkup",
    "ElementDef",
    "MarkupGrammar",
    "MarkupSanitizer",
    "default_grammar",
    "parse_allowed_tags",
]
