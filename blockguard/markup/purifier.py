"""Markup sanitization bound to bleach.

A `MarkupSanitizer` owns an immutable `MarkupGrammar`. Each `allowedTags`
spec is resolved against it once and cached; every `purify` call then binds
a fresh `bleach.sanitizer.Cleaner`, which is cheap to build and, unlike a
shared instance, safe to use from concurrent callers.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from bleach.css_sanitizer import CSSSanitizer
from bleach.sanitizer import Cleaner
from bs4 import BeautifulSoup

from .attr_types import ALLOWED_SCHEMES
from .filters import RemoveEmptyFilter, TargetBlankFilter
from .grammar import KEEP_WHEN_EMPTY, AllowedMarkup, MarkupGrammar, default_grammar, resolve_allowed_tags

logger = logging.getLogger(__name__)

# Elements removed together with their text content.
CONTENT_DROPPING_TAGS = ("script", "style")

# Keeps bleach's default set of presentational CSS properties in `style`.
CSS_SANITIZER = CSSSanitizer()


class MarkupSanitizer:
    def __init__(self, grammar: MarkupGrammar | None = None):
        self.grammar = grammar or default_grammar()
        self._keep_when_empty = self.grammar.empty_elements | KEEP_WHEN_EMPTY
        self._resolved: dict[str, AllowedMarkup] = {}

    def allowed_markup(self, allowed_tags: Any) -> AllowedMarkup:
        """Resolve (and cache) an `allowedTags` spec against the grammar."""
        cache_key = _cache_key(allowed_tags)
        markup = self._resolved.get(cache_key)
        if markup is None:
            markup = resolve_allowed_tags(self.grammar, allowed_tags)
            self._resolved[cache_key] = markup
            logger.debug("Resolved allowedTags %r to %d element(s)", cache_key, len(markup.tags))
        return markup

    def purify(self, text: str, allowed_tags: Any = "") -> str:
        markup = self.allowed_markup(allowed_tags)
        if not text:
            return text

        cleaner = Cleaner(
            tags=markup.tags,
            attributes=lambda tag, name, value: markup.accepts(tag, name, value),
            protocols=ALLOWED_SCHEMES,
            strip=True,
            strip_comments=True,
            css_sanitizer=CSS_SANITIZER,
            filters=[TargetBlankFilter, partial(RemoveEmptyFilter, keep=self._keep_when_empty)],
        )
        return cleaner.clean(drop_hidden_content(text))


def drop_hidden_content(text: str) -> str:
    """Remove `<script>`/`<style>` elements including the text inside them.

    Any text holding markup or character references is re-serialized, so
    references such as `&nbsp;` always come back as the character they name.
    """
    if "<" not in text and "&" not in text:
        return text
    soup = BeautifulSoup(text, "html.parser")
    for element in soup.find_all(list(CONTENT_DROPPING_TAGS)):
        element.decompose()
    return str(soup)


def _cache_key(allowed_tags: Any) -> str:
    if allowed_tags is None:
        return ""
    if isinstance(allowed_tags, (list, tuple)):
        return ",".join(str(s) for s in allowed_tags)
    return str(allowed_tags)
