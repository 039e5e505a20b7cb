"""Token-stream filters applied after bleach's sanitizer pass."""

from __future__ import annotations

from typing import Any, Iterable, Iterator
from urllib.parse import urlsplit

from bleach import html5lib_shim

_TEXT_TOKENS = ("Characters", "SpaceCharacters")


def _attr(token: dict[str, Any], name: str) -> str | None:
    return token.get("data", {}).get((None, name))


class TargetBlankFilter(html5lib_shim.Filter):
    """Open links to other hosts in a new window without leaking the opener."""

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for token in super().__iter__():
            if token["type"] in ("StartTag", "EmptyTag") and token["name"] == "a":
                href = _attr(token, "href")
                if href and _is_external(href):
                    data = dict(token.get("data", {}))
                    data[(None, "target")] = "_blank"
                    rel = (data.get((None, "rel")) or "").split()
                    for value in ("noreferrer", "noopener"):
                        if value not in rel:
                            rel.append(value)
                    data[(None, "rel")] = " ".join(rel)
                    token = {**token, "data": data}
            yield token


def _is_external(href: str) -> bool:
    try:
        return bool(urlsplit(href.strip()).netloc)
    except ValueError:
        return False


class RemoveEmptyFilter(html5lib_shim.Filter):
    """Drop elements with no content, innermost first.

    Whitespace does not count as content but survives the removal of the
    element around it. Elements with an empty content model, elements
    listed in `keep`, and elements carrying an `id` or `name` attribute are
    always kept.
    """

    def __init__(self, source: Iterable[dict[str, Any]], keep: frozenset[str] = frozenset()):
        super().__init__(source)
        self.keep = keep

    def __iter__(self) -> Iterator[dict[str, Any]]:
        # Each open element buffers its start token and the tokens seen inside it.
        stack: list[tuple[dict[str, Any], list[dict[str, Any]]]] = []

        for token in super().__iter__():
            kind = token["type"]
            if kind == "StartTag" and token["name"] not in self.keep:
                stack.append((token, []))
                continue

            if kind == "EndTag" and stack and stack[-1][0]["name"] == token["name"]:
                start, children = stack.pop()
                # An empty element leaves only its whitespace behind.
                element = children if self._is_removable(start, children) else [start, *children, token]
                if stack:
                    stack[-1][1].extend(element)
                else:
                    yield from element
                continue

            if stack:
                stack[-1][1].append(token)
            else:
                yield token

        for start, children in stack:
            yield start
            yield from children

    def _is_removable(self, start: dict[str, Any], children: list[dict[str, Any]]) -> bool:
        if _attr(start, "id") is not None or _attr(start, "name") is not None:
            return False
        for child in children:
            if child["type"] not in _TEXT_TOKENS:
                return False
            if child.get("data", "").strip():
                return False
        return True
