"""Markup grammar: which elements exist and which attributes they may carry.

The grammar is built once per engine (defaults plus custom tags) and never
mutated afterwards. A field's `allowedTags` spec selects a subset of it; the
selection is resolved against the grammar so a spec naming an unknown element
or attribute fails loudly instead of silently allowing nothing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from ..errors import ConfigError
from .attr_types import BASE_TYPES, AttrType, enum_type, resolve_attr_type

CONTENT_SETS = frozenset({"Inline", "Block", "Flow", "Formctrl", "List", "Table"})
CONTENT_MODELS = frozenset({"Empty", "Inline", "Flow", "Block", "Optional", "Required", "Custom", "Chameleon"})

# Elements that are kept even when empty.
KEEP_WHEN_EMPTY = frozenset({"td", "th", "colgroup", "iframe"})


@dataclass(frozen=True)
class ElementDef:
    name: str
    content_set: str | None = "Inline"
    content_model: str = "Inline"
    collection: str | None = "Common"
    attributes: Mapping[str, AttrType] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.content_model == "Empty"


@dataclass(frozen=True)
class MarkupGrammar:
    elements: Mapping[str, ElementDef]
    collections: Mapping[str, Mapping[str, AttrType]]

    def element(self, name: str) -> ElementDef | None:
        return self.elements.get(name)

    def attributes_of(self, name: str) -> dict[str, AttrType]:
        """All attributes an element may carry: its own plus its collection's."""
        element = self.elements[name]
        merged = dict(self.collections.get(element.collection or "", {}))
        merged.update(element.attributes)
        return merged

    @property
    def global_attributes(self) -> Mapping[str, AttrType]:
        return self.collections["Common"]

    @property
    def empty_elements(self) -> frozenset[str]:
        return frozenset(name for name, el in self.elements.items() if el.is_empty)

    def with_elements(self, elements: Iterable[ElementDef]) -> MarkupGrammar:
        merged = dict(self.elements)
        for element in elements:
            merged[element.name] = element
        return replace(self, elements=MappingProxyType(merged))


_CORE = {
    "class": BASE_TYPES["Class"],
    "id": BASE_TYPES["ID"],
    "style": BASE_TYPES["CSS"],
    "title": BASE_TYPES["Text"],
}
_I18N = {"lang": BASE_TYPES["LanguageCode"], "dir": enum_type(["ltr", "rtl"])}

DEFAULT_COLLECTIONS: Mapping[str, Mapping[str, AttrType]] = MappingProxyType(
    {
        "Core": MappingProxyType(dict(_CORE)),
        "I18N": MappingProxyType(dict(_I18N)),
        "Lang": MappingProxyType(dict(_I18N)),
        "Common": MappingProxyType({**_CORE, **_I18N}),
    }
)


def _el(tag: str, content_set: str = "Inline", content_model: str = "Inline", **attrs: str) -> ElementDef:
    resolved = {attr.replace("_", "-"): resolve_attr_type(spec, attr) for attr, spec in attrs.items()}
    return ElementDef(tag, content_set, content_model, "Common", MappingProxyType(resolved))


_CELL = dict(
    abbr="Text",
    align="Enum#left,center,right,justify,char",
    valign="Enum#top,middle,bottom,baseline",
    colspan="Number",
    rowspan="Number",
    width="Length",
    height="Length",
    bgcolor="Color",
    nowrap="Bool",
)


def _default_elements() -> list[ElementDef]:
    inline = [
        _el("a", href="URI", rel="Text", target="FrameTarget", name="ID"),
        _el("br", content_model="Empty"),
        _el("img", content_model="Empty", src="URI", alt="Text", width="Length", height="Length", longdesc="URI"),
        _el("del", cite="URI", datetime="Text"),
        _el("ins", cite="URI", datetime="Text"),
        _el("q", cite="URI"),
        _el("bdo", dir="Enum#ltr,rtl"),
        _el("font", size="Text", color="Color", face="Text"),
        _el("mark"),
    ]
    inline += [
        _el(name)
        for name in (
            "abbr", "acronym", "b", "big", "cite", "code", "dfn", "em", "i", "kbd",
            "s", "samp", "small", "span", "strike", "strong", "sub", "sup", "tt", "u", "var",
        )
    ]

    block = [
        _el("address", "Block", "Inline"),
        _el("blockquote", "Block", "Flow", cite="URI"),
        _el("center", "Block", "Flow"),
        _el("div", "Block", "Flow", align="Enum#left,center,right,justify"),
        _el("p", "Block", "Inline", align="Enum#left,center,right,justify"),
        _el("pre", "Block", "Inline", width="Number"),
        _el("hr", "Block", "Empty", align="Enum#left,center,right", size="Pixels", width="Length", noshade="Bool"),
    ]
    block += [_el(f"h{n}", "Block", "Inline", align="Enum#left,center,right,justify") for n in range(1, 7)]

    lists = [
        _el("ul", "Block", "Required", type="Enum#disc,square,circle"),
        _el("ol", "Block", "Required", start="Number", type="Enum#1,a,A,i,I"),
        _el("li", None, "Flow", type="Text", value="Number"),
        _el("dl", "Block", "Required"),
        _el("dt", None, "Inline"),
        _el("dd", None, "Flow"),
    ]

    tables = [
        _el(
            "table",
            "Block",
            "Table",
            border="Pixels",
            cellpadding="Length",
            cellspacing="Length",
            width="Length",
            summary="Text",
            align="Enum#left,center,right",
            bgcolor="Color",
        ),
        _el("caption", None, "Inline"),
        _el("colgroup", None, "Optional", span="Number", width="MultiLength"),
        _el("col", None, "Empty", span="Number", width="MultiLength"),
        _el("thead", None, "Required"),
        _el("tbody", None, "Required"),
        _el("tfoot", None, "Required"),
        _el("tr", None, "Required", align="Enum#left,center,right,justify,char", valign="Enum#top,middle,bottom,baseline", bgcolor="Color"),
        _el("td", None, "Flow", **_CELL),
        _el("th", None, "Flow", scope="Enum#row,col,rowgroup,colgroup", **_CELL),
    ]
    return inline + block + lists + tables


def default_grammar() -> MarkupGrammar:
    """HTML elements available to every `allowedTags` spec."""
    return MarkupGrammar(
        elements=MappingProxyType({el.name: el for el in _default_elements()}),
        collections=DEFAULT_COLLECTIONS,
    )


@dataclass(frozen=True)
class AllowedMarkup:
    """A resolved `allowedTags` spec: element names and per-element attributes."""

    tags: frozenset[str]
    attributes: Mapping[str, frozenset[str]]
    types: Mapping[tuple[str, str], AttrType]

    def accepts(self, tag: str, name: str, value: str) -> bool:
        if name not in self.attributes.get(tag, frozenset()):
            return False
        attr_type = self.types.get((tag, name))
        return attr_type is not None and attr_type.accepts(value)


_SPLIT_RE = re.compile(r"[,\n\r]+")
_ENTRY_RE = re.compile(r"^(?P<element>[A-Za-z][A-Za-z0-9_-]*|\*)(\[(?P<attrs>[^\]]*)\])?$")


def parse_allowed_tags(spec: Any) -> tuple[list[str], dict[str, list[str]]]:
    """Parse `"a[href|title],b,*[class]"` into elements and attributes per element.

    Attributes listed under `*` apply to every allowed element.
    """
    if spec is None:
        return [], {}
    if isinstance(spec, (list, tuple)):
        spec = ",".join(str(s) for s in spec)
    if not isinstance(spec, str):
        raise ConfigError(f"allowedTags must be a string, got {spec!r}")

    elements: list[str] = []
    attributes: dict[str, list[str]] = {}
    compact = spec.replace(" ", "").replace("\t", "")
    for chunk in _SPLIT_RE.split(compact):
        if not chunk:
            continue
        match = _ENTRY_RE.match(chunk)
        if match is None:
            raise ConfigError(f"Cannot parse allowedTags entry `{chunk}`")
        element = match.group("element").lower()
        if element != "*" and element not in elements:
            elements.append(element)
        attrs = match.group("attrs")
        if attrs:
            bucket = attributes.setdefault(element, [])
            for attr in attrs.split("|"):
                attr = attr.lower()
                if attr and attr not in bucket:
                    bucket.append(attr)
    return elements, attributes


def resolve_allowed_tags(grammar: MarkupGrammar, spec: Any) -> AllowedMarkup:
    elements, attributes = parse_allowed_tags(spec)

    for name in elements:
        if grammar.element(name) is None:
            raise ConfigError(f"Element `{name}` is not supported by the markup grammar")

    global_attrs = attributes.get("*", [])
    for attr in global_attrs:
        if attr not in grammar.global_attributes:
            raise ConfigError(f"Global attribute `{attr}` is not supported by the markup grammar")

    allowed: dict[str, frozenset[str]] = {}
    types: dict[tuple[str, str], AttrType] = {}
    for name in elements:
        available = grammar.attributes_of(name)
        names = set()
        for attr in attributes.get(name, []):
            if attr not in available:
                raise ConfigError(f"Attribute `{name}.{attr}` is not supported by the markup grammar")
            names.add(attr)
            types[(name, attr)] = available[attr]
        for attr in global_attrs:
            names.add(attr)
            types[(name, attr)] = available.get(attr, grammar.global_attributes[attr])
        allowed[name] = frozenset(names)

    return AllowedMarkup(
        tags=frozenset(elements),
        attributes=MappingProxyType(allowed),
        types=MappingProxyType(types),
    )
