"""Rule store: per-block-type rule sets and custom markup tags, built once from configuration."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..errors import ConfigError, UnknownBlockType
from ..markup.attr_types import AttrType, resolve_attr_type
from ..markup.grammar import (
    CONTENT_MODELS,
    CONTENT_SETS,
    ElementDef,
    MarkupGrammar,
    default_grammar,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomTagDefinition:
    """A caller-declared element added to the markup grammar.

    Configuration form (keys in parentheses are accepted aliases):

        "customTags": {
          "tagName": {
            "contentSet": "Inline",            ("type")
            "contentModel": "Inline",          ("contents")
            "attributeCollection": "Common",   ("collection")
            "attributes": {
              "attr1": "Text",
              "attr2": {"type": "Enum", "options": "a,b,c"},
              "attr3": {"type": "Number", "options": [false, true, true]}
            }
          }
        }
    """

    tag: str
    content_set: str | None = "Inline"
    content_model: str = "Inline"
    attribute_collection: str | None = "Common"
    attributes: Mapping[str, AttrType] = field(default_factory=dict)

    @classmethod
    def from_config(cls, tag: Any, data: Any) -> CustomTagDefinition:
        if not isinstance(tag, str) or not tag.strip():
            raise ConfigError(f"Custom tag name must be a non-empty string, got {tag!r}")
        tag = tag.strip().lower()
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Custom tag `{tag}` must be an object")

        content_set = _pick(data, "contentSet", "type", default="Inline")
        if content_set is False:
            content_set = None
        elif not isinstance(content_set, str) or content_set not in CONTENT_SETS:
            raise ConfigError(f"Custom tag `{tag}` has unknown content set {content_set!r}")

        content_model = _pick(data, "contentModel", "contents", default="Inline")
        if not isinstance(content_model, str) or content_model.split(":", 1)[0].strip() not in CONTENT_MODELS:
            raise ConfigError(f"Custom tag `{tag}` has unknown content model {content_model!r}")

        collection = _pick(data, "attributeCollection", "collection", default="Common")
        if collection is False:
            collection = None
        elif not isinstance(collection, str):
            raise ConfigError(f"Custom tag `{tag}` has invalid attribute collection {collection!r}")

        raw_attributes = data.get("attributes") or {}
        if not isinstance(raw_attributes, Mapping):
            raise ConfigError(f"Attributes of custom tag `{tag}` must be an object")
        attributes = {
            str(name).lower(): resolve_attr_type(spec, str(name)) for name, spec in raw_attributes.items()
        }

        return cls(
            tag=tag,
            content_set=content_set,
            content_model=content_model.split(":", 1)[0].strip(),
            attribute_collection=collection,
            attributes=MappingProxyType(attributes),
        )

    def to_element(self) -> ElementDef:
        return ElementDef(
            name=self.tag,
            content_set=self.content_set,
            content_model=self.content_model,
            collection=self.attribute_collection,
            attributes=self.attributes,
        )


def _pick(data: Mapping[str, Any], key: str, alias: str, *, default: Any) -> Any:
    value = data.get(key)
    if value is None or value == "":
        value = data.get(alias)
    if value is None or value == "":
        return default
    return value


def build_grammar(custom_tags: list[CustomTagDefinition]) -> MarkupGrammar:
    """Default grammar extended with the custom tags (which win on name clashes)."""
    grammar = default_grammar()
    for definition in custom_tags:
        collection = definition.attribute_collection
        if collection is not None and collection not in grammar.collections:
            raise ConfigError(f"Custom tag `{definition.tag}` uses unknown attribute collection `{collection}`")
    return grammar.with_elements(d.to_element() for d in custom_tags)


class RuleStore:
    """Per-block-type rule sets plus the markup grammar, read-only after construction."""

    def __init__(self, tools: Mapping[str, Mapping[str, Any]], custom_tags: list[CustomTagDefinition] | None = None):
        self._tools = MappingProxyType(copy.deepcopy(dict(tools)))
        self.custom_tags = tuple(custom_tags or ())
        self.grammar = build_grammar(list(self.custom_tags))

    @classmethod
    def from_config(cls, config: Any) -> RuleStore:
        """Build a store from deserialized configuration `{"tools": ..., "customTags": ...}`."""
        if not config:
            raise ConfigError("Configuration data is empty")
        if not isinstance(config, Mapping):
            raise ConfigError("Configuration must be an object")

        tools = config.get("tools")
        if tools is None:
            raise ConfigError("Tools not found in configuration")
        if not isinstance(tools, Mapping):
            raise ConfigError("Tools must be an object mapping block types to rules")
        for name, rules in tools.items():
            if not isinstance(rules, Mapping):
                raise ConfigError(f"Rules of tool `{name}` must be an object")

        raw_tags = config.get("customTags") or {}
        if not isinstance(raw_tags, Mapping):
            raise ConfigError("customTags must be an object mapping tag names to definitions")
        custom_tags = [CustomTagDefinition.from_config(tag, data) for tag, data in raw_tags.items()]

        logger.debug("Loaded %d tool(s) and %d custom tag(s)", len(tools), len(custom_tags))
        return cls(tools, custom_tags)

    @property
    def tools(self) -> Mapping[str, Mapping[str, Any]]:
        return self._tools

    def has_tool(self, block_type: str) -> bool:
        return block_type in self._tools

    def rules_for(self, block_type: str) -> Mapping[str, Any]:
        try:
            return self._tools[block_type]
        except (KeyError, TypeError):
            raise UnknownBlockType(block_type) from None
