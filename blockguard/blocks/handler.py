"""Engine surface: validate and sanitize one block at a time."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..config.store import RuleStore
from ..markup.purifier import MarkupSanitizer
from .sanitizer import sanitize
from .validator import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Block:
    type: str
    data: Any
    tunes: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.data, "tunes": self.tunes}


class BlockHandler:
    """
    Validate and sanitize editor blocks against a per-type rule set.

    The handler is built once from schema configuration and is read-only
    afterwards, so one instance can serve concurrent callers.

    Usage:
        handler = BlockHandler({"tools": {"paragraph": {"text": {"type": "string", "allowedTags": "b,i"}}}})
        handler.validate_block("paragraph", data)
        block = handler.sanitize_block("paragraph", data, tunes)
    """

    def __init__(self, configuration: Mapping[str, Any] | RuleStore):
        if isinstance(configuration, RuleStore):
            self.rules = configuration
        else:
            self.rules = RuleStore.from_config(configuration)
        self.purifier = MarkupSanitizer(self.rules.grammar)

    def validate_block(self, block_type: str, block_data: Any) -> bool:
        """Check `block_data` against the rules of `block_type`; raises on the first violation."""
        rule_set = self.rules.rules_for(block_type)
        logger.debug("Validating block of type %s", block_type)
        return validate(rule_set, block_data)

    def sanitize_block(self, block_type: str, block_data: Any, block_tunes: Any = None) -> Block:
        """
        Return the block with every string field sanitized.

        `block_data` must already have passed `validate_block` for the same
        block type; sanitizing unvalidated data has undefined results.
        """
        rule_set = self.rules.rules_for(block_type)
        logger.debug("Sanitizing block of type %s", block_type)
        return Block(
            type=block_type,
            data=sanitize(rule_set, block_data, self.purifier),
            tunes=block_tunes,
        )
