"""Whole-document processing of editor output (`{"time": ..., "blocks": [...]}`)."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .blocks.handler import Block, BlockHandler
from .errors import DocumentError, EngineError

logger = logging.getLogger(__name__)


def parse_document(raw: str | Mapping[str, Any]) -> list[dict[str, Any]]:
    """Decode editor output and return its raw block list."""
    if isinstance(raw, str):
        if not raw.strip():
            raise DocumentError("Input is empty")
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Wrong JSON format: {e}") from e

    if not raw:
        raise DocumentError("Input is empty")
    if not isinstance(raw, Mapping):
        raise DocumentError("Input must be an object")
    if "blocks" not in raw:
        raise DocumentError("Field `blocks` is missing")

    blocks = raw["blocks"]
    if not isinstance(blocks, list):
        raise DocumentError("Blocks is not an array")

    for index, block in enumerate(blocks):
        if not isinstance(block, Mapping):
            raise DocumentError(f"Block #{index} must be an object")
        if not isinstance(block.get("type"), str):
            raise DocumentError(f"Block #{index} has no `type`")
        if "data" not in block:
            raise DocumentError(f"Block #{index} has no `data`")
    return list(blocks)


class EditorDocument:
    """
    A validated editor document.

    Construction validates every block (fail-fast); `blocks()` then returns
    the sanitized blocks in document order.
    """

    def __init__(self, raw: str | Mapping[str, Any], handler: BlockHandler):
        self.handler = handler
        self._blocks = parse_document(raw)
        self._validate()

    def _validate(self) -> None:
        for index, block in enumerate(self._blocks):
            try:
                self.handler.validate_block(block["type"], block["data"])
            except EngineError as e:
                e.block_index = index
                e.args = (f"Block #{index} ({block['type']}): {e}",)
                raise
        logger.debug("Validated %d block(s)", len(self._blocks))

    def __len__(self) -> int:
        return len(self._blocks)

    def blocks(self) -> list[Block]:
        return [
            self.handler.sanitize_block(block["type"], block["data"], block.get("tunes", {}))
            for block in self._blocks
        ]

    def to_dict(self) -> list[dict[str, Any]]:
        return [block.to_dict() for block in self.blocks()]
