from __future__ import annotations

import json

import pytest

from blockguard.blocks.handler import Block, BlockHandler
from blockguard.document import EditorDocument, parse_document
from blockguard.errors import DocumentError, InvalidEnumValue, UnknownBlockType


def _document(*blocks: dict) -> str:
    return json.dumps({"time": 1700000000000, "blocks": list(blocks), "version": "2.28.0"})


def test_document_blocks_are_sanitized_in_order(handler: BlockHandler) -> None:
    raw = _document(
        {"type": "header", "data": {"text": "Title <u>x</u>", "level": 2}},
        {"type": "paragraph", "data": {"text": "<b>Hi</b><script>alert(1)</script>"}, "tunes": {"anchor": "a1"}},
    )
    document = EditorDocument(raw, handler)

    assert len(document) == 2
    assert document.blocks() == [
        Block(type="header", data={"text": "Title x", "level": 2}, tunes={}),
        Block(type="paragraph", data={"text": "<b>Hi</b>"}, tunes={"anchor": "a1"}),
    ]


def test_document_accepts_decoded_input(handler: BlockHandler) -> None:
    document = EditorDocument({"blocks": [{"type": "paragraph", "data": {"text": "plain"}}]}, handler)
    assert document.to_dict() == [{"type": "paragraph", "data": {"text": "plain"}, "tunes": {}}]


def test_document_relays_explicit_null_tunes(handler: BlockHandler) -> None:
    document = EditorDocument({"blocks": [{"type": "paragraph", "data": {"text": "x"}, "tunes": None}]}, handler)
    assert document.blocks()[0].tunes is None


def test_document_validation_is_fail_fast(handler: BlockHandler) -> None:
    raw = _document(
        {"type": "paragraph", "data": {"text": "fine"}},
        {"type": "header", "data": {"text": "Title", "level": 9}},
        {"type": "video", "data": {}},
    )
    with pytest.raises(InvalidEnumValue, match="Block #1 \\(header\\)") as exc:
        EditorDocument(raw, handler)
    assert exc.value.block_index == 1


def test_unknown_block_type_in_document(handler: BlockHandler) -> None:
    with pytest.raises(UnknownBlockType, match="Block #0"):
        EditorDocument(_document({"type": "video", "data": {}}), handler)


@pytest.mark.parametrize(
    "raw,message",
    [
        ("", "Input is empty"),
        ("{not json", "Wrong JSON format"),
        ("{}", "Input is empty"),
        ("[1]", "must be an object"),
        ('{"time": 1}', "Field `blocks` is missing"),
        ('{"blocks": {}}', "Blocks is not an array"),
        ('{"blocks": ["paragraph"]}', "Block #0 must be an object"),
        ('{"blocks": [{"data": {}}]}', "has no `type`"),
        ('{"blocks": [{"type": "paragraph"}]}', "has no `data`"),
    ],
)
def test_malformed_documents(raw: str, message: str) -> None:
    with pytest.raises(DocumentError, match=message):
        parse_document(raw)


def test_empty_block_list_is_allowed(handler: BlockHandler) -> None:
    assert EditorDocument('{"blocks": []}', handler).blocks() == []
