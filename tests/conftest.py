"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from blockguard.blocks.handler import BlockHandler


@pytest.fixture
def editor_config() -> dict[str, Any]:
    """Rule sets for a typical set of editor tools."""
    return {
        "tools": {
            "paragraph": {
                "text": {"type": "string", "allowedTags": "i,b,u,a[href],mark,br"},
            },
            "header": {
                "text": {"type": "string", "allowedTags": "b,i"},
                "level": {"type": "integer", "canBeOnly": [2, 3, 4]},
            },
            "list": {
                "style": ["ordered", "unordered"],
                "items": {
                    "type": "array",
                    "data": {"-": {"type": "string", "allowedTags": "i,b"}},
                },
            },
            "image": {
                "url": "string",
                "caption": {"type": "string", "required": False, "allow_null": True},
                "withBorder": "boolean",
                "stretched": {"type": "boolean", "required": False},
            },
            "raw": {
                "html": {"type": "string", "allowedTags": "*"},
            },
            "checklist": {
                "items": {
                    "type": "array",
                    "data": {
                        "-": {
                            "type": "array",
                            "data": {"text": "string", "checked": "boolean"},
                        }
                    },
                },
            },
        },
        "customTags": {
            "note": {
                "contentSet": "Inline",
                "contentModel": "Inline",
                "attributeCollection": "Common",
                "attributes": {
                    "kind": {"type": "Enum", "options": "info,warning"},
                    "level": {"type": "Number", "options": [False, False, True]},
                },
            },
        },
    }


@pytest.fixture
def handler(editor_config: dict[str, Any]) -> BlockHandler:
    return BlockHandler(editor_config)


class RecordingPurifier:
    """Stand-in purifier that tags every string it is asked to clean."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def purify(self, text: str, allowed_tags: Any) -> str:
        self.calls.append((text, allowed_tags))
        return f"clean({text})"


@pytest.fixture
def recording_purifier() -> RecordingPurifier:
    return RecordingPurifier()
