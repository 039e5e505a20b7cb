"""blockguard - schema-driven validation and sanitization of editor blocks."""

__version__ = "0.1.0"

from .blocks.handler import Block, BlockHandler
from .config.store import RuleStore
from .document import EditorDocument
from .errors import (
    ConfigError,
    DocumentError,
    EngineError,
    InvalidEnumValue,
    InvalidType,
    MissingRequiredField,
    UnhandledType,
    UnknownBlockType,
    UnknownField,
    ValidationError,
)

__all__ = [
    "__version__",
    "Block",
    "BlockHandler",
    "ConfigError",
    "DocumentError",
    "EditorDocument",
    "EngineError",
    "InvalidEnumValue",
    "InvalidType",
    "MissingRequiredField",
    "RuleStore",
    "UnhandledType",
    "UnknownBlockType",
    "UnknownField",
    "ValidationError",
]
