"""Error taxonomy for block validation and sanitization.

Every failure is raised synchronously and aborts the current call; nothing
is recovered internally. Field-level errors carry the offending key and the
path from the block root so nested failures can be reported precisely.
"""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for every error raised by blockguard."""


class ConfigError(EngineError, ValueError):
    """Schema configuration or markup grammar cannot be interpreted."""


class UnknownBlockType(EngineError):
    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Tool `{block_type}` not found in the configuration")


class DocumentError(EngineError):
    """Editor document is not shaped like `{"blocks": [...]}`."""


def format_path(path: tuple[Any, ...]) -> str:
    return ".".join(str(p) for p in path)


class ValidationError(EngineError):
    """A payload does not match its rule set."""

    def __init__(self, key: Any, message: str, path: tuple[Any, ...] = ()):
        self.key = key
        self.path = path or (key,)
        super().__init__(message)


class MissingRequiredField(ValidationError):
    def __init__(self, key: Any, path: tuple[Any, ...] = ()):
        path = path or (key,)
        super().__init__(key, f"Not found required param `{format_path(path)}`", path)


class UnknownField(ValidationError):
    def __init__(self, key: Any, path: tuple[Any, ...] = (), reason: str | None = None):
        path = path or (key,)
        message = f"Found extra param `{format_path(path)}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(key, message, path)


class InvalidEnumValue(ValidationError):
    def __init__(self, key: Any, value: Any, path: tuple[Any, ...] = ()):
        self.value = value
        path = path or (key,)
        super().__init__(
            key,
            f"Option `{format_path(path)}` with value {value!r} has invalid value. Check canBeOnly param.",
            path,
        )


class InvalidType(ValidationError):
    def __init__(self, key: Any, value: Any, expected: str, path: tuple[Any, ...] = ()):
        self.value = value
        self.expected = expected
        path = path or (key,)
        super().__init__(key, f"Option `{format_path(path)}` with value {value!r} must be {expected}", path)


class UnhandledType(ConfigError):
    """A rule declares a type the validator does not know."""

    def __init__(self, element_type: Any, path: tuple[Any, ...] = ()):
        self.element_type = element_type
        self.path = path
        message = f"Unhandled type `{element_type}`"
        if path:
            message = f"{message} for `{format_path(path)}`"
        super().__init__(message)
