"""Check command implementation."""

import json
import sys
from pathlib import Path

from rich.console import Console

from ..blocks.handler import BlockHandler
from ..config.load import load_rule_store
from ..document import EditorDocument
from ..errors import ConfigError, EngineError, ValidationError


def run_check(
    config_path: Path,
    document_path: Path | None,
    validate_only: bool = False,
    indent: int | None = 2,
) -> int:
    """Validate (and sanitize) an editor document.

    Args:
        config_path: Path to the schema configuration (.json or .toml)
        document_path: Path to the editor document, or None to read stdin
        validate_only: Only report whether the document is valid
        indent: JSON indentation of the sanitized output

    Returns:
        Exit code (0 = valid, 1 = rejected or misconfigured)
    """
    console = Console(stderr=True)

    try:
        handler = BlockHandler(load_rule_store(config_path))
    except ConfigError as e:
        console.print(f"Configuration error: {e}", style="bold red", markup=False)
        return 1

    if document_path is None:
        raw = sys.stdin.read()
        source = "<stdin>"
    else:
        try:
            raw = document_path.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"Cannot read document: {e}", style="bold red", markup=False)
            return 1
        source = str(document_path)

    try:
        document = EditorDocument(raw, handler)
        if validate_only:
            console.print(f"OK: {source} ({len(document)} blocks)", style="green", markup=False)
            return 0
        output = document.to_dict()
    except ValidationError as e:
        console.print(f"Invalid block: {e}", style="bold red", markup=False)
        return 1
    except EngineError as e:
        console.print(f"Rejected: {e}", style="bold red", markup=False)
        return 1

    print(json.dumps({"blocks": output}, ensure_ascii=False, indent=indent))
    return 0
