"""CLI output formatting.

Every command prints through :class:`OutputFormatter` so ``--json`` and text
modes stay consistent across domains.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from memento.core.exceptions import MementoError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Print ``data`` as JSON, or ``message`` in text mode."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` on stderr.

        :class:`MementoError` instances contribute their hint (text mode) or
        their full ``to_json_error`` payload (JSON mode).
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {"error": error_code, "message": msg}
            if isinstance(error, MementoError):
                output.update(error.to_json_error())
                output["message"] = msg
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
            return
        print(f"Error: {msg}", file=sys.stderr)
        hint = getattr(error, "hint", None)
        if hint:
            print(f"Hint: {hint}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)


__all__ = ["OutputFormatter"]
