"""Text processing utilities."""
from __future__ import annotations

from .frontmatter import (
    FRONTMATTER_PATTERN,
    ParsedDocument,
    has_frontmatter,
    parse_frontmatter,
)

__all__ = [
    "FRONTMATTER_PATTERN",
    "ParsedDocument",
    "has_frontmatter",
    "parse_frontmatter",
]
