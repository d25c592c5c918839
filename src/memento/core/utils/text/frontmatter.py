"""YAML front matter parsing for component documents.

Component files open with a YAML block delimited by ``---`` lines::

    ---
    name: architect
    description: System design and architecture decisions
    dependencies: [reviewer]
    ---

    # Architect Mode
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

import yaml

# Matches content between the first pair of '---' markers at the start of a file
FRONTMATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


@dataclass
class ParsedDocument:
    """Result of parsing a document with YAML front matter.

    Attributes:
        frontmatter: Parsed YAML front matter as a dictionary
        content: The markdown content after the front matter
        raw_frontmatter: The raw YAML string
    """

    frontmatter: Dict[str, Any]
    content: str
    raw_frontmatter: str


def parse_frontmatter(content: str) -> ParsedDocument:
    """Parse YAML front matter from markdown content.

    A document without a front matter block yields an empty mapping and the
    full content.

    Raises:
        ValueError: If the block is not valid YAML or not a mapping

    Example:
        >>> doc = parse_frontmatter("---\\nname: architect\\n---\\n# Architect\\n")
        >>> doc.frontmatter["name"]
        'architect'
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return ParsedDocument(frontmatter={}, content=content, raw_frontmatter="")

    raw_yaml = match.group(1)
    try:
        parsed = yaml.safe_load(raw_yaml)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in frontmatter: {e}") from e
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Frontmatter must be a YAML mapping, got {type(parsed).__name__}")

    return ParsedDocument(
        frontmatter=parsed,
        content=content[match.end():],
        raw_frontmatter=raw_yaml,
    )


def has_frontmatter(content: str) -> bool:
    """Return True if ``content`` starts with a ``---`` front matter block."""
    return bool(FRONTMATTER_PATTERN.match(content))


__all__ = [
    "FRONTMATTER_PATTERN",
    "ParsedDocument",
    "parse_frontmatter",
    "has_frontmatter",
]
