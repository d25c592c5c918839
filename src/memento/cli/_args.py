"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from memento.core.components.types import type_names


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root path",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str = "Overwrite existing files") -> None:
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help=help_text,
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def add_type_arg(parser: argparse.ArgumentParser, *, required: bool = True) -> None:
    """Add the component type positional (``mode``, ``workflows``...)."""
    parser.add_argument(
        "type",
        nargs=None if required else "?",
        help=f"Component type ({', '.join(type_names())})",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags every command takes: --json, --repo-root, --verbose."""
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_type_arg",
    "add_standard_flags",
]
