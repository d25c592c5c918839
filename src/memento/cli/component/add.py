"""
memento component add - Install a component into the project

SUMMARY: Install a mode, workflow or agent (and the modes it depends on)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from memento.cli import add_force_flag, add_standard_flags, add_type_arg, formatter, get_repo_root, resolve_component
from memento.cli._utils import component_installer
from memento.core.components.types import get_component_type
from memento.core.exceptions import MementoError

SUMMARY = "Install a component and the modes it depends on"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_type_arg(parser)
    parser.add_argument("name", help="Component name (fuzzy matched unless --source is given)")
    parser.add_argument(
        "--source",
        type=Path,
        help="Install from this file instead of the template source",
    )
    add_force_flag(parser, "Reinstall even if already installed")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        repo_root = get_repo_root(args)
        ctype = get_component_type(args.type)
        source = args.source
        if source is not None:
            name = args.name
        else:
            match = resolve_component(repo_root, args.name, ctype.name)
            name = match.name
            # User-level components live outside the template source
            if match.scope == "global":
                source = match.component.path

        result = component_installer(repo_root).install(ctype, name, args.force, source=source)
        if result.skipped:
            out.success(
                result.to_dict(),
                f"{ctype.name} '{name}' is already installed (use --force to reinstall)",
                status="skipped",
            )
            return 0

        lines = [f"Installed {t} '{n}'" for t, n in result.installed]
        out.success(result.to_dict(), "\n".join(lines))
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_add_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
