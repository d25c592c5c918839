"""
memento component remove - Remove an installed component

SUMMARY: Delete the installed file and its manifest entries
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, add_type_arg, formatter, get_repo_root, resolve_component
from memento.cli._utils import component_installer
from memento.core.components.types import get_component_type
from memento.core.exceptions import ComponentNotFoundError, MementoError

SUMMARY = "Remove an installed component"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_type_arg(parser)
    parser.add_argument("name", help="Installed component name (fuzzy matched)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        repo_root = get_repo_root(args)
        ctype = get_component_type(args.type)
        try:
            name = resolve_component(repo_root, args.name, ctype.name, scope="installed").name
        except ComponentNotFoundError:
            # Listed in the manifest but the file is already gone
            name = args.name
        component_installer(repo_root).remove(ctype, name)
        out.success({"type": ctype.name, "name": name}, f"Removed {ctype.name} '{name}'")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_remove_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
