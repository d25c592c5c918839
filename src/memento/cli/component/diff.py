"""
memento component diff - Compare an installed component with its template

SUMMARY: Tell whether the installed copy differs from the template (no mutation)
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, add_type_arg, formatter, get_repo_root, resolve_component
from memento.cli._utils import update_manager
from memento.core.components.types import get_component_type
from memento.core.exceptions import MementoError

SUMMARY = "Show whether an installed component differs from its template"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_type_arg(parser)
    parser.add_argument("name", help="Installed component name (fuzzy matched)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        repo_root = get_repo_root(args)
        ctype = get_component_type(args.type)
        name = resolve_component(repo_root, args.name, ctype.name, scope="installed").name
        result = update_manager(repo_root).diff(ctype, name)
        if result.identical:
            message = f"{ctype.name} '{name}' matches its template"
        else:
            message = f"{ctype.name} '{name}' differs from its template"
        out.success(result.to_dict(), message)
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_diff_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
