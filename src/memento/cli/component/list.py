"""
memento component list - List installed and available components

SUMMARY: List components by type
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, add_type_arg, formatter, get_repo_root
from memento.cli._utils import component_installer
from memento.core.components.types import get_component_type
from memento.core.exceptions import MementoError

SUMMARY = "List installed and available components"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_type_arg(parser, required=False)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--installed", action="store_true", help="Only installed components")
    group.add_argument("--available", action="store_true", help="Only template components")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        installer = component_installer(get_repo_root(args))
        wanted = [get_component_type(args.type).plural] if args.type else None

        payload = {}
        if not args.available:
            installed = installer.list_installed()
            payload["installed"] = {k: v for k, v in installed.items() if wanted is None or k in wanted}
        if not args.installed:
            available = installer.list_available()
            payload["available"] = {
                k: [m.to_dict() for m in v] for k, v in available.items() if wanted is None or k in wanted
            }

        if out.json_mode:
            out.json_output(payload)
            return 0

        for plural, names in payload.get("installed", {}).items():
            out.text(f"Installed {plural}: {len(names)}")
            for name in names:
                out.text(f"  - {name}")
        for plural, metas in payload.get("available", {}).items():
            out.text(f"Available {plural}: {len(metas)}")
            for meta in metas:
                out.text(f"  - {meta['name']}: {meta['description']}")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
