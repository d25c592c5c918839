"""
memento pack list - List starter packs

SUMMARY: Available packs from the template source, or the installed ones
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, formatter, get_repo_root
from memento.cli._utils import pack_installer
from memento.core.exceptions import MementoError

SUMMARY = "List available or installed starter packs"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--installed", action="store_true", help="Only packs recorded in the manifest")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        installer = pack_installer(get_repo_root(args))
        if args.installed:
            records = installer.list_installed()
            if out.json_mode:
                out.json_output({"installed": {name: r.to_dict() for name, r in records.items()}})
                return 0
            if not records:
                out.text("No packs installed")
            for name, record in sorted(records.items()):
                out.text(f"{name} v{record.version} (installed {record.installed_at})")
            return 0

        packs = installer.list_available()
        if out.json_mode:
            out.json_output({"packs": [p.summary() for p in packs]})
            return 0
        if not packs:
            out.text("No packs available")
        for pack in packs:
            out.text(f"{pack.name} v{pack.version}: {pack.description}")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="pack_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
