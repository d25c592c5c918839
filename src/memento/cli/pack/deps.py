"""
memento pack deps - Show the pack dependency order

SUMMARY: Resolve a pack's dependencies without installing anything
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, formatter, get_repo_root
from memento.cli._utils import pack_installer
from memento.core.exceptions import MementoError

SUMMARY = "Show the packs a pack depends on, in install order"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        installer = pack_installer(get_repo_root(args))
        # Unknown packs fail here with PackNotFoundError
        installer.source.load_raw(args.name)
        result = installer.resolve_dependencies(args.name)
        payload = {
            "pack": args.name,
            "resolved": list(result.resolved),
            "missing": list(result.missing),
            "circular": list(result.circular),
            "errors": result.errors(),
        }
        if out.json_mode:
            out.json_output({"status": "success" if result.ok else "error", **payload})
        else:
            if result.resolved:
                out.text(f"Install order for '{args.name}': {' -> '.join([*result.resolved, args.name])}")
            else:
                out.text(f"'{args.name}' has no pack dependencies")
            for error in result.errors():
                out.text(error)
        return 0 if result.ok else 1
    except MementoError as exc:
        out.error(exc, error_code="pack_deps_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
