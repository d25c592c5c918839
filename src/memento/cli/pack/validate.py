"""
memento pack validate - Validate a pack manifest

SUMMARY: Run schema and structural checks against one pack, or all of them
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, formatter, get_repo_root
from memento.cli._utils import pack_installer
from memento.core.exceptions import MementoError

SUMMARY = "Validate starter pack manifests"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", nargs="?", help="Pack name (omit to validate every pack)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        installer = pack_installer(get_repo_root(args))
        names = [args.name] if args.name else installer.source.list_packs()
        reports = {}
        for name in names:
            try:
                reports[name] = installer.validate(installer.source.load_pack(name)).to_dict()
            except MementoError as exc:
                if args.name:
                    raise
                reports[name] = {"ok": False, "errors": [str(exc)], "warnings": []}

        ok = all(r["ok"] for r in reports.values())
        if out.json_mode:
            out.json_output({"status": "success" if ok else "invalid", "packs": reports})
            return 0 if ok else 1

        for name, report in reports.items():
            out.text(f"{name}: {'valid' if report['ok'] else 'INVALID'}")
            for error in report["errors"]:
                out.text(f"  error: {error}")
            for warning in report["warnings"]:
                out.text(f"  warning: {warning}")
        return 0 if ok else 1
    except MementoError as exc:
        out.error(exc, error_code="pack_validate_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
