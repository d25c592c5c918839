"""
memento component update - Update installed components from their templates

SUMMARY: Update one component, or every component that has drifted
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_force_flag, add_standard_flags, formatter, get_repo_root, resolve_component
from memento.cli._utils import update_manager
from memento.core.components.types import get_component_type
from memento.core.exceptions import MementoError

SUMMARY = "Update installed components from the template source"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("type", nargs="?", help="Component type (omit to update everything)")
    parser.add_argument("name", nargs="?", help="Installed component name (fuzzy matched)")
    add_force_flag(parser, "Overwrite local modifications (a backup is kept)")
    add_standard_flags(parser)


def _update_one(args: argparse.Namespace) -> int:
    out = formatter(args)
    repo_root = get_repo_root(args)
    ctype = get_component_type(args.type)
    name = resolve_component(repo_root, args.name, ctype.name, scope="installed").name
    outcome = update_manager(repo_root).update_component(ctype, name, force=args.force)
    if outcome.status == "up-to-date":
        message = f"{ctype.name} '{name}' is up to date"
    else:
        message = f"Updated {ctype.name} '{name}' ({outcome.from_version} -> {outcome.to_version})"
        if outcome.backup_path:
            message += f"\n  backup: {outcome.backup_path}"
    out.success(outcome.to_dict(), message)
    return 0


def _update_all(args: argparse.Namespace) -> int:
    out = formatter(args)
    summary = update_manager(get_repo_root(args)).update_all(force=args.force)
    payload = {
        "updated": [o.to_dict() for o in summary.updated],
        "failed": [
            {"type": f.type, "name": f.name, **f.error.to_json_error()} for f in summary.failed
        ],
    }
    if out.json_mode:
        out.json_output({"status": "success" if summary.ok else "partial", **payload})
    else:
        if not summary.updated and not summary.failed:
            out.text("All components are up to date")
        for outcome in summary.updated:
            out.text(f"Updated {outcome.type} '{outcome.name}'")
        for failure in summary.failed:
            out.text(f"Failed {failure.type} '{failure.name}': {failure.error}")
            if failure.error.hint:
                out.text(f"  hint: {failure.error.hint}")
    return 0 if summary.ok else 1


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        if args.type and not args.name:
            out.error(ValueError("A component name is required when a type is given"))
            return 1
        if args.type:
            return _update_one(args)
        return _update_all(args)
    except MementoError as exc:
        out.error(exc, error_code="component_update_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
