"""
memento component check - Report drift and missing mode dependencies

SUMMARY: Read-only report of components that changed locally or upstream
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, formatter, get_repo_root
from memento.cli._utils import component_installer, update_manager
from memento.core.exceptions import MementoError

SUMMARY = "Check installed components for updates and local changes"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        repo_root = get_repo_root(args)
        updates = update_manager(repo_root).check_for_updates()
        issues = component_installer(repo_root).validate_installed_dependencies()

        if out.json_mode:
            out.json_output({
                "updates": [u.to_dict() for u in updates],
                "dependencyIssues": [
                    {"type": i.type, "name": i.name, "missing": list(i.missing)} for i in issues
                ],
            })
            return 0

        if not updates:
            out.text("All components are up to date")
        for info in updates:
            flags = []
            if info.version_changed:
                flags.append(f"{info.current_version} -> {info.latest_version}")
            if info.has_local_changes:
                flags.append("local changes")
            out.text(f"{info.type} '{info.name}': {', '.join(flags)}")
        for issue in issues:
            out.text(f"{issue.type} '{issue.name}' needs modes that are not installed: {', '.join(issue.missing)}")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_check_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
