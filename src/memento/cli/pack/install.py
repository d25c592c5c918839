"""
memento pack install - Install a starter pack

SUMMARY: Install a pack, the packs it depends on and all of their components
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_dry_run_flag, add_force_flag, add_standard_flags, formatter, get_repo_root
from memento.cli._utils import pack_installer
from memento.core.exceptions import MementoError
from memento.core.packs import PackInstallationResult, ToolDependencyChecker

SUMMARY = "Install a starter pack"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    add_force_flag(parser, "Reinstall components that are already installed")
    parser.add_argument(
        "--skip-optional",
        action="store_true",
        help="Install required components only",
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def _render(result: PackInstallationResult) -> str:
    verb = "Would install" if result.dry_run else "Installed"
    lines = [f"{verb} pack '{result.pack}' v{result.version}"]
    if result.dependencies:
        lines.append(f"  dependencies: {', '.join(result.dependencies)}")
    for plural, names in result.installed.items():
        if names:
            lines.append(f"  {plural}: {', '.join(names)}")
    for plural, names in result.skipped.items():
        if names:
            lines.append(f"  skipped {plural}: {', '.join(names)}")
    lines.extend(f"  {g}" for g in ToolDependencyChecker.installation_guidance(result.tools))
    if result.post_install_message and not result.dry_run:
        lines.append("")
        lines.append(result.post_install_message)
    return "\n".join(lines)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        result = pack_installer(get_repo_root(args)).install_pack(
            args.name,
            force=args.force,
            skip_optional=args.skip_optional,
            dry_run=args.dry_run,
        )
        out.success(result.to_dict(), _render(result), status="dry-run" if result.dry_run else "success")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="pack_install_error")
        for issue in getattr(exc, "issues", []) or []:
            if not out.json_mode:
                print(f"  - {issue}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
