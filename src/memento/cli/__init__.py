"""
Memento CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (component/, pack/) plus top-level commands in commands/.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities and service factories
"""
from ._output import OutputFormatter
from ._args import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_type_arg,
    add_verbose_flag,
)
from ._utils import formatter, get_repo_root, resolve_component

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_dry_run_flag",
    "add_force_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_type_arg",
    "add_verbose_flag",
    # Utilities
    "formatter",
    "get_repo_root",
    "resolve_component",
]
