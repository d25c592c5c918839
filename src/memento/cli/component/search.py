"""
memento component search - Fuzzy search across every scope

SUMMARY: Rank components by how well their names match a query
"""

from __future__ import annotations

import argparse
import sys

from memento.cli import add_standard_flags, formatter, get_repo_root
from memento.cli._utils import catalog
from memento.core.config.domains import FuzzyConfig
from memento.core.exceptions import MementoError
from memento.core.resolution import find_matches, generate_suggestions

SUMMARY = "Fuzzy search components by name"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="Name, abbreviation or acronym to look for")
    parser.add_argument("--type", "-t", dest="type", help="Restrict to one component type")
    parser.add_argument("--limit", type=int, help="Maximum number of results")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        repo_root = get_repo_root(args)
        fuzzy = FuzzyConfig(repo_root=repo_root)
        candidates = catalog(repo_root).candidates(args.type)
        matches = find_matches(
            args.query,
            candidates,
            max_results=args.limit or fuzzy.max_results,
            min_score=fuzzy.min_score,
            include_metadata=fuzzy.include_metadata,
        )
        suggestions = [] if matches else generate_suggestions(
            args.query,
            candidates,
            fuzzy.max_suggestions,
            min_score=fuzzy.suggestion_min_score,
            include_metadata=fuzzy.include_metadata,
        )

        if out.json_mode:
            out.json_output({"matches": [m.to_dict() for m in matches], "suggestions": suggestions})
            return 0

        if not matches:
            out.text(f"No components match '{args.query}'")
            if suggestions:
                out.text(f"Did you mean: {', '.join(suggestions)}?")
            return 0
        for match in matches:
            out.text(f"{match.score:>3}  {match.type:<8} {match.name}  [{match.scope}, {match.match_type}]")
        return 0
    except MementoError as exc:
        out.error(exc, error_code="component_search_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
