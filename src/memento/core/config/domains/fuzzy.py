from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class FuzzyConfig(BaseDomainConfig):
    """Thresholds for fuzzy component name resolution."""

    def _config_section(self) -> str:
        return "fuzzy"

    @cached_property
    def max_results(self) -> int:
        return self._int("max_results", 10)

    @cached_property
    def min_score(self) -> int:
        return self._int("min_score", 20)

    @cached_property
    def suggestion_min_score(self) -> int:
        return self._int("suggestion_min_score", 10)

    @cached_property
    def max_suggestions(self) -> int:
        return self._int("max_suggestions", 3)

    @cached_property
    def auto_select_min_score(self) -> int:
        return self._int("auto_select_min_score", 80)

    @cached_property
    def auto_select_margin(self) -> int:
        return self._int("auto_select_margin", 20)

    @cached_property
    def include_metadata(self) -> bool:
        """Boost name matches whose description or tags contain the query."""
        return self._bool("include_metadata", True)


__all__ = ["FuzzyConfig"]
