"""Fuzzy component name matching.

Scores are integers in ``[0, 100]``; every candidate gets the highest score
of the rules that apply to it:

=========  ===============================================================
exact      100
substring  ``60 + floor(35 * len(query) / len(name))``, +5 when the name
           starts with the query, capped at 99
acronym    query (2+ chars) is a prefix of the segment initials:
           ``40 + floor(19 * len(query) / segments)``
partial    ``floor(39 * max(bigram dice, in-order character coverage))``
=========  ===============================================================

On name alone the bands do not overlap, so a substring hit outranks an
acronym hit which outranks a partial one. Candidates that match by name can
then gain up to 15 points from their metadata (+5 when the description
contains the query, +3 per tag containing it); a boosted score stays below
100, which is reserved for exact matches.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple

from memento.core.components.metadata import ComponentMetadata
from memento.core.exceptions import AmbiguousComponentError, ComponentNotFoundError

EXACT = "exact"
SUBSTRING = "substring"
ACRONYM = "acronym"
PARTIAL = "partial"

SCOPE_PRIORITY = {"project": 0, "global": 1, "builtin": 2}
SEGMENT_SPLIT = re.compile(r"[-_\s]+")

DESCRIPTION_BOOST = 5
TAG_BOOST = 3
METADATA_BOOST_CAP = 15


@dataclass(frozen=True)
class ComponentInfo:
    name: str
    type: str
    path: Optional[Path] = None
    metadata: Optional[ComponentMetadata] = None


class Candidate(NamedTuple):
    component: ComponentInfo
    scope: str


@dataclass(frozen=True)
class FuzzyMatch:
    name: str
    type: str
    score: int
    match_type: str
    scope: str
    component: ComponentInfo

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "score": self.score,
            "matchType": self.match_type,
            "scope": self.scope,
        }


def _segments(name: str) -> List[str]:
    return [s for s in SEGMENT_SPLIT.split(name) if s]


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def _dice(a: str, b: str) -> float:
    ba, bb = _bigrams(a), _bigrams(b)
    total = sum(ba.values()) + sum(bb.values())
    if not total:
        return 0.0
    return 2.0 * sum((ba & bb).values()) / total


def _coverage(query: str, name: str) -> float:
    """Fraction of ``query`` characters found in ``name`` in order."""
    pos = 0
    found = 0
    for ch in query:
        idx = name.find(ch, pos)
        if idx < 0:
            continue
        found += 1
        pos = idx + 1
    return found / len(query)


def score_name(query: str, name: str) -> Tuple[int, Optional[str]]:
    """Return ``(score, match_type)`` for ``query`` against ``name``.

    Both are compared case-insensitively. A score of 0 has no match type.
    """
    q = query.strip().lower()
    n = name.strip().lower()
    if not q or not n:
        return 0, None
    if q == n:
        return 100, EXACT

    best: Tuple[int, Optional[str]] = (0, None)

    if q in n:
        score = 60 + math.floor(35 * len(q) / len(n))
        if n.startswith(q):
            score += 5
        best = (min(score, 99), SUBSTRING)

    segments = _segments(n)
    initials = "".join(s[0] for s in segments)
    if len(q) >= 2 and initials.startswith(q):
        score = 40 + math.floor(19 * len(q) / len(segments))
        if score > best[0]:
            best = (score, ACRONYM)

    partial = math.floor(39 * max(_dice(q, n), _coverage(q, n)))
    if partial > best[0]:
        best = (partial, PARTIAL)

    return best


def metadata_score(query: str, metadata: Optional[ComponentMetadata]) -> int:
    """Boost for ``query`` appearing in the description or tags, capped at 15."""
    q = query.strip().lower()
    if metadata is None or not q:
        return 0
    boost = 0
    if q in metadata.description.lower():
        boost += DESCRIPTION_BOOST
    boost += TAG_BOOST * sum(1 for tag in metadata.tags if q in tag.lower())
    return min(boost, METADATA_BOOST_CAP)


def _sort_key(match: FuzzyMatch) -> Tuple[int, int, str]:
    return (-match.score, SCOPE_PRIORITY.get(match.scope, len(SCOPE_PRIORITY)), match.name)


def find_matches(
    query: str,
    candidates: Sequence[Candidate],
    *,
    max_results: int = 10,
    min_score: int = 20,
    include_metadata: bool = True,
) -> List[FuzzyMatch]:
    """Score every candidate and return the best ``max_results`` at or above ``min_score``.

    Ordering: score (descending), scope (project, global, builtin), then name.
    With ``include_metadata`` a name match is boosted by :func:`metadata_score`.
    """
    if not query or not query.strip():
        return []
    matches: List[FuzzyMatch] = []
    for component, scope in candidates:
        score, match_type = score_name(query, component.name)
        if match_type is None:
            continue
        if include_metadata and match_type != EXACT:
            score = min(score + metadata_score(query, component.metadata), 99)
        if score < min_score:
            continue
        matches.append(FuzzyMatch(component.name, component.type, score, match_type, scope, component))
    matches.sort(key=_sort_key)
    return matches[:max_results]


def find_best_match(
    query: str,
    candidates: Sequence[Candidate],
    *,
    min_score: int = 20,
    include_metadata: bool = True,
) -> Optional[FuzzyMatch]:
    matches = find_matches(
        query, candidates, max_results=1, min_score=min_score, include_metadata=include_metadata
    )
    return matches[0] if matches else None


def _shares_word(query: str, name: str) -> bool:
    for qw in _segments(query.lower()):
        for nw in _segments(name.lower()):
            if qw in nw or nw in qw:
                return True
    return False


def generate_suggestions(
    query: str,
    candidates: Sequence[Candidate],
    max_suggestions: int = 3,
    *,
    min_score: int = 10,
    include_metadata: bool = True,
) -> List[str]:
    """Names worth offering as "did you mean" hints, best first."""
    suggestions: List[str] = []
    matches = find_matches(
        query,
        candidates,
        max_results=max_suggestions * 2,
        min_score=min_score,
        include_metadata=include_metadata,
    )
    for match in matches:
        if match.name not in suggestions:
            suggestions.append(match.name)
        if len(suggestions) >= max_suggestions:
            return suggestions

    for component, _scope in candidates:
        if len(suggestions) >= max_suggestions:
            break
        if component.name not in suggestions and _shares_word(query, component.name):
            suggestions.append(component.name)
    return suggestions


def _distinct(matches: Sequence[FuzzyMatch]) -> List[FuzzyMatch]:
    # Same component visible from several scopes counts once (best scope wins)
    seen = set()
    out: List[FuzzyMatch] = []
    for match in matches:
        key = (match.type, match.name)
        if key not in seen:
            seen.add(key)
            out.append(match)
    return out


def select_match(
    query: str,
    candidates: Sequence[Candidate],
    *,
    auto_select: bool = True,
    max_results: int = 10,
    min_score: int = 20,
    auto_select_min_score: int = 80,
    auto_select_margin: int = 20,
    suggestion_min_score: int = 10,
    max_suggestions: int = 3,
    include_metadata: bool = True,
) -> FuzzyMatch:
    """Pick one component for ``query`` without prompting.

    An exact match always wins. Otherwise the best match is taken when it
    scores at least ``auto_select_min_score`` and beats the runner-up by more
    than ``auto_select_margin``. With ``auto_select`` off only a sole match
    is returned.

    Raises:
        ComponentNotFoundError: Nothing scores ``min_score`` (carries suggestions)
        AmbiguousComponentError: Several matches and no clear winner
    """
    matches = _distinct(
        find_matches(
            query,
            candidates,
            max_results=max_results,
            min_score=min_score,
            include_metadata=include_metadata,
        )
    )
    if not matches:
        raise ComponentNotFoundError(
            f"No component matches '{query}'",
            suggestions=generate_suggestions(
                query,
                candidates,
                max_suggestions,
                min_score=suggestion_min_score,
                include_metadata=include_metadata,
            ),
            context={"query": query},
        )

    best = matches[0]
    runner_up = matches[1] if len(matches) > 1 else None
    if best.match_type == EXACT:
        return best
    if runner_up is None and not auto_select:
        return best
    if auto_select and best.score >= auto_select_min_score:
        if runner_up is None or best.score - runner_up.score > auto_select_margin:
            return best

    raise AmbiguousComponentError(
        f"'{query}' matches several components: " + ", ".join(m.name for m in matches),
        candidates=[m.name for m in matches],
        context={"query": query, "matches": [m.to_dict() for m in matches]},
    )


__all__ = [
    "ComponentInfo",
    "Candidate",
    "FuzzyMatch",
    "EXACT",
    "SUBSTRING",
    "ACRONYM",
    "PARTIAL",
    "SCOPE_PRIORITY",
    "score_name",
    "metadata_score",
    "find_matches",
    "find_best_match",
    "generate_suggestions",
    "select_match",
]
