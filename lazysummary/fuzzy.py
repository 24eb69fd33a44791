"""Fuzzy filtering of directory entries by name.

A query matches a name when its characters appear in the name in order,
ignoring case. Every matching name is kept. Names containing the query as
one contiguous run rank first; within each group, matches that land on
word starts and adjacent characters rank higher.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .listing import Entry

SEPARATOR_CHARS = frozenset("/_-. ")

FIRST_CHAR_BONUS = 15
WORD_START_BONUS = 30
ADJACENT_BONUS = 15
LEADING_GAP_PENALTY = 5
MAX_LEADING_GAP_PENALTY = 15


@dataclass(frozen=True)
class NameMatch:
    """Where and how well a query matched one name."""

    name: str
    positions: tuple[int, ...]
    contiguous: bool
    score: int


def _fold(text: str) -> list[str]:
    return [ch.lower() for ch in text]


def _is_word_start(name: str, idx: int) -> bool:
    if idx == 0:
        return True
    prev, cur = name[idx - 1], name[idx]
    if prev in SEPARATOR_CHARS:
        return True
    return prev.islower() and cur.isupper()


def _contiguous_positions(needle: list[str], hay: list[str]) -> tuple[int, ...] | None:
    span = len(needle)
    for start in range(len(hay) - span + 1):
        if hay[start : start + span] == needle:
            return tuple(range(start, start + span))
    return None


def _subsequence_positions(needle: list[str], hay: list[str]) -> tuple[int, ...] | None:
    positions: list[int] = []
    idx = 0
    for ch in needle:
        while idx < len(hay) and hay[idx] != ch:
            idx += 1
        if idx == len(hay):
            return None
        positions.append(idx)
        idx += 1
    return tuple(positions)


def score_positions(name: str, positions: Sequence[int]) -> int:
    """Score matched ``positions`` in ``name``; higher is better."""
    if not positions:
        return 0
    score = 0
    for order, idx in enumerate(positions):
        if _is_word_start(name, idx):
            score += WORD_START_BONUS
        if order and idx == positions[order - 1] + 1:
            score += ADJACENT_BONUS
    if positions[0] == 0:
        score += FIRST_CHAR_BONUS
    score -= min(MAX_LEADING_GAP_PENALTY, positions[0] * LEADING_GAP_PENALTY)
    score -= len(name) - len(positions)
    return score


def match_name(query: str, name: str) -> NameMatch | None:
    """Match ``query`` against ``name``; ``None`` when it is not a subsequence."""
    needle = _fold(query)
    hay = _fold(name)
    positions = _contiguous_positions(needle, hay)
    contiguous = positions is not None
    if positions is None:
        positions = _subsequence_positions(needle, hay)
        if positions is None:
            return None
    return NameMatch(name=name, positions=positions, contiguous=contiguous, score=score_positions(name, positions))


def rank_names(query: str, names: Sequence[str]) -> list[NameMatch]:
    """Every name matching ``query``, best first.

    Contiguous matches come before scattered ones, then higher score,
    shorter name and name order break ties.
    """
    matches = [match for match in (match_name(query, name) for name in names) if match is not None]
    matches.sort(key=lambda match: (not match.contiguous, -match.score, len(match.name), match.name))
    return matches


def filter_entries(entries: Sequence[Entry], query: str) -> list[Entry]:
    """Return the entries whose path matches ``query``, in ranked order.

    An empty query returns every entry in listing order. Ranked names map
    back to the first entry carrying that path.
    """
    if not query:
        return list(entries)

    first_by_path: dict[str, Entry] = {}
    for entry in entries:
        first_by_path.setdefault(entry.path, entry)

    return [first_by_path[match.name] for match in rank_names(query, list(first_by_path))]


__all__ = [
    "NameMatch",
    "filter_entries",
    "match_name",
    "rank_names",
    "score_positions",
]
