"""Fuzzy matching for typo-tolerant node lookup.

This module provides edit distance calculation and normalized similarity
scores used to compare node titles and names against term variants.

Scoring rules:
- Both strings are normalized (lower-case, trimmed, internal whitespace
  collapsed) before comparison
- ``similarity`` is ``1 - distance / max(len(a), len(b), 1)``
- A score of 1.0 is only produced for equal normalized strings
- ``partial_similarity`` additionally rewards a label that contains the term
  and reordered tokens, always staying below 1.0 for unequal strings
- Containment is directional: a label that is merely a fragment of the term
  (a bare ``us`` folder against "about us") earns no containment credit
"""

from __future__ import annotations

from collections.abc import Iterable
import re

from content_discovery.domain.search import TermVariant


_WHITESPACE = re.compile(r"\s+")

CONTAINMENT_BASE = 0.5
CONTAINMENT_SPAN = 0.45
MIN_CONTAINED_LENGTH = 3
REORDER_FACTOR = 0.95


def normalize(text: str) -> str:
    """Lower-case, trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", text.strip().lower())


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming for O(m*n) time complexity, with optional
    early termination when distance exceeds max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.
        If max_distance is set and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Use shorter string as columns for space efficiency
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = curr_row[0]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity of two strings in [0, 1].

    Examples:
        >>> similarity("Homepage", " homepage ")
        1.0
        >>> similarity("", "abc")
        0.0
    """
    left, right = normalize(a), normalize(b)
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0
    longest = max(len(left), len(right), 1)
    return 1.0 - levenshtein_distance(left, right) / longest


def containment_score(label: str, term: str) -> float:
    """Score for ``label`` containing ``term``, 0 when it does not.

    The term must be at least ``MIN_CONTAINED_LENGTH`` characters, so two-letter
    fragments never match inside longer labels.

    Examples:
        >>> containment_score("Contact", " contact")
        1.0
        >>> containment_score("us", "about us")
        0.0
    """
    label, term = normalize(label), normalize(term)
    if not label or not term:
        return 0.0
    if label == term:
        return 1.0
    if len(term) < MIN_CONTAINED_LENGTH or term not in label:
        return 0.0
    return CONTAINMENT_BASE + CONTAINMENT_SPAN * len(term) / len(label)


def reordered_score(a: str, b: str) -> float:
    """Similarity of the sorted token sequences, discounted unless strings are equal."""
    left, right = normalize(a), normalize(b)
    if left == right:
        return similarity(left, right)
    sorted_left = " ".join(sorted(_tokens(left)))
    sorted_right = " ".join(sorted(_tokens(right)))
    return REORDER_FACTOR * similarity(sorted_left, sorted_right)


def partial_similarity(label: str, term: str) -> float:
    """Best of edit distance, containment of the term and reordered-token similarity."""
    return max(similarity(label, term), containment_score(label, term), reordered_score(label, term))


def score_against_variants(
    candidate_label: str,
    variants: Iterable[TermVariant],
    *,
    partial: bool = False,
) -> float:
    """Maximum score of ``candidate_label`` across all variants (0 when none)."""
    scorer = partial_similarity if partial else similarity
    return max((scorer(candidate_label, variant.text) for variant in variants), default=0.0)


def best_variant(
    labels: Iterable[str],
    variants: Iterable[TermVariant],
    *,
    partial: bool = False,
) -> tuple[float, TermVariant | None]:
    """Return the best (score, variant) pair over every (label, variant) combination.

    Earlier variants win ties so results stay deterministic.
    """
    scorer = partial_similarity if partial else similarity
    variant_list = list(variants)
    best_score = 0.0
    winner: TermVariant | None = None
    for label in labels:
        for variant in variant_list:
            score = scorer(label, variant.text)
            if winner is None or score > best_score:
                best_score = score
                winner = variant
    return best_score, winner


def _tokens(text: str) -> list[str]:
    return [token for token in re.split(r"[\s\-_]+", text) if token]
