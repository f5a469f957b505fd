"""Weighted fuzzy search over canonical keymaps.

The index is either healthy (rapidfuzz scoring over four weighted fields) or
degraded (literal substring filtering). Query dispatch branches on that state.

Example:
    >>> index = SearchIndex.build(keymaps)
    >>> index.search("find file")
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from nvim_keymaps.exceptions import IndexBuildError
from nvim_keymaps.models import KeymapItem

logger = logging.getLogger(__name__)

# (field, weight) pairs, weights sum to 1.0
FIELD_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("lhs", 0.4),
    ("description", 0.3),
    ("rhs", 0.2),
    ("mode_name", 0.1),
)

# Maximum per-field distance (0 = exact, 1 = no match) that still counts
THRESHOLD = 0.4
MIN_MATCH_LENGTH = 1
# Exact matches score this instead of zero so weights still separate them
DISTANCE_FLOOR = 0.001


@dataclass(frozen=True)
class Healthy:
    """Fuzzy index state: case-folded field values per keymap."""

    scorer: Any
    fields: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class Degraded:
    """Fallback state used when the fuzzy index could not be built."""

    reason: str


def _fold_fields(item: KeymapItem) -> tuple[str, ...]:
    return tuple(getattr(item, name).casefold() for name, _ in FIELD_WEIGHTS)


def _load_scorer() -> Any:
    from rapidfuzz import fuzz

    return fuzz


class SearchIndex:
    """Ranked lookup over an immutable keymap list.

    Attributes:
        items: Canonical keymaps in stored order
        state: Healthy or Degraded
    """

    def __init__(self, items: Sequence[KeymapItem], state: Healthy | Degraded):
        self.items: tuple[KeymapItem, ...] = tuple(items)
        self.state = state

    @classmethod
    def build(cls, items: Sequence[KeymapItem]) -> "SearchIndex":
        """Build a fuzzy index, degrading to substring search on failure.

        Args:
            items: Canonical keymaps in stored order

        Returns:
            SearchIndex in the healthy state, or degraded if building failed
        """
        try:
            state = cls._build_state(items)
        except IndexBuildError as e:
            logger.warning(f"Fuzzy index unavailable, using substring search: {e}")
            return cls.degraded(items, str(e))

        logger.debug(f"Built fuzzy index over {len(items)} keymaps")
        return cls(items, state)

    @classmethod
    def degraded(cls, items: Sequence[KeymapItem], reason: str = "") -> "SearchIndex":
        """Create an index that only performs substring matching."""
        return cls(items, Degraded(reason=reason))

    @staticmethod
    def _build_state(items: Sequence[KeymapItem]) -> Healthy:
        try:
            scorer = _load_scorer()
            fields = tuple(_fold_fields(item) for item in items)
        except Exception as e:
            raise IndexBuildError(f"Failed to build fuzzy index: {e}", original_error=e) from e
        return Healthy(scorer=scorer, fields=fields)

    @property
    def is_degraded(self) -> bool:
        return isinstance(self.state, Degraded)

    def search(self, query: str) -> list[KeymapItem]:
        """Return keymaps matching a free-text query.

        A blank query returns every keymap in stored order. Otherwise a
        healthy index ranks by ascending distance (ties keep stored order)
        and a degraded index filters by substring in stored order.

        Args:
            query: Search text typed by the user

        Returns:
            Matching keymaps
        """
        if not query or not query.strip():
            return list(self.items)

        if isinstance(self.state, Healthy):
            return self._fuzzy_search(self.state, query)
        return self._substring_search(query)

    def _substring_search(self, query: str) -> list[KeymapItem]:
        needle = query.casefold()
        return [
            item
            for item in self.items
            if any(needle in value for value in _fold_fields(item))
        ]

    def _fuzzy_search(self, state: Healthy, query: str) -> list[KeymapItem]:
        tokens = [t for t in query.casefold().split() if len(t) >= MIN_MATCH_LENGTH]
        if not tokens:
            return list(self.items)

        ranked: list[tuple[float, int]] = []
        for position, fields in enumerate(state.fields):
            distance = self._item_distance(state.scorer, tokens, fields)
            if distance is not None:
                ranked.append((distance, position))

        ranked.sort()
        return [self.items[position] for _, position in ranked]

    def _item_distance(
        self, scorer: Any, tokens: list[str], fields: tuple[str, ...]
    ) -> float | None:
        """Mean token distance, or None when any token matches no field."""
        total = 0.0
        for token in tokens:
            token_distance = 1.0
            matched = False
            for value, (_, weight) in zip(fields, FIELD_WEIGHTS):
                distance = self._field_distance(scorer, token, value)
                if distance <= THRESHOLD:
                    matched = True
                    token_distance *= max(distance, DISTANCE_FLOOR) ** weight
            if not matched:
                return None
            total += token_distance
        return total / len(tokens)

    @staticmethod
    def _field_distance(scorer: Any, token: str, value: str) -> float:
        if not value:
            return 1.0
        # Anywhere in the field counts, but a token longer than the field
        # must match the whole field
        if len(value) >= len(token):
            similarity = scorer.partial_ratio(token, value)
        else:
            similarity = scorer.ratio(token, value)
        return 1.0 - similarity / 100.0
