"""Single-metric competition ranking."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


def competition_rank(pairs: Sequence[tuple[str, float]]) -> dict[str, int]:
    """Rank ``(id, value)`` pairs descending by value, 0-based.

    Tied values share a rank and the next distinct value skips ahead by
    the number of tied items, so ``[10, 10, 8, 5]`` ranks ``[0, 0, 2, 3]``.
    The entity with the largest value always ranks 0.

    Ties keep the order they hold in *pairs* (``sorted`` is stable under
    ``reverse=True``); the rank values do not depend on it.
    """
    ordered = sorted(pairs, key=lambda pair: pair[1], reverse=True)
    ranks: dict[str, int] = {}
    last_value: float | None = None
    last_rank = 0
    for position, (entity_id, value) in enumerate(ordered):
        if position == 0 or value != last_value:
            last_rank = position
            last_value = value
        ranks[entity_id] = last_rank
    return ranks
