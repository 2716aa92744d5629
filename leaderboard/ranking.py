"""Pure ranking helpers shared by the service and the API client."""

import math
from typing import Iterable, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def assign_ranks(ordered: Sequence[T]) -> List[Tuple[int, T]]:
    """Pair each entry with its 1-based position.

    Ranks are strictly positional: tied scores still get distinct,
    consecutive rank numbers.
    """
    return list(enumerate(ordered, 1))


def average_score(totals: Iterable[int]) -> int:
    """Mean of ``totals`` rounded half up, or 0 for no values."""
    values = list(totals)
    if not values:
        return 0
    return int(math.floor(sum(values) / len(values) + 0.5))
