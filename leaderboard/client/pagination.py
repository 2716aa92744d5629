import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from leaderboard.ranking import average_score

USERS_PER_PAGE = 6


@dataclass
class Page:
    current_users: List[Dict[str, Any]] = field(default_factory=list)
    total_pages: int = 0
    current_page: int = 1
    has_next_page: bool = False
    has_prev_page: bool = False


@dataclass
class Statistics:
    total_users: int = 0
    highest_score: int = 0
    average_score: int = 0


def total_pages(item_count: int, per_page: int = USERS_PER_PAGE) -> int:
    return math.ceil(item_count / per_page)


def is_valid_page(page: int, page_count: int) -> bool:
    return 1 <= page <= page_count


def paginate(items: Sequence[Dict[str, Any]], current_page: int, per_page: int = USERS_PER_PAGE) -> Page:
    """Slice ``items`` to the 1-based ``current_page``."""
    end = current_page * per_page
    start = end - per_page
    pages = total_pages(len(items), per_page)
    return Page(
        current_users=list(items[max(start, 0):max(end, 0)]),
        total_pages=pages,
        current_page=current_page,
        has_next_page=current_page < pages,
        has_prev_page=current_page > 1,
    )


def compute_statistics(users: Sequence[Dict[str, Any]], leaderboard: Sequence[Dict[str, Any]]) -> Statistics:
    """Figures shown on the stat tiles: player count, best and average score."""
    highest = leaderboard[0].get("totalPoints", 0) if leaderboard else 0
    return Statistics(
        total_users=len(users),
        highest_score=highest or 0,
        average_score=average_score(u.get("totalPoints", 0) for u in users),
    )
