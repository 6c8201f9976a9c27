"""
Ingredient-overlap scoring.

Pure functions only: no I/O, no exceptions for any well-formed input. Empty
sets are defined cases (score 0), never errors.

Percentages are normalized against the size of the *query* ingredient set and
rounded half-up with integer arithmetic, so 0.5 always rounds to 1 and the
result is reproducible across platforms.
"""

from dataclasses import dataclass
from typing import Iterable, List, Set

from domain.enums import ScoringMode


@dataclass(frozen=True)
class MatchScore:
    matched_count: int
    total_ingredients: int
    match_percentage: int

    def to_dict(self) -> dict:
        return {
            "matchedCount": self.matched_count,
            "totalIngredients": self.total_ingredients,
            "matchPercentage": self.match_percentage,
        }


def percentage(part: int, whole: int) -> int:
    """round(part / whole * 100), half-up; 0 when whole is 0"""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def normalize_names(names: Iterable[str]) -> List[str]:
    """Lower-case, strip and de-duplicate names, keeping first-seen order"""
    seen = dict.fromkeys(
        n.strip().lower() for n in (names or []) if isinstance(n, str) and n.strip()
    )
    return list(seen)


def score(
    dish_names: Iterable[str],
    query_names: Iterable[str],
    mode: ScoringMode = ScoringMode.EXACT,
) -> MatchScore:
    """
    Score how well a dish's ingredient names cover a query.

    EXACT counts dish ingredients equal to a query name. SUBSTRING counts dish
    ingredients that contain any query term ("rice" matches "basmati rice"),
    which can exceed the query size, so its percentage is capped at 100.

    Args:
        dish_names: Ingredient names of the candidate dish
        query_names: Ingredient names the user has
        mode: Matching policy

    Returns:
        MatchScore(matched_count, total_ingredients, match_percentage)
    """
    dish = normalize_names(dish_names)
    query: Set[str] = set(normalize_names(query_names))

    if mode == ScoringMode.SUBSTRING:
        matched = sum(1 for name in dish if any(term in name for term in query))
    else:
        matched = sum(1 for name in dish if name in query)

    pct = percentage(matched, max(1, len(query))) if query else 0
    return MatchScore(
        matched_count=matched,
        total_ingredients=len(dish),
        match_percentage=min(pct, 100),
    )


def jaccard_percentage(first: Iterable[str], second: Iterable[str]) -> int:
    """|S ∩ C| / |S ∪ C| as a 0-100 integer; 0 when both sets are empty"""
    s, c = set(first or []), set(second or [])
    shared = len(s & c)
    union = len(s) + len(c) - shared
    return percentage(shared, union)


def ranking_key(matched: int, pct: int, entity_id: str):
    """Sort key: matched desc, percentage desc, id asc"""
    return (-matched, -pct, entity_id)
