"""
Dietary flag computation and profile compatibility.

A dish's flags are always recomputed from its full ingredient list; nothing
patches them incrementally.
"""

from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from domain.enums import VegType
from repositories.predicates import Equals, Predicate


@dataclass(frozen=True)
class DietaryFlags:
    is_veg: bool = True
    is_vegan: bool = True
    dairy_free: bool = True
    nut_free: bool = True
    gluten_free: bool = True

    def as_columns(self) -> dict:
        return asdict(self)


def _flag(item: Any, name: str) -> bool:
    if isinstance(item, Mapping):
        return bool(item.get(name, False))
    return bool(getattr(item, name, False))


def compute_dietary_flags(ingredients: Iterable[Any]) -> DietaryFlags:
    """
    Aggregate ingredient tags into dish flags.

    is_veg / is_vegan hold only if every ingredient has them; *_free holds
    only if no ingredient carries the allergen. An empty list is permissive:
    every flag is True.
    """
    items = list(ingredients or [])
    return DietaryFlags(
        is_veg=all(_flag(i, "is_veg") for i in items),
        is_vegan=all(_flag(i, "is_vegan") for i in items),
        dairy_free=not any(_flag(i, "is_dairy") for i in items),
        nut_free=not any(_flag(i, "is_nut") for i in items),
        gluten_free=not any(_flag(i, "is_gluten") for i in items),
    )


def profile_predicates(profile: Optional[Mapping[str, Any]]) -> List[Predicate]:
    """Dish filter clauses implied by a cached diet profile (None = no constraints)"""
    if not profile:
        return []
    clauses: List[Predicate] = []
    veg_type = profile.get("vegType")
    if veg_type == VegType.VEGETARIAN.value:
        clauses.append(Equals("is_veg", True))
    if veg_type == VegType.VEGAN.value:
        clauses.append(Equals("is_vegan", True))
    if profile.get("dairyFree"):
        clauses.append(Equals("dairy_free", True))
    if profile.get("nutFree"):
        clauses.append(Equals("nut_free", True))
    if profile.get("glutenFree"):
        clauses.append(Equals("gluten_free", True))
    if profile.get("hasDiabetes"):
        clauses.append(Equals("diabetes_friendly", True))
    return clauses


def check_compatibility(
    dish: Mapping[str, Any], profile: Optional[Mapping[str, Any]]
) -> Tuple[bool, List[str]]:
    """Explain why a dish (camelCase dict) does not fit a profile"""
    if not profile:
        return True, []

    reasons: List[str] = []
    veg_type = profile.get("vegType")
    if veg_type == VegType.VEGETARIAN.value and not dish.get("isVeg"):
        reasons.append("Contains non-vegetarian ingredients")
    if veg_type == VegType.VEGAN.value and not dish.get("isVegan"):
        reasons.append("Contains animal products")
    if profile.get("dairyFree") and not dish.get("dairyFree"):
        reasons.append("Contains dairy")
    if profile.get("nutFree") and not dish.get("nutFree"):
        reasons.append("Contains nuts")
    if profile.get("glutenFree") and not dish.get("glutenFree"):
        reasons.append("Contains gluten")
    if profile.get("hasDiabetes") and not dish.get("diabetesFriendly"):
        reasons.append("Not suitable for diabetes")

    return len(reasons) == 0, reasons
