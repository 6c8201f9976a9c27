"""
Cache invalidation coordinator.

Every catalog mutation calls exactly one method here after its store write
commits. Targeted keys are deleted directly; key families are deleted by
pattern. SafeCache logs and swallows backend failures, so invalidation never
fails the mutation that triggered it.
"""

import logging
from typing import Iterable, Optional, Tuple

from adapters.cache_adapter import SafeCache
from app.config import settings, InvalidationStrategy
from services import cache_keys as keys

logger = logging.getLogger("pantrychef.cache.invalidation")

MEAL_FAMILIES = (keys.MEAL_SEARCH, keys.SIMILAR_MEALS, keys.TRENDING_MEALS)
RECIPE_FAMILIES = (keys.RECIPES, keys.RECIPE_SEARCH)
INGREDIENT_FAMILIES = (keys.INGREDIENT, keys.AUTOCOMPLETE)


class CacheInvalidationCoordinator:
    """Maps each kind of mutation to the cache keys it makes stale"""

    def __init__(
        self,
        cache: SafeCache,
        recipe_strategy: Optional[InvalidationStrategy] = None,
    ):
        self.cache = cache
        self.recipe_strategy = recipe_strategy or settings.recipe_invalidation_strategy

    def _families(self, prefixes) -> int:
        return sum(self.cache.delete_pattern(keys.family(p)) for p in prefixes)

    def ingredient_changed(
        self,
        ingredient_id: str,
        slug: Optional[str] = None,
        old_slug: Optional[str] = None,
        meals: Iterable[Tuple[str, str]] = (),
        recipes: Iterable[Tuple[str, str]] = (),
    ) -> None:
        """
        Ingredient create/update/delete/verify.

        Args:
            ingredient_id: Changed ingredient
            slug: Current slug
            old_slug: Slug before a rename, if it changed
            meals: (id, slug) of meals whose names or flags were recomputed
            recipes: (id, slug) of recipes whose names or flags were recomputed
        """
        targeted = [keys.ingredient_key(ingredient_id)]
        for s in {slug, old_slug} - {None}:
            targeted.append(keys.ingredient_slug_key(s))

        meals, recipes = list(meals), list(recipes)
        for meal_id, meal_slug in meals:
            targeted.extend([keys.meal_key(meal_id), keys.meal_slug_key(meal_slug)])
        for recipe_id, recipe_slug in recipes:
            targeted.extend([keys.recipe_key(recipe_id), keys.recipe_slug_key(recipe_slug)])
        self.cache.delete(*targeted)

        removed = self._families(INGREDIENT_FAMILIES)
        if meals:
            removed += self._families(MEAL_FAMILIES)
        if recipes:
            removed += self._families(RECIPE_FAMILIES)
        logger.info(
            f"cache_invalidated ingredient_id={ingredient_id} families_removed={removed} "
            f"meals_rewritten={len(meals)} recipes_rewritten={len(recipes)}"
        )

    def meal_changed(
        self,
        meal_id: str,
        slug: Optional[str] = None,
        old_slug: Optional[str] = None,
        deleted: bool = False,
    ) -> None:
        """Meal create/update/delete"""
        targeted = [keys.meal_key(meal_id)]
        for s in {slug, old_slug} - {None}:
            targeted.append(keys.meal_slug_key(s))
        if deleted:
            targeted.append(keys.meal_ingredients_key(meal_id))
        self.cache.delete(*targeted)
        removed = self._families(MEAL_FAMILIES)
        logger.info(f"cache_invalidated meal_id={meal_id} families_removed={removed}")

    def recipe_changed(
        self, recipe_id: str, slug: Optional[str] = None, old_slug: Optional[str] = None
    ) -> None:
        """Recipe create/update/delete"""
        targeted = [keys.recipe_key(recipe_id)]
        for s in {slug, old_slug} - {None}:
            targeted.append(keys.recipe_slug_key(s))
        self.cache.delete(*targeted)

        if self.recipe_strategy == InvalidationStrategy.GLOBAL:
            self.cache.flush_all()
            return
        removed = self._families(RECIPE_FAMILIES)
        logger.info(f"cache_invalidated recipe_id={recipe_id} families_removed={removed}")

    def recipe_engagement(self, recipe_id: str, slug: Optional[str] = None) -> None:
        """Bookmark, unbookmark, rate: counters live on the detail entry only"""
        targeted = [keys.recipe_key(recipe_id)]
        if slug:
            targeted.append(keys.recipe_slug_key(slug))
        self.cache.delete(*targeted)

    def profile_changed(self, user_id: str) -> None:
        self.cache.delete(keys.user_profile_key(user_id))
        self.cache.delete_pattern(keys.user_search_family(user_id))
        logger.info(f"cache_invalidated user_id={user_id}")

    def ingredient_category_changed(self, category_id: str) -> None:
        """Category names are embedded in cached ingredients"""
        removed = self._families((keys.INGREDIENT,))
        logger.info(f"cache_invalidated category_id={category_id} families_removed={removed}")
