"""Similar meals by shared ingredient ids."""

from typing import Any, Dict, List
from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import NotFoundError
from repositories import MealRepository
from services.base import BaseService, validate_limit
from services.match_scorer import jaccard_percentage, ranking_key
from services import cache_keys as keys


class SimilarityService(BaseService):
    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.similarity")
        self.meals = MealRepository(db)

    def find_similar_meals(self, meal_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Rank other meals by how many ingredients they share with `meal_id`.

        Sorted by matchingCount desc, similarityPercentage (Jaccard) desc,
        id asc. A source meal without ingredients has no similar meals.

        Raises:
            NotFoundError: source meal does not exist
        """
        validate_limit(limit)
        cache_key = keys.similar_meals_key(meal_id, limit)
        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return cached

        source = self.meals.get_by_id(meal_id)
        if source is None:
            raise NotFoundError(f"Meal {meal_id} not found")

        source_ids = set(source.ingredient_ids or [])
        rows = []
        if source_ids:
            for meal in self.meals.sharing_ingredients(sorted(source_ids), exclude_id=meal_id):
                candidate_ids = set(meal.ingredient_ids or [])
                rows.append(
                    {
                        "id": meal.id,
                        "title": meal.title,
                        "slug": meal.slug,
                        "shortDescription": meal.short_description,
                        "cookingTimeMinutes": meal.cooking_time_minutes,
                        "difficulty": meal.difficulty.value if meal.difficulty else None,
                        "ingredientNames": list(meal.ingredient_names or []),
                        "matchingCount": len(source_ids & candidate_ids),
                        "totalIngredients": len(candidate_ids),
                        "similarityPercentage": jaccard_percentage(source_ids, candidate_ids),
                    }
                )

        rows.sort(
            key=lambda r: ranking_key(r["matchingCount"], r["similarityPercentage"], r["id"])
        )
        result = rows[:limit]

        self.cache.set_json(cache_key, result, settings.similar_cache_ttl)
        self.log_info("similar_meals", meal_id=meal_id, found=len(result))
        return result
