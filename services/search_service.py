"""
Meal search orchestration.

Ranked search pushes every filter into the catalog store, scores the
candidates with the match scorer and caches the assembled page. Profiles are
resolved through the profile service so they share its cache entry.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import ScoringMode
from domain.models import Meal
from domain.schemas.search_schemas import MealSearchQuery
from repositories import IngredientRepository, MealCategoryRepository, MealRepository
from repositories.predicates import (
    Equals,
    GreaterThan,
    LessThanOrEqual,
    Predicate,
    all_of,
    overlaps,
)
from services.base import BaseService, validate_limit, validate_page
from services.dietary import check_compatibility, profile_predicates
from services.match_scorer import normalize_names, ranking_key, score
from services.meal_service import load_meal_ingredients
from services.profile_service import ProfileService
from services import cache_keys as keys


class MealSearchService(BaseService):
    """Ingredient-overlap search over meals"""

    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.search")
        self.meals = MealRepository(db)
        self.categories = MealCategoryRepository(db)
        self.ingredients = IngredientRepository(db)
        self.profiles = ProfileService(db, cache)

    @staticmethod
    def validate(query: MealSearchQuery) -> None:
        validate_page(query.page, query.limit)
        if query.max_cooking_time is not None and query.max_cooking_time < 1:
            raise ServiceValidationError(
                "max_cooking_time must be >= 1",
                details={"max_cooking_time": query.max_cooking_time},
            )

    def _filters(
        self, query: MealSearchQuery, profile: Optional[Dict[str, Any]]
    ) -> Optional[Predicate]:
        clauses: List[Optional[Predicate]] = []

        names = normalize_names(query.ingredients)
        if names:
            clauses.append(overlaps("ingredient_names", names))

        clauses.extend(profile_predicates(profile))

        if query.meal_category:
            category = self.categories.find_by_name_fragment(query.meal_category)
            if category:
                clauses.append(Equals("category_id", category.id))
            else:
                self.logger.debug(f"category_filter_ignored category={query.meal_category}")

        if query.difficulty:
            clauses.append(Equals("difficulty", query.difficulty))
        if query.max_cooking_time is not None:
            clauses.append(LessThanOrEqual("cooking_time_minutes", query.max_cooking_time))

        return all_of(*clauses)

    @staticmethod
    def _row(meal: Meal, query_names: List[str], mode: ScoringMode) -> Dict[str, Any]:
        match = score(meal.ingredient_names or [], query_names, mode)
        return {**meal.summary_dict(), **match.to_dict()}

    def search_meals(
        self, query: MealSearchQuery, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Ranked search by ingredient overlap.

        Candidates are every meal passing the filters; they are scored in
        EXACT mode, sorted by matched count desc, match percentage desc and
        id asc, then paginated.

        Args:
            query: Ingredients, optional category/difficulty/time filters, page
            user_id: Caller whose dietary profile constrains the results

        Returns:
            {results, total, page, limit, hasMore}
        """
        self.validate(query)

        cache_key = keys.meal_search_key(
            user_id,
            query.ingredients,
            query.meal_category,
            query.difficulty,
            query.max_cooking_time,
            query.page,
            query.limit,
        )
        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return cached

        profile = self.profiles.get_profile(user_id)
        predicate = self._filters(query, profile)
        query_names = normalize_names(query.ingredients)

        rows = [
            self._row(meal, query_names, ScoringMode.EXACT)
            for meal in self.meals.find_many(predicate)
        ]
        rows.sort(key=lambda r: ranking_key(r["matchedCount"], r["matchPercentage"], r["id"]))

        total = len(rows)
        offset = (query.page - 1) * query.limit
        response = {
            "results": rows[offset : offset + query.limit],
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "hasMore": total > query.page * query.limit,
        }

        self.cache.set_json(cache_key, response, settings.search_cache_ttl)
        self.log_info(
            "meal_search",
            user_id=user_id,
            ingredients=len(query_names),
            total=total,
            page=query.page,
        )
        return response

    def search_meals_simple(
        self, query: MealSearchQuery, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Popularity-first search, scored loosely.

        Pages are cut in the store ordered by click count, then each page is
        scored in SUBSTRING mode and re-sorted by match percentage. Not cached.
        """
        self.validate(query)
        profile = self.profiles.get_profile(user_id)
        predicate = self._filters(query, profile)
        query_names = normalize_names(query.ingredients)

        meals = self.meals.find_many(
            predicate,
            order_by=(Meal.click_count.desc(), Meal.id.asc()),
            limit=query.limit,
            offset=(query.page - 1) * query.limit,
        )
        total = self.meals.count(predicate)

        rows = [self._row(meal, query_names, ScoringMode.SUBSTRING) for meal in meals]
        rows.sort(key=lambda r: -r["matchPercentage"])

        return {
            "results": rows,
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "hasMore": total > query.page * query.limit,
        }

    def get_meal_detail(self, meal_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Meal detail with ingredient breakdown and a dietary verdict for the caller.

        The view counter is incremented only when the meal is loaded from the
        store, not on cache hits.
        """
        cache_key = keys.meal_key(meal_id)
        meal = self.cache.get_json(cache_key)
        if meal is None:
            entity = self.meals.get_by_id(meal_id)
            if entity is None:
                raise NotFoundError(f"Meal {meal_id} not found")
            self.meals.increment(meal_id, "view_count")
            self.db.refresh(entity)
            meal = entity.to_dict()
            self.cache.set_json(cache_key, meal, settings.detail_cache_ttl)

        profile = self.profiles.get_profile(user_id)
        compatible, reasons = check_compatibility(meal, profile)
        ingredients = load_meal_ingredients(
            self.cache, self.ingredients, meal["id"], meal.get("ingredientIds") or []
        )
        return {
            **meal,
            "ingredients": ingredients,
            "isCompatibleWithUserDiet": compatible,
            "incompatibleReasons": reasons,
        }

    def autocomplete_ingredients(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Ingredients whose name contains `query` or that carry it as an alias"""
        validate_limit(limit)
        query = (query or "").strip()
        if not query:
            return []

        def load():
            return [
                {"id": i.id, "name": i.name, "slug": i.slug}
                for i in self.ingredients.autocomplete(query, limit)
            ]

        return self.cached(
            keys.autocomplete_key(query.lower(), limit),
            settings.autocomplete_cache_ttl,
            load,
        )

    def trending_meals(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most clicked meals, newest first among equals"""
        validate_limit(limit)

        def load():
            meals = self.meals.find_many(
                GreaterThan("click_count", 0),
                order_by=(Meal.click_count.desc(), Meal.created_at.desc(), Meal.id.asc()),
                limit=limit,
            )
            return [{**m.summary_dict(), "clickCount": m.click_count} for m in meals]

        return self.cached(keys.trending_meals_key(limit), settings.trending_cache_ttl, load)
