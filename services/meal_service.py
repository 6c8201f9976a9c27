"""
Meal service - chef-authored meal catalog.

Meal writes resolve free-text ingredient inputs against the ingredient master
table, creating provisional (unverified) ingredients for unknown names.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
import math

from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ServiceError, ServiceValidationError
from domain.enums import Difficulty
from domain.models import Ingredient, Meal
from domain.schemas.dish_schemas import IngredientInput, MealCreate, MealUpdate
from repositories import IngredientRepository, MealCategoryRepository, MealRepository
from repositories.predicates import Equals, all_of
from services.base import BaseService, validate_page
from services.cache_invalidation import CacheInvalidationCoordinator
from services.dish_projection import ingredient_detail, meal_search_text, project_ingredients
from services.helpers import capitalize_words, generate_slug, is_uuid
from services import cache_keys as keys


def load_meal_ingredients(
    cache: SafeCache,
    ingredients: IngredientRepository,
    meal_id: str,
    ingredient_ids: Sequence[str],
) -> List[Dict[str, Any]]:
    """
    Per-ingredient details of a meal.

    Served from meal:ingredients:{id} when present; otherwise rebuilt from
    the ingredient table, which has no quantities.
    """
    details = cache.get_json(keys.meal_ingredients_key(meal_id))
    if details is not None:
        return details
    return [ingredient_detail(i) for i in ingredients.get_many(list(ingredient_ids))]


class MealService(BaseService):
    """Business logic for meal CRUD and engagement counters"""

    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.meal")
        self.meals = MealRepository(db)
        self.categories = MealCategoryRepository(db)
        self.ingredients = IngredientRepository(db)
        self.invalidation = CacheInvalidationCoordinator(cache)
        self._provisional: List[Ingredient] = []

    # ------------------------------------------------------------------
    # Ingredient resolution
    # ------------------------------------------------------------------

    def _resolve_one(self, item: IngredientInput) -> Ingredient:
        value = item.name.strip()
        if is_uuid(value):
            ingredient = self.ingredients.get_by_id(value)
            if ingredient is None:
                raise ServiceValidationError(f"Ingredient with ID {value} not found")
            return ingredient

        ingredient = self.ingredients.get_by_name_or_alias(value)
        if ingredient is not None:
            return ingredient

        slug = generate_slug(value)
        if not slug:
            raise ServiceValidationError(f"Ingredient name '{value}' has no usable characters")
        existing = self.ingredients.get_by_slug(slug)
        if existing is not None:
            return existing

        # Flushed only: committed together with the meal that uses it
        ingredient = Ingredient(
            name=capitalize_words(value),
            slug=slug,
            aliases=[value.lower()],
            is_verified=False,
        )
        self.db.add(ingredient)
        self.db.flush()
        self._provisional.append(ingredient)
        return ingredient

    def resolve_ingredients(
        self, inputs: Sequence[IngredientInput]
    ) -> Tuple[List[Ingredient], List[Dict[str, Any]]]:
        """
        Map ingredient inputs (id, name or alias) to master rows.

        Duplicates collapse onto the first occurrence. Unknown names become
        provisional ingredients that stay uncommitted until the caller
        commits; if any input fails the whole resolution is rolled back.

        Returns:
            (ingredients, per-meal details with quantity and optionality)
        """
        resolved: List[Ingredient] = []
        details: List[Dict[str, Any]] = []
        seen = set()
        self._provisional = []
        try:
            for item in inputs:
                ingredient = self._resolve_one(item)
                if ingredient.id in seen:
                    continue
                seen.add(ingredient.id)
                resolved.append(ingredient)
                details.append(ingredient_detail(ingredient, item.quantity, item.is_optional))
        except ServiceError:
            self._provisional = []
            self.db.rollback()
            raise
        return resolved, details

    def _announce_provisional(self) -> None:
        for ingredient in self._provisional:
            self.invalidation.ingredient_changed(ingredient.id, ingredient.slug)
            self.log_info(
                "provisional_ingredient_created", ingredient_id=ingredient.id, name=ingredient.name
            )
        self._provisional = []

    def _store_details(self, meal_id: str, details: List[Dict[str, Any]]) -> None:
        # No TTL: the entry lives as long as the meal and is dropped on delete
        self.cache.set_json(keys.meal_ingredients_key(meal_id), details)

    def _check_category(self, category_id: Optional[str]) -> None:
        if category_id and not self.categories.exists(category_id):
            raise NotFoundError(f"Meal category {category_id} not found")

    def _unique_slug(self, title: str, exclude_id: Optional[str] = None) -> str:
        slug = generate_slug(title)
        if not slug:
            raise ServiceValidationError("Meal title must contain letters or digits")
        if self.meals.slug_taken(slug, exclude_id):
            raise ConflictError(f'Meal with title "{title}" already exists')
        return slug

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_meal(self, data: MealCreate) -> Dict[str, Any]:
        slug = self._unique_slug(data.title)
        self._check_category(data.meal_category_id)

        ingredients, details = self.resolve_ingredients(data.ingredients)
        meal = Meal(
            title=data.title,
            slug=slug,
            short_description=data.short_description,
            instructions=data.instructions,
            cooking_time_minutes=data.cooking_time_minutes,
            difficulty=data.difficulty or Difficulty.MEDIUM,
            category_id=data.meal_category_id,
            diabetes_friendly=data.diabetes_friendly,
            **project_ingredients(ingredients),
        )
        meal.search_text = meal_search_text(meal)
        meal = self.meals.create(meal)
        self._announce_provisional()

        self._store_details(meal.id, details)
        self.invalidation.meal_changed(meal.id, meal.slug)
        self.log_info("meal_created", meal_id=meal.id, ingredients=len(ingredients))
        return {**meal.to_dict(), "ingredients": details}

    def update_meal(self, meal_id: str, data: MealUpdate) -> Dict[str, Any]:
        """
        Partially update a meal.

        A new ingredient list recomputes the projection and every dietary
        flag from scratch; a new title re-slugs the meal.
        """
        meal = self.meals.get_by_id(meal_id)
        if meal is None:
            raise NotFoundError(f"Meal {meal_id} not found")

        changes = data.model_dump(exclude_unset=True)
        old_slug = meal.slug

        # Everything that can fail runs before the meal is touched
        title = changes.pop("title", None)
        new_slug = None
        if title and title != meal.title:
            new_slug = self._unique_slug(title, exclude_id=meal_id)

        has_category = "meal_category_id" in changes
        category_id = changes.pop("meal_category_id", None)
        if has_category:
            self._check_category(category_id)

        details = None
        projection: Dict[str, Any] = {}
        if changes.pop("ingredients", None) is not None:
            ingredients, details = self.resolve_ingredients(data.ingredients)
            projection = project_ingredients(ingredients)

        if new_slug is not None:
            meal.slug = new_slug
            meal.title = title
        if has_category:
            meal.category_id = category_id
        for column, value in projection.items():
            setattr(meal, column, value)
        for field, value in changes.items():
            if value is None and field in ("difficulty", "diabetes_friendly"):
                continue
            setattr(meal, field, value)

        meal.search_text = meal_search_text(meal)
        meal = self.meals.update(meal)
        self._announce_provisional()

        if details is not None:
            self._store_details(meal.id, details)
        self.invalidation.meal_changed(meal.id, meal.slug, old_slug)
        self.log_info("meal_updated", meal_id=meal_id, fields=",".join(sorted(data.model_fields_set)))

        return {
            **meal.to_dict(),
            "ingredients": load_meal_ingredients(
                self.cache, self.ingredients, meal.id, meal.ingredient_ids
            ),
        }

    def delete_meal(self, meal_id: str) -> Dict[str, str]:
        meal = self.meals.get_by_id(meal_id)
        if meal is None:
            raise NotFoundError(f"Meal {meal_id} not found")
        slug = meal.slug
        self.meals.delete(meal_id)
        self.invalidation.meal_changed(meal_id, slug, deleted=True)
        self.log_info("meal_deleted", meal_id=meal_id)
        return {"message": "Meal deleted successfully"}

    def _load(self, meal: Optional[Meal]) -> Optional[Dict[str, Any]]:
        return meal.to_dict() if meal is not None else None

    def get_meal(self, meal_id: str) -> Dict[str, Any]:
        meal = self.cached(
            keys.meal_key(meal_id),
            settings.detail_cache_ttl,
            lambda: self._load(self.meals.get_by_id(meal_id)),
        )
        if meal is None:
            raise NotFoundError(f"Meal {meal_id} not found")
        return {
            **meal,
            "ingredients": load_meal_ingredients(
                self.cache, self.ingredients, meal["id"], meal.get("ingredientIds") or []
            ),
        }

    def get_meal_by_slug(self, slug: str) -> Dict[str, Any]:
        meal = self.cached(
            keys.meal_slug_key(slug),
            settings.detail_cache_ttl,
            lambda: self._load(self.meals.get_by_slug(slug)),
        )
        if meal is None:
            raise NotFoundError(f'Meal with slug "{slug}" not found')
        return meal

    def list_meals(
        self,
        page: int = 1,
        limit: int = 20,
        category_id: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
        is_veg: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Newest meals first, optionally filtered"""
        validate_page(page, limit)
        predicate = all_of(
            Equals("category_id", category_id) if category_id else None,
            Equals("difficulty", difficulty) if difficulty else None,
            Equals("is_veg", is_veg) if is_veg is not None else None,
        )
        meals = self.meals.find_many(
            predicate,
            order_by=(Meal.created_at.desc(), Meal.id.asc()),
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = self.meals.count(predicate)
        return {
            "meals": [m.summary_dict() for m in meals],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    # ------------------------------------------------------------------
    # Engagement counters
    # ------------------------------------------------------------------

    def increment_view_count(self, meal_id: str) -> None:
        if not self.meals.increment(meal_id, "view_count"):
            raise NotFoundError(f"Meal {meal_id} not found")

    def increment_click_count(self, meal_id: str, user_id: Optional[str] = None) -> None:
        """Clicks feed trending; the trending cache catches up within its TTL"""
        if not self.meals.increment(meal_id, "click_count"):
            raise NotFoundError(f"Meal {meal_id} not found")
        self.logger.debug(f"meal_clicked meal_id={meal_id} user_id={user_id}")
