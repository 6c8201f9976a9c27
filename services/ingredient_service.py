"""Ingredient service - master ingredient data management."""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.models import Ingredient, IngredientCategory
from domain.schemas.ingredient_schemas import (
    IngredientCategoryCreate,
    IngredientCreate,
    IngredientUpdate,
)
from repositories import (
    IngredientCategoryRepository,
    IngredientRepository,
    MealRepository,
    RecipeRepository,
)
from services.base import BaseService, validate_limit, validate_offset
from services.cache_invalidation import CacheInvalidationCoordinator
from services.dish_projection import (
    meal_search_text,
    project_ingredients,
    recipe_search_text,
    refresh_details,
)
from services.helpers import generate_slug
from services import cache_keys as keys

# Updating any of these changes the projection of every dish using the ingredient
PROJECTED_FIELDS = {"name", "is_veg", "is_vegan", "is_dairy", "is_nut", "is_gluten"}

# Columns a partial update may set back to null
NULLABLE_FIELDS = {"description", "category_id"}


class IngredientService(BaseService):
    """Business logic for ingredient master data management."""

    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.ingredient")
        self.ingredients = IngredientRepository(db)
        self.categories = IngredientCategoryRepository(db)
        self.meals = MealRepository(db)
        self.recipes = RecipeRepository(db)
        self.invalidation = CacheInvalidationCoordinator(cache)

    def _require(self, ingredient_id: str) -> Ingredient:
        ingredient = self.ingredients.get_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient with ID {ingredient_id} not found")
        return ingredient

    def _check_category(self, category_id: Optional[str]) -> None:
        if category_id and not self.categories.exists(category_id):
            raise NotFoundError(f"Ingredient category {category_id} not found")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_ingredient(self, data: IngredientCreate) -> Dict[str, Any]:
        """Create a verified ingredient; name and slug must both be free"""
        slug = generate_slug(data.name)
        if not slug:
            raise ServiceValidationError("Ingredient name must contain letters or digits")
        if self.ingredients.name_or_slug_taken(data.name, slug):
            raise ConflictError(f'Ingredient "{data.name}" already exists')
        self._check_category(data.category_id)

        ingredient = self.ingredients.create(
            Ingredient(slug=slug, is_verified=True, **data.model_dump())
        )
        self.invalidation.ingredient_changed(ingredient.id, ingredient.slug)
        self.log_info("ingredient_created", ingredient_id=ingredient.id, name=ingredient.name)
        return ingredient.to_dict()

    def update_ingredient(self, ingredient_id: str, data: IngredientUpdate) -> Dict[str, Any]:
        """
        Partially update an ingredient.

        A rename re-slugs the ingredient. When the name or a dietary tag
        changes, every meal and recipe using the ingredient has its names,
        slugs and flags recomputed in the same transaction.
        """
        ingredient = self._require(ingredient_id)
        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in NULLABLE_FIELDS
        }
        old_slug = ingredient.slug

        name = changes.get("name")
        if name is not None:
            name = changes["name"] = name.strip()
            slug = generate_slug(name)
            if not slug:
                raise ServiceValidationError("Ingredient name must contain letters or digits")
            if self.ingredients.name_or_slug_taken(name, slug, exclude_id=ingredient_id):
                raise ConflictError(f'Ingredient "{name}" already exists')
            ingredient.slug = slug
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        projected = {
            field
            for field, value in changes.items()
            if field in PROJECTED_FIELDS and getattr(ingredient, field) != value
        }
        for field, value in changes.items():
            setattr(ingredient, field, value)

        rewritten_meals: List[Tuple[str, str]] = []
        rewritten_recipes: List[Tuple[str, str]] = []
        if projected or ingredient.slug != old_slug:
            self.db.flush()
            rewritten_meals, rewritten_recipes = self._refresh_dishes(ingredient)

        ingredient = self.ingredients.update(ingredient)
        self._refresh_meal_details(ingredient, rewritten_meals)
        self.invalidation.ingredient_changed(
            ingredient.id,
            ingredient.slug,
            old_slug,
            meals=rewritten_meals,
            recipes=rewritten_recipes,
        )
        self.log_info(
            "ingredient_updated",
            ingredient_id=ingredient_id,
            meals_refreshed=len(rewritten_meals),
            recipes_refreshed=len(rewritten_recipes),
        )
        return ingredient.to_dict()

    def _refresh_dishes(self, ingredient: Ingredient):
        """Recompute the projection of every dish referencing `ingredient` (no commit)"""
        rewritten = []
        for repo, search_text in ((self.meals, meal_search_text), (self.recipes, recipe_search_text)):
            touched = []
            for dish in repo.referencing_ingredient(ingredient.id):
                rows = self.ingredients.get_many(list(dish.ingredient_ids or []))
                for column, value in project_ingredients(rows).items():
                    setattr(dish, column, value)
                dish.search_text = search_text(dish)
                touched.append((dish.id, dish.slug))
            rewritten.append(touched)
        return rewritten[0], rewritten[1]

    def _refresh_meal_details(self, ingredient: Ingredient, meals: List[Tuple[str, str]]) -> None:
        for meal_id, _ in meals:
            key = keys.meal_ingredients_key(meal_id)
            details = self.cache.get_json(key)
            if details is not None:
                self.cache.set_json(key, refresh_details(details, ingredient))

    def verify_ingredient(self, ingredient_id: str) -> Dict[str, Any]:
        """Promote a provisional ingredient to verified"""
        ingredient = self._require(ingredient_id)
        ingredient.is_verified = True
        ingredient = self.ingredients.update(ingredient)
        self.invalidation.ingredient_changed(ingredient.id, ingredient.slug)
        self.log_info("ingredient_verified", ingredient_id=ingredient_id)
        return ingredient.to_dict()

    def delete_ingredient(self, ingredient_id: str) -> Dict[str, Any]:
        """Delete an ingredient no dish references"""
        ingredient = self._require(ingredient_id)
        used = self.meals.count_referencing(ingredient_id) + self.recipes.count_referencing(
            ingredient_id
        )
        if used:
            raise ConflictError(
                f'Cannot delete ingredient "{ingredient.name}" - it is used in {used} dish(es)',
                details={"ingredientId": ingredient_id, "references": used},
            )

        slug = ingredient.slug
        self.ingredients.delete(ingredient_id)
        self.invalidation.ingredient_changed(ingredient_id, slug)
        self.log_info("ingredient_deleted", ingredient_id=ingredient_id)
        return {"success": True, "message": "Ingredient deleted successfully"}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_ingredient_by_id(self, ingredient_id: str) -> Dict[str, Any]:
        ingredient = self.cached(
            keys.ingredient_key(ingredient_id),
            settings.ingredient_cache_ttl,
            lambda: self._to_dict(self.ingredients.get_by_id(ingredient_id)),
        )
        if ingredient is None:
            raise NotFoundError(f"Ingredient with ID {ingredient_id} not found")
        return ingredient

    def get_ingredient_by_slug(self, slug: str) -> Dict[str, Any]:
        ingredient = self.cached(
            keys.ingredient_slug_key(slug),
            settings.ingredient_cache_ttl,
            lambda: self._to_dict(self.ingredients.get_by_slug(slug)),
        )
        if ingredient is None:
            raise NotFoundError(f"Ingredient with slug {slug} not found")
        return ingredient

    @staticmethod
    def _to_dict(ingredient: Optional[Ingredient]) -> Optional[Dict[str, Any]]:
        return ingredient.to_dict() if ingredient is not None else None

    def search_ingredients(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        is_veg: Optional[bool] = None,
        is_vegan: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """Name/alias search, verified ingredients first"""
        validate_limit(limit)
        validate_offset(offset)
        query = query.strip() if query else None

        def load():
            items, total = self.ingredients.search(
                query, category_id, is_veg, is_vegan, limit=limit, offset=offset
            )
            return {
                "ingredients": [i.to_dict() for i in items],
                "pagination": {
                    "total": total,
                    "limit": limit,
                    "offset": offset,
                    "hasMore": offset + limit < total,
                },
            }

        return self.cached(
            keys.ingredient_search_key(
                query.lower() if query else None, category_id, is_veg, is_vegan, limit, offset
            ),
            settings.ingredient_cache_ttl,
            load,
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Dict[str, Any]]:
        def load():
            return [
                {**self._category_dict(c), "ingredientCount": self.categories.ingredient_count(c.id)}
                for c in self.categories.list_ordered()
            ]

        return self.cached(keys.ingredient_categories_key(), settings.ingredient_cache_ttl, load)

    @staticmethod
    def _category_dict(category: IngredientCategory) -> Dict[str, Any]:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "sortOrder": category.sort_order,
        }

    def create_category(self, data: IngredientCategoryCreate) -> Dict[str, Any]:
        if self.categories.get_by_name(data.name):
            raise ConflictError("This category already exists")
        category = self.categories.create(IngredientCategory(**data.model_dump()))
        self.invalidation.ingredient_category_changed(category.id)
        self.log_info("ingredient_category_created", category_id=category.id)
        return self._category_dict(category)

    def update_category(self, category_id: str, data: IngredientCategoryCreate) -> Dict[str, Any]:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category with ID {category_id} not found")
        existing = self.categories.get_by_name(data.name)
        if existing is not None and existing.id != category_id:
            raise ConflictError("A category with this name already exists")

        for field, value in data.model_dump().items():
            setattr(category, field, value)
        category = self.categories.update(category)
        self.invalidation.ingredient_category_changed(category_id)
        return self._category_dict(category)

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category with ID {category_id} not found")
        count = self.categories.ingredient_count(category_id)
        if count:
            raise ConflictError(
                f'Cannot delete category "{category.name}" - it has {count} ingredient(s)'
            )
        self.categories.delete(category_id)
        self.invalidation.ingredient_category_changed(category_id)
        return {"success": True, "message": "Category deleted successfully"}
