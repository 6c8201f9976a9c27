"""
Recipe service - recipe catalog, bookmarks and ratings.

Recipes reference ingredients strictly by id: every id must exist at write
time. Writes invalidate by key family or flush the whole cache, depending on
the configured recipe invalidation strategy.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import RecipeType
from domain.models import Bookmark, CookedRecipe, Recipe
from domain.schemas.dish_schemas import RateRecipeRequest, RecipeCreate, RecipeUpdate
from domain.schemas.search_schemas import RecipeSearchQuery
from repositories import (
    BookmarkRepository,
    CookedRecipeRepository,
    IngredientRepository,
    RecipeRepository,
)
from repositories.predicates import (
    ContainsSubstring,
    Equals,
    GreaterThan,
    all_of,
    any_of,
    overlaps,
)
from services.base import BaseService, validate_limit, validate_offset
from services.cache_invalidation import CacheInvalidationCoordinator
from services.dish_projection import project_ingredients, recipe_search_text
from services.helpers import generate_slug
from services import cache_keys as keys

RANKED_ORDER = (
    Recipe.avg_rating.desc(),
    Recipe.cook_count.desc(),
    Recipe.bookmark_count.desc(),
    Recipe.id.asc(),
)


def _page(items: List[Dict[str, Any]], total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {
        "recipes": items,
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }


class RecipeService(BaseService):
    """Business logic for recipes"""

    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.recipe")
        self.recipes = RecipeRepository(db)
        self.ingredients = IngredientRepository(db)
        self.bookmarks = BookmarkRepository(db)
        self.cooked = CookedRecipeRepository(db)
        self.invalidation = CacheInvalidationCoordinator(cache)

    def _require(self, recipe_id: str) -> Recipe:
        recipe = self.recipes.get_by_id(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe with ID {recipe_id} not found")
        return recipe

    def _unique_slug(self, title: str, exclude_id: Optional[str] = None) -> str:
        slug = generate_slug(title)
        if not slug:
            raise ServiceValidationError("Recipe title must contain letters or digits")
        if self.recipes.slug_taken(slug, exclude_id):
            raise ConflictError(f'Recipe with name "{title}" already exists')
        return slug

    def _load_ingredients(self, ingredient_ids: List[str]):
        rows = self.ingredients.get_many(ingredient_ids)
        if len(rows) != len(ingredient_ids):
            found = {i.id for i in rows}
            missing = [i for i in ingredient_ids if i not in found]
            raise ServiceValidationError(
                "Some ingredients not found", details={"missingIngredientIds": missing}
            )
        return rows

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_recipe(self, data: RecipeCreate) -> Dict[str, Any]:
        slug = self._unique_slug(data.title)
        ingredients = self._load_ingredients(data.ingredient_ids)

        recipe = Recipe(
            slug=slug,
            **data.model_dump(exclude={"ingredient_ids"}),
            **project_ingredients(ingredients),
        )
        recipe.search_text = recipe_search_text(recipe)
        recipe = self.recipes.create(recipe)

        self.invalidation.recipe_changed(recipe.id, recipe.slug)
        self.log_info("recipe_created", recipe_id=recipe.id, ingredients=len(ingredients))
        return recipe.to_dict()

    def update_recipe(self, recipe_id: str, data: RecipeUpdate) -> Dict[str, Any]:
        recipe = self._require(recipe_id)
        changes = data.model_dump(exclude_unset=True)
        old_slug = recipe.slug

        title = changes.pop("title", None)
        if title and title != recipe.title:
            recipe.slug = self._unique_slug(title, exclude_id=recipe_id)
            recipe.title = title

        ingredient_ids = changes.pop("ingredient_ids", None)
        if ingredient_ids is not None:
            if not ingredient_ids:
                raise ServiceValidationError("A recipe needs at least one ingredient")
            for column, value in project_ingredients(self._load_ingredients(ingredient_ids)).items():
                setattr(recipe, column, value)

        for field, value in changes.items():
            if value is None and field in ("difficulty", "diabetes_friendly"):
                continue
            setattr(recipe, field, value)

        recipe.search_text = recipe_search_text(recipe)
        recipe = self.recipes.update(recipe)

        self.invalidation.recipe_changed(recipe.id, recipe.slug, old_slug)
        self.log_info("recipe_updated", recipe_id=recipe_id)
        return recipe.to_dict()

    def delete_recipe(self, recipe_id: str) -> Dict[str, Any]:
        recipe = self._require(recipe_id)
        slug = recipe.slug
        self.recipes.delete(recipe_id)
        self.invalidation.recipe_changed(recipe_id, slug)
        self.log_info("recipe_deleted", recipe_id=recipe_id)
        return {"success": True, "message": "Recipe deleted successfully"}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _detail(self, recipe: Optional[Recipe]) -> Optional[Dict[str, Any]]:
        if recipe is None:
            return None
        self.recipes.increment(recipe.id, "view_count")
        self.db.refresh(recipe)
        return {
            **recipe.to_dict(),
            "recentCooks": [c.to_dict() for c in self.cooked.recent_for_recipe(recipe.id)],
        }

    def get_recipe_by_id(self, recipe_id: str) -> Dict[str, Any]:
        """Full recipe; counts a view whenever the entry is loaded from the store"""
        recipe = self.cached(
            keys.recipe_key(recipe_id),
            settings.detail_cache_ttl,
            lambda: self._detail(self.recipes.get_by_id(recipe_id)),
        )
        if recipe is None:
            raise NotFoundError(f"Recipe with ID {recipe_id} not found")
        return recipe

    def get_recipe_by_slug(self, slug: str) -> Dict[str, Any]:
        recipe = self.cached(
            keys.recipe_slug_key(slug),
            settings.detail_cache_ttl,
            lambda: self._detail(self.recipes.get_by_slug(slug)),
        )
        if recipe is None:
            raise NotFoundError(f'Recipe with slug "{slug}" not found')
        return recipe

    def get_all_recipes(self, limit: int = 20, offset: int = 0) -> Dict[str, Any]:
        validate_limit(limit)
        validate_offset(offset)

        def load():
            recipes = self.recipes.find_many(
                order_by=(Recipe.created_at.desc(), Recipe.id.asc()), limit=limit, offset=offset
            )
            return _page([r.summary_dict() for r in recipes], self.recipes.count(), limit, offset)

        return self.cached(keys.recipes_all_key(limit, offset), settings.detail_cache_ttl, load)

    def get_popular_recipes(self, limit: int = 10) -> List[Dict[str, Any]]:
        validate_limit(limit)

        def load():
            recipes = self.recipes.find_many(
                order_by=(
                    Recipe.cook_count.desc(),
                    Recipe.bookmark_count.desc(),
                    Recipe.avg_rating.desc(),
                    Recipe.id.asc(),
                ),
                limit=limit,
            )
            return [r.summary_dict() for r in recipes]

        return self.cached(keys.recipes_popular_key(limit), settings.detail_cache_ttl, load)

    def get_recipes_by_type(
        self, recipe_type: RecipeType, limit: int = 20, offset: int = 0
    ) -> Dict[str, Any]:
        validate_limit(limit)
        validate_offset(offset)
        predicate = Equals("recipe_type", recipe_type)

        def load():
            recipes = self.recipes.find_many(
                predicate,
                order_by=(Recipe.avg_rating.desc(), Recipe.cook_count.desc(), Recipe.id.asc()),
                limit=limit,
                offset=offset,
            )
            result = _page(
                [r.summary_dict() for r in recipes], self.recipes.count(predicate), limit, offset
            )
            result["recipeType"] = recipe_type.value
            return result

        return self.cached(
            keys.recipes_type_key(recipe_type, limit, offset), settings.detail_cache_ttl, load
        )

    def search_recipes_by_ingredients(self, query: RecipeSearchQuery) -> Dict[str, Any]:
        """
        Filter recipes sharing any of the given ingredient ids.

        Ordered by average rating, cook count and bookmark count, all desc.
        """
        validate_limit(query.limit)
        validate_offset(query.offset)
        dietary = query.dietary_filters()
        text = query.search_text.strip() if query.search_text else None

        cache_key = keys.recipe_search_key(
            query.ingredient_ids,
            query.recipe_type,
            query.difficulty,
            dietary,
            text,
            query.limit,
            query.offset,
        )
        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return cached

        predicate = all_of(
            overlaps("ingredient_ids", query.ingredient_ids) if query.ingredient_ids else None,
            Equals("recipe_type", query.recipe_type) if query.recipe_type else None,
            Equals("difficulty", query.difficulty) if query.difficulty else None,
            *(Equals(flag, True) for flag in dietary),
            any_of(
                ContainsSubstring("search_text", text), ContainsSubstring("title", text)
            )
            if text
            else None,
        )
        recipes = self.recipes.find_many(
            predicate, order_by=RANKED_ORDER, limit=query.limit, offset=query.offset
        )
        result = _page(
            [r.summary_dict() for r in recipes],
            self.recipes.count(predicate),
            query.limit,
            query.offset,
        )
        result["filters"] = {
            "ingredientIds": list(query.ingredient_ids),
            "recipeType": query.recipe_type.value if query.recipe_type else None,
            "difficulty": query.difficulty.value if query.difficulty else None,
            "searchText": text,
        }

        self.cache.set_json(cache_key, result, settings.search_cache_ttl)
        return result

    # ------------------------------------------------------------------
    # Engagement
    # ------------------------------------------------------------------

    def bookmark_recipe(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        if not user_id:
            raise ServiceValidationError("A user id is required to bookmark")
        recipe = self._require(recipe_id)
        if self.bookmarks.get_for(user_id, recipe_id):
            raise ConflictError("Recipe already bookmarked")

        try:
            self.bookmarks.create(Bookmark(user_id=user_id, recipe_id=recipe_id))
        except IntegrityError:
            # a concurrent request bookmarked first
            self.db.rollback()
            raise ConflictError("Recipe already bookmarked")

        self.recipes.increment(recipe_id, "bookmark_count")
        self.invalidation.recipe_engagement(recipe_id, recipe.slug)
        self.log_info("recipe_bookmarked", user_id=user_id, recipe_id=recipe_id)
        return {"success": True, "message": "Recipe bookmarked"}

    def remove_bookmark(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        bookmark = self.bookmarks.get_for(user_id, recipe_id) if user_id else None
        if bookmark is None:
            raise NotFoundError("Bookmark not found")

        self.bookmarks.delete(bookmark.id)
        # never below zero
        self.recipes.increment(
            recipe_id, "bookmark_count", -1, guard=GreaterThan("bookmark_count", 0)
        )
        recipe = self.recipes.get_by_id(recipe_id)
        self.invalidation.recipe_engagement(recipe_id, recipe.slug if recipe else None)
        self.log_info("recipe_unbookmarked", user_id=user_id, recipe_id=recipe_id)
        return {"success": True, "message": "Bookmark removed"}

    def get_user_bookmarks(self, user_id: str, limit: int = 20, offset: int = 0) -> Dict[str, Any]:
        validate_limit(limit)
        validate_offset(offset)
        recipes, total = self.bookmarks.list_for_user(user_id, limit=limit, offset=offset)
        return _page([r.summary_dict() for r in recipes], total, limit, offset)

    def rate_recipe(self, user_id: str, recipe_id: str, data: RateRecipeRequest) -> Dict[str, Any]:
        """Record a cook, bump cook_count and recompute the average rating"""
        if not user_id:
            raise ServiceValidationError("A user id is required to rate a recipe")
        recipe = self._require(recipe_id)

        cooked = self.cooked.create(
            CookedRecipe(user_id=user_id, recipe_id=recipe_id, rating=data.rating, notes=data.notes)
        )
        self.recipes.increment(recipe_id, "cook_count")

        average = self.cooked.average_rating(recipe_id)
        if average is not None:
            self.db.refresh(recipe)
            recipe.avg_rating = float(average)
            self.recipes.update(recipe)

        self.invalidation.recipe_engagement(recipe_id, recipe.slug)
        self.log_info("recipe_rated", user_id=user_id, recipe_id=recipe_id, rating=data.rating)
        return cooked.to_dict()
