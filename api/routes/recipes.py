"""
Recipe routes - recipe catalog, ingredient search, bookmarks and ratings.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List, Dict, Any
import logging

from api.dependencies import get_recipe_service, get_user_id
from app.exceptions import ServiceValidationError
from domain.enums import Difficulty, RecipeType
from domain.schemas.dish_schemas import RateRecipeRequest, RecipeCreate, RecipeUpdate
from domain.schemas.search_schemas import RecipeSearchQuery
from services import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("pantrychef.api.recipes")


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_recipe(data: RecipeCreate, service: RecipeService = Depends(get_recipe_service)):
    """Create a recipe; every ingredient id must exist."""
    return service.create_recipe(data)


@router.get("", response_model=Dict[str, Any])
def get_all_recipes(
    limit: int = Query(default=20, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    service: RecipeService = Depends(get_recipe_service),
):
    return service.get_all_recipes(limit, offset)


@router.get("/popular", response_model=List[Dict[str, Any]])
def get_popular_recipes(
    limit: int = Query(default=10, ge=1, le=100, description="Maximum results"),
    service: RecipeService = Depends(get_recipe_service),
):
    return service.get_popular_recipes(limit)


@router.get("/search", response_model=Dict[str, Any])
def search_recipes(
    ingredient_ids: Optional[str] = Query(
        default=None, description="Comma-separated ingredient ids"
    ),
    recipe_type: Optional[RecipeType] = Query(default=None),
    difficulty: Optional[Difficulty] = Query(default=None),
    is_veg: bool = Query(default=False),
    is_vegan: bool = Query(default=False),
    dairy_free: bool = Query(default=False),
    nut_free: bool = Query(default=False),
    gluten_free: bool = Query(default=False),
    search_text: Optional[str] = Query(default=None, max_length=200),
    limit: int = Query(default=20, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Search recipes sharing any of the given ingredients.

    - **ingredient_ids**: Comma-separated ids
    - **recipe_type** / **difficulty**: Exact filters
    - **is_veg**, **is_vegan**, **dairy_free**, **nut_free**, **gluten_free**: Dietary filters
    - **search_text**: Substring of name, description or ingredient names
    """
    ids = [i.strip() for i in ingredient_ids.split(",") if i.strip()] if ingredient_ids else []
    query = RecipeSearchQuery(
        ingredient_ids=ids,
        recipe_type=recipe_type,
        difficulty=difficulty,
        is_veg=is_veg,
        is_vegan=is_vegan,
        dairy_free=dairy_free,
        nut_free=nut_free,
        gluten_free=gluten_free,
        search_text=search_text,
        limit=limit,
        offset=offset,
    )
    return service.search_recipes_by_ingredients(query)


@router.get("/type/{recipe_type}", response_model=Dict[str, Any])
def get_recipes_by_type(
    recipe_type: RecipeType,
    limit: int = Query(default=20, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    service: RecipeService = Depends(get_recipe_service),
):
    return service.get_recipes_by_type(recipe_type, limit, offset)


@router.get("/user/bookmarks", response_model=Dict[str, Any])
def get_user_bookmarks(
    limit: int = Query(default=20, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    user_id: Optional[str] = Depends(get_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    """Recipes bookmarked by the caller, newest bookmark first."""
    if not user_id:
        raise ServiceValidationError("X-User-Id header is required")
    return service.get_user_bookmarks(user_id, limit, offset)


@router.get("/slug/{slug}", response_model=Dict[str, Any])
def get_recipe_by_slug(slug: str, service: RecipeService = Depends(get_recipe_service)):
    return service.get_recipe_by_slug(slug)


@router.get("/{recipe_id}", response_model=Dict[str, Any])
def get_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    """Full recipe with its most recent cook entries."""
    return service.get_recipe_by_id(recipe_id)


@router.put("/{recipe_id}", response_model=Dict[str, Any])
def update_recipe(
    recipe_id: str, data: RecipeUpdate, service: RecipeService = Depends(get_recipe_service)
):
    return service.update_recipe(recipe_id, data)


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    return service.delete_recipe(recipe_id)


@router.post("/{recipe_id}/bookmark", status_code=status.HTTP_201_CREATED)
def bookmark_recipe(
    recipe_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    return service.bookmark_recipe(user_id, recipe_id)


@router.delete("/{recipe_id}/bookmark")
def remove_bookmark(
    recipe_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    return service.remove_bookmark(user_id, recipe_id)


@router.post("/{recipe_id}/rate", status_code=status.HTTP_201_CREATED)
def rate_recipe(
    recipe_id: str,
    data: RateRecipeRequest,
    user_id: Optional[str] = Depends(get_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    """Record that the caller cooked this recipe, optionally with a 1-5 rating."""
    return service.rate_recipe(user_id, recipe_id, data)
