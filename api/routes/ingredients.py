"""Ingredient master data routes"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List, Dict, Any
import logging

from api.dependencies import get_ingredient_service
from domain.schemas.ingredient_schemas import (
    IngredientCategoryCreate,
    IngredientCreate,
    IngredientUpdate,
)
from services import IngredientService

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])
logger = logging.getLogger("pantrychef.api.ingredients")


# Categories


@router.post("/categories", status_code=status.HTTP_201_CREATED)
def create_category(
    data: IngredientCategoryCreate,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.create_category(data)


@router.get("/categories", response_model=List[Dict[str, Any]])
def list_categories(service: IngredientService = Depends(get_ingredient_service)):
    """All ingredient categories with their ingredient counts."""
    return service.list_categories()


@router.put("/categories/{category_id}")
def update_category(
    category_id: str,
    data: IngredientCategoryCreate,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.update_category(category_id, data)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: str, service: IngredientService = Depends(get_ingredient_service)
):
    return service.delete_category(category_id)


# Ingredients


@router.post("", status_code=status.HTTP_201_CREATED)
def create_ingredient(
    data: IngredientCreate, service: IngredientService = Depends(get_ingredient_service)
):
    return service.create_ingredient(data)


@router.get("", response_model=Dict[str, Any])
def search_ingredients(
    query: Optional[str] = Query(default=None, max_length=100, description="Name or alias"),
    category_id: Optional[str] = Query(default=None, description="Category filter"),
    is_veg: Optional[bool] = Query(default=None),
    is_vegan: Optional[bool] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.search_ingredients(query, category_id, is_veg, is_vegan, limit, offset)


@router.get("/slug/{slug}")
def get_ingredient_by_slug(
    slug: str, service: IngredientService = Depends(get_ingredient_service)
):
    return service.get_ingredient_by_slug(slug)


@router.get("/{ingredient_id}")
def get_ingredient(
    ingredient_id: str, service: IngredientService = Depends(get_ingredient_service)
):
    return service.get_ingredient_by_id(ingredient_id)


@router.put("/{ingredient_id}")
def update_ingredient(
    ingredient_id: str,
    data: IngredientUpdate,
    service: IngredientService = Depends(get_ingredient_service),
):
    """
    Partially update an ingredient.

    Renaming it or changing a dietary tag refreshes every meal and recipe
    that uses it.
    """
    return service.update_ingredient(ingredient_id, data)


@router.patch("/{ingredient_id}/verify")
def verify_ingredient(
    ingredient_id: str, service: IngredientService = Depends(get_ingredient_service)
):
    return service.verify_ingredient(ingredient_id)


@router.delete("/{ingredient_id}")
def delete_ingredient(
    ingredient_id: str, service: IngredientService = Depends(get_ingredient_service)
):
    """Delete an ingredient; refused while any dish still uses it."""
    return service.delete_ingredient(ingredient_id)
