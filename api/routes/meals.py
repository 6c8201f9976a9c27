"""Meal catalog routes"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional, Dict, Any
import logging

from api.dependencies import get_meal_service, get_user_id
from domain.enums import Difficulty
from domain.schemas.dish_schemas import MealCreate, MealUpdate
from services import MealService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("pantrychef.api.meals")


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_meal(data: MealCreate, service: MealService = Depends(get_meal_service)):
    """
    Create a meal.

    Ingredients may be given by id, name or alias; unknown names are added
    to the ingredient table as unverified entries.
    """
    return service.create_meal(data)


@router.get("", response_model=Dict[str, Any])
def list_meals(
    page: int = Query(default=1, ge=1, description="Page number"),
    limit: int = Query(default=20, ge=1, le=100, description="Page size"),
    meal_category_id: Optional[str] = Query(default=None, description="Category filter"),
    difficulty: Optional[Difficulty] = Query(default=None, description="Difficulty filter"),
    is_veg: Optional[bool] = Query(default=None, description="Vegetarian filter"),
    service: MealService = Depends(get_meal_service),
):
    return service.list_meals(page, limit, meal_category_id, difficulty, is_veg)


@router.get("/slug/{slug}", response_model=Dict[str, Any])
def get_meal_by_slug(slug: str, service: MealService = Depends(get_meal_service)):
    return service.get_meal_by_slug(slug)


@router.get("/{meal_id}", response_model=Dict[str, Any])
def get_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    return service.get_meal(meal_id)


@router.put("/{meal_id}", response_model=Dict[str, Any])
def update_meal(
    meal_id: str, data: MealUpdate, service: MealService = Depends(get_meal_service)
):
    """Partially update a meal; a new ingredient list recomputes its dietary flags."""
    return service.update_meal(meal_id, data)


@router.delete("/{meal_id}")
def delete_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    return service.delete_meal(meal_id)


@router.post("/{meal_id}/view", status_code=status.HTTP_204_NO_CONTENT)
def record_view(meal_id: str, service: MealService = Depends(get_meal_service)):
    service.increment_view_count(meal_id)


@router.post("/{meal_id}/click", status_code=status.HTTP_204_NO_CONTENT)
def record_click(
    meal_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    service: MealService = Depends(get_meal_service),
):
    service.increment_click_count(meal_id, user_id)
