"""
Search routes - ranked meal search, meal detail, similar meals,
ingredient autocomplete and trending meals.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional, List, Dict, Any
import logging

from api.dependencies import get_search_service, get_similarity_service, get_user_id
from domain.schemas.search_schemas import MealSearchQuery
from services import MealSearchService, SimilarityService

router = APIRouter(prefix="/search", tags=["Search"])
logger = logging.getLogger("pantrychef.api.search")


@router.post("/meals", response_model=Dict[str, Any])
def search_meals(
    query: MealSearchQuery,
    user_id: Optional[str] = Depends(get_user_id),
    service: MealSearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    """
    Rank meals by how many of the given ingredients they use.

    - **ingredients**: Ingredient names the user has
    - **meal_category**: Category name fragment (ignored when unknown)
    - **difficulty**: EASY, MEDIUM or HARD
    - **max_cooking_time**: Upper bound in minutes
    - **page** / **limit**: Pagination (limit 1-100)

    The caller's dietary profile (X-User-Id header) filters the results.
    """
    return service.search_meals(query, user_id)


@router.post("/meals/simple", response_model=Dict[str, Any])
def search_meals_simple(
    query: MealSearchQuery,
    user_id: Optional[str] = Depends(get_user_id),
    service: MealSearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    """Popular-first search with loose (substring) ingredient matching."""
    return service.search_meals_simple(query, user_id)


@router.get("/autocomplete-ingredients", response_model=List[Dict[str, Any]])
def autocomplete_ingredients(
    query: str = Query(..., min_length=1, max_length=100, description="Partial ingredient name"),
    limit: int = Query(default=10, ge=1, le=100, description="Maximum suggestions"),
    service: MealSearchService = Depends(get_search_service),
) -> List[Dict[str, Any]]:
    return service.autocomplete_ingredients(query, limit)


@router.get("/trending", response_model=List[Dict[str, Any]])
def trending_meals(
    limit: int = Query(default=10, ge=1, le=100, description="Maximum results"),
    service: MealSearchService = Depends(get_search_service),
) -> List[Dict[str, Any]]:
    """Most clicked meals."""
    return service.trending_meals(limit)


@router.get("/meals/{meal_id}", response_model=Dict[str, Any])
def get_meal_detail(
    meal_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    service: MealSearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    """Meal detail with ingredients and a dietary compatibility verdict for the caller."""
    return service.get_meal_detail(meal_id, user_id)


@router.get("/meals/{meal_id}/similar", response_model=List[Dict[str, Any]])
def find_similar_meals(
    meal_id: str,
    limit: int = Query(default=10, ge=1, le=100, description="Maximum results"),
    service: SimilarityService = Depends(get_similarity_service),
) -> List[Dict[str, Any]]:
    """Meals sharing the most ingredients with the given meal."""
    return service.find_similar_meals(meal_id, limit)
