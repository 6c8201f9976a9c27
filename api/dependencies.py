"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from adapters import cache_adapter
from adapters.cache_adapter import SafeCache
from domain.models import get_db_session
from services import (
    IngredientService,
    MealSearchService,
    MealService,
    ProfileService,
    RecipeService,
    SimilarityService,
)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_cache() -> SafeCache:
    """Process-wide cache facade"""
    return cache_adapter.get_cache()


def get_user_id(
    x_user_id: Optional[str] = Header(default=None, max_length=64, description="Caller user id"),
) -> Optional[str]:
    """Caller identity; requests are trusted, absent means anonymous"""
    if not x_user_id or not x_user_id.strip():
        return None
    return x_user_id.strip()


# Service factories


def get_search_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> MealSearchService:
    return MealSearchService(db, cache)


def get_similarity_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> SimilarityService:
    return SimilarityService(db, cache)


def get_profile_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> ProfileService:
    return ProfileService(db, cache)


def get_ingredient_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> IngredientService:
    return IngredientService(db, cache)


def get_meal_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> MealService:
    return MealService(db, cache)


def get_recipe_service(
    db: Session = Depends(get_db), cache: SafeCache = Depends(get_cache)
) -> RecipeService:
    return RecipeService(db, cache)
