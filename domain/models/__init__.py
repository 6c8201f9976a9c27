"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.ingredient import Ingredient, IngredientCategory
from domain.models.dish import DishMixin, Meal, MealCategory, Recipe
from domain.models.profile import UserDietProfile
from domain.models.engagement import Bookmark, CookedRecipe

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Catalog models
    "Ingredient",
    "IngredientCategory",
    "DishMixin",
    "Meal",
    "MealCategory",
    "Recipe",
    # User models
    "UserDietProfile",
    "Bookmark",
    "CookedRecipe",
]
