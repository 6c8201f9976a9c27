"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.search_schemas import MealSearchQuery, RecipeSearchQuery
from domain.schemas.dish_schemas import (
    IngredientInput,
    MealCreate,
    MealUpdate,
    RecipeCreate,
    RecipeUpdate,
    RateRecipeRequest,
)
from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientCategoryCreate,
)
from domain.schemas.profile_schemas import DietProfileUpdate

__all__ = [
    # Search
    "MealSearchQuery",
    "RecipeSearchQuery",
    # Dishes
    "IngredientInput",
    "MealCreate",
    "MealUpdate",
    "RecipeCreate",
    "RecipeUpdate",
    "RateRecipeRequest",
    # Ingredients
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientCategoryCreate",
    # Profiles
    "DietProfileUpdate",
]
