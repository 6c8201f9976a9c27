"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.ingredient_repository import (
    IngredientRepository,
    IngredientCategoryRepository,
)
from repositories.dish_repository import (
    DishRepository,
    MealRepository,
    RecipeRepository,
    MealCategoryRepository,
)
from repositories.user_repository import DietProfileRepository
from repositories.engagement_repository import (
    BookmarkRepository,
    CookedRecipeRepository,
)

__all__ = [
    "BaseRepository",
    "IngredientRepository",
    "IngredientCategoryRepository",
    "DishRepository",
    "MealRepository",
    "RecipeRepository",
    "MealCategoryRepository",
    "DietProfileRepository",
    "BookmarkRepository",
    "CookedRecipeRepository",
]
