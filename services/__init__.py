"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.search_service import MealSearchService
from services.similarity_service import SimilarityService
from services.ingredient_service import IngredientService
from services.meal_service import MealService
from services.recipe_service import RecipeService
from services.cache_invalidation import CacheInvalidationCoordinator

__all__ = [
    "ProfileService",
    "MealSearchService",
    "SimilarityService",
    "IngredientService",
    "MealService",
    "RecipeService",
    "CacheInvalidationCoordinator",
]
