"""API routes package"""

from . import health, search, meals, recipes, ingredients, profiles

__all__ = ["health", "search", "meals", "recipes", "ingredients", "profiles"]
