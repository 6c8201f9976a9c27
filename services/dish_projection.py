"""
Denormalized ingredient projection carried by every dish.

A dish stores its ingredient ids, lower-cased names and slugs as three
index-aligned lists next to the dietary flags derived from them. Everything
here rebuilds that projection from full ingredient rows.
"""

from typing import Any, Dict, List, Sequence

from domain.models import Ingredient, Meal, Recipe
from services.dietary import compute_dietary_flags
from services.helpers import build_search_text


def project_ingredients(ingredients: Sequence[Ingredient]) -> Dict[str, Any]:
    """Column values for a dish made of `ingredients`, in the given order"""
    return {
        "ingredient_ids": [i.id for i in ingredients],
        "ingredient_names": [i.name.lower() for i in ingredients],
        "ingredient_slugs": [i.slug for i in ingredients],
        **compute_dietary_flags(ingredients).as_columns(),
    }


def meal_search_text(meal: Meal) -> str:
    return build_search_text(meal.title, meal.short_description, names=meal.ingredient_names or [])


def recipe_search_text(recipe: Recipe) -> str:
    return build_search_text(
        recipe.title,
        recipe.short_description,
        recipe.about_this_dish,
        recipe.pro_tip,
        names=recipe.ingredient_names or [],
    )


def ingredient_detail(ingredient: Ingredient, quantity=None, is_optional: bool = False) -> Dict[str, Any]:
    """Per-meal ingredient entry kept under meal:ingredients:{id}"""
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "slug": ingredient.slug,
        "quantity": quantity,
        "isOptional": is_optional,
        "isVeg": ingredient.is_veg,
        "isVegan": ingredient.is_vegan,
        "isDairy": ingredient.is_dairy,
        "isNut": ingredient.is_nut,
        "isGluten": ingredient.is_gluten,
    }


def refresh_details(details: List[Dict[str, Any]], ingredient: Ingredient) -> List[Dict[str, Any]]:
    """Rewrite the entries for `ingredient`, keeping quantity and optionality"""
    refreshed = []
    for entry in details:
        if entry.get("id") == ingredient.id:
            entry = ingredient_detail(
                ingredient, entry.get("quantity"), bool(entry.get("isOptional"))
            )
        refreshed.append(entry)
    return refreshed
