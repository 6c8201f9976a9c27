"""
Cache key derivation.

Keys are `<prefix>:<component>:<component>...`. Every component is
percent-encoded so a ':' or ',' inside a value can never shift the
boundaries of another component, and ingredient lists are normalized and
sorted so permuted queries share one key.
"""

from typing import Any, Iterable, Optional
from urllib.parse import quote

MEAL_SEARCH = "meal-search"
SIMILAR_MEALS = "similar-meals"
TRENDING_MEALS = "trending-meals"
AUTOCOMPLETE = "autocomplete"
USER_PROFILE = "user:profile"
MEAL = "meal"
RECIPE = "recipe"
RECIPES = "recipes"
RECIPE_SEARCH = "recipe-search"
INGREDIENT = "ingredient"


def encode_component(value: Any) -> str:
    """Percent-encode one key component; None becomes the empty string"""
    if value is None:
        return ""
    if hasattr(value, "value"):  # enums
        value = value.value
    return quote(str(value), safe=" ")


def ingredient_component(names: Optional[Iterable[str]]) -> str:
    normalized = sorted(n.strip().lower() for n in (names or []) if n and n.strip())
    return ",".join(encode_component(n) for n in normalized)


def build_key(prefix: str, *components: Any) -> str:
    return ":".join([prefix, *(encode_component(c) for c in components)])


def family(prefix: str) -> str:
    """Glob pattern matching every key under `prefix`"""
    return f"{prefix}:*"


# Meal search


def meal_search_key(
    user_id: Optional[str],
    ingredients: Iterable[str],
    category: Optional[str],
    difficulty: Any,
    max_cooking_time: Optional[int],
    page: int,
    limit: int,
) -> str:
    return ":".join(
        [
            MEAL_SEARCH,
            encode_component(user_id),
            ingredient_component(ingredients),
            encode_component(category),
            encode_component(difficulty),
            encode_component(max_cooking_time),
            encode_component(page),
            encode_component(limit),
        ]
    )


def user_search_family(user_id: str) -> str:
    return f"{MEAL_SEARCH}:{encode_component(user_id)}:*"


def similar_meals_key(meal_id: str, limit: int) -> str:
    return build_key(SIMILAR_MEALS, meal_id, limit)


def trending_meals_key(limit: int) -> str:
    return build_key(TRENDING_MEALS, limit)


def autocomplete_key(query: str, limit: int) -> str:
    return build_key(AUTOCOMPLETE, query, limit)


def user_profile_key(user_id: str) -> str:
    return build_key(USER_PROFILE, user_id)


# Dishes


def meal_key(meal_id: str) -> str:
    return build_key(MEAL, meal_id)


def meal_slug_key(slug: str) -> str:
    return build_key(MEAL, "slug", slug)


def meal_ingredients_key(meal_id: str) -> str:
    return build_key(MEAL, "ingredients", meal_id)


def recipe_key(recipe_id: str) -> str:
    return build_key(RECIPE, recipe_id)


def recipe_slug_key(slug: str) -> str:
    return build_key(RECIPE, "slug", slug)


def recipes_all_key(limit: int, offset: int) -> str:
    return build_key(RECIPES, "all", limit, offset)


def recipes_popular_key(limit: int) -> str:
    return build_key(RECIPES, "popular", limit)


def recipes_type_key(recipe_type: Any, limit: int, offset: int) -> str:
    return build_key(RECIPES, "type", recipe_type, limit, offset)


def recipe_search_key(
    ingredient_ids: Iterable[str],
    recipe_type: Any,
    difficulty: Any,
    dietary: Iterable[str],
    search_text: Optional[str],
    limit: int,
    offset: int,
) -> str:
    return ":".join(
        [
            RECIPE_SEARCH,
            ingredient_component(ingredient_ids),
            encode_component(recipe_type),
            encode_component(difficulty),
            ingredient_component(dietary),
            encode_component(search_text.strip().lower() if search_text else None),
            encode_component(limit),
            encode_component(offset),
        ]
    )


# Ingredients


def ingredient_key(ingredient_id: str) -> str:
    return build_key(INGREDIENT, ingredient_id)


def ingredient_slug_key(slug: str) -> str:
    return build_key(INGREDIENT, "slug", slug)


def ingredient_search_key(
    query: Optional[str],
    category_id: Optional[str],
    is_veg: Optional[bool],
    is_vegan: Optional[bool],
    limit: int,
    offset: int,
) -> str:
    return build_key(
        INGREDIENT, "search", query, category_id, is_veg, is_vegan, limit, offset
    )


def ingredient_categories_key() -> str:
    return build_key(INGREDIENT, "categories", "all")
