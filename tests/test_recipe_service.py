"""
Tests for recipes: creation, search, bookmarks and ratings.
"""

import pytest

from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import RecipeType
from domain.schemas.dish_schemas import RateRecipeRequest, RecipeCreate, RecipeUpdate
from domain.schemas.search_schemas import RecipeSearchQuery
from services import RecipeService
from test_fixtures import make_ingredient, make_recipe


@pytest.fixture
def pantry(db_session):
    return {
        "rice": make_ingredient(db_session, "Rice"),
        "milk": make_ingredient(db_session, "Milk", is_vegan=False, is_dairy=True),
        "cashew": make_ingredient(db_session, "Cashew", is_nut=True),
        "flour": make_ingredient(db_session, "Flour", is_gluten=True),
    }


# =============================================================================
# CREATE / UPDATE
# =============================================================================


def test_create_recipe_projects_ingredients(db_session, cache, pantry):
    recipe = RecipeService(db_session, cache).create_recipe(
        RecipeCreate(
            title="Kheer",
            recipe_type=RecipeType.DESSERT,
            ingredient_ids=[pantry["rice"].id, pantry["milk"].id, pantry["rice"].id],
        )
    )

    assert recipe["ingredientNames"] == ["rice", "milk"]
    assert recipe["isVeg"] is True
    assert recipe["isVegan"] is False
    assert recipe["dairyFree"] is False
    assert recipe["recipeType"] == "DESSERT"


def test_create_recipe_requires_every_ingredient(db_session, cache, pantry):
    with pytest.raises(ServiceValidationError) as exc_info:
        RecipeService(db_session, cache).create_recipe(
            RecipeCreate(title="Mystery", ingredient_ids=[pantry["rice"].id, "missing"])
        )

    assert exc_info.value.details == {"missingIngredientIds": ["missing"]}


def test_update_recipe_ingredients_recomputes_flags(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Cookies", [pantry["flour"], pantry["cashew"]])
    service = RecipeService(db_session, cache)

    updated = service.update_recipe(recipe.id, RecipeUpdate(ingredient_ids=[pantry["rice"].id]))

    assert updated["glutenFree"] is True
    assert updated["nutFree"] is True


def test_get_recipe_counts_view_and_caches(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])
    service = RecipeService(db_session, cache)

    assert service.get_recipe_by_id(recipe.id)["viewCount"] == 1
    assert service.get_recipe_by_slug("kheer")["viewCount"] == 2
    assert service.get_recipe_by_id(recipe.id)["viewCount"] == 1
    with pytest.raises(NotFoundError):
        service.get_recipe_by_id("missing")


# =============================================================================
# SEARCH
# =============================================================================


def test_search_by_ingredients_with_dietary_filters(db_session, cache, pantry):
    make_recipe(db_session, "Kheer", [pantry["rice"], pantry["milk"]], recipe_id="r1")
    make_recipe(db_session, "Rice Pilaf", [pantry["rice"], pantry["cashew"]], recipe_id="r2")
    make_recipe(db_session, "Bread", [pantry["flour"]], recipe_id="r3")
    service = RecipeService(db_session, cache)

    everything = service.search_recipes_by_ingredients(
        RecipeSearchQuery(ingredient_ids=[pantry["rice"].id])
    )
    dairy_free = service.search_recipes_by_ingredients(
        RecipeSearchQuery(ingredient_ids=[pantry["rice"].id], dairy_free=True)
    )

    assert sorted(r["id"] for r in everything["recipes"]) == ["r1", "r2"]
    assert [r["id"] for r in dairy_free["recipes"]] == ["r2"]
    assert dairy_free["filters"]["ingredientIds"] == [pantry["rice"].id]


def test_search_by_text(db_session, cache, pantry):
    make_recipe(db_session, "Kheer", [pantry["rice"], pantry["milk"]], recipe_id="r1")
    make_recipe(db_session, "Bread", [pantry["flour"]], recipe_id="r2")

    result = RecipeService(db_session, cache).search_recipes_by_ingredients(
        RecipeSearchQuery(search_text="MILK")
    )

    assert [r["id"] for r in result["recipes"]] == ["r1"]


def test_search_orders_by_rating(db_session, cache, pantry):
    make_recipe(db_session, "Plain", [pantry["rice"]], recipe_id="r1", avg_rating=3.0)
    make_recipe(db_session, "Loved", [pantry["rice"]], recipe_id="r2", avg_rating=4.5)

    result = RecipeService(db_session, cache).search_recipes_by_ingredients(
        RecipeSearchQuery(ingredient_ids=[pantry["rice"].id])
    )

    assert [r["id"] for r in result["recipes"]] == ["r2", "r1"]


def test_recipes_by_type(db_session, cache, pantry):
    make_recipe(db_session, "Kheer", [pantry["rice"]], recipe_type=RecipeType.DESSERT)
    make_recipe(db_session, "Pilaf", [pantry["rice"]], recipe_type=RecipeType.DINNER)

    result = RecipeService(db_session, cache).get_recipes_by_type(RecipeType.DESSERT)

    assert [r["title"] for r in result["recipes"]] == ["Kheer"]
    assert result["recipeType"] == "DESSERT"


# =============================================================================
# BOOKMARKS
# =============================================================================


def test_bookmark_and_duplicate(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])
    service = RecipeService(db_session, cache)

    service.bookmark_recipe("u1", recipe.id)
    with pytest.raises(ConflictError):
        service.bookmark_recipe("u1", recipe.id)

    db_session.expire_all()
    assert service.recipes.get_by_id(recipe.id).bookmark_count == 1
    bookmarks = service.get_user_bookmarks("u1")
    assert [r["id"] for r in bookmarks["recipes"]] == [recipe.id]


def test_unbookmark_decrements_once(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])
    service = RecipeService(db_session, cache)
    service.bookmark_recipe("u1", recipe.id)

    service.remove_bookmark("u1", recipe.id)
    with pytest.raises(NotFoundError):
        service.remove_bookmark("u1", recipe.id)

    db_session.expire_all()
    assert service.recipes.get_by_id(recipe.id).bookmark_count == 0


def test_bookmark_requires_user(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])

    with pytest.raises(ServiceValidationError):
        RecipeService(db_session, cache).bookmark_recipe(None, recipe.id)


# =============================================================================
# RATINGS
# =============================================================================


def test_rating_updates_average_and_cook_count(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])
    service = RecipeService(db_session, cache)

    service.rate_recipe("u1", recipe.id, RateRecipeRequest(rating=5))
    service.rate_recipe("u2", recipe.id, RateRecipeRequest(rating=4))
    service.rate_recipe("u3", recipe.id, RateRecipeRequest(notes="no rating"))

    detail = service.get_recipe_by_id(recipe.id)
    assert detail["cookCount"] == 3
    assert detail["avgRating"] == 4.5
    assert len(detail["recentCooks"]) == 3


def test_rating_is_visible_after_cached_read(db_session, cache, pantry):
    recipe = make_recipe(db_session, "Kheer", [pantry["rice"]])
    service = RecipeService(db_session, cache)
    assert service.get_recipe_by_id(recipe.id)["avgRating"] == 0.0

    service.rate_recipe("u1", recipe.id, RateRecipeRequest(rating=2))

    assert service.get_recipe_by_id(recipe.id)["avgRating"] == 2.0
