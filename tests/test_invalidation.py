"""
Cache consistency tests: every mutation must make the affected cached reads
fresh again on the next call.
"""

from adapters.cache_adapter import SafeCache, UnavailableCache
from app.config import InvalidationStrategy
from domain.schemas.dish_schemas import IngredientInput, MealCreate, MealUpdate, RecipeUpdate
from domain.schemas.ingredient_schemas import IngredientUpdate
from domain.schemas.search_schemas import MealSearchQuery
from repositories import IngredientRepository, MealRepository
from services import (
    CacheInvalidationCoordinator,
    IngredientService,
    MealSearchService,
    MealService,
    RecipeService,
    SimilarityService,
)
from services import cache_keys as keys
from test_fixtures import make_ingredient, make_meal, make_recipe


# =============================================================================
# INGREDIENT UPDATES
# =============================================================================


def test_ingredient_update_is_visible_on_next_read(db_session, cache):
    rice = make_ingredient(db_session, "Rice")
    service = IngredientService(db_session, cache)
    assert service.get_ingredient_by_id(rice.id)["isGluten"] is False

    service.update_ingredient(rice.id, IngredientUpdate(is_gluten=True))

    assert service.get_ingredient_by_id(rice.id)["isGluten"] is True


def test_ingredient_tag_change_recomputes_dish_flags(db_session, cache):
    """
    Verifies:
    - Meals and recipes using the ingredient get new flags
    - Their cached detail entries are dropped
    - Cached per-meal ingredient details keep quantities but pick up new tags
    """
    rice = make_ingredient(db_session, "Rice")
    meal_service = MealService(db_session, cache)
    meal = meal_service.create_meal(
        MealCreate(title="Rice Bowl", ingredients=[IngredientInput(name="rice", quantity="2 cups")])
    )
    recipe = make_recipe(db_session, "Rice Pudding", [rice])
    assert meal_service.get_meal(meal["id"])["glutenFree"] is True

    IngredientService(db_session, cache).update_ingredient(rice.id, IngredientUpdate(is_gluten=True))

    db_session.expire_all()
    refreshed = meal_service.get_meal(meal["id"])
    assert refreshed["glutenFree"] is False
    assert refreshed["ingredients"][0]["quantity"] == "2 cups"
    assert refreshed["ingredients"][0]["isGluten"] is True
    assert RecipeService(db_session, cache).get_recipe_by_id(recipe.id)["glutenFree"] is False


def test_ingredient_rename_rewrites_dish_names_and_search(db_session, cache):
    rice = make_ingredient(db_session, "Rice")
    make_meal(db_session, "Bowl", [rice], meal_id="m1")
    search = MealSearchService(db_session, cache)
    assert search.search_meals(MealSearchQuery(ingredients=["rice"]))["total"] == 1

    IngredientService(db_session, cache).update_ingredient(
        rice.id, IngredientUpdate(name="Basmati Rice")
    )

    assert search.search_meals(MealSearchQuery(ingredients=["rice"]))["total"] == 0
    found = search.search_meals(MealSearchQuery(ingredients=["basmati rice"]))
    assert [r["id"] for r in found["results"]] == ["m1"]
    assert found["results"][0]["ingredientNames"] == ["basmati rice"]


# =============================================================================
# MEAL WRITES
# =============================================================================


def test_meal_write_flushes_search_and_similar_families(db_session, cache):
    rice = make_ingredient(db_session, "Rice")
    make_meal(db_session, "Rice Bowl", [rice], meal_id="m1")
    similar = SimilarityService(db_session, cache)
    assert similar.find_similar_meals("m1") == []
    MealSearchService(db_session, cache).search_meals(MealSearchQuery(ingredients=["rice"]))

    created = MealService(db_session, cache).create_meal(
        MealCreate(title="Rice Salad", ingredients=[IngredientInput(name="rice")])
    )

    assert cache.delete_pattern("meal-search:*") == 0
    assert [r["id"] for r in similar.find_similar_meals("m1")] == [created["id"]]


# =============================================================================
# RECIPE WRITES
# =============================================================================


def test_recipe_update_clears_recipe_families_only(db_session, cache):
    rice = make_ingredient(db_session, "Rice")
    recipe = make_recipe(db_session, "Rice Pudding", [rice])
    service = RecipeService(db_session, cache)
    service.get_all_recipes()
    cache.set_json(keys.meal_key("m1"), {"id": "m1"})

    service.update_recipe(recipe.id, RecipeUpdate(portions=4))

    assert cache.get_json(keys.recipes_all_key(20, 0)) is None
    assert cache.get_json(keys.meal_key("m1")) == {"id": "m1"}


def test_global_strategy_flushes_everything(cache):
    cache.set_json(keys.meal_key("m1"), {"id": "m1"})
    cache.set_json(keys.user_profile_key("u1"), {"userId": "u1"})

    CacheInvalidationCoordinator(cache, InvalidationStrategy.GLOBAL).recipe_changed("r1", "slug")

    assert cache.get_json(keys.meal_key("m1")) is None
    assert cache.get_json(keys.user_profile_key("u1")) is None


def test_engagement_touches_only_detail_entries(cache):
    cache.set_json(keys.recipe_key("r1"), {"id": "r1"})
    cache.set_json(keys.recipes_popular_key(10), [])

    CacheInvalidationCoordinator(cache).recipe_engagement("r1")

    assert cache.get_json(keys.recipe_key("r1")) is None
    assert cache.get_json(keys.recipes_popular_key(10)) == []


# =============================================================================
# CACHE OUTAGE
# =============================================================================


def test_meal_writes_commit_while_cache_is_down(db_session):
    """
    Verifies:
    - Create, update and delete succeed with an unreachable cache
    - Each write is committed to the store
    """
    down = SafeCache(UnavailableCache())
    make_ingredient(db_session, "Rice")
    service = MealService(db_session, down)

    meal = service.create_meal(
        MealCreate(title="Rice Bowl", ingredients=[IngredientInput(name="rice")])
    )
    db_session.rollback()
    assert MealRepository(db_session).get_by_id(meal["id"]) is not None

    updated = service.update_meal(meal["id"], MealUpdate(title="Plain Rice Bowl"))
    db_session.rollback()
    assert updated["slug"] == "plain-rice-bowl"
    assert MealRepository(db_session).get_by_id(meal["id"]).title == "Plain Rice Bowl"

    service.delete_meal(meal["id"])
    db_session.rollback()
    assert MealRepository(db_session).get_by_id(meal["id"]) is None


def test_ingredient_update_commits_while_cache_is_down(db_session):
    down = SafeCache(UnavailableCache())
    rice = make_ingredient(db_session, "Rice")
    meal = make_meal(db_session, "Rice Bowl", [rice])

    IngredientService(db_session, down).update_ingredient(rice.id, IngredientUpdate(is_gluten=True))

    db_session.rollback()
    assert IngredientRepository(db_session).get_by_id(rice.id).is_gluten is True
    assert MealRepository(db_session).get_by_id(meal.id).gluten_free is False
