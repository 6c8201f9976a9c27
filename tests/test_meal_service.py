"""
Tests for meal writes: ingredient resolution, projection and flags.
"""

import pytest

from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import Difficulty
from domain.schemas.dish_schemas import IngredientInput, MealCreate, MealUpdate
from repositories import IngredientRepository, MealRepository
from services import MealService
from services import cache_keys as keys
from test_fixtures import make_ingredient, make_meal_category


def meal_input(title="Egg Fried Rice", names=("rice", "egg"), **fields):
    return MealCreate(title=title, ingredients=[IngredientInput(name=n) for n in names], **fields)


# =============================================================================
# CREATE
# =============================================================================


def test_create_meal_resolves_by_name_alias_and_id(db_session, cache):
    """
    Verifies:
    - Names match case-insensitively, aliases match too, ids resolve directly
    - The three ingredient lists are index aligned
    - Flags are computed from the resolved ingredients
    """
    rice = make_ingredient(db_session, "Rice", aliases=["chawal"])
    egg = make_ingredient(db_session, "Egg", is_veg=False, is_vegan=False)
    onion = make_ingredient(db_session, "Onion")

    meal = MealService(db_session, cache).create_meal(
        MealCreate(
            title="Egg Fried Rice",
            ingredients=[
                IngredientInput(name="Chawal", quantity="1 cup"),
                IngredientInput(name="EGG"),
                IngredientInput(name=onion.id, is_optional=True),
            ],
        )
    )

    assert meal["slug"] == "egg-fried-rice"
    assert meal["ingredientIds"] == [rice.id, egg.id, onion.id]
    assert meal["ingredientNames"] == ["rice", "egg", "onion"]
    assert meal["ingredientSlugs"] == ["rice", "egg", "onion"]
    assert meal["isVeg"] is False
    assert meal["glutenFree"] is True
    assert meal["ingredients"][0]["quantity"] == "1 cup"
    assert meal["ingredients"][2]["isOptional"] is True


def test_create_meal_stores_ingredient_details(db_session, cache):
    make_ingredient(db_session, "Rice")
    make_ingredient(db_session, "Egg")

    meal = MealService(db_session, cache).create_meal(meal_input())

    details = cache.get_json(keys.meal_ingredients_key(meal["id"]))
    assert [d["name"] for d in details] == ["Rice", "Egg"]


def test_unknown_name_creates_provisional_ingredient(db_session, cache):
    meal = MealService(db_session, cache).create_meal(meal_input(names=["  green chilli "]))

    created = IngredientRepository(db_session).get_by_slug("green-chilli")
    assert created.name == "Green Chilli"
    assert created.is_verified is False
    assert created.aliases == ["green chilli"]
    assert meal["ingredientIds"] == [created.id]
    # provisional ingredients carry no tags
    assert meal["isVeg"] is False


def test_duplicate_inputs_collapse(db_session, cache):
    make_ingredient(db_session, "Rice", aliases=["chawal"])

    meal = MealService(db_session, cache).create_meal(meal_input(names=["rice", "Chawal", "RICE"]))

    assert meal["ingredientNames"] == ["rice"]


def test_meal_without_ingredients_is_permissive(db_session, cache):
    meal = MealService(db_session, cache).create_meal(meal_input(title="Water", names=[]))

    assert meal["ingredientIds"] == []
    assert all(meal[f] for f in ("isVeg", "isVegan", "dairyFree", "nutFree", "glutenFree"))


def test_unknown_ingredient_id_is_rejected(db_session, cache):
    with pytest.raises(ServiceValidationError):
        MealService(db_session, cache).create_meal(
            meal_input(names=["123e4567-e89b-12d3-a456-426614174000"])
        )


def test_duplicate_title_conflicts(db_session, cache):
    service = MealService(db_session, cache)
    service.create_meal(meal_input(names=[]))

    with pytest.raises(ConflictError):
        service.create_meal(meal_input(title="Egg fried rice!", names=[]))


def test_unknown_category_is_not_found(db_session, cache):
    with pytest.raises(NotFoundError):
        MealService(db_session, cache).create_meal(meal_input(names=[], meal_category_id="nope"))


# =============================================================================
# UPDATE / DELETE
# =============================================================================


def test_update_ingredients_recomputes_flags(db_session, cache):
    rice = make_ingredient(db_session, "Rice")
    make_ingredient(db_session, "Chicken", is_veg=False, is_vegan=False)
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(title="Pulao", names=["rice", "chicken"]))
    assert meal["isVeg"] is False

    updated = service.update_meal(meal["id"], MealUpdate(ingredients=[IngredientInput(name="rice")]))

    assert updated["isVeg"] is True
    assert updated["ingredientIds"] == [rice.id]
    assert [i["name"] for i in updated["ingredients"]] == ["Rice"]


def test_partial_update_keeps_other_fields(db_session, cache):
    category = make_meal_category(db_session, "Curry")
    service = MealService(db_session, cache)
    meal = service.create_meal(
        meal_input(names=[], meal_category_id=category.id, cooking_time_minutes=25)
    )

    updated = service.update_meal(meal["id"], MealUpdate(difficulty=Difficulty.HARD))

    assert updated["difficulty"] == "HARD"
    assert updated["cookingTimeMinutes"] == 25
    assert updated["categoryId"] == category.id


def test_rename_reslugs_and_clears_old_slug_entry(db_session, cache):
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(names=[]))
    service.get_meal_by_slug("egg-fried-rice")

    updated = service.update_meal(meal["id"], MealUpdate(title="Veg Fried Rice"))

    assert updated["slug"] == "veg-fried-rice"
    assert cache.get_json(keys.meal_slug_key("egg-fried-rice")) is None
    with pytest.raises(NotFoundError):
        service.get_meal_by_slug("egg-fried-rice")


def test_failed_update_leaves_meal_and_cache_untouched(db_session, cache):
    """
    Verifies:
    - An unknown ingredient id fails the update after a new title and an
      unknown name were already accepted
    - The stored meal keeps its old title and slug
    - The provisional ingredient for the unknown name is not persisted
    - The cached detail still agrees with the store
    """
    make_ingredient(db_session, "Rice")
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(title="Old Title", names=["rice"]))
    service.get_meal(meal["id"])

    with pytest.raises(ServiceValidationError):
        service.update_meal(
            meal["id"],
            MealUpdate(
                title="New Title",
                ingredients=[
                    IngredientInput(name="dragonfruit"),
                    IngredientInput(name="123e4567-e89b-12d3-a456-426614174000"),
                ],
            ),
        )

    stored = MealRepository(db_session).get_by_id(meal["id"])
    assert stored.title == "Old Title"
    assert stored.slug == "old-title"
    assert stored.ingredient_names == ["rice"]
    assert IngredientRepository(db_session).get_by_slug("dragonfruit") is None
    assert service.get_meal(meal["id"])["title"] == "Old Title"


def test_provisional_ingredient_commits_with_meal_update(db_session, cache):
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(names=[]))

    updated = service.update_meal(
        meal["id"], MealUpdate(ingredients=[IngredientInput(name="Star Anise")])
    )

    db_session.rollback()
    created = IngredientRepository(db_session).get_by_slug("star-anise")
    assert created is not None
    assert created.is_verified is False
    assert updated["ingredientIds"] == [created.id]


def test_delete_meal_drops_detail_entries(db_session, cache):
    make_ingredient(db_session, "Rice")
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(names=["rice"]))
    service.get_meal(meal["id"])

    service.delete_meal(meal["id"])

    assert cache.get_json(keys.meal_key(meal["id"])) is None
    assert cache.get_json(keys.meal_ingredients_key(meal["id"])) is None
    with pytest.raises(NotFoundError):
        service.get_meal(meal["id"])


# =============================================================================
# LIST / COUNTERS
# =============================================================================


def test_list_meals_paginates(db_session, cache):
    service = MealService(db_session, cache)
    for n in range(5):
        service.create_meal(meal_input(title=f"Meal {n}", names=[]))

    page = service.list_meals(page=2, limit=2)

    assert len(page["meals"]) == 2
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}


def test_click_count_feeds_trending(db_session, cache):
    service = MealService(db_session, cache)
    meal = service.create_meal(meal_input(names=[]))

    service.increment_click_count(meal["id"])
    service.increment_click_count(meal["id"])

    db_session.expire_all()
    assert service.meals.get_by_id(meal["id"]).click_count == 2
    with pytest.raises(NotFoundError):
        service.increment_click_count("missing")
