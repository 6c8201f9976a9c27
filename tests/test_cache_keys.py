"""
Tests for cache key derivation.
"""

from domain.enums import Difficulty
from services import cache_keys as keys


def test_permuted_ingredients_share_a_key():
    first = keys.meal_search_key("u1", ["Rice", "egg", " onion"], None, None, None, 1, 20)
    second = keys.meal_search_key("u1", ["onion", "EGG", "rice"], None, None, None, 1, 20)

    assert first == second


def test_meal_search_key_layout():
    key = keys.meal_search_key("u1", ["rice", "egg"], "Curry", Difficulty.EASY, 30, 2, 10)

    assert key == "meal-search:u1:egg,rice:Curry:EASY:30:2:10"


def test_anonymous_search_has_empty_user_component():
    key = keys.meal_search_key(None, [], None, None, None, 1, 20)

    assert key == "meal-search::::::1:20"


def test_separators_inside_values_are_escaped():
    """A ':' or ',' in one component cannot shift the others"""
    tricky = keys.meal_search_key("u1", ["salt,pepper"], "a:b", None, None, 1, 20)
    plain = keys.meal_search_key("u1", ["salt", "pepper"], "a", None, None, 1, 20)

    assert tricky != plain
    assert "salt%2Cpepper" in tricky
    assert "a%3Ab" in tricky
    assert tricky.count(":") == plain.count(":")


def test_user_search_family_only_covers_that_user():
    pattern = keys.user_search_family("u1")

    assert pattern == "meal-search:u1:*"
    assert not keys.meal_search_key("u10", [], None, None, None, 1, 20).startswith(pattern[:-1])


def test_user_ids_with_glob_characters_are_escaped():
    assert keys.user_search_family("a*") == "meal-search:a%2A:*"


def test_detail_keys():
    assert keys.meal_key("m1") == "meal:m1"
    assert keys.meal_slug_key("egg-rice") == "meal:slug:egg-rice"
    assert keys.meal_ingredients_key("m1") == "meal:ingredients:m1"
    assert keys.user_profile_key("u1") == "user:profile:u1"
    assert keys.similar_meals_key("m1", 10) == "similar-meals:m1:10"
    assert keys.family(keys.SIMILAR_MEALS) == "similar-meals:*"


def test_recipe_search_key_sorts_ids_and_flags():
    first = keys.recipe_search_key(["b", "a"], None, None, ["nut_free", "is_veg"], " Soup ", 20, 0)
    second = keys.recipe_search_key(["a", "b"], None, None, ["is_veg", "nut_free"], "soup", 20, 0)

    assert first == second
