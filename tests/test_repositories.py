"""
Repository tests against a real (SQLite) session.

Covers:
- Predicate compilation: overlap, equality, ranges, substring, disjunction
- Atomic counter increments with and without a guard
- Ingredient lookups by name and alias
"""

import pytest
from sqlalchemy.orm import Session

from domain.enums import Difficulty
from domain.models import Meal
from repositories import IngredientRepository, MealCategoryRepository, MealRepository
from repositories.predicates import (
    AnyOf,
    ContainsSubstring,
    Equals,
    GreaterThan,
    LessThanOrEqual,
    Or,
    all_of,
    any_of,
    compile_predicate,
    overlaps,
)
from test_fixtures import make_ingredient, make_meal, make_meal_category


@pytest.fixture
def pantry(db_session: Session):
    rice = make_ingredient(db_session, "Rice")
    egg = make_ingredient(db_session, "Egg", is_veg=False, is_vegan=False)
    onion = make_ingredient(db_session, "Onion")
    chicken = make_ingredient(db_session, "Chicken", is_veg=False, is_vegan=False)
    make_meal(db_session, "Egg Fried Rice", [rice, egg, onion], meal_id="m1", cooking_time_minutes=20)
    make_meal(db_session, "Chicken Rice", [rice, chicken], meal_id="m2", cooking_time_minutes=45,
              difficulty=Difficulty.MEDIUM)
    make_meal(db_session, "Boiled Egg", [egg], meal_id="m3", cooking_time_minutes=10)
    make_meal(db_session, "Plain Water", [], meal_id="m4")
    return {"rice": rice, "egg": egg, "onion": onion, "chicken": chicken}


def ids(meals):
    return sorted(m.id for m in meals)


# =============================================================================
# PREDICATES
# =============================================================================


def test_set_overlap_matches_any_shared_name(db_session, pantry):
    repo = MealRepository(db_session)

    assert ids(repo.find_many(overlaps("ingredient_names", ["rice"]))) == ["m1", "m2"]
    assert ids(repo.find_many(overlaps("ingredient_names", ["egg", "chicken"]))) == ["m1", "m2", "m3"]


def test_set_overlap_with_no_values_matches_nothing(db_session, pantry):
    assert MealRepository(db_session).find_many(overlaps("ingredient_names", [])) == []


def test_conjunction_of_overlap_and_flags(db_session, pantry):
    repo = MealRepository(db_session)
    predicate = all_of(overlaps("ingredient_names", ["rice"]), Equals("is_veg", True))

    assert repo.find_many(predicate) == []


def test_range_and_enum_predicates(db_session, pantry):
    repo = MealRepository(db_session)

    assert ids(repo.find_many(LessThanOrEqual("cooking_time_minutes", 20))) == ["m1", "m3"]
    assert ids(repo.find_many(Equals("difficulty", Difficulty.MEDIUM))) == ["m2"]
    assert ids(repo.find_many(Equals("cooking_time_minutes", None))) == ["m4"]


def test_disjunction_and_any_of(db_session, pantry):
    repo = MealRepository(db_session)

    assert ids(repo.find_many(Or((Equals("id", "m1"), Equals("id", "m4"))))) == ["m1", "m4"]
    assert ids(repo.find_many(AnyOf("id", ("m2", "m3")))) == ["m2", "m3"]
    assert repo.find_many(AnyOf("id", ())) == []


def test_substring_is_case_insensitive_and_escapes_wildcards(db_session, pantry):
    repo = MealRepository(db_session)

    assert ids(repo.find_many(ContainsSubstring("title", "RICE"))) == ["m1", "m2"]
    assert repo.find_many(ContainsSubstring("title", "%")) == []


def test_count_and_ordering(db_session, pantry):
    repo = MealRepository(db_session)
    predicate = overlaps("ingredient_names", ["egg"])

    assert repo.count(predicate) == 2
    meals = repo.find_many(predicate, order_by=(Meal.id.desc(),), limit=1)
    assert [m.id for m in meals] == ["m3"]


def test_all_of_and_any_of_drop_empty_clauses():
    assert all_of(None, None) is None
    assert any_of(None, Equals("id", "x")) == Equals("id", "x")


def test_unknown_column_is_rejected():
    with pytest.raises(ValueError):
        compile_predicate(Meal, Equals("no_such_column", 1), "sqlite")


def test_postgres_overlap_renders_array_operator():
    from sqlalchemy.dialects import postgresql

    clause = compile_predicate(Meal, overlaps("ingredient_names", ["rice"]), "postgresql")

    assert "&&" in str(clause.compile(dialect=postgresql.dialect()))


# =============================================================================
# DISH QUERIES
# =============================================================================


def test_sharing_ingredients_excludes_source(db_session, pantry):
    repo = MealRepository(db_session)
    shared = repo.sharing_ingredients([pantry["rice"].id, pantry["egg"].id], exclude_id="m1")

    assert [m.id for m in shared] == ["m2", "m3"]


def test_referencing_ingredient(db_session, pantry):
    repo = MealRepository(db_session)

    assert ids(repo.referencing_ingredient(pantry["onion"].id)) == ["m1"]
    assert repo.count_referencing(pantry["chicken"].id) == 1


def test_category_lookup_by_fragment(db_session):
    make_meal_category(db_session, "Indian Curry")

    assert MealCategoryRepository(db_session).find_by_name_fragment("curry").name == "Indian Curry"
    assert MealCategoryRepository(db_session).find_by_name_fragment("pasta") is None


# =============================================================================
# COUNTERS
# =============================================================================


def test_increment_is_applied_in_store(db_session, pantry):
    repo = MealRepository(db_session)

    assert repo.increment("m1", "click_count") == 1
    assert repo.increment("m1", "click_count", 2) == 1

    db_session.expire_all()
    assert repo.get_by_id("m1").click_count == 3


def test_increment_missing_row_updates_nothing(db_session, pantry):
    assert MealRepository(db_session).increment("missing", "view_count") == 0


def test_guarded_decrement_never_goes_below_zero(db_session, pantry):
    repo = MealRepository(db_session)
    guard = GreaterThan("bookmark_count", 0)

    assert repo.increment("m1", "bookmark_count", -1, guard=guard) == 0
    db_session.expire_all()
    assert repo.get_by_id("m1").bookmark_count == 0


# =============================================================================
# INGREDIENTS
# =============================================================================


def test_ingredient_lookup_by_name_and_alias(db_session):
    make_ingredient(db_session, "Paneer", is_vegan=False, is_dairy=True, aliases=["cottage cheese"])
    repo = IngredientRepository(db_session)

    assert repo.get_by_name("PANEER").slug == "paneer"
    assert repo.get_by_name_or_alias("Cottage Cheese").name == "Paneer"
    assert repo.get_by_name_or_alias("tofu") is None


def test_get_many_preserves_requested_order(db_session, pantry):
    repo = IngredientRepository(db_session)
    requested = [pantry["onion"].id, "missing", pantry["rice"].id]

    assert [i.name for i in repo.get_many(requested)] == ["Onion", "Rice"]


def test_ingredient_search_prefers_verified(db_session):
    from domain.models import Ingredient

    make_ingredient(db_session, "Brown Rice")
    db_session.add(Ingredient(name="Black Rice", slug="black-rice", is_verified=False))
    db_session.commit()

    items, total = IngredientRepository(db_session).search("rice")

    assert total == 2
    assert [i.name for i in items] == ["Brown Rice", "Black Rice"]
