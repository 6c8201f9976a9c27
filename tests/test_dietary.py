"""
Tests for dietary flag computation and profile compatibility.
"""

from types import SimpleNamespace

from repositories.predicates import Equals
from services.dietary import (
    DietaryFlags,
    check_compatibility,
    compute_dietary_flags,
    profile_predicates,
)


def ingredient(**tags):
    base = dict(is_veg=True, is_vegan=True, is_dairy=False, is_nut=False, is_gluten=False)
    base.update(tags)
    return SimpleNamespace(**base)


# =============================================================================
# FLAG COMPUTATION
# =============================================================================


def test_empty_ingredient_list_is_permissive():
    """A dish with no ingredients carries every flag"""
    assert compute_dietary_flags([]) == DietaryFlags(True, True, True, True, True)


def test_is_veg_is_conjunction():
    flags = compute_dietary_flags([ingredient(), ingredient(is_veg=False, is_vegan=False)])

    assert flags.is_veg is False
    assert flags.is_vegan is False


def test_removing_non_veg_ingredient_flips_to_veg():
    rice, chicken = ingredient(), ingredient(is_veg=False, is_vegan=False)

    assert compute_dietary_flags([rice, chicken]).is_veg is False
    assert compute_dietary_flags([rice]).is_veg is True


def test_allergen_flags_are_negated_disjunction():
    flags = compute_dietary_flags(
        [ingredient(is_vegan=False, is_dairy=True), ingredient(is_gluten=True)]
    )

    assert flags.dairy_free is False
    assert flags.gluten_free is False
    assert flags.nut_free is True
    assert flags.is_veg is True
    assert flags.is_vegan is False


def test_flags_accept_mappings():
    flags = compute_dietary_flags([{"is_veg": True, "is_vegan": True, "is_nut": True}])

    assert flags.nut_free is False
    assert flags.is_vegan is True


def test_as_columns_matches_dish_columns():
    assert set(DietaryFlags().as_columns()) == {
        "is_veg",
        "is_vegan",
        "dairy_free",
        "nut_free",
        "gluten_free",
    }


# =============================================================================
# PROFILE PREDICATES
# =============================================================================


def test_no_profile_means_no_constraints():
    assert profile_predicates(None) == []


def test_vegan_profile_predicates():
    profile = {"vegType": "vegan", "nutFree": True, "hasDiabetes": True}

    assert profile_predicates(profile) == [
        Equals("is_vegan", True),
        Equals("nut_free", True),
        Equals("diabetes_friendly", True),
    ]


def test_omnivore_profile_without_restrictions_has_no_predicates():
    assert profile_predicates({"vegType": "omnivore", "dairyFree": False}) == []


# =============================================================================
# COMPATIBILITY
# =============================================================================


def test_compatible_without_profile():
    assert check_compatibility({"isVeg": False}, None) == (True, [])


def test_incompatibility_reasons():
    dish = {
        "isVeg": False,
        "isVegan": False,
        "dairyFree": False,
        "nutFree": True,
        "glutenFree": False,
        "diabetesFriendly": False,
    }
    profile = {"vegType": "vegetarian", "dairyFree": True, "glutenFree": True, "hasDiabetes": True}

    compatible, reasons = check_compatibility(dish, profile)

    assert compatible is False
    assert reasons == [
        "Contains non-vegetarian ingredients",
        "Contains dairy",
        "Contains gluten",
        "Not suitable for diabetes",
    ]
