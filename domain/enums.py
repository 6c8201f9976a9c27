"""
Domain enums for PantryChef.
Contains all enumeration types used across the domain models.
"""

import enum


class Difficulty(str, enum.Enum):
    """How hard a dish is to cook"""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class VegType(str, enum.Enum):
    """Standing vegetarian preference of a user"""

    OMNIVORE = "omnivore"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"


class RecipeType(str, enum.Enum):
    """Recipe course type"""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"
    DESSERT = "DESSERT"
    DRINK = "DRINK"


class ScoringMode(str, enum.Enum):
    """How query ingredient names are matched against a dish"""

    EXACT = "exact"
    SUBSTRING = "substring"
