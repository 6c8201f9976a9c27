#!/usr/bin/env python3
"""
Initialize the PantryChef catalog store.
Creates tables and, on an empty store, seeds a small demo catalog through the
services so every dish gets its ingredient projection and dietary flags.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")

CATEGORIES = [
    ("Vegetables", 1),
    ("Grains", 2),
    ("Dairy & Eggs", 3),
    ("Meat & Fish", 4),
    ("Nuts & Seeds", 5),
    ("Pantry", 6),
]

# name, category, aliases, veg, vegan, dairy, nut, gluten
INGREDIENTS = [
    ("Rice", "Grains", ["chawal"], True, True, False, False, False),
    ("Onion", "Vegetables", ["pyaz"], True, True, False, False, False),
    ("Tomato", "Vegetables", ["tamatar"], True, True, False, False, False),
    ("Spinach", "Vegetables", ["palak"], True, True, False, False, False),
    ("Potato", "Vegetables", ["aloo"], True, True, False, False, False),
    ("Egg", "Dairy & Eggs", ["eggs"], False, False, False, False, False),
    ("Paneer", "Dairy & Eggs", ["cottage cheese"], True, False, True, False, False),
    ("Butter", "Dairy & Eggs", [], True, False, True, False, False),
    ("Chicken", "Meat & Fish", [], False, False, False, False, False),
    ("Cashew", "Nuts & Seeds", ["kaju"], True, True, False, True, False),
    ("Wheat Flour", "Grains", ["atta"], True, True, False, False, True),
    ("Lentils", "Pantry", ["dal"], True, True, False, False, False),
]

MEAL_CATEGORIES = ["Breakfast", "Curry", "Rice Dishes", "Snacks"]

# title, category, difficulty, minutes, ingredients
MEALS = [
    ("Egg Fried Rice", "Rice Dishes", "EASY", 20, ["rice", "egg", "onion"]),
    ("Chicken Pulao", "Rice Dishes", "MEDIUM", 45, ["rice", "chicken", "onion"]),
    ("Palak Paneer", "Curry", "MEDIUM", 35, ["spinach", "paneer", "onion", "tomato"]),
    ("Dal Tadka", "Curry", "EASY", 30, ["lentils", "onion", "tomato", "butter"]),
    ("Aloo Paratha", "Breakfast", "MEDIUM", 40, ["wheat flour", "potato", "butter"]),
    ("Masala Omelette", "Breakfast", "EASY", 10, ["egg", "onion", "tomato"]),
    ("Kaju Curry", "Curry", "HARD", 50, ["cashew", "onion", "tomato", "butter"]),
]


def seed(db, cache):
    from domain.models import IngredientCategory, MealCategory
    from domain.schemas import IngredientCreate, MealCreate, IngredientInput
    from repositories import IngredientCategoryRepository, IngredientRepository, MealCategoryRepository
    from services import IngredientService, MealService

    if IngredientRepository(db).count() > 0:
        logger.info("Catalog already seeded, skipping")
        return

    category_repo = IngredientCategoryRepository(db)
    categories = {
        name: category_repo.create(IngredientCategory(name=name, sort_order=order))
        for name, order in CATEGORIES
    }

    ingredient_service = IngredientService(db, cache)
    for name, category, aliases, veg, vegan, dairy, nut, gluten in INGREDIENTS:
        ingredient_service.create_ingredient(
            IngredientCreate(
                name=name,
                aliases=aliases,
                category_id=categories[category].id,
                is_veg=veg,
                is_vegan=vegan,
                is_dairy=dairy,
                is_nut=nut,
                is_gluten=gluten,
            )
        )
    logger.info(f"✓ Seeded {len(INGREDIENTS)} ingredients")

    meal_category_repo = MealCategoryRepository(db)
    meal_categories = {
        name: meal_category_repo.create(MealCategory(name=name)) for name in MEAL_CATEGORIES
    }

    meal_service = MealService(db, cache)
    for title, category, difficulty, minutes, names in MEALS:
        meal_service.create_meal(
            MealCreate(
                title=title,
                meal_category_id=meal_categories[category].id,
                difficulty=difficulty,
                cooking_time_minutes=minutes,
                ingredients=[IngredientInput(name=n) for n in names],
            )
        )
    logger.info(f"✓ Seeded {len(MEALS)} meals")


def main() -> int:
    from adapters import cache_adapter
    from domain.models.database import SessionLocal, init_database

    try:
        init_database()
        logger.info("✓ Tables created")
        db = SessionLocal()
        try:
            seed(db, cache_adapter.connect())
        finally:
            db.close()
        return 0
    except Exception as e:
        logger.exception(f"✗ Failed to initialize catalog: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
