"""
Dish models - meals and recipes.

Both carry the same denormalized ingredient projection (ids, lower-cased names,
slugs as index-aligned lists) and the dietary flags derived from it, so the
search and similarity code treats them interchangeably.
"""

from sqlalchemy import (
    Column,
    Text,
    String,
    Boolean,
    Integer,
    Float,
    TIMESTAMP,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.models.types import StringList, new_id
from domain.enums import Difficulty, RecipeType


class MealCategory(Base):
    """Meal category (breakfast, curry, dessert, ...)"""

    __tablename__ = "meal_category"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)

    meals = relationship("Meal", back_populates="category")


class DishMixin:
    """Columns shared by every dish table"""

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    short_description = Column(Text)

    ingredient_ids = Column(StringList, nullable=False, default=list)
    ingredient_names = Column(StringList, nullable=False, default=list)
    ingredient_slugs = Column(StringList, nullable=False, default=list)

    is_veg = Column(Boolean, nullable=False, default=True)
    is_vegan = Column(Boolean, nullable=False, default=True)
    dairy_free = Column(Boolean, nullable=False, default=True)
    nut_free = Column(Boolean, nullable=False, default=True)
    gluten_free = Column(Boolean, nullable=False, default=True)
    diabetes_friendly = Column(Boolean, nullable=False, default=False)

    difficulty = Column(
        SQLEnum(Difficulty, name="difficulty"), nullable=False, default=Difficulty.MEDIUM
    )
    cooking_time_minutes = Column(Integer)

    view_count = Column(Integer, nullable=False, default=0)
    click_count = Column(Integer, nullable=False, default=0)
    cook_count = Column(Integer, nullable=False, default=0)
    bookmark_count = Column(Integer, nullable=False, default=0)
    avg_rating = Column(Float, nullable=False, default=0.0)

    search_text = Column(Text, nullable=False, default="")

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def dietary_dict(self) -> dict:
        return {
            "isVeg": self.is_veg,
            "isVegan": self.is_vegan,
            "dairyFree": self.dairy_free,
            "nutFree": self.nut_free,
            "glutenFree": self.gluten_free,
            "diabetesFriendly": self.diabetes_friendly,
        }

    def summary_dict(self) -> dict:
        """List/search projection of a dish"""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "shortDescription": self.short_description,
            "cookingTimeMinutes": self.cooking_time_minutes,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "ingredientNames": list(self.ingredient_names or []),
            **self.dietary_dict(),
        }

    def counters_dict(self) -> dict:
        return {
            "viewCount": self.view_count,
            "clickCount": self.click_count,
            "cookCount": self.cook_count,
            "bookmarkCount": self.bookmark_count,
            "avgRating": self.avg_rating,
        }


class Meal(DishMixin, Base):
    """Chef-authored meal searched by pantry ingredients"""

    __tablename__ = "meal"

    instructions = Column(Text)
    category_id = Column(String(36), ForeignKey("meal_category.id", ondelete="SET NULL"))

    category = relationship("MealCategory", back_populates="meals")

    def to_dict(self) -> dict:
        return {
            **self.summary_dict(),
            "instructions": self.instructions,
            "categoryId": self.category_id,
            "category": (
                {"id": self.category.id, "name": self.category.name}
                if self.category
                else None
            ),
            "ingredientIds": list(self.ingredient_ids or []),
            "ingredientSlugs": list(self.ingredient_slugs or []),
            **self.counters_dict(),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Meal(id={self.id}, title='{self.title}')>"


class Recipe(DishMixin, Base):
    """Step-by-step recipe with bookmarks and ratings"""

    __tablename__ = "recipe"

    portions = Column(Integer)
    recipe_type = Column(SQLEnum(RecipeType, name="recipetype"))
    about_this_dish = Column(Text)
    pro_tip = Column(Text)

    bookmarks = relationship(
        "Bookmark", back_populates="recipe", cascade="all, delete-orphan"
    )
    cooked_entries = relationship(
        "CookedRecipe", back_populates="recipe", cascade="all, delete-orphan"
    )

    def summary_dict(self) -> dict:
        return {
            **super().summary_dict(),
            "portions": self.portions,
            "recipeType": self.recipe_type.value if self.recipe_type else None,
            **self.counters_dict(),
        }

    def to_dict(self) -> dict:
        return {
            **self.summary_dict(),
            "aboutThisDish": self.about_this_dish,
            "proTip": self.pro_tip,
            "ingredientIds": list(self.ingredient_ids or []),
            "ingredientSlugs": list(self.ingredient_slugs or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Recipe(id={self.id}, title='{self.title}')>"
