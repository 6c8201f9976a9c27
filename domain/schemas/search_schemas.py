"""Schemas for meal and recipe search queries"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from domain.enums import Difficulty, RecipeType


class MealSearchQuery(BaseModel):
    """
    Ranked meal search query.

    Ranges (page >= 1, limit 1..100, max_cooking_time >= 1) are checked by the
    search service so that a bad value is reported as a service error before
    any store or cache access.
    """

    ingredients: List[str] = Field(default_factory=list)
    meal_category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    max_cooking_time: Optional[int] = None
    page: int = 1
    limit: int = 20

    @field_validator("ingredients")
    def strip_blank(cls, v):
        return [i.strip() for i in v if i and i.strip()]


class RecipeSearchQuery(BaseModel):
    """Recipe search by ingredient ids with dietary and text filters"""

    ingredient_ids: List[str] = Field(default_factory=list)
    recipe_type: Optional[RecipeType] = None
    difficulty: Optional[Difficulty] = None
    is_veg: bool = False
    is_vegan: bool = False
    dairy_free: bool = False
    nut_free: bool = False
    gluten_free: bool = False
    search_text: Optional[str] = None
    limit: int = 20
    offset: int = 0

    def dietary_filters(self) -> List[str]:
        """Names of the dietary flags the caller asked for"""
        return [
            name
            for name in ("is_veg", "is_vegan", "dairy_free", "nut_free", "gluten_free")
            if getattr(self, name)
        ]
