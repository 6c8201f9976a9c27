"""Schemas for meal and recipe writes"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from domain.enums import Difficulty, RecipeType


class IngredientInput(BaseModel):
    """One meal ingredient: an ingredient id, a name or an alias"""

    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[str] = None
    is_optional: bool = False


class MealCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    short_description: Optional[str] = None
    instructions: Optional[str] = None
    cooking_time_minutes: Optional[int] = Field(None, ge=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    meal_category_id: Optional[str] = None
    diabetes_friendly: bool = False
    ingredients: List[IngredientInput] = Field(default_factory=list)


class MealUpdate(BaseModel):
    """Partial meal update; only fields that are set are applied"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    short_description: Optional[str] = None
    instructions: Optional[str] = None
    cooking_time_minutes: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    meal_category_id: Optional[str] = None
    diabetes_friendly: Optional[bool] = None
    ingredients: Optional[List[IngredientInput]] = None


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    short_description: Optional[str] = None
    about_this_dish: Optional[str] = None
    pro_tip: Optional[str] = None
    portions: Optional[int] = Field(None, ge=1)
    recipe_type: Optional[RecipeType] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    cooking_time_minutes: Optional[int] = Field(None, ge=1)
    diabetes_friendly: bool = False
    ingredient_ids: List[str] = Field(..., min_length=1)

    @field_validator("ingredient_ids")
    def dedupe_ids(cls, v):
        return list(dict.fromkeys(i.strip() for i in v if i and i.strip()))


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    short_description: Optional[str] = None
    about_this_dish: Optional[str] = None
    pro_tip: Optional[str] = None
    portions: Optional[int] = Field(None, ge=1)
    recipe_type: Optional[RecipeType] = None
    difficulty: Optional[Difficulty] = None
    cooking_time_minutes: Optional[int] = Field(None, ge=1)
    diabetes_friendly: Optional[bool] = None
    ingredient_ids: Optional[List[str]] = None

    @field_validator("ingredient_ids")
    def dedupe_ids(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(i.strip() for i in v if i and i.strip()))


class RateRecipeRequest(BaseModel):
    """'I cooked this' entry with an optional 1-5 rating"""

    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = Field(None, max_length=2000)
