"""Schemas for ingredient master data"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    aliases: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    category_id: Optional[str] = None
    is_veg: bool = False
    is_vegan: bool = False
    is_dairy: bool = False
    is_nut: bool = False
    is_gluten: bool = False

    @field_validator("name")
    def strip_name(cls, v):
        return v.strip()

    @field_validator("aliases")
    def normalize_aliases(cls, v):
        return list(dict.fromkeys(a.lower().strip() for a in v if a and a.strip()))


class IngredientUpdate(BaseModel):
    """Partial update; unset fields keep their stored value"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    aliases: Optional[List[str]] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    is_veg: Optional[bool] = None
    is_vegan: Optional[bool] = None
    is_dairy: Optional[bool] = None
    is_nut: Optional[bool] = None
    is_gluten: Optional[bool] = None

    @field_validator("aliases")
    def normalize_aliases(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(a.lower().strip() for a in v if a and a.strip()))


class IngredientCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    sort_order: int = 0
