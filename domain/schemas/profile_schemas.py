from pydantic import BaseModel, Field, field_validator
from typing import List

from domain.enums import VegType


class DietProfileUpdate(BaseModel):
    veg_type: VegType = VegType.OMNIVORE
    dairy_free: bool = False
    nut_free: bool = False
    gluten_free: bool = False
    has_diabetes: bool = False
    other_allergies: List[str] = Field(default_factory=list)

    @field_validator("other_allergies")
    def normalize_allergies(cls, v):
        return [a.lower().strip() for a in v if a and a.strip()]
