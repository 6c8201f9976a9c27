"""
User dietary profile model.
"""

from sqlalchemy import Column, String, Boolean, TIMESTAMP, Enum as SQLEnum
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.models.types import StringList
from domain.enums import VegType


class UserDietProfile(Base):
    """Standing dietary constraints of a user; absence means no constraints"""

    __tablename__ = "user_diet_profile"

    user_id = Column(String(64), primary_key=True)
    veg_type = Column(
        SQLEnum(VegType, name="vegtype"), nullable=False, default=VegType.OMNIVORE
    )
    dairy_free = Column(Boolean, nullable=False, default=False)
    nut_free = Column(Boolean, nullable=False, default=False)
    gluten_free = Column(Boolean, nullable=False, default=False)
    has_diabetes = Column(Boolean, nullable=False, default=False)
    other_allergies = Column(StringList, nullable=False, default=list)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "vegType": self.veg_type.value if self.veg_type else VegType.OMNIVORE.value,
            "dairyFree": self.dairy_free,
            "nutFree": self.nut_free,
            "glutenFree": self.gluten_free,
            "hasDiabetes": self.has_diabetes,
            "otherAllergies": list(self.other_allergies or []),
        }
