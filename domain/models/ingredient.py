"""
Ingredient model - Master ingredient table.
Single source of truth for all ingredients across the system.
"""

from sqlalchemy import (
    Column,
    Text,
    String,
    Boolean,
    Integer,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.models.types import StringList, new_id


class IngredientCategory(Base):
    """Grouping for ingredients (vegetables, dairy, spices, ...)"""

    __tablename__ = "ingredient_category"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    sort_order = Column(Integer, nullable=False, default=0)

    ingredients = relationship("Ingredient", back_populates="category")


class Ingredient(Base):
    """
    Master ingredient table - single source of truth.

    Dishes reference ingredients by id and keep denormalized name/slug copies;
    the dietary tags here drive every dish's aggregate flags.
    """

    __tablename__ = "ingredient"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False, index=True)
    slug = Column(Text, nullable=False, unique=True, index=True)
    aliases = Column(StringList, nullable=False, default=list)
    description = Column(Text)
    category_id = Column(
        String(36), ForeignKey("ingredient_category.id", ondelete="SET NULL")
    )

    is_veg = Column(Boolean, nullable=False, default=False)
    is_vegan = Column(Boolean, nullable=False, default=False)
    is_dairy = Column(Boolean, nullable=False, default=False)
    is_nut = Column(Boolean, nullable=False, default=False)
    is_gluten = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    category = relationship("IngredientCategory", back_populates="ingredients")

    __table_args__ = (UniqueConstraint("name", name="uq_ingredient_name"),)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "aliases": list(self.aliases or []),
            "description": self.description,
            "categoryId": self.category_id,
            "category": (
                {"id": self.category.id, "name": self.category.name}
                if self.category
                else None
            ),
            "isVeg": self.is_veg,
            "isVegan": self.is_vegan,
            "isDairy": self.is_dairy,
            "isNut": self.is_nut,
            "isGluten": self.is_gluten,
            "isVerified": self.is_verified,
        }

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name='{self.name}')>"
