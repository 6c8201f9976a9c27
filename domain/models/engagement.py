"""
Engagement models - bookmarks and cook/rating log for recipes.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.models.types import new_id


class Bookmark(Base):
    """A user's saved recipe"""

    __tablename__ = "bookmark"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    recipe_id = Column(
        String(36), ForeignKey("recipe.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    recipe = relationship("Recipe", back_populates="bookmarks")

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_bookmark_user_recipe"),
    )


class CookedRecipe(Base):
    """One 'I cooked this' entry, optionally rated 1-5"""

    __tablename__ = "cooked_recipe"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    recipe_id = Column(
        String(36), ForeignKey("recipe.id", ondelete="CASCADE"), nullable=False
    )
    rating = Column(Integer)
    notes = Column(Text)
    cooked_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    recipe = relationship("Recipe", back_populates="cooked_entries")

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_rating_range"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "recipeId": self.recipe_id,
            "rating": self.rating,
            "notes": self.notes,
            "cookedAt": self.cooked_at.isoformat() if self.cooked_at else None,
        }
