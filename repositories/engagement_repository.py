"""
Engagement Repository - bookmarks and cook/rating log
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Bookmark, CookedRecipe, Recipe


class BookmarkRepository(BaseRepository[Bookmark]):
    """Repository for recipe bookmarks"""

    def __init__(self, db: Session):
        super().__init__(db, Bookmark)

    def get_for(self, user_id: str, recipe_id: str) -> Optional[Bookmark]:
        return self.find_unique(user_id=user_id, recipe_id=recipe_id)

    def list_for_user(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Recipe], int]:
        query = (
            self.db.query(Recipe)
            .join(Bookmark, Bookmark.recipe_id == Recipe.id)
            .filter(Bookmark.user_id == user_id)
        )
        total = query.count()
        recipes = (
            query.order_by(Bookmark.created_at.desc(), Bookmark.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return recipes, total


class CookedRecipeRepository(BaseRepository[CookedRecipe]):
    """Repository for cook/rating entries"""

    def __init__(self, db: Session):
        super().__init__(db, CookedRecipe)

    def average_rating(self, recipe_id: str) -> Optional[float]:
        """Mean of non-null ratings, None when nobody rated yet"""
        return (
            self.db.query(func.avg(CookedRecipe.rating))
            .filter(CookedRecipe.recipe_id == recipe_id, CookedRecipe.rating.isnot(None))
            .scalar()
        )

    def recent_for_recipe(self, recipe_id: str, limit: int = 10) -> List[CookedRecipe]:
        return (
            self.db.query(CookedRecipe)
            .filter(CookedRecipe.recipe_id == recipe_id)
            .order_by(CookedRecipe.cooked_at.desc(), CookedRecipe.id.asc())
            .limit(limit)
            .all()
        )
