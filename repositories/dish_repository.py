"""
Dish Repository - Data access layer shared by meals and recipes
"""

from typing import List, Optional, Sequence, Type, TypeVar
from sqlalchemy.orm import Session

from domain.models import Meal, MealCategory, Recipe
from repositories.base import BaseRepository
from repositories.predicates import ContainsSubstring, overlaps

DishType = TypeVar("DishType", Meal, Recipe)


class DishRepository(BaseRepository[DishType]):
    """Repository over any table carrying the dish ingredient projection"""

    def __init__(self, db: Session, model: Type[DishType]):
        super().__init__(db, model)

    def get_by_slug(self, slug: str) -> Optional[DishType]:
        return self.find_unique(slug=slug)

    def slug_taken(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(self.model).filter(self.model.slug == slug)
        if exclude_id:
            query = query.filter(self.model.id != exclude_id)
        return query.first() is not None

    def referencing_ingredient(self, ingredient_id: str) -> List[DishType]:
        """Dishes whose ingredient set contains `ingredient_id`"""
        return self.find_many(overlaps("ingredient_ids", [ingredient_id]))

    def count_referencing(self, ingredient_id: str) -> int:
        return self.count(overlaps("ingredient_ids", [ingredient_id]))

    def sharing_ingredients(
        self, ingredient_ids: Sequence[str], exclude_id: Optional[str] = None
    ) -> List[DishType]:
        """Dishes sharing at least one ingredient id, optionally skipping one dish"""
        predicate = overlaps("ingredient_ids", list(ingredient_ids))
        dishes = self.find_many(predicate, order_by=(self.model.id.asc(),))
        if exclude_id is None:
            return dishes
        return [d for d in dishes if d.id != exclude_id]


class MealRepository(DishRepository[Meal]):
    def __init__(self, db: Session):
        super().__init__(db, Meal)


class RecipeRepository(DishRepository[Recipe]):
    def __init__(self, db: Session):
        super().__init__(db, Recipe)


class MealCategoryRepository(BaseRepository[MealCategory]):
    """Repository for meal categories"""

    def __init__(self, db: Session):
        super().__init__(db, MealCategory)

    def find_by_name_fragment(self, fragment: str) -> Optional[MealCategory]:
        """First category whose name contains `fragment`, case-insensitively"""
        return self.find_first(
            ContainsSubstring("name", fragment), order_by=(MealCategory.name.asc(),)
        )

    def get_by_name(self, name: str) -> Optional[MealCategory]:
        return self.find_unique(name=name)
