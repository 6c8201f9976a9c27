"""
Ingredient Repository - Data access layer for the ingredient master table
"""

from typing import List, Optional, Sequence
from sqlalchemy import func
from sqlalchemy.orm import Session

from domain.models import Ingredient, IngredientCategory
from repositories.base import BaseRepository
from repositories.predicates import (
    Predicate,
    AnyOf,
    ContainsSubstring,
    Equals,
    all_of,
    any_of,
    overlaps,
)


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient master data"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_slug(self, slug: str) -> Optional[Ingredient]:
        return self.find_unique(slug=slug)

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        """Get ingredient by name (case-insensitive)"""
        normalized_name = name.lower().strip()
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name) == normalized_name)
            .first()
        )

    def get_by_name_or_alias(self, name: str) -> Optional[Ingredient]:
        """Resolve a free-text name against names first, then aliases"""
        ingredient = self.get_by_name(name)
        if ingredient:
            return ingredient
        return self.find_first(overlaps("aliases", [name.lower().strip()]))

    def get_many(self, ingredient_ids: Sequence[str]) -> List[Ingredient]:
        """Fetch ingredients by id, returned in the order of `ingredient_ids`"""
        if not ingredient_ids:
            return []
        found = {i.id: i for i in self.find_many(AnyOf("id", tuple(ingredient_ids)))}
        return [found[i] for i in ingredient_ids if i in found]

    def name_or_slug_taken(self, name: str, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Ingredient).filter(
            (func.lower(Ingredient.name) == name.lower().strip()) | (Ingredient.slug == slug)
        )
        if exclude_id:
            query = query.filter(Ingredient.id != exclude_id)
        return query.first() is not None

    def search(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        is_veg: Optional[bool] = None,
        is_vegan: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[Ingredient], int]:
        """Search by name/alias with optional category and dietary filters.

        Returns:
            (page of ingredients, total matching)
        """
        predicate = all_of(
            self._text_predicate(query),
            Equals("category_id", category_id) if category_id else None,
            Equals("is_veg", is_veg) if is_veg is not None else None,
            Equals("is_vegan", is_vegan) if is_vegan is not None else None,
        )
        items = self.find_many(
            predicate,
            order_by=(Ingredient.is_verified.desc(), Ingredient.name.asc()),
            limit=limit,
            offset=offset,
        )
        return items, self.count(predicate)

    def autocomplete(self, query: str, limit: int = 10) -> List[Ingredient]:
        return self.find_many(
            self._text_predicate(query), order_by=(Ingredient.name.asc(),), limit=limit
        )

    @staticmethod
    def _text_predicate(query: Optional[str]) -> Optional[Predicate]:
        if not query:
            return None
        return any_of(
            ContainsSubstring("name", query),
            overlaps("aliases", [query.lower()]),
        )


class IngredientCategoryRepository(BaseRepository[IngredientCategory]):
    """Repository for ingredient categories"""

    def __init__(self, db: Session):
        super().__init__(db, IngredientCategory)

    def get_by_name(self, name: str) -> Optional[IngredientCategory]:
        return self.find_unique(name=name)

    def list_ordered(self) -> List[IngredientCategory]:
        return self.find_many(order_by=(IngredientCategory.sort_order.asc(),))

    def ingredient_count(self, category_id: str) -> int:
        return (
            self.db.query(Ingredient)
            .filter(Ingredient.category_id == category_id)
            .count()
        )
