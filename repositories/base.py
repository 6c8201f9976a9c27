"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, List, Type, Sequence, Any
from sqlalchemy import update as sql_update
from sqlalchemy.orm import Session
from abc import ABC

from repositories.predicates import Predicate, compile_predicate

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @property
    def dialect(self) -> str:
        """Name of the SQL dialect behind the session (postgresql, sqlite, ...)"""
        return self.db.get_bind().dialect.name

    def where(self, predicate: Optional[Predicate]):
        """Compile a predicate tree against this repository's model"""
        return compile_predicate(self.model, predicate, self.dialect)

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """Get entity by primary key"""
        return self.db.get(self.model, entity_id)

    def find_unique(self, **criteria) -> Optional[ModelType]:
        """Get the single entity matching all equality criteria"""
        return self.db.query(self.model).filter_by(**criteria).first()

    def find_first(
        self, predicate: Optional[Predicate] = None, order_by: Sequence = ()
    ) -> Optional[ModelType]:
        return (
            self.db.query(self.model)
            .filter(self.where(predicate))
            .order_by(*order_by)
            .first()
        )

    def find_many(
        self,
        predicate: Optional[Predicate] = None,
        order_by: Sequence = (),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ModelType]:
        """
        Query entities matching a predicate.

        Args:
            predicate: Filter tree, None for no filter
            order_by: SQLAlchemy order clauses
            limit: Maximum rows, None for all
            offset: Rows to skip

        Returns:
            List of entities
        """
        query = self.db.query(self.model).filter(self.where(predicate)).order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, predicate: Optional[Predicate] = None) -> int:
        return self.db.query(self.model).filter(self.where(predicate)).count()

    def get_all(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get all entities with pagination"""
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Update existing entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: Any) -> bool:
        """Delete entity by ID"""
        entity = self.get_by_id(entity_id)
        if entity:
            self.db.delete(entity)
            self.db.commit()
            return True
        return False

    def exists(self, entity_id: Any) -> bool:
        """Check if entity exists"""
        return self.get_by_id(entity_id) is not None

    def increment(
        self,
        entity_id: Any,
        field: str,
        amount: int = 1,
        guard: Optional[Predicate] = None,
    ) -> int:
        """
        Atomically add `amount` to a counter column.

        Runs as a single UPDATE ... SET field = field + amount so concurrent
        callers never lose an increment.

        Args:
            entity_id: Primary key of the row
            field: Counter column name
            amount: Delta, may be negative
            guard: Extra predicate the row must satisfy for the update to apply

        Returns:
            Number of rows updated (0 or 1)
        """
        column = getattr(self.model, field)
        stmt = (
            sql_update(self.model)
            .where(self.model.id == entity_id)
            .where(self.where(guard))
            .values({field: column + amount})
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount
