"""
User Repository - Data access layer for user dietary profiles
"""

from typing import Optional
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import UserDietProfile


class DietProfileRepository(BaseRepository[UserDietProfile]):
    """Repository for dietary profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, UserDietProfile)

    def get_by_user_id(self, user_id: str) -> Optional[UserDietProfile]:
        """Get dietary profile for a user"""
        return (
            self.db.query(UserDietProfile)
            .filter(UserDietProfile.user_id == user_id)
            .first()
        )

    def upsert(self, user_id: str, **kwargs) -> UserDietProfile:
        """Create or update dietary profile"""
        profile = self.get_by_user_id(user_id)
        if profile:
            for key, value in kwargs.items():
                if hasattr(profile, key):
                    setattr(profile, key, value)
        else:
            profile = UserDietProfile(user_id=user_id, **kwargs)
            self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def delete_by_user_id(self, user_id: str) -> bool:
        count = (
            self.db.query(UserDietProfile)
            .filter(UserDietProfile.user_id == user_id)
            .delete()
        )
        self.db.commit()
        return count > 0
