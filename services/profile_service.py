"""User dietary profile resolution with read-through caching."""

from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.schemas.profile_schemas import DietProfileUpdate
from repositories import DietProfileRepository
from services.base import BaseService
from services.cache_invalidation import CacheInvalidationCoordinator
from services import cache_keys as keys


class ProfileService(BaseService):
    """Business logic for dietary profiles"""

    def __init__(self, db: Session, cache: SafeCache):
        super().__init__(db, cache, "pantrychef.profile")
        self.profiles = DietProfileRepository(db)
        self.invalidation = CacheInvalidationCoordinator(cache)

    def get_profile(self, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Resolve a user's dietary profile.

        One store read per cache miss. A missing profile means "no
        constraints" and is not cached, so a profile created later is seen
        immediately.
        """
        if not user_id:
            return None
        return self.cached(
            keys.user_profile_key(user_id),
            settings.profile_cache_ttl,
            lambda: self._load(user_id),
        )

    def _load(self, user_id: str) -> Optional[Dict[str, Any]]:
        profile = self.profiles.get_by_user_id(user_id)
        if profile is None:
            self.logger.debug(f"profile_not_found user_id={user_id}")
            return None
        return profile.to_dict()

    def require_profile(self, user_id: str) -> Dict[str, Any]:
        profile = self.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"Dietary profile not found for user {user_id}")
        return profile

    def upsert_profile(self, user_id: str, data: DietProfileUpdate) -> Dict[str, Any]:
        """Create or replace a user's profile and drop everything derived from it"""
        if not user_id or len(user_id) > 64:
            raise ServiceValidationError("A user id of at most 64 characters is required")

        profile = self.profiles.upsert(user_id, **data.model_dump())
        self.invalidation.profile_changed(user_id)
        self.log_info("profile_upserted", user_id=user_id, veg_type=profile.veg_type.value)
        return profile.to_dict()

    def delete_profile(self, user_id: str) -> None:
        if not self.profiles.delete_by_user_id(user_id):
            raise NotFoundError(f"Dietary profile not found for user {user_id}")
        self.invalidation.profile_changed(user_id)
        self.log_info("profile_deleted", user_id=user_id)
