"""Dietary profile routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_profile_service
from domain.schemas.profile_schemas import DietProfileUpdate
from services import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])
logger = logging.getLogger("pantrychef.api.profiles")


@router.get("/{user_id}")
def get_profile(user_id: str, service: ProfileService = Depends(get_profile_service)):
    """Get a user's dietary profile"""
    return service.require_profile(user_id)


@router.put("/{user_id}")
def upsert_profile(
    user_id: str,
    data: DietProfileUpdate,
    service: ProfileService = Depends(get_profile_service),
):
    """
    Create or replace a user's dietary profile.
    Cached searches for the user are dropped so the next search applies it.
    """
    return service.upsert_profile(user_id, data)


@router.delete("/{user_id}")
def delete_profile(user_id: str, service: ProfileService = Depends(get_profile_service)):
    service.delete_profile(user_id)
    return {"status": "ok", "deleted": user_id}
