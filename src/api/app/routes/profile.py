# src/api/app/routes/profile.py

from fastapi import APIRouter

from src.api.schemas.analytics.dashboard import UserProfileSchema
from src.api.services.rating_service import RatingService
from src.core.database import GetDBDep
from src.core.dependencies import GetCurrentUserDep

router = APIRouter(prefix="/profile", tags=["User - Profile"])


@router.get("", response_model=UserProfileSchema)
def get_profile(db: GetDBDep, current_user: GetCurrentUserDep):
    return RatingService(db).user_profile(current_user)
