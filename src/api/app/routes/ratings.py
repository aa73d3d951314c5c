# src/api/app/routes/ratings.py

from fastapi import APIRouter

from src.api.schemas.rating.rating import MessageResponse, MyRatingsResponse
from src.api.services.query_builder import ListParamsDep
from src.api.services.rating_service import RatingService
from src.core.database import GetDBDep
from src.core.dependencies import GetCurrentUserDep

router = APIRouter(prefix="/ratings", tags=["User - Ratings"])


@router.get("", response_model=MyRatingsResponse)
def list_my_ratings(db: GetDBDep, current_user: GetCurrentUserDep, params: ListParamsDep):
    return RatingService(db).list_my_ratings(current_user.id, params)


@router.delete("/{rating_id}", response_model=MessageResponse)
def delete_rating(rating_id: int, db: GetDBDep, current_user: GetCurrentUserDep):
    RatingService(db).delete_own_rating(current_user.id, rating_id)
    return MessageResponse(message="Rating deleted successfully")
