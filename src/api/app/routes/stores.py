# src/api/app/routes/stores.py

from fastapi import APIRouter

from src.api.schemas.rating.rating import RatingSubmit, RatingSubmitResponse
from src.api.schemas.store.store_details import BrowseStoreListResponse, StoreDetails
from src.api.services.query_builder import ListParamsDep
from src.api.services.rating_service import RatingService
from src.api.services.store_service import StoreService
from src.core.database import GetDBDep
from src.core.dependencies import GetCurrentUserDep

router = APIRouter(prefix="/stores", tags=["User - Stores"])


@router.get("", response_model=BrowseStoreListResponse)
def browse_stores(db: GetDBDep, current_user: GetCurrentUserDep, params: ListParamsDep):
    return StoreService(db).browse_stores(current_user.id, params)


@router.get("/{store_id}", response_model=StoreDetails)
def get_store(store_id: int, db: GetDBDep, current_user: GetCurrentUserDep):
    return StoreService(db).store_details(current_user.id, store_id)


@router.post("/{store_id}/rate", response_model=RatingSubmitResponse)
def rate_store(store_id: int, data: RatingSubmit, db: GetDBDep, current_user: GetCurrentUserDep):
    """Envia ou atualiza a avaliação do usuário (uma por loja)"""
    return RatingService(db).submit_rating_response(
        current_user.id, store_id, data.rating, data.review
    )
