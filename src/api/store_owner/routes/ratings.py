# src/api/store_owner/routes/ratings.py

from fastapi import APIRouter

from src.api.schemas.rating.rating import StoreCustomersResponse, StoreRatingsResponse
from src.api.services.query_builder import ListParamsDep
from src.api.services.rating_service import RatingService
from src.core.database import GetDBDep
from src.core.dependencies import GetOwnedStoreDep

router = APIRouter(tags=["Store Owner - Ratings"])


@router.get("/ratings", response_model=StoreRatingsResponse)
def list_store_ratings(db: GetDBDep, store: GetOwnedStoreDep, params: ListParamsDep):
    return RatingService(db).list_store_ratings(store, params)


@router.get("/users", response_model=StoreCustomersResponse)
def list_store_customers(db: GetDBDep, store: GetOwnedStoreDep, params: ListParamsDep):
    """Usuários que avaliaram a loja, com a avaliação de cada um"""
    return RatingService(db).list_store_customers(store, params)
