# src/api/store_owner/routes/dashboard.py

from fastapi import APIRouter

from src.api.schemas.analytics.dashboard import OwnerDashboardSchema, OwnerStatisticsSchema
from src.api.schemas.store.store import StoreWithRating
from src.api.services.rating_service import RatingService
from src.api.services.store_service import StoreService
from src.core.database import GetDBDep
from src.core.dependencies import GetOwnedStoreDep

router = APIRouter(tags=["Store Owner - Dashboard"])


@router.get("/dashboard", response_model=OwnerDashboardSchema)
def get_dashboard(db: GetDBDep, store: GetOwnedStoreDep):
    return RatingService(db).owner_dashboard(store)


@router.get("/statistics", response_model=OwnerStatisticsSchema)
def get_statistics(db: GetDBDep, store: GetOwnedStoreDep):
    """Média, total, distribuição 1..5 e as 10 avaliações mais recentes"""
    return RatingService(db).owner_statistics(store)


@router.get("/store", response_model=StoreWithRating)
def get_store_info(db: GetDBDep, store: GetOwnedStoreDep):
    return StoreService(db).store_overview(store)
