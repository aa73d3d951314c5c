# src/api/admin/routes/stores.py

from fastapi import APIRouter, Query

from src.api.schemas.rating.rating import MessageResponse
from src.api.schemas.store.store import (
    StoreCreate,
    StoreListResponse,
    StoreSchema,
    StoreUpdate,
    StoreWithRating,
)
from src.api.schemas.auth.user import StatusUpdate
from src.api.services.query_builder import ListParamsDep
from src.api.services.store_service import StoreService
from src.core.database import GetDBDep

router = APIRouter(prefix="/stores", tags=["Admin - Stores"])


@router.get("", response_model=StoreListResponse)
def list_stores(
        db: GetDBDep,
        params: ListParamsDep,
        include_inactive: bool = Query(False, alias="includeInactive"),
):
    return StoreService(db).list_stores(params, include_inactive=include_inactive)


@router.post("", response_model=StoreSchema, status_code=201)
def create_store(store_data: StoreCreate, db: GetDBDep):
    return StoreService(db).create_store(store_data)


@router.get("/{store_id}", response_model=StoreWithRating)
def get_store(store_id: int, db: GetDBDep):
    service = StoreService(db)
    return service.store_overview(service.get_store(store_id))


@router.put("/{store_id}", response_model=StoreSchema)
def update_store(store_id: int, data: StoreUpdate, db: GetDBDep):
    return StoreService(db).update_store(store_id, data)


@router.patch("/{store_id}/status", response_model=StoreSchema)
def update_store_status(store_id: int, data: StatusUpdate, db: GetDBDep):
    return StoreService(db).set_status(store_id, data.is_active)


@router.delete("/{store_id}", response_model=MessageResponse)
def delete_store(store_id: int, db: GetDBDep):
    StoreService(db).soft_delete(store_id)
    return MessageResponse(message="Store deleted successfully")
