# src/api/admin/routes/users.py

from typing import Optional

from fastapi import APIRouter, Query

from src.api.schemas.auth.user import (
    AdminUserCreate,
    StatusUpdate,
    UserListResponse,
    UserSchema,
    UserUpdate,
    UserWithStores,
)
from src.api.schemas.rating.rating import MessageResponse
from src.api.services.query_builder import ListParamsDep
from src.api.services.user_service import UserService
from src.core.database import GetDBDep
from src.core.utils.enums import UserRole

router = APIRouter(prefix="/users", tags=["Admin - Users"])


@router.get("", response_model=UserListResponse)
def list_users(
        db: GetDBDep,
        params: ListParamsDep,
        role: Optional[UserRole] = Query(None),
        include_inactive: bool = Query(False, alias="includeInactive"),
):
    # Somente ativos por padrão, com ou sem filtro de perfil
    return UserService(db).list_users(params, role=role, include_inactive=include_inactive)


@router.post("", response_model=UserSchema, status_code=201)
def create_user(user_data: AdminUserCreate, db: GetDBDep):
    return UserService(db).admin_create(user_data)


@router.get("/{user_id}", response_model=UserWithStores)
def get_user(user_id: int, db: GetDBDep):
    return UserService(db).user_details(user_id)


@router.put("/{user_id}", response_model=UserSchema)
def update_user(user_id: int, data: UserUpdate, db: GetDBDep):
    return UserService(db).update_user(user_id, data)


@router.patch("/{user_id}/status", response_model=UserSchema)
def update_user_status(user_id: int, data: StatusUpdate, db: GetDBDep):
    return UserService(db).set_status(user_id, data.is_active)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: GetDBDep):
    UserService(db).soft_delete(user_id)
    return MessageResponse(message="User deleted successfully")
