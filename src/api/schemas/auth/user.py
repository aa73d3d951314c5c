# Em schemas/auth/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, StrictBool, field_validator

from src.api.schemas.base_schema import AppBaseModel
from src.api.schemas.shared.pagination import PaginationMeta
from src.api.schemas.store.store import StoreRatingBrief
from src.core.utils.enums import UserRole
from src.core.utils.validators import normalize_email, validate_password


# --- Schemas de Entrada ---

class UserCreate(AppBaseModel):
    """Cadastro público (/auth/register) - sempre cria perfil 'user'"""
    name: str = Field(..., min_length=3, max_length=60)
    email: EmailStr
    password: str
    address: str = Field(..., min_length=1, max_length=400)

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return validate_password(value)


class AdminUserCreate(UserCreate):
    """Criação pelo administrador: o perfil é escolhido"""
    role: UserRole = UserRole.USER


class UserUpdate(AppBaseModel):
    """Atualização parcial pelo administrador"""
    name: Optional[str] = Field(None, min_length=3, max_length=60)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1, max_length=400)
    role: Optional[UserRole] = None
    is_active: Optional[StrictBool] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value else value


class StatusUpdate(AppBaseModel):
    is_active: StrictBool


class LoginRequest(AppBaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)


class ChangePasswordData(AppBaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return validate_password(value)


# --- Schemas de Saída ---

class UserBrief(AppBaseModel):
    id: int
    name: str
    email: str


class UserSchema(AppBaseModel):
    id: int
    name: str
    email: str
    address: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TokenResponse(AppBaseModel):
    token: str
    token_type: str = "bearer"
    user: UserSchema


class UserWithStores(UserSchema):
    """Visão do admin: proprietários carregam as lojas com a nota média"""
    stores: Optional[list[StoreRatingBrief]] = None


class UserListResponse(AppBaseModel):
    users: list[UserWithStores]
    pagination: PaginationMeta
