# schemas/store/store.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, StrictBool, field_validator, model_validator

from src.api.schemas.base_schema import AppBaseModel
from src.api.schemas.shared.pagination import PaginationMeta
from src.core.utils.validators import normalize_email


# --- Entrada (admin) ---

class StoreCreate(AppBaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    address: str = Field(..., min_length=1, max_length=400)
    # O proprietário pode ser indicado pelo id ou pelo nome
    owner_id: Optional[int] = Field(None, gt=0)
    owner_name: Optional[str] = Field(None, min_length=3, max_length=60)

    @field_validator("name", "address", "owner_name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)

    @model_validator(mode="after")
    def require_owner(self):
        if self.owner_id is None and not self.owner_name:
            raise ValueError("Either ownerId or ownerName is required")
        return self


class StoreUpdate(AppBaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1, max_length=400)
    owner_id: Optional[int] = Field(None, gt=0)
    is_active: Optional[StrictBool] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value else value


# --- Saída ---

class OwnerBrief(AppBaseModel):
    id: int
    name: str
    email: str


class StoreBrief(AppBaseModel):
    id: int
    name: str
    email: str
    address: str


class StoreSchema(StoreBrief):
    owner_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerBrief] = None


class StoreWithRating(StoreSchema):
    """Loja + campos derivados (nunca armazenados)"""
    average_rating: float = 0.0
    total_ratings: int = 0


class StoreRatingBrief(AppBaseModel):
    """Resumo usado dentro de outras respostas (usuários, avaliações)"""
    id: int
    name: str
    address: str
    average_rating: float = 0.0
    total_ratings: int = 0


class StoreListResponse(AppBaseModel):
    stores: list[StoreWithRating]
    pagination: PaginationMeta
