# schemas/rating/rating.py
from datetime import datetime
from typing import Optional

from pydantic import field_validator

from ..base_schema import AppBaseModel
from ..shared.pagination import PaginationMeta
from ..store.store import StoreBrief, StoreRatingBrief

RATING_MIN = 1
RATING_MAX = 5
REVIEW_MAX_LENGTH = 500


class RatingSubmit(AppBaseModel):
    rating: int
    # None (ou ausente) mantém o comentário atual; "" limpa
    review: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, value):
        # bool é subclasse de int e não é uma nota
        if isinstance(value, bool) or not isinstance(value, int) or not RATING_MIN <= value <= RATING_MAX:
            raise ValueError(f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}")
        return value

    @field_validator("review")
    @classmethod
    def check_review(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > REVIEW_MAX_LENGTH:
            raise ValueError(f"Review must not exceed {REVIEW_MAX_LENGTH} characters")
        return value


class RatingOut(AppBaseModel):
    id: int
    user_id: int
    store_id: int
    rating: int
    review: str
    created_at: datetime
    updated_at: datetime


class RaterBrief(AppBaseModel):
    id: int
    name: str
    email: str


class CustomerBrief(RaterBrief):
    address: str


class RatingWithUser(RatingOut):
    user: RaterBrief


class RatingWithStore(RatingOut):
    store: StoreRatingBrief


class CustomerRating(RatingOut):
    """Cliente que avaliou a loja + a avaliação dele"""
    user: CustomerBrief


class RatingSubmitResponse(AppBaseModel):
    message: str
    data: RatingWithStore


class MessageResponse(AppBaseModel):
    message: str


class MyRatingsResponse(AppBaseModel):
    ratings: list[RatingWithStore]
    pagination: PaginationMeta


class StoreRatingsResponse(AppBaseModel):
    store: StoreBrief
    ratings: list[RatingWithUser]
    pagination: PaginationMeta


class StoreCustomersResponse(AppBaseModel):
    store: StoreBrief
    users: list[CustomerRating]
    pagination: PaginationMeta
