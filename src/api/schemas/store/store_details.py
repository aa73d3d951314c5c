# src/api/schemas/store/store_details.py

from typing import Optional

from src.api.schemas.rating.rating import RatingOut, RatingWithUser
from src.api.schemas.store.store import StoreWithRating
from src.api.schemas.base_schema import AppBaseModel
from src.api.schemas.shared.pagination import PaginationMeta


class BrowseStore(StoreWithRating):
    # Avaliação do usuário logado (None se ainda não avaliou)
    user_rating: Optional[RatingOut] = None


class StoreDetails(BrowseStore):
    recent_ratings: list[RatingWithUser] = []


class BrowseStoreListResponse(AppBaseModel):
    stores: list[BrowseStore]
    pagination: PaginationMeta
