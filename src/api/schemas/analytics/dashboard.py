# Em: src/api/schemas/analytics/dashboard.py

from pydantic import Field

from src.api.schemas.auth.user import UserSchema
from src.api.schemas.base_schema import AppBaseModel
from src.api.schemas.rating.rating import RatingWithStore, RatingWithUser
from src.api.schemas.store.store import StoreBrief


# ===================================================================
# ADMIN
# ===================================================================
class AdminDashboardSchema(AppBaseModel):
    total_users: int = Field(..., description="Usuários ativos.")
    total_stores: int = Field(..., description="Lojas ativas.")
    total_ratings: int = Field(..., description="Total de avaliações enviadas.")


# ===================================================================
# PROPRIETÁRIO
# ===================================================================
class OwnerDashboardSchema(AppBaseModel):
    store: StoreBrief
    average_rating: float
    total_ratings: int
    recent_ratings: list[RatingWithUser]


class OwnerStatisticsSchema(AppBaseModel):
    average_rating: float
    total_ratings: int
    # Sempre com as cinco chaves (1..5)
    rating_distribution: dict[int, int]
    recent_ratings: list[RatingWithUser]


# ===================================================================
# USUÁRIO
# ===================================================================
class UserStatisticsSchema(AppBaseModel):
    total_ratings: int


class UserProfileSchema(AppBaseModel):
    user: UserSchema
    statistics: UserStatisticsSchema
    recent_ratings: list[RatingWithStore]
