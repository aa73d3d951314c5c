# src/api/services/rating_service.py
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, contains_eager, joinedload

from src.api.schemas.analytics.dashboard import (
    OwnerDashboardSchema,
    OwnerStatisticsSchema,
    UserProfileSchema,
    UserStatisticsSchema,
)
from src.api.schemas.auth.user import UserSchema
from src.api.schemas.rating.rating import (
    REVIEW_MAX_LENGTH,
    RATING_MAX,
    RATING_MIN,
    CustomerRating,
    MyRatingsResponse,
    RatingWithStore,
    RatingWithUser,
    StoreCustomersResponse,
    StoreRatingsResponse,
)
from src.api.schemas.store.store import StoreBrief, StoreRatingBrief
from src.api.services.query_builder import (
    MY_RATINGS,
    STORE_CUSTOMERS,
    STORE_RATINGS,
    ListParams,
    paginate,
)
from src.api.services.rating_aggregator import (
    RatingSummary,
    rating_distribution,
    recent_ratings,
    summarize_store,
    summarize_stores,
)
from src.api.services.scope_resolver import own_ratings_filter
from src.core import models
from src.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# INSERT ... ON CONFLICT por dialeto
_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

RATING_CREATED_MESSAGE = "Rating submitted successfully"
RATING_UPDATED_MESSAGE = "Rating updated successfully"

DASHBOARD_RECENT_LIMIT = 5
STATISTICS_RECENT_LIMIT = 10
PROFILE_RECENT_LIMIT = 5


# ═══════════════════════════════════════════════════════════
# SERIALIZAÇÃO
# ═══════════════════════════════════════════════════════════

def store_rating_brief(store: models.Store, summary: RatingSummary) -> StoreRatingBrief:
    return StoreRatingBrief(
        id=store.id,
        name=store.name,
        address=store.address,
        average_rating=summary.average_rating,
        total_ratings=summary.total_ratings,
    )


def rating_with_store(rating: models.Rating, summary: RatingSummary) -> RatingWithStore:
    return RatingWithStore(
        id=rating.id,
        user_id=rating.user_id,
        store_id=rating.store_id,
        rating=rating.rating,
        review=rating.review,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
        store=store_rating_brief(rating.store, summary),
    )


class RatingService:
    """Envio, remoção e consultas de avaliações"""

    def __init__(self, db: Session):
        self.db = db

    # ========== ENVIO (UPSERT) ==========

    def submit_rating(
            self,
            user_id: int,
            store_id: int,
            rating: int,
            review: Optional[str] = None,
    ) -> tuple[bool, models.Rating]:
        """
        Cria ou atualiza a avaliação do usuário para a loja.

        Uma única avaliação por (usuário, loja): o INSERT usa
        ON CONFLICT DO NOTHING e, se a linha já existia, o UPDATE
        sobrescreve a nota. O comentário só muda quando enviado
        (None mantém o atual, "" limpa).

        Returns:
            (created, rating) - created=True quando a avaliação é nova
        """
        self._validate_rating_input(rating, review)

        store = self.db.query(models.Store).filter(
            models.Store.id == store_id,
            models.Store.is_active.is_(True)
        ).first()

        if not store:
            raise NotFoundError("Store not found or is not active")

        now = datetime.now(timezone.utc)
        insert = self._insert_for_dialect()

        stmt = (
            insert(models.Rating)
            .values(
                user_id=user_id,
                store_id=store_id,
                rating=rating,
                review=review or "",
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "store_id"])
            .returning(models.Rating.id)
        )
        inserted_id = self.db.execute(stmt).scalar_one_or_none()
        created = inserted_id is not None

        if not created:
            values = {"rating": rating, "updated_at": now}
            if review is not None:
                values["review"] = review
            self.db.execute(
                update(models.Rating)
                .where(
                    models.Rating.user_id == user_id,
                    models.Rating.store_id == store_id,
                )
                .values(**values)
            )

        self.db.commit()

        saved = (
            self.db.query(models.Rating)
            .options(joinedload(models.Rating.store))
            .filter(
                models.Rating.user_id == user_id,
                models.Rating.store_id == store_id,
            )
            .populate_existing()
            .one()
        )

        logger.info(
            f"⭐ Avaliação {'criada' if created else 'atualizada'}: "
            f"usuário={user_id} loja={store_id} nota={rating}"
        )
        return created, saved

    def submit_rating_response(self, user_id: int, store_id: int, rating: int, review: Optional[str] = None) -> dict:
        created, saved = self.submit_rating(user_id, store_id, rating, review)
        return {
            "message": RATING_CREATED_MESSAGE if created else RATING_UPDATED_MESSAGE,
            "data": rating_with_store(saved, summarize_store(self.db, store_id)),
        }

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect]
        except KeyError:
            raise RuntimeError(f"Dialeto sem suporte a upsert: {dialect}")

    @staticmethod
    def _validate_rating_input(rating, review: Optional[str]) -> None:
        errors = []
        if isinstance(rating, bool) or not isinstance(rating, int) or not RATING_MIN <= rating <= RATING_MAX:
            errors.append({
                "field": "rating",
                "message": f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}",
            })
        if review is not None and len(review) > REVIEW_MAX_LENGTH:
            errors.append({
                "field": "review",
                "message": f"Review must not exceed {REVIEW_MAX_LENGTH} characters",
            })
        if errors:
            raise ValidationError(errors)

    # ========== REMOÇÃO ==========

    def delete_own_rating(self, user_id: int, rating_id: int) -> None:
        """Remove a avaliação somente se pertencer ao usuário"""
        rating = self.db.query(models.Rating).filter(
            models.Rating.id == rating_id,
            own_ratings_filter(user_id)
        ).first()

        # Avaliação de outro usuário é indistinguível de id inexistente
        if not rating:
            raise NotFoundError("Rating not found")

        self.db.delete(rating)
        self.db.commit()
        logger.info(f"🗑️ Avaliação {rating_id} removida pelo usuário {user_id}")

    # ========== USUÁRIO ==========

    def list_my_ratings(self, user_id: int, params: ListParams) -> MyRatingsResponse:
        query = (
            self.db.query(models.Rating)
            .options(joinedload(models.Rating.store))
            .filter(own_ratings_filter(user_id))
        )
        page = paginate(query, params, MY_RATINGS)
        summaries = summarize_stores(self.db, [r.store_id for r in page.items])

        return MyRatingsResponse(
            ratings=[rating_with_store(r, summaries[r.store_id]) for r in page.items],
            pagination=page.pagination,
        )

    def user_profile(self, user: models.User) -> UserProfileSchema:
        total_ratings = self.db.query(models.Rating).filter(own_ratings_filter(user.id)).count()

        latest = (
            self.db.query(models.Rating)
            .options(joinedload(models.Rating.store))
            .filter(own_ratings_filter(user.id))
            .order_by(models.Rating.created_at.desc(), models.Rating.id.desc())
            .limit(PROFILE_RECENT_LIMIT)
            .all()
        )
        summaries = summarize_stores(self.db, [r.store_id for r in latest])

        return UserProfileSchema(
            user=UserSchema.model_validate(user),
            statistics=UserStatisticsSchema(total_ratings=total_ratings),
            recent_ratings=[rating_with_store(r, summaries[r.store_id]) for r in latest],
        )

    # ========== PROPRIETÁRIO ==========

    def list_store_ratings(self, store: models.Store, params: ListParams) -> StoreRatingsResponse:
        query = (
            self.db.query(models.Rating)
            .options(joinedload(models.Rating.user))
            .filter(models.Rating.store_id == store.id)
        )
        page = paginate(query, params, STORE_RATINGS)

        return StoreRatingsResponse(
            store=StoreBrief.model_validate(store),
            ratings=[RatingWithUser.model_validate(r) for r in page.items],
            pagination=page.pagination,
        )

    def list_store_customers(self, store: models.Store, params: ListParams) -> StoreCustomersResponse:
        """Clientes que avaliaram a loja (uma linha por avaliação)"""
        query = (
            self.db.query(models.Rating)
            .join(models.Rating.user)
            .options(contains_eager(models.Rating.user))
            .filter(models.Rating.store_id == store.id)
        )
        page = paginate(query, params, STORE_CUSTOMERS)

        return StoreCustomersResponse(
            store=StoreBrief.model_validate(store),
            users=[CustomerRating.model_validate(r) for r in page.items],
            pagination=page.pagination,
        )

    def owner_dashboard(self, store: models.Store) -> OwnerDashboardSchema:
        summary = summarize_store(self.db, store.id)
        latest = recent_ratings(self.db, store.id, DASHBOARD_RECENT_LIMIT)

        return OwnerDashboardSchema(
            store=StoreBrief.model_validate(store),
            average_rating=summary.average_rating,
            total_ratings=summary.total_ratings,
            recent_ratings=[RatingWithUser.model_validate(r) for r in latest],
        )

    def owner_statistics(self, store: models.Store) -> OwnerStatisticsSchema:
        summary = summarize_store(self.db, store.id)
        latest = recent_ratings(self.db, store.id, STATISTICS_RECENT_LIMIT)

        return OwnerStatisticsSchema(
            average_rating=summary.average_rating,
            total_ratings=summary.total_ratings,
            rating_distribution=rating_distribution(self.db, store.id),
            recent_ratings=[RatingWithUser.model_validate(r) for r in latest],
        )
