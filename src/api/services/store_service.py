# src/api/services/store_service.py
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from src.api.schemas.rating.rating import RatingOut, RatingWithUser
from src.api.schemas.store.store import (
    StoreCreate,
    StoreListResponse,
    StoreSchema,
    StoreUpdate,
    StoreWithRating,
)
from src.api.schemas.store.store_details import (
    BrowseStore,
    BrowseStoreListResponse,
    StoreDetails,
)
from src.api.services.query_builder import (
    ADMIN_STORES,
    BROWSE_STORES,
    ListParams,
    paginate,
)
from src.api.services.rating_aggregator import (
    RatingSummary,
    recent_ratings,
    summarize_store,
    summarize_stores,
)
from src.core import models
from src.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.core.utils.enums import UserRole

logger = logging.getLogger(__name__)

STORE_EMAIL_TAKEN_MESSAGE = "Store already exists with this email"
OWNER_HAS_STORE_MESSAGE = "Store owner already has an active store"
DETAILS_RECENT_LIMIT = 10


def store_with_rating(store: models.Store, summary: RatingSummary) -> StoreWithRating:
    base = StoreSchema.model_validate(store).model_dump()
    return StoreWithRating(**base, **summary.as_dict())


class StoreService:
    """Lojas: administração (CRUD) e navegação pelos usuários"""

    def __init__(self, db: Session):
        self.db = db

    # ========== CONSULTAS ==========

    def get_store(self, store_id: int) -> models.Store:
        store = (
            self.db.query(models.Store)
            .options(joinedload(models.Store.owner))
            .filter(models.Store.id == store_id)
            .first()
        )
        if not store:
            raise NotFoundError("Store not found")
        return store

    def get_active_store(self, store_id: int) -> models.Store:
        store = self.get_store(store_id)
        if not store.is_active:
            raise NotFoundError("Store not found")
        return store

    def count_active(self) -> int:
        return self.db.query(models.Store).filter(models.Store.is_active.is_(True)).count()

    # ========== PROPRIETÁRIO ==========

    def resolve_owner(self, owner_id: Optional[int] = None, owner_name: Optional[str] = None) -> models.User:
        """
        Encontra o proprietário pelo id (preferencial) ou pelo nome.

        O nome é comparado por inteiro, sem diferenciar maiúsculas, apenas
        entre proprietários ativos. Mais de um resultado é ambíguo.
        """
        if owner_id is not None:
            owner = self.db.get(models.User, owner_id)
            if not owner or not owner.is_active:
                raise NotFoundError("Store owner not found")
            if owner.role != UserRole.STORE_OWNER:
                raise ValidationError.for_field("ownerId", "User must have the store_owner role")
            return owner

        name = (owner_name or "").strip()
        matches = (
            self.db.query(models.User)
            .filter(
                func.lower(models.User.name) == name.lower(),
                models.User.role == UserRole.STORE_OWNER,
                models.User.is_active.is_(True),
            )
            .limit(2)
            .all()
        )

        if not matches:
            raise NotFoundError(
                f'Store owner "{name}" not found. Please ensure the full name is correct '
                f'and the user exists with the store_owner role.'
            )
        if len(matches) > 1:
            raise ValidationError.for_field(
                "ownerName", f'More than one store owner is named "{name}". Use ownerId instead.'
            )
        return matches[0]

    def _ensure_owner_free(self, owner_id: int, exclude_store_id: Optional[int] = None) -> None:
        query = self.db.query(models.Store.id).filter(
            models.Store.owner_id == owner_id,
            models.Store.is_active.is_(True),
        )
        if exclude_store_id is not None:
            query = query.filter(models.Store.id != exclude_store_id)
        if query.first():
            raise ConflictError(OWNER_HAS_STORE_MESSAGE, field="ownerId")

    def _ensure_email_available(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = self.db.query(models.Store).filter(
            func.lower(models.Store.email) == email.lower()
        ).first()
        if existing and existing.id != exclude_id:
            raise ConflictError(STORE_EMAIL_TAKEN_MESSAGE, field="email")

    def _commit_store(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            detail = str(e.orig)
            if "owner" in detail:
                raise ConflictError(OWNER_HAS_STORE_MESSAGE, field="ownerId")
            raise ConflictError(STORE_EMAIL_TAKEN_MESSAGE, field="email")

    # ========== ADMINISTRAÇÃO ==========

    def create_store(self, data: StoreCreate) -> models.Store:
        self._ensure_email_available(data.email)
        owner = self.resolve_owner(data.owner_id, data.owner_name)
        self._ensure_owner_free(owner.id)

        store = models.Store(
            name=data.name,
            email=data.email,
            address=data.address,
            owner_id=owner.id,
            is_active=True,
        )
        self.db.add(store)
        self._commit_store()

        logger.info(f"🏪 Loja criada: id={store.id} proprietário={owner.id}")
        return self.get_store(store.id)

    def update_store(self, store_id: int, data: StoreUpdate) -> models.Store:
        store = self.get_store(store_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        if "email" in changes:
            self._ensure_email_available(changes["email"], exclude_id=store.id)

        if "owner_id" in changes and changes["owner_id"] != store.owner_id:
            self.resolve_owner(owner_id=changes["owner_id"])

        will_be_active = changes.get("is_active", store.is_active)
        owner_changed = changes.get("owner_id", store.owner_id) != store.owner_id
        reactivated = will_be_active and not store.is_active
        if will_be_active and (owner_changed or reactivated):
            self._ensure_owner_free(changes.get("owner_id", store.owner_id), exclude_store_id=store.id)

        for field_name, value in changes.items():
            setattr(store, field_name, value)
        self._commit_store()

        logger.info(f"✏️ Loja {store.id} atualizada: {sorted(changes)}")
        return self.get_store(store.id)

    def set_status(self, store_id: int, is_active: bool) -> models.Store:
        store = self.get_store(store_id)
        if is_active and not store.is_active:
            self._ensure_owner_free(store.owner_id, exclude_store_id=store.id)

        store.is_active = is_active
        self._commit_store()
        logger.info(f"🔁 Loja {store.id} {'ativada' if is_active else 'desativada'}")
        return store

    def soft_delete(self, store_id: int) -> None:
        """Desativa a loja; as avaliações continuam no banco"""
        self.set_status(store_id, False)

    def list_stores(self, params: ListParams, include_inactive: bool = False) -> StoreListResponse:
        query = self.db.query(models.Store).options(joinedload(models.Store.owner))
        if not include_inactive:
            query = query.filter(models.Store.is_active.is_(True))

        page = paginate(query, params, ADMIN_STORES)
        summaries = summarize_stores(self.db, [s.id for s in page.items])

        return StoreListResponse(
            stores=[store_with_rating(s, summaries[s.id]) for s in page.items],
            pagination=page.pagination,
        )

    def store_overview(self, store: models.Store) -> StoreWithRating:
        return store_with_rating(store, summarize_store(self.db, store.id))

    # ========== NAVEGAÇÃO (USUÁRIO) ==========

    def _user_ratings_for(self, user_id: int, store_ids: list[int]) -> dict[int, models.Rating]:
        if not store_ids:
            return {}
        ratings = self.db.query(models.Rating).filter(
            models.Rating.user_id == user_id,
            models.Rating.store_id.in_(store_ids),
        ).all()
        return {r.store_id: r for r in ratings}

    def browse_stores(self, user_id: int, params: ListParams) -> BrowseStoreListResponse:
        """Lojas ativas com nota média e a avaliação do próprio usuário"""
        query = (
            self.db.query(models.Store)
            .options(joinedload(models.Store.owner))
            .filter(models.Store.is_active.is_(True))
        )
        page = paginate(query, params, BROWSE_STORES)

        store_ids = [s.id for s in page.items]
        summaries = summarize_stores(self.db, store_ids)
        own = self._user_ratings_for(user_id, store_ids)

        stores = []
        for store in page.items:
            mine = own.get(store.id)
            stores.append(BrowseStore(
                **store_with_rating(store, summaries[store.id]).model_dump(),
                user_rating=RatingOut.model_validate(mine) if mine else None,
            ))

        return BrowseStoreListResponse(stores=stores, pagination=page.pagination)

    def store_details(self, user_id: int, store_id: int) -> StoreDetails:
        store = self.get_active_store(store_id)
        mine = self._user_ratings_for(user_id, [store.id]).get(store.id)
        latest = recent_ratings(self.db, store.id, DETAILS_RECENT_LIMIT)

        return StoreDetails(
            **self.store_overview(store).model_dump(),
            user_rating=RatingOut.model_validate(mine) if mine else None,
            recent_ratings=[RatingWithUser.model_validate(r) for r in latest],
        )
