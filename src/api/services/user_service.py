# src/api/services/user_service.py
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.schemas.auth.user import (
    AdminUserCreate,
    UserCreate,
    UserListResponse,
    UserSchema,
    UserUpdate,
    UserWithStores,
)
from src.api.schemas.store.store import StoreRatingBrief
from src.api.services.query_builder import ADMIN_USERS, ListParams, paginate
from src.api.services.rating_aggregator import summarize_stores
from src.api.services.scope_resolver import find_owned_store
from src.core import models
from src.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.core.security.security import get_password_hash, verify_password
from src.core.utils.enums import UserRole

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User already exists with this email"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
ACCOUNT_DEACTIVATED_MESSAGE = "Account is deactivated."
OWNER_HAS_ACTIVE_STORE_MESSAGE = "Store owner still has an active store. Deactivate or reassign it first."


class UserService:
    """Cadastro, autenticação e administração de usuários"""

    def __init__(self, db: Session):
        self.db = db

    # ========== CONSULTAS ==========

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(
            func.lower(models.User.email) == email.strip().lower()
        ).first()

    def get_user(self, user_id: int) -> models.User:
        user = self.db.get(models.User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _ensure_email_available(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = self.find_by_email(email)
        if existing and existing.id != exclude_id:
            raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email")

    # ========== CADASTRO ==========

    def create_user(self, data: UserCreate, role: UserRole = UserRole.USER) -> models.User:
        """Cria o usuário; o perfil vem do chamador (registro público = USER)"""
        self._ensure_email_available(data.email)

        user = models.User(
            name=data.name,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            address=data.address,
            role=role,
            is_active=True,
        )
        self.db.add(user)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email")

        self.db.refresh(user)
        logger.info(f"✅ Usuário criado: id={user.id} perfil={user.role.value}")
        return user

    def register(self, data: UserCreate) -> models.User:
        return self.create_user(data, role=UserRole.USER)

    def admin_create(self, data: AdminUserCreate) -> models.User:
        return self.create_user(data, role=data.role)

    # ========== AUTENTICAÇÃO ==========

    def authenticate(self, email: str, password: str) -> models.User:
        user = self.find_by_email(email)

        # Mesma mensagem para e-mail inexistente e senha errada
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("⚠️ Tentativa de login com credenciais inválidas")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            raise AuthenticationError(ACCOUNT_DEACTIVATED_MESSAGE)

        return user

    def change_password(self, user: models.User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError.for_field("currentPassword", "Current password is incorrect")

        user.hashed_password = get_password_hash(new_password)
        self.db.commit()
        logger.info(f"🔑 Senha alterada: usuário {user.id}")

    # ========== ADMINISTRAÇÃO ==========

    def update_user(self, user_id: int, data: UserUpdate) -> models.User:
        user = self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True)

        for field_name in ("name", "email", "address", "role", "is_active"):
            if changes.get(field_name) is None:
                changes.pop(field_name, None)

        if "email" in changes:
            self._ensure_email_available(changes["email"], exclude_id=user.id)

        leaving_owner_role = "role" in changes and changes["role"] != UserRole.STORE_OWNER
        if leaving_owner_role and user.role == UserRole.STORE_OWNER and find_owned_store(self.db, user.id):
            raise ConflictError(OWNER_HAS_ACTIVE_STORE_MESSAGE, field="role")

        for field_name, value in changes.items():
            setattr(user, field_name, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email")

        self.db.refresh(user)
        logger.info(f"✏️ Usuário {user.id} atualizado: {sorted(changes)}")
        return user

    def set_status(self, user_id: int, is_active: bool) -> models.User:
        user = self.get_user(user_id)
        user.is_active = is_active
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"🔁 Usuário {user.id} {'ativado' if is_active else 'desativado'}")
        return user

    def soft_delete(self, user_id: int) -> None:
        """Desativa o usuário; as avaliações dele permanecem"""
        self.set_status(user_id, False)

    def count_active(self) -> int:
        return self.db.query(models.User).filter(models.User.is_active.is_(True)).count()

    # ========== LISTAGEM / DETALHE ==========

    def list_users(
            self,
            params: ListParams,
            role: Optional[UserRole] = None,
            include_inactive: bool = False,
    ) -> UserListResponse:
        query = self.db.query(models.User)
        if not include_inactive:
            query = query.filter(models.User.is_active.is_(True))
        if role is not None:
            query = query.filter(models.User.role == role)

        page = paginate(query, params, ADMIN_USERS)
        owner_stores = self._stores_by_owner([u.id for u in page.items if u.role == UserRole.STORE_OWNER])

        return UserListResponse(
            users=[self._with_stores(u, owner_stores) for u in page.items],
            pagination=page.pagination,
        )

    def user_details(self, user_id: int) -> UserWithStores:
        user = self.get_user(user_id)
        owner_stores = self._stores_by_owner([user.id] if user.role == UserRole.STORE_OWNER else [])
        return self._with_stores(user, owner_stores)

    def _stores_by_owner(self, owner_ids: list[int]) -> dict[int, list[StoreRatingBrief]]:
        """Lojas ativas dos proprietários da página, com a nota média (2 queries no total)"""
        if not owner_ids:
            return {}

        stores = (
            self.db.query(models.Store)
            .filter(
                models.Store.owner_id.in_(owner_ids),
                models.Store.is_active.is_(True),
            )
            .order_by(models.Store.id)
            .all()
        )
        summaries = summarize_stores(self.db, [s.id for s in stores])

        grouped: dict[int, list[StoreRatingBrief]] = {owner_id: [] for owner_id in owner_ids}
        for store in stores:
            summary = summaries[store.id]
            grouped[store.owner_id].append(StoreRatingBrief(
                id=store.id,
                name=store.name,
                address=store.address,
                average_rating=summary.average_rating,
                total_ratings=summary.total_ratings,
            ))
        return grouped

    @staticmethod
    def _with_stores(user: models.User, owner_stores: dict[int, list[StoreRatingBrief]]) -> UserWithStores:
        # Não usa model_validate direto: o ORM também tem `stores` (sem as notas)
        base = UserSchema.model_validate(user).model_dump()
        stores = owner_stores.get(user.id, []) if user.role == UserRole.STORE_OWNER else None
        return UserWithStores(**base, stores=stores)
