from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, Index, UniqueConstraint, CheckConstraint, text
from sqlalchemy import ForeignKey, String, Enum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.core.utils.enums import UserRole


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    # ✅ USA `default` em vez de `server_default`
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(60))
    # Sempre gravado em minúsculas (ver schemas de entrada)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column()
    address: Mapped[str] = mapped_column(String(400))
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        default=UserRole.USER,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    stores: Mapped[List["Store"]] = relationship(back_populates="owner")
    ratings: Mapped[List["Rating"]] = relationship(back_populates="user")

    __table_args__ = (
        # Índice para email case-insensitive
        Index(
            'idx_users_email_lower',
            text('LOWER(email)'),
            unique=True
        ),
        Index('idx_users_role_active', role, is_active),
    )


class Store(Base, TimestampMixin):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    address: Mapped[str] = mapped_column(String(400))
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    owner: Mapped["User"] = relationship(back_populates="stores")
    ratings: Mapped[List["Rating"]] = relationship(back_populates="store")

    __table_args__ = (
        Index(
            'idx_stores_email_lower',
            text('LOWER(email)'),
            unique=True
        ),
        # "Minha loja": busca por dono + ativa
        Index('idx_stores_owner_active', owner_id, is_active),
        # No máximo UMA loja ativa por proprietário
        Index(
            'uq_stores_owner_active',
            owner_id,
            unique=True,
            postgresql_where=text('is_active = true'),
            sqlite_where=text('is_active = 1'),
        ),
    )


class Rating(Base, TimestampMixin):
    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(nullable=False)
    review: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    user: Mapped["User"] = relationship(back_populates="ratings")
    store: Mapped["Store"] = relationship(back_populates="ratings")

    __table_args__ = (
        # Uma avaliação por usuário por loja (base do upsert atômico)
        UniqueConstraint('user_id', 'store_id', name='uq_ratings_user_store'),
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_ratings_rating_range'),
    )
