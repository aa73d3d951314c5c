# src/api/services/scope_resolver.py
"""
Escopo por perfil: "minha loja" (proprietário) e "minhas avaliações" (usuário)
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.core import models
from src.core.exceptions import AccessDeniedError

logger = logging.getLogger(__name__)

NO_ACTIVE_STORE_MESSAGE = "Access denied: No active store found for this user."


def find_owned_store(db: Session, user_id: int) -> Optional[models.Store]:
    return (
        db.query(models.Store)
        .filter(
            models.Store.owner_id == user_id,
            models.Store.is_active.is_(True),
        )
        .order_by(models.Store.id)
        .first()
    )


def resolve_owned_store(db: Session, user_id: int) -> models.Store:
    """Loja ativa do proprietário; sem loja => acesso negado"""
    store = find_owned_store(db, user_id)
    if store is None:
        logger.warning(f"⚠️ Proprietário {user_id} sem loja ativa")
        raise AccessDeniedError(NO_ACTIVE_STORE_MESSAGE)
    return store


def own_ratings_filter(user_id: int):
    return models.Rating.user_id == user_id
