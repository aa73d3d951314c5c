# Arquivo: src/core/db_initialization.py

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.core import models
from src.core.security.security import get_password_hash
from src.core.utils.enums import UserRole

logger = logging.getLogger(__name__)

# Contas de demonstração (uma por perfil)
DEMO_ACCOUNTS = [
    {
        "name": "System Administrator Account",
        "email": "admin@example.com",
        "password": "Admin123!",
        "address": "123 Admin Street, Administrative District, City 12345",
        "role": UserRole.ADMIN,
    },
    {
        "name": "Normal User Account for Testing",
        "email": "user@example.com",
        "password": "User123!",
        "address": "456 User Avenue, Residential Area, City 67890",
        "role": UserRole.USER,
    },
    {
        "name": "Store Owner Business Account",
        "email": "owner@example.com",
        "password": "Owner123!",
        "address": "789 Business Boulevard, Commercial Zone, City 54321",
        "role": UserRole.STORE_OWNER,
    },
]

DEMO_EMAILS = [account["email"] for account in DEMO_ACCOUNTS]


def clear_demo_accounts(db: Session) -> int:
    """
    Remove (de verdade) as contas de demonstração.

    Avaliações feitas por elas e as lojas delas saem junto,
    senão as chaves estrangeiras impedem a remoção.
    """
    users = db.query(models.User).filter(models.User.email.in_(DEMO_EMAILS)).all()
    if not users:
        return 0

    user_ids = [u.id for u in users]
    store_ids = [
        store_id for (store_id,) in
        db.query(models.Store.id).filter(models.Store.owner_id.in_(user_ids)).all()
    ]

    rating_filter = models.Rating.user_id.in_(user_ids)
    if store_ids:
        rating_filter = or_(rating_filter, models.Rating.store_id.in_(store_ids))
    db.query(models.Rating).filter(rating_filter).delete(synchronize_session=False)

    if store_ids:
        db.query(models.Store).filter(models.Store.id.in_(store_ids)).delete(synchronize_session=False)

    db.query(models.User).filter(models.User.id.in_(user_ids)).delete(synchronize_session=False)
    db.commit()

    logger.info(f"🧹 {len(user_ids)} conta(s) de demonstração removida(s)")
    return len(user_ids)


def seed_demo_accounts(db: Session) -> list[models.User]:
    """Recria as três contas de demonstração"""
    clear_demo_accounts(db)

    users = []
    for account in DEMO_ACCOUNTS:
        user = models.User(
            name=account["name"],
            email=account["email"],
            hashed_password=get_password_hash(account["password"]),
            address=account["address"],
            role=account["role"],
            is_active=True,
        )
        db.add(user)
        users.append(user)

    db.commit()
    for user in users:
        logger.info(f"✨ Conta {user.role.value} criada: {user.email}")
    return users


def update_user_role(db: Session, email: str, role: UserRole) -> models.User | None:
    user = db.query(models.User).filter(models.User.email == email.strip().lower()).first()
    if not user:
        return None

    user.role = role
    db.commit()
    logger.info(f"🔁 Perfil de {user.email} alterado para {role.value}")
    return user
