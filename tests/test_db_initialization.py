"""
Testes das Contas de Demonstração, Health Check e Correlation ID
"""

from src.core import models
from src.core.db_initialization import (
    DEMO_ACCOUNTS,
    DEMO_EMAILS,
    clear_demo_accounts,
    seed_demo_accounts,
    update_user_role,
)
from src.core.security.security import verify_password
from src.core.utils.enums import UserRole


class TestDemoAccounts:

    def test_seed_creates_one_account_per_role(self, db):
        users = seed_demo_accounts(db)

        assert {u.role for u in users} == set(UserRole)
        admin = next(u for u in users if u.role == UserRole.ADMIN)
        assert verify_password("Admin123!", admin.hashed_password)

    def test_seed_is_repeatable(self, db):
        seed_demo_accounts(db)
        seed_demo_accounts(db)

        assert db.query(models.User).filter(models.User.email.in_(DEMO_EMAILS)).count() == len(DEMO_ACCOUNTS)

    def test_clear_removes_stores_and_ratings(self, db, make_store, make_rating, normal_user):
        users = {u.role: u for u in seed_demo_accounts(db)}
        store = make_store(users[UserRole.STORE_OWNER])
        make_rating(normal_user, store, 4)
        make_rating(users[UserRole.USER], store, 5)

        removed = clear_demo_accounts(db)

        db.expire_all()
        assert removed == 3
        assert db.query(models.Store).count() == 0
        assert db.query(models.Rating).count() == 0
        # Usuários fora da lista continuam
        assert db.get(models.User, normal_user.id) is not None

    def test_clear_without_accounts(self, db):
        assert clear_demo_accounts(db) == 0


def test_update_user_role(db, normal_user):
    updated = update_user_role(db, "  Customer@Example.com ", UserRole.STORE_OWNER)

    assert updated.role == UserRole.STORE_OWNER
    assert update_user_role(db, "ghost@example.com", UserRole.ADMIN) is None


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["services"]["database"]["status"] == "healthy"


def test_root(client):
    assert client.get("/").json()["name"] == "StoreRating API"


def test_correlation_id_echoed(client):
    response = client.get("/", headers={"x-correlation-id": "req-123"})

    assert response.headers["x-correlation-id"] == "req-123"


def test_correlation_id_generated(client):
    assert client.get("/").headers["x-correlation-id"].startswith("sr-")
