"""
Fixtures compartilhadas
=======================
Banco SQLite em memória, fábricas de usuários/lojas/avaliações e TestClient
"""

import os

# Precisa vir antes de qualquer import de src.* (config é lido no import)
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-more-than-32-characters"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.core import models
from src.core.database import get_db
from src.core.security.security import create_access_token, get_password_hash
from src.core.utils.enums import UserRole
from src.main import app

DEFAULT_PASSWORD = "Secret#123"


# ═══════════════════════════════════════════════════════════
# BANCO
# ═══════════════════════════════════════════════════════════

def _enable_sqlite_fks(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def engine():
    """Banco em memória compartilhado por todas as sessões do teste"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_fks)
    models.Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient com get_db apontando para o banco do teste"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ═══════════════════════════════════════════════════════════
# FÁBRICAS
# ═══════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def password_hash():
    """bcrypt é lento: um hash para todos os usuários de teste"""
    return get_password_hash(DEFAULT_PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    counter = {"n": 0}

    def _make(name=None, email=None, role=UserRole.USER, is_active=True, address="1 Test Street"):
        counter["n"] += 1
        user = models.User(
            name=name or f"Test User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            hashed_password=password_hash,
            address=address,
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_store(db):
    counter = {"n": 0}

    def _make(owner, name=None, email=None, is_active=True, address="10 Market Road"):
        counter["n"] += 1
        store = models.Store(
            name=name or f"Store {counter['n']}",
            email=email or f"store{counter['n']}@example.com",
            address=address,
            owner_id=owner.id,
            is_active=is_active,
        )
        db.add(store)
        db.commit()
        return store

    return _make


@pytest.fixture
def make_rating(db):
    def _make(user, store, rating, review=""):
        obj = models.Rating(user_id=user.id, store_id=store.id, rating=rating, review=review)
        db.add(obj)
        db.commit()
        return obj

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(name="Platform Admin", email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def owner(make_user):
    return make_user(name="Jane Doe", email="jane@example.com", role=UserRole.STORE_OWNER)


@pytest.fixture
def normal_user(make_user):
    return make_user(name="Regular Customer", email="customer@example.com")
