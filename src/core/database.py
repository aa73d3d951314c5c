"""
Camada de Banco
===============

Engine único por processo, sessão por requisição (`GetDBDep`) e
health check usado por /api/health.
"""

import logging
import time
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, NullPool

from src.core.config import config

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════
# ENGINE
# ═══════════════════════════════════════════════════════════

POOL_SETTINGS = {
    "production": {"pool_size": 20, "max_overflow": 20, "pool_timeout": 10, "pool_recycle": 1800},
    "development": {"pool_size": 5, "max_overflow": 10, "pool_timeout": 30, "pool_recycle": 3600},
}


def get_engine_config(database_url: str = config.DATABASE_URL) -> dict:
    """Argumentos do create_engine para o ambiente atual"""
    if database_url.startswith("sqlite"):
        return {"poolclass": NullPool, "connect_args": {"check_same_thread": False}}

    if config.is_test:
        return {"poolclass": NullPool}

    pool = POOL_SETTINGS["production" if config.is_production else "development"]
    engine_config = {
        "poolclass": QueuePool,
        "pool_pre_ping": True,
        "echo": config.DEBUG and not config.is_production,
        **pool,
    }
    if config.is_production:
        engine_config["connect_args"] = {
            "connect_timeout": 10,
            "application_name": "store_rating_api",
        }
    return engine_config


engine = create_engine(config.DATABASE_URL, **get_engine_config())


@event.listens_for(engine, "connect")
def on_connect(dbapi_conn, connection_record):
    if engine.dialect.name == "sqlite":
        # SQLite só respeita FKs com o pragma ligado
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    logger.debug("🔵 Conexão aberta")


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False
)


# ═══════════════════════════════════════════════════════════
# SESSÃO POR REQUISIÇÃO
# ═══════════════════════════════════════════════════════════

def get_db():
    """Sessão da requisição; qualquer exceção desfaz a transação aberta"""
    session = SessionLocal()
    try:
        yield session
    except Exception:
        logger.exception("❌ Transação desfeita após erro")
        session.rollback()
        raise
    finally:
        session.close()


# Mesma sessão fora do FastAPI (scripts)
get_db_manager = contextmanager(get_db)

GetDBDep = Annotated[Session, Depends(get_db)]


# ═══════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════

def check_database_health(db: Session) -> dict:
    """SELECT 1 com a latência em ms; detalhes do erro só com DEBUG"""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1")).scalar()
    except Exception as e:
        logger.error(f"❌ Banco indisponível: {e}")
        return {"status": "unhealthy", "error": str(e) if config.DEBUG else None}

    return {
        "status": "healthy",
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }
