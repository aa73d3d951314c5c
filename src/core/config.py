# src/core/config.py
"""
Configuração - StoreRating API
==============================

Lida uma única vez, na importação, das variáveis de ambiente ou do
arquivo .env na raiz do projeto. O resto do código usa só `config`.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

ENVIRONMENTS = ("development", "test", "production")
MIN_SECRET_KEY_LENGTH = 32

# Front-end local, liberado só em desenvolvimento
LOCAL_FRONTEND_ORIGINS = ("http://localhost:3000", "http://localhost:5173")


class Config(BaseSettings):
    """Todas as chaves aceitas pelo .env"""

    # ═══════════════════════════════════════════════════════════
    # 🌍 AMBIENTE / LOGS
    # ═══════════════════════════════════════════════════════════

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ═══════════════════════════════════════════════════════════
    # 🗄️ POSTGRES / REDIS
    # ═══════════════════════════════════════════════════════════

    DATABASE_URL: str
    # Vazio: logout sem revogação e rate limit em memória
    REDIS_URL: Optional[str] = None

    # ═══════════════════════════════════════════════════════════
    # 🔐 AUTENTICAÇÃO
    # ═══════════════════════════════════════════════════════════

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    RATE_LIMIT_ENABLED: bool = True

    # ═══════════════════════════════════════════════════════════
    # 🌐 HTTP
    # ═══════════════════════════════════════════════════════════

    ALLOWED_ORIGINS: str = "http://localhost:3000"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @field_validator("ENVIRONMENT")
    @classmethod
    def lower_environment(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_test(self) -> bool:
        return self.ENVIRONMENT == "test"

    def get_allowed_origins_list(self) -> list[str]:
        """ALLOWED_ORIGINS separado por vírgula (+ front local em desenvolvimento), sem repetições"""
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if self.is_development:
            origins += LOCAL_FRONTEND_ORIGINS
        return list(dict.fromkeys(origins))

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


config = Config()


def validate_config(settings: Config = config) -> None:
    """Falha cedo, na importação, com todas as chaves inválidas de uma vez"""
    problems = []

    if settings.ENVIRONMENT not in ENVIRONMENTS:
        problems.append(f"ENVIRONMENT inválido: {settings.ENVIRONMENT!r} (use {', '.join(ENVIRONMENTS)})")

    if len(settings.SECRET_KEY) < MIN_SECRET_KEY_LENGTH:
        problems.append(f"SECRET_KEY precisa de pelo menos {MIN_SECRET_KEY_LENGTH} caracteres")

    if settings.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
        problems.append("ACCESS_TOKEN_EXPIRE_MINUTES precisa ser positivo")

    if problems:
        raise ValueError("❌ Configuração inválida:\n" + "\n".join(f"  • {p}" for p in problems))


validate_config()
