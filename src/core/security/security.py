# src/core/security/security.py

import logging
import uuid
from datetime import timedelta, datetime, timezone
from typing import Optional

import jwt
from jwt import InvalidTokenError
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer

from src.core.config import config
from src.core.security.token_blacklist import TokenBlacklist

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════
# CONSTANTES DE SEGURANÇA
# ═══════════════════════════════════════════════════════════

SECRET_KEY = config.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ("sub", "exp", "jti", "type")

# auto_error=False: a ausência do token vira AuthenticationError (corpo padrão da API)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ═══════════════════════════════════════════════════════════
# SENHAS
# ═══════════════════════════════════════════════════════════

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ═══════════════════════════════════════════════════════════
# TOKENS
# ═══════════════════════════════════════════════════════════

def create_access_token(
        data: dict,
        expires_delta: timedelta | None = None,
        jti: Optional[str] = None
) -> str:
    """
    JWT de acesso assinado com HS256.

    Args:
        data: claims da aplicação, ex.: {"sub": "42", "role": "user"}
        expires_delta: validade; padrão ACCESS_TOKEN_EXPIRE_MINUTES
        jti: id do token usado pela blacklist; gerado quando omitido
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        **data,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "jti": jti or uuid.uuid4().hex,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> Optional[dict]:
    """Payload do token ou None (assinatura, expiração, claims, tipo e blacklist)"""
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except InvalidTokenError as e:
        logger.warning(f"🔒 Token recusado: {e}")
        return None

    if payload["type"] != ACCESS_TOKEN_TYPE:
        return None

    if TokenBlacklist.is_blacklisted(payload["jti"]):
        logger.warning(f"🔒 Token revogado: {payload['jti'][:8]}...")
        return None

    return payload


def token_ttl_seconds(payload: dict) -> int:
    """Segundos restantes até a expiração natural do token"""
    remaining = int(payload["exp"] - datetime.now(timezone.utc).timestamp())
    return max(remaining, 1)
