# src/core/security/token_blacklist.py

import logging

from redis.exceptions import RedisError

from src.core.cache.redis_client import redis_client

logger = logging.getLogger(__name__)


class TokenBlacklist:
    """
    Blacklist para revogação de tokens JWT (logout).

    Sem Redis configurado a revogação é ignorada e o token
    continua válido até expirar.
    """

    @staticmethod
    def _key(jti: str) -> str:
        return f"blacklist:{jti}"

    @staticmethod
    def add_token(jti: str, ttl_seconds: int) -> bool:
        """
        Adiciona token à blacklist com TTL automático.

        Args:
            jti: ID único do token (JWT ID)
            ttl_seconds: Tempo até expiração natural do token
        """
        client = redis_client.raw
        if client is None:
            logger.warning("⚠️ Redis indisponível: token não foi revogado")
            return False

        try:
            client.setex(TokenBlacklist._key(jti), ttl_seconds, "revoked")
            return True
        except RedisError as e:
            logger.error(f"❌ Erro ao revogar token: {e}")
            return False

    @staticmethod
    def is_blacklisted(jti: str) -> bool:
        """Verifica se token está na blacklist"""
        client = redis_client.raw
        if client is None:
            return False

        try:
            return client.exists(TokenBlacklist._key(jti)) > 0
        except RedisError as e:
            logger.error(f"❌ Erro ao consultar blacklist: {e}")
            return False
