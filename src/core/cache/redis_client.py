# src/core/cache/redis_client.py

"""
Redis opcional
==============

Conecta na primeira vez que alguém pede o cliente. Sem REDIS_URL, ou com o
Redis fora do ar nessa primeira tentativa, `raw` fica None e quem usa
(blacklist de tokens, health check) segue sem ele.
"""

import logging
from typing import Optional

import redis
from redis.exceptions import RedisError

from src.core.config import config

logger = logging.getLogger(__name__)


class RedisClient:

    def __init__(self, url: Optional[str]):
        self._url = url
        self._client: Optional[redis.Redis] = None
        self._attempted = False

    def _connect(self) -> None:
        self._attempted = True

        if not self._url:
            logger.info("ℹ️ REDIS_URL vazio: logout sem revogação de tokens")
            return

        try:
            client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                max_connections=10,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            client.ping()
        except RedisError as e:
            logger.error(f"❌ Redis indisponível: {e}")
            return

        self._client = client
        # Sem usuário/senha no log
        logger.info(f"✅ Redis conectado: {self._url.rsplit('@', 1)[-1]}")

    @property
    def raw(self) -> Optional[redis.Redis]:
        if not self._attempted:
            self._connect()
        return self._client

    @property
    def is_available(self) -> bool:
        return self.raw is not None


redis_client = RedisClient(config.REDIS_URL)
