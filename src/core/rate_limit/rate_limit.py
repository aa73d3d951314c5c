# src/core/rate_limit/rate_limit.py

"""
Rate Limiting
=============
Limites por IP nas rotas de credenciais (login, cadastro, troca de senha).
O contador fica no Redis quando REDIS_URL existe, senão em memória
(por processo).
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from src.core.config import config

logger = logging.getLogger(__name__)

RATE_LIMITS = {
    "login": "5/minute",
    "register": "3/minute",
    "password_change": "5/hour",
}

RETRY_AFTER_SECONDS = 60


def client_ip(request: Request) -> str:
    # Atrás de proxy vale o primeiro IP do X-Forwarded-For
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else "unknown"


limiter = Limiter(
    key_func=client_ip,
    storage_uri=config.REDIS_URL or "memory://",
    enabled=config.RATE_LIMIT_ENABLED,
    # Storage fora do ar não derruba o login
    swallow_errors=True,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"🚨 Rate limit ({exc.detail}) em {request.url.path} para {client_ip(request)}")
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": "Too many requests, please try again later."},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
