# src/main.py
"""
Aplicação Principal - StoreRating API
=====================================

Administradores gerenciam usuários e lojas, proprietários acompanham as
avaliações da própria loja e usuários navegam e avaliam lojas.
"""
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from src.api.admin import router as admin_router
from src.api.app import router as user_router
from src.api.app.routes.auth import router as auth_router
from src.api.store_owner import router as store_owner_router
from src.core import models
from src.core.cache.redis_client import redis_client
from src.core.config import config
from src.core.database import GetDBDep, check_database_health, engine
from src.core.exceptions import AppError
from src.core.middleware.correlation import CorrelationIdFilter, CorrelationIdMiddleware
from src.core.rate_limit.rate_limit import limiter, rate_limit_exceeded_handler

_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.addFilter(CorrelationIdFilter())

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s',
    handlers=[_log_handler]
)
logger = logging.getLogger(__name__)

APP_NAME = "StoreRating API"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerencia ciclo de vida da aplicação"""
    logger.info("=" * 60)
    logger.info(f"🚀 INICIANDO {APP_NAME}")
    logger.info("=" * 60)

    logger.info("📊 Criando tabelas do banco de dados...")
    models.Base.metadata.create_all(bind=engine)

    logger.info(f"🌍 Ambiente: {config.ENVIRONMENT}")
    logger.info(f"🔐 Debug Mode: {config.DEBUG}")

    if redis_client.is_available:
        logger.info("✅ Redis conectado (logout e rate limit compartilhados)")
    else:
        logger.warning("⚠️ Redis não disponível: logout não revoga tokens")

    logger.info("✅ APLICAÇÃO PRONTA!")
    logger.info("=" * 60)

    yield

    logger.info("=" * 60)
    logger.info("🛑 DESLIGANDO APLICAÇÃO")
    logger.info("=" * 60)


app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    docs_url="/docs" if not config.is_production else None,
    redoc_url="/redoc" if not config.is_production else None,
    lifespan=lifespan
)

app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ═══════════════════════════════════════════════════════════
# RATE LIMITING
# ═══════════════════════════════════════════════════════════

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# ═══════════════════════════════════════════════════════════
# TRATAMENTO DE ERROS GLOBAL
# ═══════════════════════════════════════════════════════════

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Exceções de domínio -> status e corpo padronizados"""
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # 404 de rota inexistente, 405 etc. com o mesmo corpo da API
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def _error_field(loc: tuple) -> str:
    # ("body", "password") -> "password"; ("query", "page") -> "page"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) if parts else str(loc[0]) if loc else "request"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Erros do pydantic no mesmo formato de ValidationError"""
    errors = [
        {
            "field": _error_field(tuple(err.get("loc", ()))),
            "message": str(err.get("msg", "Invalid value")).removeprefix("Value error, "),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation errors", "errors": errors},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Handler para erros internos"""
    logger.error(
        f"❌ Erro interno em {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    content = {"success": False, "message": "Server error"}
    if config.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ═══════════════════════════════════════════════════════════
# ROTAS DA API
# ═══════════════════════════════════════════════════════════

app.include_router(auth_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(store_owner_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "operational",
        "environment": config.ENVIRONMENT,
    }


@app.get("/api/health")
def health_check(db: GetDBDep):
    """Health check para monitoramento"""
    database = check_database_health(db)
    healthy = database["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "services": {
                "database": database,
                "redis": "healthy" if redis_client.is_available else "not_configured",
            },
        },
    )
