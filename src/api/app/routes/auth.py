# src/api/app/routes/auth.py

import logging

from fastapi import APIRouter
from starlette.requests import Request

from src.api.schemas.auth.user import (
    ChangePasswordData,
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserSchema,
)
from src.api.schemas.rating.rating import MessageResponse
from src.api.services.user_service import UserService
from src.core import models
from src.core.database import GetDBDep
from src.core.dependencies import GetCurrentUserDep, GetTokenPayloadDep
from src.core.rate_limit.rate_limit import RATE_LIMITS, limiter
from src.core.security.security import create_access_token, token_ttl_seconds
from src.core.security.token_blacklist import TokenBlacklist

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _issue_token(user: models.User) -> TokenResponse:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return TokenResponse(token=token, user=UserSchema.model_validate(user))


@router.post("/register", response_model=TokenResponse, status_code=201)
@limiter.limit(RATE_LIMITS["register"])
async def register(request: Request, user_data: UserCreate, db: GetDBDep):
    """Cadastro público: sempre perfil 'user'"""
    user = UserService(db).register(user_data)
    return _issue_token(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, credentials: LoginRequest, db: GetDBDep):
    user = UserService(db).authenticate(credentials.email, credentials.password)
    logger.info(f"✅ Login: usuário {user.id} ({user.role.value})")
    return _issue_token(user)


@router.get("/me", response_model=UserSchema)
def get_me(current_user: GetCurrentUserDep):
    return current_user


@router.put("/update-password", response_model=MessageResponse)
@limiter.limit(RATE_LIMITS["password_change"])
async def update_password(
        request: Request,
        data: ChangePasswordData,
        db: GetDBDep,
        current_user: GetCurrentUserDep,
):
    UserService(db).change_password(current_user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(payload: GetTokenPayloadDep, current_user: GetCurrentUserDep):
    """Revoga o token atual (blacklist pelo JTI até a expiração natural)"""
    revoked = TokenBlacklist.add_token(payload["jti"], token_ttl_seconds(payload))
    logger.info(f"👋 Logout: usuário {current_user.id} (revogado={revoked})")
    return MessageResponse(message="Logged out successfully")
