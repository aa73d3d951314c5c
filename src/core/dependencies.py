# src/core/dependencies.py

import logging
from typing import Annotated, Optional

from fastapi import Depends

from src.api.services.scope_resolver import resolve_owned_store
from src.core import models
from src.core.database import GetDBDep
from src.core.exceptions import AccessDeniedError, AuthenticationError
from src.core.security.security import verify_access_token, oauth2_scheme
from src.core.utils.enums import UserRole

logger = logging.getLogger(__name__)


def get_token_payload(token: Annotated[Optional[str], Depends(oauth2_scheme)]) -> dict:
    """Payload do token válido (assinatura, expiração e blacklist)"""
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    payload = verify_access_token(token)
    if not payload:
        raise AuthenticationError("Token is not valid.")

    return payload


GetTokenPayloadDep = Annotated[dict, Depends(get_token_payload)]


def get_current_user(db: GetDBDep, payload: GetTokenPayloadDep) -> models.User:
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Token is not valid.")

    user = db.get(models.User, user_id)

    if not user:
        raise AuthenticationError("Token is not valid. User not found.")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated.")

    return user


GetCurrentUserDep = Annotated[models.User, Depends(get_current_user)]


# ═══════════════════════════════════════════════════════════
# PERFIS
# ═══════════════════════════════════════════════════════════

class RequireRoles:
    """
    Dependência de perfil para um router inteiro

    Uso:
    ```python
    router = APIRouter(dependencies=[Depends(RequireRoles(UserRole.ADMIN))])
    ```
    """

    def __init__(self, *roles: UserRole):
        self.roles = set(roles)

    def __call__(self, user: GetCurrentUserDep) -> models.User:
        if user.role not in self.roles:
            logger.warning(f"⛔ Perfil {user.role.value} bloqueado (usuário {user.id})")
            raise AccessDeniedError(
                f"User role {user.role.value} is not authorized to access this route"
            )
        return user


require_admin = RequireRoles(UserRole.ADMIN)
require_user = RequireRoles(UserRole.USER)
require_store_owner = RequireRoles(UserRole.STORE_OWNER)


# ═══════════════════════════════════════════════════════════
# ESCOPO DO PROPRIETÁRIO
# ═══════════════════════════════════════════════════════════

def get_owned_store(
        db: GetDBDep,
        user: Annotated[models.User, Depends(require_store_owner)],
) -> models.Store:
    """Perfil conferido antes; depois a loja ativa do proprietário"""
    return resolve_owned_store(db, user.id)


GetOwnedStoreDep = Annotated[models.Store, Depends(get_owned_store)]
