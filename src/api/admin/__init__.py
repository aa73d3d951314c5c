from fastapi import APIRouter, Depends

from src.api.admin.routes.dashboard import router as dashboard_router
from src.api.admin.routes.users import router as users_router
from src.api.admin.routes.stores import router as stores_router
from src.core.dependencies import require_admin

router = APIRouter(
    prefix="/admin",
    dependencies=[Depends(require_admin)],
)

router.include_router(dashboard_router)
router.include_router(users_router)
router.include_router(stores_router)
