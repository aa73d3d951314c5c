from fastapi import APIRouter, Depends

from src.api.store_owner.routes.dashboard import router as dashboard_router
from src.api.store_owner.routes.ratings import router as ratings_router
from src.core.dependencies import require_store_owner

router = APIRouter(
    prefix="/store-owner",
    dependencies=[Depends(require_store_owner)],
)

router.include_router(dashboard_router)
router.include_router(ratings_router)
