from fastapi import APIRouter, Depends

from src.api.app.routes.stores import router as stores_router
from src.api.app.routes.ratings import router as ratings_router
from src.api.app.routes.profile import router as profile_router
from src.core.dependencies import require_user

router = APIRouter(
    prefix="/user",
    dependencies=[Depends(require_user)],
)

# Inclua os routers filhos no router pai
router.include_router(stores_router)
router.include_router(ratings_router)
router.include_router(profile_router)
