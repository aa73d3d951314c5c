# Em: src/api/admin/routes/dashboard.py

from fastapi import APIRouter

from src.api.schemas.analytics.dashboard import AdminDashboardSchema
from src.api.services.store_service import StoreService
from src.api.services.user_service import UserService
from src.core import models
from src.core.database import GetDBDep

router = APIRouter(prefix="/dashboard", tags=["Admin - Dashboard"])


@router.get("", response_model=AdminDashboardSchema)
def get_dashboard_summary(db: GetDBDep):
    """Totais da plataforma: usuários ativos, lojas ativas e avaliações"""
    return AdminDashboardSchema(
        total_users=UserService(db).count_active(),
        total_stores=StoreService(db).count_active(),
        total_ratings=db.query(models.Rating).count(),
    )
