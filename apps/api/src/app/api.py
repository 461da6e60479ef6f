from fastapi import APIRouter

from app.modules.admin.router import router as admin_router
from app.modules.auth import router as auth_router
from app.modules.concerns.router import router as concerns_router
from app.modules.email_config.router import router as email_config_router
from app.modules.health.router import router as health_router
from app.modules.reports.router import router as reports_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(concerns_router, prefix="/concerns", tags=["Concerns"])

api_router.include_router(reports_router, prefix="/reports", tags=["Reports"])

api_router.include_router(email_config_router, prefix="/email-config", tags=["Email Configuration"])

api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

api_router.include_router(health_router, prefix="/health", tags=["Health"])
