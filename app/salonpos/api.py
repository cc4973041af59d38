from fastapi import APIRouter

from app.salonpos.core.config import settings
from app.salonpos.routers.checkout import router as checkout_router
from app.salonpos.routers.health import router as health_router
from app.salonpos.routers.metrics import router as metrics_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(checkout_router, prefix="/salonpos/checkout", tags=["checkout"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
