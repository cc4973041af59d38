from fastapi import FastAPI

from app.salonpos.api import api_router
from app.salonpos.core.config import settings
from app.salonpos.core.errors import setup_exception_handlers
from app.salonpos.core.logging import configure_logging
from app.salonpos.middleware.observability import ObservabilityMiddleware
from app.salonpos.middleware.tenant import TenantContextMiddleware
from app.salonpos.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
