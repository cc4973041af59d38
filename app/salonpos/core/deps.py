from fastapi import Depends, Request
from jose import JWTError
from pydantic import ValidationError

from app.salonpos.core.config import settings
from app.salonpos.core.context import RequestContext, build_request_context
from app.salonpos.core.error_catalog import AppError, ErrorCatalog
from app.salonpos.core.permissions import has_permission
from app.salonpos.core.security import TokenData, decode_token, oauth2_scheme
from app.salonpos.db.session import get_db
from app.salonpos.services.catalog import SqlCatalogLookup
from app.salonpos.services.checkout import CheckoutService
from app.salonpos.services.invoices import SqlInvoiceFinalizer
from app.salonpos.services.session_store import SqlSessionStore


def get_current_token_data(token: str = Depends(oauth2_scheme)) -> TokenData:
    try:
        payload = decode_token(token)
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def require_request_context(
    request: Request,
    token_data: TokenData = Depends(get_current_token_data),
) -> RequestContext:
    if not token_data.tenant_id:
        raise AppError(ErrorCatalog.TENANT_SCOPE_REQUIRED)
    trace_id = getattr(request.state, "trace_id", "")
    context = build_request_context(
        user_id=token_data.sub,
        tenant_id=token_data.tenant_id,
        branch_id=token_data.branch_id,
        role=token_data.role,
        trace_id=trace_id,
    )
    request.state.context = context
    return context


def require_permission(permission_key: str):
    def dependency(context: RequestContext = Depends(require_request_context)) -> RequestContext:
        if not has_permission(context.role, permission_key):
            raise AppError(ErrorCatalog.PERMISSION_DENIED, details={"permission": permission_key})
        return context

    return dependency


def get_checkout_service(db=Depends(get_db)) -> CheckoutService:
    catalog = SqlCatalogLookup(db)
    return CheckoutService(
        store=SqlSessionStore(db),
        catalog=catalog,
        finalizer=SqlInvoiceFinalizer(db, catalog),
        ttl_seconds=settings.CHECKOUT_SESSION_TTL_SECONDS,
        key_prefix=settings.CHECKOUT_SESSION_KEY_PREFIX,
        payment_tolerance=settings.CHECKOUT_PAYMENT_TOLERANCE,
    )


__all__ = [
    "get_current_token_data",
    "require_request_context",
    "require_permission",
    "get_checkout_service",
]
