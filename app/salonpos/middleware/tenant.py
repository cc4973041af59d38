from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.salonpos.core.context import build_request_context
from app.salonpos.core.security import decode_token


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Best-effort request scoping for logs; authorization happens in route dependencies."""

    async def dispatch(self, request: Request, call_next):
        request.state.tenant_id = None
        request.state.user_id = None
        request.state.branch_id = None
        request.state.role = None

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(" ", 1)[1]
            try:
                payload = decode_token(token)
            except JWTError:
                payload = {}
            request.state.tenant_id = payload.get("tenant_id")
            request.state.user_id = payload.get("sub")
            request.state.branch_id = payload.get("branch_id")
            request.state.role = payload.get("role")

        request.state.context = build_request_context(
            user_id=request.state.user_id,
            tenant_id=request.state.tenant_id,
            branch_id=request.state.branch_id,
            role=request.state.role,
            trace_id=getattr(request.state, "trace_id", ""),
        )

        return await call_next(request)
