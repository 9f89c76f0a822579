# backend/gearguard/core/gate.py
"""
Session gate for browser pages.

Every page request passes through ``SessionGateMiddleware``. Signed-in
users are kept away from the login/signup pages and anonymous users are
sent to ``/login`` with the page they wanted as ``callbackUrl``. The gate
only knows "signed in or not"; role checks live in the API handlers.
"""
import re
from typing import Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

LOGIN_PATH = "/login"
HOME_PATH = "/"
PUBLIC_PREFIXES = ("/login", "/signup")

# never gated: the JSON API answers 401/403 itself
EXEMPT_PREFIXES = ("/api/", "/static/")
EXEMPT_PATHS = ("/api", "/favicon.ico", "/health", "/docs", "/redoc", "/openapi.json")
_ASSET_RE = re.compile(r".*\.(?:svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE)


def is_exempt(path: str) -> bool:
    return (
        path in EXEMPT_PATHS
        or path.startswith(EXEMPT_PREFIXES)
        or path.startswith("/docs/")
        or bool(_ASSET_RE.match(path))
    )


def is_public(path: str) -> bool:
    return path.startswith(PUBLIC_PREFIXES)


def gate_redirect(path: str, authenticated: bool) -> Optional[str]:
    """Where to send the caller instead, or ``None`` to let the request through."""
    if is_exempt(path):
        return None
    public = is_public(path)
    if authenticated and public:
        return HOME_PATH
    if not authenticated and not public:
        return f"{LOGIN_PATH}?{urlencode({'callbackUrl': path})}"
    return None


class SessionGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if is_exempt(path):
            return await call_next(request)

        state = request.app.state
        token = request.cookies.get(state.settings.SESSION_COOKIE_NAME)
        authenticated = state.tokens.decode(token) is not None

        target = gate_redirect(path, authenticated)
        if target is not None:
            return RedirectResponse(url=target, status_code=307)
        return await call_next(request)
