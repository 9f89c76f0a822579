# backend/gearguard/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from ..domain.constants import Role
from ..schemas.user import SessionUser

logger = logging.getLogger(__name__)

CLAIMS = (
    "name", "email", "role", "departmentId", "departmentName",
    "isTechnician", "technicianId", "maintenanceTeamId",
)


# ---- Password hashing ----
class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self._ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plain: str) -> str:
        return self._ctx.hash(plain)

    def verify(self, plain: str, hashed: Optional[str]) -> bool:
        # passlib compares digests in constant time
        if not hashed:
            return False
        try:
            return self._ctx.verify(plain, hashed)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False

    def dummy_verify(self) -> None:
        """Spend the same time as a real check when there is no hash to compare."""
        self._ctx.dummy_verify()


# ---- Signed session tokens ----
class SessionTokens:
    def __init__(self, secret: str, algorithm: str = "HS256", max_age_seconds: int = 30 * 24 * 60 * 60):
        self._secret = secret
        self._algorithm = algorithm
        self.max_age_seconds = max_age_seconds

    def issue(self, user: SessionUser, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(tz=timezone.utc)
        data = user.model_dump()
        payload = {k: data[k] for k in CLAIMS}
        payload.update(
            sub=str(user.id),
            iat=int(now.timestamp()),
            exp=now + timedelta(seconds=self.max_age_seconds),
        )
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: Optional[str]) -> Optional[SessionUser]:
        if not token:
            return None
        try:
            data = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return SessionUser(id=int(data["sub"]), **{k: data.get(k) for k in CLAIMS})
        except (JWTError, KeyError, ValueError, ValidationError) as e:
            logger.info("Rejected session token: %s", e.__class__.__name__)
            return None


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_tokens(request: Request) -> SessionTokens:
    return request.app.state.tokens


# ---- Locate the token: Authorization header first, then the session cookie ----
def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Parses the 'Authorization' header leniently:
      - extra spaces:      "Bearer   <JWT>"
      - doubled scheme:    "Bearer Bearer <JWT>"
      - quoted value:      Authorization: "Bearer <JWT>"
    """
    auth = request.headers.get("Authorization")
    if not auth:
        return None

    auth = str(auth).strip().strip('"').strip("'")
    scheme, param = get_authorization_scheme_param(auth)
    if not scheme or scheme.lower() != "bearer":
        return None

    token = (param or "").strip()
    if token.lower().startswith("bearer "):
        token = token.split(None, 1)[1].strip()
    # a JWT never contains spaces
    token = token.replace(" ", "")
    return token or None


def session_token_from(request: Request) -> Optional[str]:
    token = _extract_bearer_token(request)
    if token:
        return token
    return request.cookies.get(request.app.state.settings.SESSION_COOKIE_NAME)


def get_optional_session(request: Request, tokens: SessionTokens = Depends(get_tokens)) -> Optional[SessionUser]:
    return tokens.decode(session_token_from(request))


def require_session(current: Optional[SessionUser] = Depends(get_optional_session)) -> SessionUser:
    if current is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current


# ---- Role check dependency ----
def require_roles(*roles: Role):
    allowed = {Role(r).value for r in roles}

    def _dep(current: SessionUser = Depends(require_session)) -> SessionUser:
        if current.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: requires role {' or '.join(sorted(allowed))}",
            )
        return current
    return _dep
