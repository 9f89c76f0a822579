import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ..core.api import ok
from ..core.db import get_db
from ..core.security import (
    PasswordHasher, SessionTokens, get_hasher, get_optional_session, get_tokens, require_session
)
from ..domain.errors import AuthError
from ..models import Employee
from ..schemas.user import LoginIn, SessionUser, SignupIn
from ..services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

LOGIN_FAILED = "Invalid email or password"


def _serialize_employee(e: Employee) -> dict:
    return {
        "id": e.EmployeeID,
        "name": e.Name,
        "email": e.Email,
        "role": e.Role,
        "departmentId": e.DepartmentID,
    }


def _login(db: Session, hasher: PasswordHasher, email: str, password: str) -> SessionUser:
    try:
        return auth_service.authenticate(db, hasher, email=email, password=password)
    except AuthError as e:
        # the reason stays in the server log; the caller only learns that it failed
        logger.info("Login failed for %r: %s", email, e.reason)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=LOGIN_FAILED,
            headers={"WWW-Authenticate": "Bearer"},
        )


# ---- Endpoints ----
@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, db: Session = Depends(get_db), hasher: PasswordHasher = Depends(get_hasher)):
    employee = auth_service.signup(
        db, hasher,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        department_id=payload.departmentId,
    )
    return ok({"message": "User created successfully", "user": _serialize_employee(employee)},
              status_code=status.HTTP_201_CREATED)


@router.post("/login")
def login(
    payload: LoginIn,
    request: Request,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: SessionTokens = Depends(get_tokens),
):
    user = _login(db, hasher, payload.email, payload.password)
    token = tokens.issue(user)

    resp = ok({"access_token": token, "token_type": "bearer", "user": user.model_dump()})
    settings = request.app.state.settings
    resp.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=tokens.max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )
    logger.info("Employee %s logged in", user.id)
    return resp


# OAuth2 password flow for bearer clients (username = email); no cookie
@router.post("/token")
def token(
    form: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: SessionTokens = Depends(get_tokens),
):
    user = _login(db, hasher, form.username, form.password)
    return {"access_token": tokens.issue(user), "token_type": "bearer"}


@router.post("/logout")
def logout(request: Request):
    resp = ok({"message": "Signed out"})
    resp.delete_cookie(request.app.state.settings.SESSION_COOKIE_NAME, path="/")
    return resp


@router.get("/session")
def session(current: Optional[SessionUser] = Depends(get_optional_session)):
    return ok(current.model_dump() if current else None)


@router.get("/me")
def me(current: SessionUser = Depends(require_session)):
    return ok(current.model_dump())
