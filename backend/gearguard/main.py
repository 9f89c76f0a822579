# backend/gearguard/main.py
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi import HTTPException as FastAPIHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.api import UTF8JSONResponse, fail, ok
from .core.config import Settings, get_settings
from .core.db import Database
from .core.gate import SessionGateMiddleware
from .core.security import PasswordHasher, SessionTokens

# --- Router imports ---
from .routers.auth import router as auth_router
from .routers.categories import router as categories_router
from .routers.directory import router as directory_router
from .routers.equipment import router as equipment_router
from .routers.maintenance import router as maintenance_router
from .routers.pages import router as pages_router
from .routers.reports import router as reports_router

logger = logging.getLogger("gearguard")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_PATHS = ("/health",)


def _validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        # drop the "body"/"query"/"path" source prefix
        loc = [str(p) for p in err.get("loc", ())[1:]] or [str(p) for p in err.get("loc", ())]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)

    db = Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s v%s", settings.PROJECT_NAME, settings.VERSION)
        if settings.AUTO_CREATE_TABLES:
            db.create_all()
        if not db.ping():
            logger.warning("Database is not reachable; continuing in degraded mode")
        yield
        logger.info("Shutting down %s", settings.PROJECT_NAME)
        db.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        default_response_class=UTF8JSONResponse,
        lifespan=lifespan,
    )

    # service objects live on app.state; dependencies read them from the request
    app.state.settings = settings
    app.state.db = db
    app.state.hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.tokens = SessionTokens(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
        max_age_seconds=settings.SESSION_MAX_AGE_SECONDS,
    )

    # -----------------------------
    # Global error envelope
    # -----------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_to_envelope(request: Request, exc: StarletteHTTPException):
        return fail(str(exc.detail) if exc.detail else exc.__class__.__name__,
                    status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(FastAPIHTTPException)
    async def fastapi_http_exception_to_envelope(request: Request, exc: FastAPIHTTPException):
        return fail(str(exc.detail) if exc.detail else exc.__class__.__name__,
                    status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_to_envelope(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        logger.info("Validation failed on %s %s: %s", request.method, request.url.path, errors)
        return fail("Validation failed", status_code=400, meta={"errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_to_envelope(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return fail("Internal server error", status_code=500)

    # -----------------------------
    # Middleware (last added runs first)
    # -----------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path in QUIET_PATHS:
            return await call_next(request)
        started = time.perf_counter()
        logger.info(">> %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("[ERROR] %s %s - %s (%.3fs)", request.method, request.url.path, e,
                         time.perf_counter() - started)
            raise
        logger.info("<< %s %s - %s (%.3fs)", request.method, request.url.path,
                    response.status_code, time.perf_counter() - started)
        return response

    app.add_middleware(SessionGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- Health ----
    @app.get("/health", tags=["system"])
    def health():
        if not app.state.db.ping():
            return fail("Database unavailable", status_code=503)
        return ok({"service": settings.PROJECT_NAME, "version": settings.VERSION, "db": "ok"})

    # =========================
    # Router registration
    # =========================
    app.include_router(auth_router)
    app.include_router(categories_router)
    app.include_router(equipment_router)
    app.include_router(maintenance_router)
    app.include_router(directory_router)
    app.include_router(reports_router)
    app.include_router(pages_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gearguard.main:app", host="0.0.0.0", port=8000, reload=False)
