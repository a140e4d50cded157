from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
from slowapi.errors import RateLimitExceeded

from unidirectory.core.config import Settings, settings as default_settings
from unidirectory.core.database import Database
from unidirectory.core.exceptions import InternalError, UniDirectoryError, error_body
from unidirectory.core.logging_config import logger
from unidirectory.core.middleware import RequestContextMiddleware
from unidirectory.core.rate_limiter import limiter, rate_limit_exceeded_handler
from unidirectory.core.security import TokenIssuer
from unidirectory.api.router import api_router


def validate_critical_config(settings: Settings) -> None:
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.JWT_SECRET_KEY:
        errors.append("JWT_SECRET_KEY is not set")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    if settings.EXPOSE_ERROR_DETAILS and settings.ENVIRONMENT == "production":
        logger.warning("[Startup] EXPOSE_ERROR_DETAILS is on - 500 responses include raw error messages")

    logger.info("[Startup] Critical configuration validated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    settings: Settings = app.state.settings
    database: Database = app.state.db

    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("=" * 60)

    validate_critical_config(settings)

    await database.create_tables()
    logger.info("[Startup] Database tables ready")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await database.close()


async def app_error_handler(request: Request, exc: UniDirectoryError) -> JSONResponse:
    """Render any UniDirectoryError as {statusCode, error}"""
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc, expose_details=settings.EXPOSE_ERROR_DETAILS),
        headers={"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that escaped an endpoint still gets the standard 500 body"""
    logger.log_error_with_context(exc, f"{request.method} {request.url.path}")
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=500,
        content=error_body(InternalError(str(exc)), expose_details=settings.EXPOSE_ERROR_DETAILS),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are validation failures (400)"""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "statusCode": 400,
            "error": "Invalid request",
            "details": [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        },
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    token_issuer: Optional[TokenIssuer] = None,
) -> FastAPI:
    """
    Build the application.

    The database client and token issuer are constructed here and attached
    to app.state; request handlers reach them only through dependencies.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description="University directory search and favorites API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False  # Prevent 307 redirects that break CORS
    )

    app.state.settings = settings
    app.state.db = database or Database(settings)
    app.state.token_issuer = token_issuer or TokenIssuer.from_settings(settings)

    # Add rate limiter state and exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(UniDirectoryError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Add middleware (order matters - last added runs first)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/health"
        }

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

