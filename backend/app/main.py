from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

import app.models  # noqa: F401  registers every table on Base.metadata
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.exceptions import CampusOpsError, error_response
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler

APP_VERSION = "1.0.0"
MAX_BODY_BYTES = 1024 * 1024
PLACEHOLDER_SECRETS = {"", "CHANGE_ME"}


def config_problems() -> List[str]:
    """Settings the service refuses to boot with"""
    problems = []
    if not settings.DATABASE_URL:
        problems.append("DATABASE_URL is empty")
    for name in ("SECRET_KEY", "JWT_SECRET_KEY"):
        if getattr(settings, name) in PLACEHOLDER_SECRETS:
            problems.append(f"{name} still has its placeholder value")
    if not 0 < settings.LOW_STOCK_RATIO < 1:
        problems.append(f"LOW_STOCK_RATIO must lie strictly between 0 and 1 (got {settings.LOW_STOCK_RATIO})")
    return problems


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT}, API {settings.API_VERSION})")

    problems = config_problems()
    if problems:
        for problem in problems:
            logger.critical(f"[Startup] {problem}")
        raise RuntimeError("Refusing to start: " + "; ".join(problems))
    if not settings.RATE_LIMIT_ENABLED:
        logger.warning("[Startup] rate limiting is disabled")

    # Deployed databases are migrated with alembic; local SQLite runs build tables here
    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await init_db()
        logger.info("[Startup] tables ensured")

    yield

    await close_db()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="Lab component and library inventory, project approval and resource request tracking",
    version=APP_VERSION,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Last added runs first: CORS sees the request before the size check and logging
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=MAX_BODY_BYTES)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(CampusOpsError)
async def campus_ops_error_handler(request: Request, exc: CampusOpsError):
    where = f"{request.method} {request.url.path}"
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=where)
    else:
        logger.info(f"{where} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Pydantic failures on bodies and params become 400 VALIDATION_ERROR"""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    if errors:
        # drop the leading "body"/"query" segment for the summary line
        field = ".".join(errors[0]["loc"][1:]) or "request"
        message = f"{field}: {errors[0]['msg']}"
    else:
        message = "Invalid request"
    payload = {"code": "VALIDATION_ERROR", "message": message, "details": {"errors": errors}}
    return JSONResponse(status_code=400, content={"success": False, "error": payload})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    payload = {
        "code": "INTERNAL_ERROR",
        "message": str(exc) if settings.DEBUG else "An unexpected error occurred",
        "details": {},
    }
    return JSONResponse(status_code=500, content={"success": False, "error": payload})


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": APP_VERSION}


@app.get("/", tags=["Root"])
async def root():
    return {
        "service": settings.APP_NAME,
        "api": f"/api/{settings.API_VERSION}",
        "docs": "/docs",
    }


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


def run():
    """Console entry point (see setup.py)"""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
