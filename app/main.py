from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
from contextlib import asynccontextmanager

from core.config import settings
from core.logger import setup_logging, get_logger
from core.database import init_db, close_db
from services.cache import CacheService
from app.middleware import page_guard_middleware
from app.pages import page_router
from app.api.v1.endpoints.auth import auth_router
from app.api.v1.endpoints.users import user_router
from app.api.v1.endpoints.projects import project_router
from app.api.v1.endpoints.tasks import task_router
from app.api.v1.endpoints.subtasks import subtask_router
from app.api.v1.endpoints.comments import comment_router
from app.api.v1.endpoints.dashboard import dashboard_router
from app.api.v1.endpoints.rate_limit import rate_limit_router

setup_logging()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Project Management API")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")

    await init_db()
    logger.info("✅ Database initialized")

    yield

    logger.info(" Shutting down Project Management API")
    await CacheService.close()
    await close_db()


app = FastAPI(
    title=settings.project_name,
    description="Role-based project management: projects, tasks, subtasks and comments",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,  # Disable docs in production
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

for router in (auth_router, user_router, project_router, task_router, subtask_router,
               comment_router, dashboard_router, rate_limit_router):
    app.include_router(router, prefix=settings.api_v1_prefix)
app.include_router(page_router)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request")
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return error_response(status.HTTP_400_BAD_REQUEST, f"{location}: {message}" if location else message)


app.middleware("http")(page_guard_middleware)

@app.middleware("http")
async def log_errors_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        request_id = getattr(request.state, "request_id", "unknown")

        logger.exception(
            f"Unhandled exception: {str(e)}",
            extra={"request_id": request_id},
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal server error",
                "detail": str(e) if settings.debug else "An unexpected error occurred",
                "request_id": request_id
            }
        )

@app.middleware("http")
async def add_request_id_middleware(request: Request, call_next):

    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        f"Incoming request: {request.method} {request.url.path}",
        extra={"request_id": request_id, "method": request.method, "path": request.url.path}
    )

    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time

    # Add request ID to response headers
    response.headers["X-Request-ID"] = request_id

    logger.info(
        f"Request completed: {request.method} {request.url.path} | "
        f"Status: {response.status_code} | Duration: {duration:.3f}s",
        extra={"request_id": request_id, "method": request.method, "path": request.url.path,
               "status_code": response.status_code, "duration_ms": round(duration * 1000, 1)}
    )

    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/api", include_in_schema=False)
async def api_info():
    logger.debug("API info endpoint accessed")
    return {
        "success": True,
        "message": settings.project_name,
        "version": "1.0.0",
        "api": settings.api_v1_prefix,
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    logger.debug("Health check endpoint accessed")
    return {
        "status": "healthy",
        "environment": settings.environment,
        "timestamp": time.time()
    }
