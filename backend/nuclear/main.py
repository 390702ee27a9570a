"""
FastAPI application entrypoint.
Run with: uvicorn nuclear.main:app --reload --port 8000 (from backend/)

All routes live under /api:
  - Users: GET/POST /api/users, GET/PUT/DELETE /api/users/{id}, ...
  - Blocks, folders, quizzes, questions, topics, fill-in-the-blanks, points-updates: same shape
  - Health: GET /api/health (no auth)

Error bodies are always {"error": str, "details"?: [{"field", "message"}]}.
Data-access errors carry an ErrorKind; nuclear.errors.STATUS_BY_KIND decides the status.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nuclear.config import settings
from nuclear.errors import DataAccessError, ErrorKind, status_for
from nuclear.ratelimit import FixedWindowRateLimiter, MemoryRateLimitStore
from nuclear.api.users import router as users_router
from nuclear.api.blocks import router as blocks_router
from nuclear.api.folders import router as folders_router
from nuclear.api.quizzes import router as quizzes_router
from nuclear.api.questions import router as questions_router
from nuclear.api.topics import router as topics_router
from nuclear.api.fill_in_the_blanks import router as fill_in_the_blanks_router
from nuclear.api.points_updates import router as points_updates_router
from nuclear.api.health import router as health_router

logger = logging.getLogger("nuclear.main")

app = FastAPI(
    title="Nuclear API",
    description="Content and learning platform: blocks, folders, quizzes, topics, exercises and points.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.rate_limiter = FixedWindowRateLimiter(
    MemoryRateLimitStore(),
    limit=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)

app.include_router(health_router)
app.include_router(users_router)
app.include_router(blocks_router)
app.include_router(folders_router)
app.include_router(quizzes_router)
app.include_router(questions_router)
app.include_router(topics_router)
app.include_router(fill_in_the_blanks_router)
app.include_router(points_updates_router)


def _field_name(loc) -> str:
    # loc looks like ("body", "email") or ("query", "page")
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [{"field": _field_name(e.get("loc", ())), "message": e.get("msg", "invalid value")} for e in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request: Request, exc: DataAccessError):
    code = status_for(exc.kind)
    if exc.kind is ErrorKind.OPERATION:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc, exc_info=exc.__cause__ or exc)
        return JSONResponse(status_code=code, content={"error": "Internal server error"})
    if exc.kind is ErrorKind.VALIDATION:
        return JSONResponse(status_code=code, content={"error": "Validation failed", "details": exc.details or [{"field": "body", "message": exc.message}]})
    content = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail if isinstance(exc.detail, str) else "Request failed"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"})


@app.on_event("startup")
def startup():
    """Configure logging, create SQLite tables. Fail fast if production uses the default SECRET_KEY."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if settings.is_production and settings.secret_key.strip() == "change-me-in-production":
        logger.critical("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
        raise RuntimeError("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
    from nuclear.database import init_db
    init_db()
    logger.info(
        "Nuclear API started (env=%s, rate limit %s/%ss)",
        settings.env, settings.rate_limit_requests, settings.rate_limit_window_seconds,
    )


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def root():
    """Root: minimal page pointing at the API docs and health check."""
    return """
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>Nuclear API</title></head>
    <body style="font-family: system-ui; max-width: 600px; margin: 2rem auto; padding: 1rem;">
    <h1>Nuclear API</h1>
    <p>This is the <strong>API server</strong>. It returns JSON under <code>/api</code>.</p>
    <ul>
    <li><a href="/docs">OpenAPI docs (Swagger)</a></li>
    <li><a href="/redoc">ReDoc</a></li>
    <li>Health: <a href="/api/health">/api/health</a></li>
    </ul>
    </body>
    </html>
    """
