"""CodeCraft API - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from codecraft.core.config import get_settings
from codecraft.core.cors import get_cors_headers
from codecraft.db.base import Base
from codecraft.db.session import engine
from codecraft.routers import admin, ai, api, auth, execute
from codecraft.routers import codecraft as codecraft_routes

settings = get_settings()

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Progress, auth and AI tutoring backend for the CodeCraft learning app",
    debug=settings.debug,
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_and_errors(request: Request, call_next):
    """Answer preflights, add CORS headers to every response and turn
    uncaught exceptions into a JSON 500."""
    cors_headers = get_cors_headers(request.headers.get("origin"), settings)

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers)

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = JSONResponse({"error": str(exc) or "Internal server error"}, status_code=500)

    response.headers.update(cors_headers)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # unknown paths and known paths with the wrong method both answer 404
    if exc.status_code == 405 or (exc.status_code == 404 and exc.detail == "Not Found"):
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse({"error": message}, status_code=400)


app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(codecraft_routes.router)
app.include_router(execute.router)
app.include_router(ai.router)
app.include_router(api.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
