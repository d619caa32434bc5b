from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database.connection import MongoGateway
from setlist.errors import INTERNAL_ERROR_MESSAGE
from setlist.routes import router as setlist_router
from setlist.validators import describe_validation_error

# =====================================================
# * Global logging configuration
# =====================================================
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")

PUBLIC_DIR = Path(__file__).resolve().parent / "public"


class ClientFiles(StaticFiles):
    """Browser client assets; non-GET requests reaching it match no route."""

    async def get_response(self, path: str, scope):
        if scope["method"] not in ("GET", "HEAD"):
            raise StarletteHTTPException(status_code=404)
        return await super().get_response(path, scope)


def create_app(gateway: Optional[MongoGateway] = None) -> FastAPI:
    """
    Builds the API plus the static browser client around one gateway.

    The gateway is connected on startup unless the caller already did so, and
    only a connection opened here is closed on shutdown.
    """
    gateway = gateway or MongoGateway()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_connection = not gateway.connected
        if owns_connection:
            gateway.connect()
        logger.info(f"🌍 {settings.PROJECT_NAME} started in '{settings.ENV}' mode.")
        yield
        if owns_connection:
            gateway.disconnect()
        logger.info(f"🛑 {settings.PROJECT_NAME} stopped.")

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    # =====================================================
    # * CORS
    # =====================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =====================================================
    # * Access log, one line per request
    # =====================================================
    access_log = logging.getLogger("access")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_log.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    # =====================================================
    # * Error bodies are always {"message": ...}
    # =====================================================
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            message = INTERNAL_ERROR_MESSAGE
        else:
            message = exc.detail if isinstance(exc.detail, str) else "Not Found"
        return JSONResponse(status_code=exc.status_code, content={"message": message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        err = exc.errors()[0] if exc.errors() else {}
        if err.get("type") == "missing":
            message = "Request body is required."
        else:
            message = describe_validation_error(exc)
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})

    # =====================================================
    # * Routes, then the static client as fallback
    # =====================================================
    app.include_router(setlist_router, tags=["Setlist"])
    app.mount("/", ClientFiles(directory=str(PUBLIC_DIR), html=True), name="public")

    return app


app = create_app()
