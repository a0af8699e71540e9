"""FastAPI application for the CloudCoffee manager backend."""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import gemini, persistence
from .config import settings
from .services.exceptions import AppError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed [{exc.code}]: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation Error on {request.url.path}: {exc.errors()}")
        return error_response(422, "Dados da requisição inválidos.", "VALIDATION_ERROR")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return error_response(exc.status_code, str(exc.detail), code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(500, "Erro interno do servidor.", "INTERNAL_ERROR")


def register_frontend(app: FastAPI, dist: Path):
    """Serve the built SPA: real files as-is, any other non-API path gets index.html."""
    root = dist.resolve()
    index = root / "index.html"

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return error_response(404, "Not Found", "NOT_FOUND")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)


def create_app(testing: bool = False, frontend_dist: Optional[Path] = None) -> FastAPI:
    """Build the application with routers, middleware and error handlers."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="CloudCoffee Manager API", version="1.0.0", debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.max_body_bytes:
            return error_response(413, "Requisição muito grande.", "PAYLOAD_TOO_LARGE")
        return await call_next(request)

    register_exception_handlers(app)

    @app.get("/api/health", tags=["system"])
    async def health():
        return {"status": "ok"}

    app.include_router(gemini.router)
    app.include_router(persistence.router)

    dist = frontend_dist or (None if testing else settings.frontend_dist_path)
    if dist is not None and (dist / "index.html").is_file():
        register_frontend(app, dist)
        logger.info(f"Serving frontend from {dist}")

    return app


app = create_app()
