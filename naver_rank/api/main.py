"""FastAPI application entry point."""
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from naver_rank.api.routes import blog, health, history, keyword, place, shopping
from naver_rank.api.schemas.base import ErrorResponse, InsufficientPointsResponse
from naver_rank.application.interfaces.candidate_source import UnsupportedSourceError
from naver_rank.application.interfaces.keyword_insights import KeywordInsightsUnavailableError
from naver_rank.application.use_cases.billing import InsufficientPointsError
from naver_rank.config import settings
from naver_rank.infrastructure.browser.session import BrowserSession
from naver_rank.infrastructure.database import connection
from naver_rank.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def _envelope(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("rank_service_starting", service=settings.service_name)
    app.state.browser_session = BrowserSession(
        headless=settings.browser_headless,
        executable_path=settings.browser_executable_path,
    )
    yield
    logger.info("rank_service_stopping")
    await app.state.browser_session.close()
    if connection.engine is not None:
        await connection.engine.dispose()


async def _log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    logger.info("http_request", method=request.method, path=request.url.path)
    return await call_next(request)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request."
    logger.info("request_validation_failed", path=request.url.path, error=message)
    return _envelope(status.HTTP_400_BAD_REQUEST, message, message)


async def _insufficient_points(request: Request, exc: InsufficientPointsError) -> JSONResponse:
    body = InsufficientPointsResponse(
        message=str(exc),
        required_points=exc.required,
        current_points=exc.current,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True),
    )


async def _unsupported_source(request: Request, exc: UnsupportedSourceError) -> JSONResponse:
    return _envelope(status.HTTP_400_BAD_REQUEST, str(exc), str(exc))


async def _insights_unavailable(
    request: Request, exc: KeywordInsightsUnavailableError
) -> JSONResponse:
    return _envelope(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Keyword statistics are unavailable.", str(exc)
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _envelope(exc.status_code, "The requested endpoint does not exist.")
    return _envelope(exc.status_code, str(exc.detail))


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_request_error", path=request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "An internal server error occurred.", str(exc)
    )


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Naver Rank Service",
        description="Rank lookups for Naver place, blog and shopping search results.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(_log_requests)

    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(InsufficientPointsError, _insufficient_points)  # type: ignore[arg-type]
    app.add_exception_handler(UnsupportedSourceError, _unsupported_source)  # type: ignore[arg-type]
    app.add_exception_handler(
        KeywordInsightsUnavailableError, _insights_unavailable  # type: ignore[arg-type]
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)

    app.include_router(health.router)
    app.include_router(place.router)
    app.include_router(blog.router)
    app.include_router(shopping.router)
    app.include_router(keyword.router)
    app.include_router(history.router)

    return app


app = create_app()
