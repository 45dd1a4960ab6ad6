"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import customers, health
from .config import settings
from .errors import InputValidationError, TrackerError
from .schemas.customers import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from .services.customers import get_customer_book
    from .services.reminders import ReminderScheduler

    scheduler = None
    try:
        book = get_customer_book()
    except TrackerError as exc:
        logger.error(f"Record store unavailable: {exc.message}")
    else:
        try:
            book.refresh()
        except TrackerError as exc:
            # The UI shows the load error and offers a retry through /customers/refresh.
            logger.error(f"Failed to load data: {exc.message}")
        # Runs against whatever snapshot a later refresh provides.
        scheduler = ReminderScheduler(book)
        scheduler.start()
    app.state.reminder_scheduler = scheduler
    yield
    if scheduler is not None:
        scheduler.stop()


async def handle_tracker_error(request: Request, exc: TrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}: {exc.message}")
    body = ErrorResponse(error=exc.message, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg', 'invalid')}" if location else error.get("msg", "invalid"))
    message = "; ".join(problems) or "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected: ValidationError: {message}")
    body = ErrorResponse(error=message, code=InputValidationError.code)
    return JSONResponse(status_code=InputValidationError.status_code, content=body.model_dump())


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_exception_handler(TrackerError, handle_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(customers.router, prefix=settings.api_prefix)
    return app


app = create_app()
