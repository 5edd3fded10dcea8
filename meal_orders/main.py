"""
FastAPI Application Entry Point

Reunion Meal Orders - collects and lists meal orders for a gathering.

Endpoints:
    - GET /: Health check (plain text)
    - GET /orders: List orders, newest first
    - POST /submit: Store one order

Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from meal_orders.core.config import Settings, get_settings, setup_logging
from meal_orders.database import build_engine, init_db
from meal_orders.exceptions import StorageError
from meal_orders.repository import OrderRepository, UnavailableOrderRepository
from meal_orders.schemas import ErrorResponse, OrderSubmission, OrderSummary, SubmitResponse

setup_logging()
logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.

    The schema bootstrap never aborts startup: a failure is logged and
    recorded as ``app.state.schema_ready = False``.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Port: {settings.port}")
    logger.info("=" * 60)

    if app.state.engine is not None:
        app.state.schema_ready = await init_db(app.state.engine)
    if app.state.schema_ready:
        logger.info("✅ Database initialized")
    else:
        logger.warning("⚠️ Database bootstrap failed, serving anyway")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    if app.state.engine is not None:
        await app.state.engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_repository(request: Request) -> OrderRepository:
    """Repository bound to this application's connection pool."""
    return request.app.state.repository


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", response_class=PlainTextResponse, tags=["Health"])
async def root(request: Request) -> PlainTextResponse:
    """Fixed acknowledgment that the service is up."""
    return PlainTextResponse(request.app.state.settings.health_message)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.get(
    "/orders",
    response_model=list[OrderSummary],
    responses={500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="List Orders",
)
async def list_orders(repository: OrderRepository = Depends(get_repository)):
    """Every order, most recent first."""
    try:
        return await repository.list_all()
    except StorageError as e:
        logger.exception(f"Error fetching orders: {e}")
        return error_response(500, e.message)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Submit Order",
)
async def submit_order(
    submission: Optional[OrderSubmission] = None,
    repository: OrderRepository = Depends(get_repository),
):
    """
    Store one order.

    A missing body is treated as an order with every field absent.
    """
    if submission is None:
        submission = OrderSubmission()

    try:
        await repository.insert(submission)
    except StorageError as e:
        logger.exception(f"Error inserting order: {e}")
        return error_response(500, e.message)

    return SubmitResponse()


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Un-coercible request bodies, in the same envelope as storage errors."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning(f"Rejected request to {request.url.path}: {message}")
    return error_response(422, message or "Invalid request body")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(500, str(exc) or exc.__class__.__name__)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and the connection pool it owns.

    The engine and repository live on ``app.state``; the engine is disposed
    when the lifespan ends. A database URL that cannot be turned into an
    engine is logged and leaves ``app.state.engine`` as None: the app still
    serves, and every storage call answers with a storage error.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Collects and lists meal orders for a gathering.",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    try:
        app.state.engine = build_engine(settings)
        app.state.repository = OrderRepository(app.state.engine)
    except StorageError as e:
        logger.exception(f"Error building database engine: {e}")
        app.state.engine = None
        app.state.repository = UnavailableOrderRepository(e)
    app.state.schema_ready = False

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    app.include_router(router)

    return app


app = create_app()
