"""FastAPI application - Aptos Copy Trader.

Clean Architecture:
- Domain: CopyTradeSession, SwapDecoder, chain ports
- Application: SessionStore, SessionRunner, SessionRegistry, TradeExecutor, handlers
- Infrastructure: SQLAlchemy, Aptos REST (httpx), Liquidswap, Telegram (aiogram)
- Presentation: FastAPI control API

Runners живуть в цьому процесі: lifespan стартує їх (resume) і
зупиняє при shutdown.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from starlette.middleware.base import BaseHTTPMiddleware

from copytrader import __version__
from copytrader.application.copytrading.services import (
    SessionRegistry,
    SessionRunner,
    SessionStore,
    TradeExecutor,
)
from copytrader.config import (
    Settings,
    bind_request_context,
    clear_request_context,
    get_logger,
    get_settings,
    setup_logging,
)
from copytrader.domain.copytrading import CopyTradeSession, DecimalsCache, SwapDecoder
from copytrader.infrastructure.aptos import (
    AptosRestClient,
    AptosTransactionSubmitter,
    LiquidswapRouter,
    WalletCredentialProvider,
)
from copytrader.infrastructure.encryption import EncryptionManager
from copytrader.infrastructure.messaging import EventBus, TelegramNotifier
from copytrader.infrastructure.persistence.sqlalchemy import Base, create_unit_of_work
from copytrader.presentation.api import dependencies
from copytrader.presentation.api.v1.routes import copy_trading_router

settings = get_settings()

setup_logging()
logger = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Async engine; SQLite (dev/tests) не підтримує pool параметри."""
    if settings.database_url.startswith("sqlite"):
        return create_async_engine(settings.database_url, echo=settings.db_echo)
    return create_async_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


# ============================================================================
# LIFESPAN EVENTS (startup/shutdown)
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager для FastAPI.

    Startup:
    - Database engine + session factory
    - Aptos clients, Liquidswap router, submitter, executor
    - Event bus + Telegram notifier
    - SessionRegistry + resume active sessions

    Shutdown:
    - Stop runners (sessions залишаються active в БД)
    - Close HTTP clients, bot session, DB connections
    """
    logger.info("application.startup.started")

    # ===== STARTUP =====
    engine = create_engine(settings)

    # Create tables (for development - в production використовуємо Alembic)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("application.database.tables_created")

    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    def uow_factory():
        return create_unit_of_work(session_factory)

    store = SessionStore(uow_factory)

    # Chain access
    read_client = AptosRestClient(settings.aptos_node_url)
    submit_client = AptosRestClient(settings.aptos_submit_node_url)
    router = LiquidswapRouter(read_client)
    submitter = AptosTransactionSubmitter(submit_client)
    executor = TradeExecutor(read_client, router, submitter)
    decoder = SwapDecoder(DecimalsCache(read_client), settings.decoder_min_out_factor)
    credentials = WalletCredentialProvider(uow_factory, EncryptionManager(settings.secret_key))

    # Notifications
    event_bus = EventBus()
    notifier: TelegramNotifier | None = None
    if settings.telegram_enabled:
        notifier = TelegramNotifier.from_token(settings.telegram_bot_token)
        notifier.register(event_bus)
        logger.info("application.telegram.enabled")

    def runner_factory(session: CopyTradeSession) -> SessionRunner:
        return SessionRunner(
            session,
            store=store,
            chain_reader=read_client,
            decoder=decoder,
            executor=executor,
            credentials=credentials,
            event_bus=event_bus,
            poll_interval=settings.copy_poll_interval_seconds,
        )

    registry = SessionRegistry(runner_factory)

    if settings.resume_sessions_on_startup:
        resumed = await registry.resume_active(store)
        logger.info("application.sessions.resumed", count=resumed)

    dependencies.init_dependencies(uow_factory=uow_factory, store=store, registry=registry)
    app.state.registry = registry

    logger.info("application.startup.completed")

    yield  # Application running

    # ===== SHUTDOWN =====
    logger.info("application.shutdown.started")

    await registry.shutdown()
    await read_client.close()
    await submit_client.close()
    if notifier is not None:
        await notifier.close()
    dependencies.reset_dependencies()
    await engine.dispose()

    logger.info("application.shutdown.completed")


# ============================================================================
# CREATE FASTAPI APPLICATION
# ============================================================================


app = FastAPI(
    title=settings.app_name,
    description="""
    Copy trading engine для Aptos: спостерігає за master акаунтами і
    повторює їх swaps через Liquidswap від імені follower-ів.

    ## Features
    - One polling runner per active (follower, master) pair
    - Exactly-once dispatch per master transaction (persisted watermark)
    - Telegram notifications (detected / executed / failed)
    """,
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Adds request correlation ID to all log messages."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        bind_request_context(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


# Order matters - last added is executed first
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR HANDLERS
# ============================================================================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic validation errors → 422 з details."""
    logger.warning("api.validation_error", path=request.url.path, errors=exc.errors())

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "details": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                for err in exc.errors()
            ],
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api.unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# ============================================================================
# ROUTES
# ============================================================================


@app.get("/health", tags=["Health"], summary="Health check")
async def health_check(request: Request) -> dict:
    """Health check з кількістю live runners."""
    registry: SessionRegistry | None = getattr(request.app.state, "registry", None)
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "network": settings.aptos_network,
        "active_runners": len(registry) if registry is not None else 0,
    }


@app.get("/health/live", tags=["Health"], summary="Liveness probe")
async def liveness_check() -> dict:
    return {"status": "alive"}


app.include_router(copy_trading_router, prefix="/api/v1")


@app.get("/", tags=["Root"], summary="API root")
async def root() -> dict:
    return {
        "message": "Aptos Copy Trader",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    # Run with: python -m copytrader.main
    uvicorn.run(
        "copytrader.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
