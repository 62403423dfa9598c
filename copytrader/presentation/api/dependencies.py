"""Dependency injection for FastAPI.

Provides dependencies для API routes:
- SessionStore / SessionRegistry (process singletons)
- Unit of Work factory
- Command / query handlers
- Follower authentication
"""

from typing import Annotated, Callable

from fastapi import Depends, Header, HTTPException, status

from copytrader.application.copytrading.handlers import (
    GetCopyTradingHandler,
    ListCopyTradingHandler,
    StartCopyTradingHandler,
    StopCopyTradingHandler,
)
from copytrader.application.copytrading.services import SessionRegistry, SessionStore
from copytrader.application.shared import UnitOfWork

# ============================================================================
# GLOBAL DEPENDENCIES (initialized в main.py lifespan)
# ============================================================================

_uow_factory: Callable[[], UnitOfWork] | None = None
_store: SessionStore | None = None
_registry: SessionRegistry | None = None


def init_dependencies(
    uow_factory: Callable[[], UnitOfWork],
    store: SessionStore,
    registry: SessionRegistry,
) -> None:
    """Initialize global dependencies.

    Note:
        Викликається при FastAPI startup (в main.py).
    """
    global _uow_factory, _store, _registry
    _uow_factory = uow_factory
    _store = store
    _registry = registry


def reset_dependencies() -> None:
    global _uow_factory, _store, _registry
    _uow_factory = None
    _store = None
    _registry = None


def _not_initialized() -> RuntimeError:
    return RuntimeError("Dependencies not initialized. Call init_dependencies() first.")


# ============================================================================
# AUTHENTICATION
# ============================================================================


async def get_current_follower_id(
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """Follower (Telegram user) id from the Authorization header.

    Формат: "Bearer user_id=123". Сервіс працює за Telegram ботом, який
    вже автентифікував користувача.

    Raises:
        HTTPException: 401 if header missing or malformed.
    """
    if authorization is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        if not authorization.startswith("Bearer "):
            raise ValueError("Invalid authorization format")

        token = authorization[len("Bearer "):]
        if "user_id=" not in token:
            raise ValueError("Missing user_id")

        follower_id = int(token.split("user_id=", 1)[1])
        if follower_id <= 0:
            raise ValueError("Invalid user_id")
        return follower_id

    except (ValueError, IndexError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authorization token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# SERVICES
# ============================================================================


async def get_session_store() -> SessionStore:
    if _store is None:
        raise _not_initialized()
    return _store


async def get_session_registry() -> SessionRegistry:
    if _registry is None:
        raise _not_initialized()
    return _registry


async def get_uow_factory() -> Callable[[], UnitOfWork]:
    if _uow_factory is None:
        raise _not_initialized()
    return _uow_factory


StoreDep = Annotated[SessionStore, Depends(get_session_store)]
RegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]


# ============================================================================
# HANDLERS
# ============================================================================


async def get_start_copy_trading_handler(
    store: StoreDep,
    registry: RegistryDep,
    uow_factory: Annotated[Callable[[], UnitOfWork], Depends(get_uow_factory)],
) -> StartCopyTradingHandler:
    return StartCopyTradingHandler(store=store, registry=registry, uow_factory=uow_factory)


async def get_stop_copy_trading_handler(
    store: StoreDep, registry: RegistryDep
) -> StopCopyTradingHandler:
    return StopCopyTradingHandler(store=store, registry=registry)


async def get_list_copy_trading_handler(
    store: StoreDep, registry: RegistryDep
) -> ListCopyTradingHandler:
    return ListCopyTradingHandler(store=store, registry=registry)


async def get_get_copy_trading_handler(
    store: StoreDep, registry: RegistryDep
) -> GetCopyTradingHandler:
    return GetCopyTradingHandler(store=store, registry=registry)


# ============================================================================
# TYPE ALIASES (для cleaner route signatures)
# ============================================================================

CurrentFollowerId = Annotated[int, Depends(get_current_follower_id)]

StartCopyTradingHandlerDep = Annotated[
    StartCopyTradingHandler, Depends(get_start_copy_trading_handler)
]
StopCopyTradingHandlerDep = Annotated[
    StopCopyTradingHandler, Depends(get_stop_copy_trading_handler)
]
ListCopyTradingHandlerDep = Annotated[
    ListCopyTradingHandler, Depends(get_list_copy_trading_handler)
]
GetCopyTradingHandlerDep = Annotated[
    GetCopyTradingHandler, Depends(get_get_copy_trading_handler)
]
