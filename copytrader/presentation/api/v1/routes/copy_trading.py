"""Copy Trading API routes - start, stop and inspect copy-trade sessions."""

from fastapi import APIRouter, HTTPException, status

from copytrader.application.copytrading.commands import (
    StartCopyTradingCommand,
    StopCopyTradingCommand,
)
from copytrader.application.copytrading.dtos import CopyTradeSessionDTO
from copytrader.application.copytrading.queries import (
    GetCopyTradingQuery,
    ListCopyTradingQuery,
)
from copytrader.config import get_logger
from copytrader.domain.copytrading import (
    InvalidMasterAddressError,
    SessionAlreadyActiveError,
    SessionNotFoundError,
    WalletNotFoundError,
)
from copytrader.domain.shared import BusinessRuleViolation
from copytrader.presentation.api.dependencies import (
    CurrentFollowerId,
    GetCopyTradingHandlerDep,
    ListCopyTradingHandlerDep,
    StartCopyTradingHandlerDep,
    StopCopyTradingHandlerDep,
)
from copytrader.presentation.api.v1.schemas import (
    CopyTradeSessionListResponse,
    CopyTradeSessionResponse,
    ErrorResponse,
    StartCopyTradingRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/copy-trading", tags=["Copy Trading"])


def _to_response(dto: CopyTradeSessionDTO) -> CopyTradeSessionResponse:
    return CopyTradeSessionResponse(
        id=dto.id,
        follower_id=dto.follower_id,
        master_address=dto.master_address,
        active=dto.active,
        last_seen_version=dto.last_seen_version,
        runner_state=dto.runner_state,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )


def _not_found(e: SessionNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "SessionNotFound", "message": e.message},
    )


def _internal_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "InternalServerError", "message": message},
    )


# ============================================================================
# START COPY TRADING
# ============================================================================


@router.post(
    "/sessions",
    response_model=CopyTradeSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start copy trading",
    description="""
    Start mirroring swaps of a master account.

    **Flow**:
    1. Validate master address
    2. Follower must have a default wallet
    3. Create session (one active session per follower/master pair)
    4. Start polling runner (baseline = current latest master transaction)

    **Returns**:
    - 201: Session created and runner started
    - 400: No wallet / copying own wallet
    - 401: Unauthorized
    - 409: Session for this master already active
    - 422: Invalid master address
    """,
    responses={
        201: {"model": CopyTradeSessionResponse, "description": "Session started"},
        400: {"model": ErrorResponse, "description": "Business rule violation"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        409: {"model": ErrorResponse, "description": "Session already active"},
        422: {"model": ErrorResponse, "description": "Invalid master address"},
    },
)
async def start_copy_trading(
    request: StartCopyTradingRequest,
    follower_id: CurrentFollowerId,
    handler: StartCopyTradingHandlerDep,
) -> CopyTradeSessionResponse:
    """Start copy trading endpoint.

    Args:
        request: StartCopyTradingRequest (Pydantic validation).
        follower_id: Current follower ID (from Authorization header).
        handler: StartCopyTradingHandler (injected dependency).
    """
    logger.info(
        "api.start_copy_trading.started",
        follower_id=follower_id,
        master_address=request.master_address,
    )

    try:
        dto = await handler.handle(
            StartCopyTradingCommand(
                follower_id=follower_id, master_address=request.master_address
            )
        )
    except SessionAlreadyActiveError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "SessionAlreadyActive",
                "message": e.message,
                "session_id": e.session_id,
            },
        )
    except InvalidMasterAddressError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "InvalidMasterAddress", "message": e.message},
        )
    except WalletNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "WalletNotFound", "message": e.message},
        )
    except BusinessRuleViolation as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "BusinessRuleViolation", "message": e.message},
        )
    except Exception as e:
        logger.error(
            "api.start_copy_trading.error", follower_id=follower_id, error=str(e), exc_info=True
        )
        raise _internal_error("Failed to start copy trading. Please try again later.")

    logger.info("api.start_copy_trading.success", follower_id=follower_id, session_id=dto.id)
    return _to_response(dto)


# ============================================================================
# LIST / GET SESSIONS
# ============================================================================


@router.get(
    "/sessions",
    response_model=CopyTradeSessionListResponse,
    summary="List active copy-trade sessions",
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}},
)
async def list_copy_trading(
    follower_id: CurrentFollowerId,
    handler: ListCopyTradingHandlerDep,
) -> CopyTradeSessionListResponse:
    dtos = await handler.handle(ListCopyTradingQuery(follower_id=follower_id))
    sessions = [_to_response(dto) for dto in dtos]
    return CopyTradeSessionListResponse(sessions=sessions, total=len(sessions))


@router.get(
    "/sessions/{session_id}",
    response_model=CopyTradeSessionResponse,
    summary="Get copy-trade session",
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def get_copy_trading(
    session_id: int,
    follower_id: CurrentFollowerId,
    handler: GetCopyTradingHandlerDep,
) -> CopyTradeSessionResponse:
    try:
        dto = await handler.handle(
            GetCopyTradingQuery(follower_id=follower_id, session_id=session_id)
        )
    except SessionNotFoundError as e:
        raise _not_found(e)
    return _to_response(dto)


# ============================================================================
# STOP COPY TRADING
# ============================================================================


async def _stop(
    session_id: int, follower_id: int, handler: StopCopyTradingHandlerDep
) -> CopyTradeSessionResponse:
    logger.info("api.stop_copy_trading.started", follower_id=follower_id, session_id=session_id)
    try:
        dto = await handler.handle(
            StopCopyTradingCommand(follower_id=follower_id, session_id=session_id)
        )
    except SessionNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(
            "api.stop_copy_trading.error", session_id=session_id, error=str(e), exc_info=True
        )
        raise _internal_error("Failed to stop copy trading. Please try again later.")
    return _to_response(dto)


@router.post(
    "/sessions/{session_id}/stop",
    response_model=CopyTradeSessionResponse,
    summary="Stop copy trading",
    description="""
    Stop a session. Runner observes the stop within one polling interval;
    already queued intents are discarded. Stopping a stopped session is a no-op.
    """,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def stop_copy_trading(
    session_id: int,
    follower_id: CurrentFollowerId,
    handler: StopCopyTradingHandlerDep,
) -> CopyTradeSessionResponse:
    return await _stop(session_id, follower_id, handler)


@router.delete(
    "/sessions/{session_id}",
    response_model=CopyTradeSessionResponse,
    summary="Stop copy trading (alias)",
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def delete_copy_trading(
    session_id: int,
    follower_id: CurrentFollowerId,
    handler: StopCopyTradingHandlerDep,
) -> CopyTradeSessionResponse:
    return await _stop(session_id, follower_id, handler)
