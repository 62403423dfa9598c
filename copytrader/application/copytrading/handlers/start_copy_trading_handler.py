"""StartCopyTradingHandler - creates a session and starts its runner."""

from typing import Callable

from copytrader.application.copytrading.commands import StartCopyTradingCommand
from copytrader.application.copytrading.dtos import CopyTradeSessionDTO
from copytrader.application.copytrading.services import SessionRegistry, SessionStore
from copytrader.application.shared import CommandHandler, UnitOfWork
from copytrader.config import get_logger
from copytrader.domain.copytrading import (
    SessionAlreadyActiveError,
    WalletNotFoundError,
    normalize_account_address,
)
from copytrader.domain.shared import BusinessRuleViolation

logger = get_logger(__name__)


class StartCopyTradingHandler(CommandHandler[StartCopyTradingCommand, CopyTradeSessionDTO]):
    """Handler для StartCopyTradingCommand.

    Flow:
    1. Validate master address
    2. Follower must have a default wallet
    3. Create session (unique per active pair)
    4. Start runner via registry

    При duplicate переконуємось що існуюча session має runner
    (наприклад після рестарту) і кидаємо SessionAlreadyActiveError.

    Raises:
        InvalidMasterAddressError: Bad address.
        WalletNotFoundError: No default wallet.
        SessionAlreadyActiveError: Pair already active.
    """

    def __init__(
        self,
        store: SessionStore,
        registry: SessionRegistry,
        uow_factory: Callable[[], UnitOfWork],
    ) -> None:
        self._store = store
        self._registry = registry
        self._uow_factory = uow_factory

    async def handle(self, command: StartCopyTradingCommand) -> CopyTradeSessionDTO:
        master_address = normalize_account_address(command.master_address)

        async with self._uow_factory() as uow:
            wallet = await uow.wallets.get_default_wallet(command.follower_id)
        if wallet is None:
            raise WalletNotFoundError(command.follower_id)
        if wallet.address == master_address:
            raise BusinessRuleViolation(
                "Cannot copy trade your own wallet", master_address=master_address
            )

        try:
            session = await self._store.create_session(command.follower_id, master_address)
        except SessionAlreadyActiveError as e:
            existing = await self._store.get_session(e.session_id)
            if existing is not None and existing.active:
                await self._registry.start(existing)
            raise

        runner = await self._registry.start(session)
        logger.info(
            "start_copy_trading.completed",
            session_id=session.id,
            follower_id=command.follower_id,
            master_address=master_address,
        )
        return CopyTradeSessionDTO.from_entity(session, runner.state)
