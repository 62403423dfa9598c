"""StopCopyTradingHandler - flips the stop flag and wakes the runner."""

from copytrader.application.copytrading.commands import StopCopyTradingCommand
from copytrader.application.copytrading.dtos import CopyTradeSessionDTO
from copytrader.application.copytrading.services import SessionRegistry, SessionStore
from copytrader.application.shared import CommandHandler
from copytrader.config import get_logger
from copytrader.domain.copytrading import SessionNotFoundError

logger = get_logger(__name__)


class StopCopyTradingHandler(CommandHandler[StopCopyTradingCommand, CopyTradeSessionDTO]):
    """Handler для StopCopyTradingCommand.

    Чужа або неіснуюча session → SessionNotFoundError, без будь-яких
    chain calls. Повторний stop вже зупиненої session - no-op.
    """

    def __init__(self, store: SessionStore, registry: SessionRegistry) -> None:
        self._store = store
        self._registry = registry

    async def handle(self, command: StopCopyTradingCommand) -> CopyTradeSessionDTO:
        session = await self._store.get_session(command.session_id)
        if session is None or session.follower_id != command.follower_id:
            raise SessionNotFoundError(command.session_id, follower_id=command.follower_id)

        if session.active:
            await self._store.set_active(session.id, False)
            session.deactivate()

        woke = self._registry.stop(session.id)
        logger.info(
            "stop_copy_trading.completed",
            session_id=session.id,
            follower_id=command.follower_id,
            runner_woken=woke,
        )
        return CopyTradeSessionDTO.from_entity(session)
