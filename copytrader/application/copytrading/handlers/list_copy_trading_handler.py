"""Query handlers для copy trading sessions."""

from copytrader.application.copytrading.dtos import CopyTradeSessionDTO
from copytrader.application.copytrading.queries import GetCopyTradingQuery, ListCopyTradingQuery
from copytrader.application.copytrading.services import SessionRegistry, SessionStore
from copytrader.application.shared import QueryHandler
from copytrader.domain.copytrading import CopyTradeSession, SessionNotFoundError


def _to_dto(session: CopyTradeSession, registry: SessionRegistry) -> CopyTradeSessionDTO:
    runner = registry.get_by_session_id(session.id)
    return CopyTradeSessionDTO.from_entity(session, runner.state if runner else None)


class ListCopyTradingHandler(QueryHandler[ListCopyTradingQuery, list[CopyTradeSessionDTO]]):
    def __init__(self, store: SessionStore, registry: SessionRegistry) -> None:
        self._store = store
        self._registry = registry

    async def handle(self, query: ListCopyTradingQuery) -> list[CopyTradeSessionDTO]:
        sessions = await self._store.list_active_sessions(query.follower_id)
        return [_to_dto(s, self._registry) for s in sessions]


class GetCopyTradingHandler(QueryHandler[GetCopyTradingQuery, CopyTradeSessionDTO]):
    def __init__(self, store: SessionStore, registry: SessionRegistry) -> None:
        self._store = store
        self._registry = registry

    async def handle(self, query: GetCopyTradingQuery) -> CopyTradeSessionDTO:
        session = await self._store.get_session(query.session_id)
        if session is None or session.follower_id != query.follower_id:
            raise SessionNotFoundError(query.session_id, follower_id=query.follower_id)
        return _to_dto(session, self._registry)
