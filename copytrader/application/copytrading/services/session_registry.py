"""SessionRegistry - live runners keyed by (follower_id, master_address).

Single-writer: всі зміни під asyncio.Lock, тому для однієї пари ніколи
не буде двох активних pollers.
"""

import asyncio
from typing import Callable

from copytrader.config import get_logger
from copytrader.domain.copytrading import CopyTradeSession

from .session_runner import SessionRunner
from .session_store import SessionStore

logger = get_logger(__name__)

RunnerFactory = Callable[[CopyTradeSession], SessionRunner]


class SessionRegistry:
    """Starts, tracks and stops session runners.

    Example:
        >>> registry = SessionRegistry(runner_factory)
        >>> runner = await registry.start(session)
        >>> await registry.start(session) is runner
        True
        >>> registry.stop(session.id)
    """

    def __init__(self, runner_factory: RunnerFactory, *, replace_timeout: float = 30.0) -> None:
        self._runner_factory = runner_factory
        self._replace_timeout = replace_timeout
        self._runners: dict[tuple[int, str], SessionRunner] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._runners)

    def __contains__(self, key: tuple[int, str]) -> bool:
        return key in self._runners

    def active_keys(self) -> list[tuple[int, str]]:
        return list(self._runners)

    def get(self, follower_id: int, master_address: str) -> SessionRunner | None:
        return self._runners.get((follower_id, master_address.lower()))

    def get_by_session_id(self, session_id: int) -> SessionRunner | None:
        for runner in self._runners.values():
            if runner.session_id == session_id:
                return runner
        return None

    async def start(self, session: CopyTradeSession) -> SessionRunner:
        """Insert-if-absent: returns the live runner for the pair if any."""
        key = session.pair_key
        async with self._lock:
            existing = self._runners.get(key)
            if existing is not None and not existing.done:
                if existing.session_id == session.id:
                    return existing
                # Runner старої (вже зупиненої) session для тієї ж пари:
                # новий стартує лише після того, як старий повністю завершився
                await self._retire(existing)

            runner = self._runner_factory(session)
            self._runners[key] = runner
            task = runner.start()
            task.add_done_callback(lambda _t, k=key, r=runner: self._forget(k, r))

        logger.info(
            "session_registry.runner_started",
            session_id=session.id,
            follower_id=session.follower_id,
            master_address=session.master_address,
        )
        return runner

    async def _retire(self, runner: SessionRunner) -> None:
        runner.request_stop()
        try:
            await runner.wait_stopped(self._replace_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "session_registry.replace_timeout",
                session_id=runner.session_id,
                timeout=self._replace_timeout,
            )
            if runner.task is not None:
                runner.task.cancel()
                await asyncio.gather(runner.task, return_exceptions=True)

    def _forget(self, key: tuple[int, str], runner: SessionRunner) -> None:
        if self._runners.get(key) is runner:
            del self._runners[key]

    def stop(self, session_id: int) -> bool:
        """Wake the runner of a session whose store flag is already false.

        Returns:
            False якщо live runner для session немає.
        """
        runner = self.get_by_session_id(session_id)
        if runner is None:
            return False
        runner.request_stop()
        return True

    async def resume_active(self, store: SessionStore) -> int:
        """Start runners for all active stored sessions (process startup)."""
        sessions = await store.list_all_active_sessions()
        for session in sessions:
            await self.start(session)
        logger.info("session_registry.resumed", count=len(sessions))
        return len(sessions)

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Stop every runner without touching stored sessions."""
        async with self._lock:
            runners = list(self._runners.values())

        for runner in runners:
            runner.request_stop(shutdown=True)

        tasks = [r.task for r in runners if r.task is not None]
        if not tasks:
            return

        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("session_registry.shutdown", stopped=len(tasks), cancelled=len(pending))
