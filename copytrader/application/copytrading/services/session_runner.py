"""SessionRunner - one cancellable polling task per active copy-trade session.

State machine:
    STARTING → POLLING → (DISPATCHING ⇄ POLLING) → STOPPED

Кожен tick:
1. Re-read session зі store (stop flag - джерело правди)
2. Fetch latest transaction master-а
3. version <= watermark → нічого
4. Decode → persist watermark → (swap) publish TradeDetected + enqueue

Executions йдуть через окремий worker task з FIFO queue, тому для
однієї session одночасно виконується максимум один swap, а polling
не чекає на execution.
"""

import asyncio
from typing import Any

from copytrader.config import bind_session_context, get_logger
from copytrader.domain.chain import ChainReader, ChainReadError, CredentialProvider
from copytrader.domain.copytrading import (
    CopyTradeSession,
    InvalidCredentialError,
    SessionStartedEvent,
    SessionState,
    SessionStoppedEvent,
    StopReason,
    SwapDecoder,
    SwapIntent,
    TradeDetectedEvent,
    TradeExecutedEvent,
    TradeExecutionError,
    TradeFailedEvent,
    WalletNotFoundError,
)
from copytrader.infrastructure.messaging import EventBus

from .session_store import SessionStore
from .trade_executor import TradeExecutor

logger = get_logger(__name__)

_STOP_SENTINEL: Any = object()

CREDENTIAL_ERRORS = (WalletNotFoundError, InvalidCredentialError)


class SessionRunner:
    """Polls one master account on behalf of one follower.

    Example:
        >>> runner = SessionRunner(session, store=store, chain_reader=reader,
        ...                        decoder=decoder, executor=executor,
        ...                        credentials=provider, event_bus=bus)
        >>> runner.start()
        >>> ...
        >>> runner.request_stop()
        >>> await runner.wait_stopped()
    """

    def __init__(
        self,
        session: CopyTradeSession,
        *,
        store: SessionStore,
        chain_reader: ChainReader,
        decoder: SwapDecoder,
        executor: TradeExecutor,
        credentials: CredentialProvider,
        event_bus: EventBus,
        poll_interval: float = 3.0,
    ) -> None:
        if session.id is None:
            raise ValueError("SessionRunner requires a persisted session")

        self.session_id: int = session.id
        self.follower_id = session.follower_id
        self.master_address = session.master_address

        self._store = store
        self._chain_reader = chain_reader
        self._decoder = decoder
        self._executor = executor
        self._credentials = credentials
        self._event_bus = event_bus
        self._poll_interval = poll_interval

        self._state = SessionState.STARTING
        self._watermark: int | None = session.last_seen_version
        self._credential_checked = False
        self._terminal_error: Exception | None = None
        self._shutdown = False

        self._wakeup = asyncio.Event()
        self._queue: asyncio.Queue[SwapIntent] = asyncio.Queue()
        self._task: asyncio.Task | None = None
        self._worker: asyncio.Task | None = None
        self.stop_reason: StopReason | None = None

    # ==================== lifecycle ====================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def watermark(self) -> int | None:
        return self._watermark

    @property
    def pair_key(self) -> tuple[int, str]:
        return (self.follower_id, self.master_address)

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(
                self._run(), name=f"copy-session-{self.session_id}"
            )
        return self._task

    def request_stop(self, *, shutdown: bool = False) -> None:
        """Wake the runner; the stop itself is observed at the next tick.

        `shutdown=True` зупиняє runner без зміни stored session
        (процес завершується, session відновиться при наступному старті).
        """
        if shutdown:
            self._shutdown = True
        self._wakeup.set()

    async def wait_stopped(self, timeout: float | None = None) -> None:
        if self._task is not None:
            await asyncio.wait_for(asyncio.shield(self._task), timeout)

    async def wait_idle(self) -> None:
        """Wait until every enqueued intent has been processed."""
        await self._queue.join()

    async def _run(self) -> None:
        bind_session_context(self.session_id, self.follower_id, self.master_address)
        logger.info("session_runner.started", poll_interval=self._poll_interval)
        self._worker = asyncio.create_task(
            self._drain_queue(), name=f"copy-session-{self.session_id}-worker"
        )

        try:
            while self._state is not SessionState.STOPPED:
                try:
                    await self.tick()
                except Exception:
                    # Store / unexpected failure: session keeps polling
                    logger.exception("session_runner.tick_failed")
                if self._state is SessionState.STOPPED:
                    break
                await self._sleep()
        except asyncio.CancelledError:
            self._worker.cancel()
            raise

        await self._worker

        logger.info("session_runner.stopped", reason=self.stop_reason)
        if self.stop_reason is not StopReason.SHUTDOWN:
            await self._event_bus.publish(
                SessionStoppedEvent(
                    session_id=self.session_id,
                    follower_id=self.follower_id,
                    master_address=self.master_address,
                    reason=self._stop_detail(),
                    terminal=self._terminal_error is not None,
                )
            )

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=self._poll_interval)
        except asyncio.TimeoutError:
            pass
        self._wakeup.clear()

    def _stop_detail(self) -> str:
        if self._terminal_error is not None:
            return str(getattr(self._terminal_error, "message", self._terminal_error))
        return (self.stop_reason or StopReason.SESSION_INACTIVE).value

    def _enter_stopped(self, reason: StopReason) -> None:
        """Terminal transition: no more dispatches, worker drains and exits."""
        if self._state is SessionState.STOPPED:
            return
        self._state = SessionState.STOPPED
        self.stop_reason = reason
        self._queue.put_nowait(_STOP_SENTINEL)

    async def _stop_terminally(self, reason: StopReason, error: Exception) -> None:
        self._terminal_error = error
        logger.error("session_runner.terminal_error", reason=reason.value, error=str(error))
        try:
            await self._store.set_active(self.session_id, False)
        finally:
            self._enter_stopped(reason)

    # ==================== polling ====================

    async def tick(self) -> None:
        """One polling iteration (also called directly in tests)."""
        if self._state is SessionState.STOPPED:
            return

        if self._shutdown:
            self._enter_stopped(StopReason.SHUTDOWN)
            return

        if self._terminal_error is not None:
            reason = (
                StopReason.WALLET_MISSING
                if isinstance(self._terminal_error, WalletNotFoundError)
                else StopReason.INVALID_CREDENTIAL
            )
            await self._stop_terminally(reason, self._terminal_error)
            return

        session = await self._store.get_session(self.session_id)
        if session is None:
            self._enter_stopped(StopReason.SESSION_MISSING)
            return
        if not session.active:
            self._enter_stopped(StopReason.USER_REQUEST)
            return

        if self._state is SessionState.STARTING:
            await self._start(session)
            return

        await self._poll(session)

    async def _start(self, session: CopyTradeSession) -> None:
        if not self._credential_checked:
            try:
                await self._credentials.load(self.follower_id)
            except WalletNotFoundError as e:
                await self._stop_terminally(StopReason.WALLET_MISSING, e)
                return
            except InvalidCredentialError as e:
                await self._stop_terminally(StopReason.INVALID_CREDENTIAL, e)
                return
            self._credential_checked = True

        try:
            latest = await self._chain_reader.get_latest_transaction(self.master_address)
        except ChainReadError as e:
            logger.warning("session_runner.baseline_failed", error=str(e))
            return

        baseline = session.baseline_version(latest.version if latest else None)
        await self._store.set_watermark(self.session_id, baseline)
        self._watermark = max(baseline, session.last_seen_version or 0)
        self._state = SessionState.POLLING

        logger.info("session_runner.baselined", watermark=self._watermark)
        await self._event_bus.publish(
            SessionStartedEvent(
                session_id=self.session_id,
                follower_id=self.follower_id,
                master_address=self.master_address,
                watermark=self._watermark,
            )
        )

    async def _poll(self, session: CopyTradeSession) -> None:
        watermark = max(self._watermark or 0, session.last_seen_version or 0)

        try:
            tx = await self._chain_reader.get_latest_transaction(self.master_address)
        except ChainReadError as e:
            logger.warning("session_runner.fetch_failed", error=str(e))
            return

        if tx is None or tx.version <= watermark:
            return

        try:
            result = await self._decoder.decode(tx)
        except ChainReadError as e:
            logger.warning("session_runner.decode_failed", version=tx.version, error=str(e))
            return

        # Watermark зберігається ДО dispatch: crash після цього = пропущений
        # trade, але ніколи не подвійний
        advanced = await self._store.set_watermark(self.session_id, tx.version)
        self._watermark = tx.version

        if not isinstance(result, SwapIntent):
            logger.debug("session_runner.skipped", version=tx.version, result=type(result).__name__)
            return
        if not advanced:
            logger.warning("session_runner.version_already_claimed", version=tx.version)
            return

        self._state = SessionState.DISPATCHING
        try:
            logger.info(
                "session_runner.swap_detected",
                version=tx.version,
                function=result.function,
                input_asset=result.input_asset,
                output_asset=result.output_asset,
                amount_raw=result.input_amount_raw,
                quoted_min_out=result.quoted_min_out_raw,
            )
            await self._event_bus.publish(
                TradeDetectedEvent(
                    session_id=self.session_id,
                    follower_id=self.follower_id,
                    master_address=self.master_address,
                    version=result.version,
                    tx_hash=result.tx_hash,
                    function=result.function,
                    input_asset=result.input_asset,
                    output_asset=result.output_asset,
                    input_amount_raw=result.input_amount_raw,
                    input_amount=result.input_amount_human,
                )
            )
            self._queue.put_nowait(result)
        finally:
            if self._state is SessionState.DISPATCHING:
                self._state = SessionState.POLLING

    # ==================== execution ====================

    async def _drain_queue(self) -> None:
        while True:
            intent = await self._queue.get()
            try:
                if intent is _STOP_SENTINEL:
                    return
                if self._state is SessionState.STOPPED:
                    logger.info("session_runner.intent_discarded", version=intent.version)
                    continue
                await self._execute(intent)
            finally:
                self._queue.task_done()

    async def _execute(self, intent: SwapIntent) -> None:
        log = logger.bind(version=intent.version)
        try:
            signer = await self._credentials.load(self.follower_id)
            tx_hash = await self._executor.execute(
                signer,
                intent.input_asset,
                intent.output_asset,
                intent.input_amount_raw,
            )
        except CREDENTIAL_ERRORS as e:
            log.error("session_runner.credential_lost", error=str(e))
            self._terminal_error = e
            self._wakeup.set()
            await self._publish_failed(intent, e.message)
        except TradeExecutionError as e:
            log.warning("session_runner.trade_failed", reason=e.reason)
            await self._publish_failed(intent, e.reason)
        except Exception as e:
            log.exception("session_runner.trade_crashed")
            await self._publish_failed(intent, f"Unexpected error: {e}")
        else:
            log.info("session_runner.trade_executed", tx_hash=tx_hash)
            await self._event_bus.publish(
                TradeExecutedEvent(
                    session_id=self.session_id,
                    follower_id=self.follower_id,
                    master_address=self.master_address,
                    version=intent.version,
                    tx_hash=tx_hash,
                    input_asset=intent.input_asset,
                    output_asset=intent.output_asset,
                    amount=intent.input_amount_human,
                )
            )

    async def _publish_failed(self, intent: SwapIntent, reason: str) -> None:
        await self._event_bus.publish(
            TradeFailedEvent(
                session_id=self.session_id,
                follower_id=self.follower_id,
                master_address=self.master_address,
                version=intent.version,
                input_asset=intent.input_asset,
                output_asset=intent.output_asset,
                reason=reason,
            )
        )
