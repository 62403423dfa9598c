"""Pytest configuration and fixtures.

In-memory test doubles для chain ports і persistence, щоб unit tests
session runner-а не ходили ні в мережу, ні в БД.
"""

import asyncio
from dataclasses import replace
from typing import Any

import pytest

from copytrader.application.copytrading.services import SessionStore
from copytrader.application.shared import UnitOfWork
from copytrader.domain.chain import (
    ChainReader,
    ChainResourceNotFoundError,
    CredentialProvider,
    TransactionRecord,
    TransactionSigner,
)
from copytrader.domain.copytrading import (
    CopyTradeSession,
    CopyTradeSessionRepository,
    SessionAlreadyActiveError,
    TradeExecutionError,
    WalletRecord,
    WalletRepository,
)
from copytrader.domain.shared import DomainEvent
from copytrader.infrastructure.messaging import EventBus

APT = "0x1::aptos_coin::AptosCoin"
USDT = "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa::asset::USDT"
MASTER = "0x" + "ab" * 32
FOLLOWER_ID = 42


# ====== Chain doubles ======


class FakeChainReader(ChainReader):
    """Scriptable ChainReader: latest tx per address, decimals, resources."""

    def __init__(self) -> None:
        self.latest: dict[str, TransactionRecord | None] = {}
        self.latest_errors: list[Exception] = []
        self.decimals: dict[str, int] = {APT: 8, USDT: 6}
        self.decimals_errors: list[Exception] = []
        self.balances: dict[tuple[str, str], int] = {}
        self.resources: dict[tuple[str, str], dict[str, Any]] = {}
        self.latest_calls = 0
        self.decimals_calls = 0

    async def get_latest_transaction(self, address: str) -> TransactionRecord | None:
        self.latest_calls += 1
        if self.latest_errors:
            raise self.latest_errors.pop(0)
        return self.latest.get(address)

    async def get_coin_decimals(self, asset_type: str) -> int:
        self.decimals_calls += 1
        if self.decimals_errors:
            raise self.decimals_errors.pop(0)
        if asset_type not in self.decimals:
            raise ChainResourceNotFoundError("CoinInfo not found", asset_type=asset_type)
        return self.decimals[asset_type]

    async def get_coin_balance(self, address: str, asset_type: str) -> int:
        return self.balances.get((address, asset_type), 0)

    async def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any]:
        try:
            return self.resources[(address, resource_type)]
        except KeyError:
            raise ChainResourceNotFoundError(
                "Resource not found", address=address, resource_type=resource_type
            ) from None


class FakeSigner(TransactionSigner):
    def __init__(self, address: str = "0x" + "cd" * 32) -> None:
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    @property
    def public_key_hex(self) -> str:
        return "0x" + "ee" * 32

    def sign(self, message: bytes) -> bytes:
        return b"\x01" * 64


class FakeCredentialProvider(CredentialProvider):
    def __init__(self, signer: TransactionSigner | None = None) -> None:
        self.signer = signer or FakeSigner()
        self.error: Exception | None = None
        self.calls = 0

    async def load(self, follower_id: int) -> TransactionSigner:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.signer


class FakeTradeExecutor:
    """Records executions; outcomes popped from `outcomes` (hash or exception)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []
        self.outcomes: list[str | Exception] = []
        self.gate: asyncio.Event | None = None

    async def execute(
        self,
        signer: TransactionSigner,
        input_asset: str,
        output_asset: str,
        input_amount_raw: int,
    ) -> str:
        self.calls.append((input_asset, output_asset, input_amount_raw))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else f"0xhash{len(self.calls)}"
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def insufficient_balance() -> TradeExecutionError:
    return TradeExecutionError("Swap transaction failed: INSUFFICIENT_BALANCE")


def make_tx(
    version: int,
    function: str | None = "0x190d::scripts_v2::swap",
    type_arguments: tuple[str, ...] = (APT, USDT),
    arguments: tuple[Any, ...] = ("100000000", "950000"),
) -> TransactionRecord:
    return TransactionRecord(
        version=version,
        hash=f"0x{version:064x}",
        sender=MASTER,
        function=function,
        type_arguments=type_arguments,
        arguments=arguments,
        success=True,
    )


# ====== Persistence doubles ======


def _copy(session: CopyTradeSession) -> CopyTradeSession:
    return CopyTradeSession(
        id=session.id,
        follower_id=session.follower_id,
        master_address=session.master_address,
        active=session.active,
        last_seen_version=session.last_seen_version,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


class InMemorySessionRepository(CopyTradeSessionRepository):
    def __init__(self) -> None:
        self.rows: dict[int, CopyTradeSession] = {}
        self._next_id = 1

    async def add(self, session: CopyTradeSession) -> CopyTradeSession:
        existing = await self.get_active_for_pair(session.follower_id, session.master_address)
        if existing is not None:
            raise SessionAlreadyActiveError(
                session_id=existing.id,
                follower_id=session.follower_id,
                master_address=session.master_address,
            )
        stored = CopyTradeSession(
            id=self._next_id,
            follower_id=session.follower_id,
            master_address=session.master_address,
            active=session.active,
            last_seen_version=session.last_seen_version,
        )
        self.rows[stored.id] = stored
        self._next_id += 1
        return _copy(stored)

    async def get_by_id(self, session_id: int) -> CopyTradeSession | None:
        row = self.rows.get(session_id)
        return _copy(row) if row else None

    async def get_active_for_pair(self, follower_id: int, master_address: str):
        for row in self.rows.values():
            if (
                row.active
                and row.follower_id == follower_id
                and row.master_address == master_address.lower()
            ):
                return _copy(row)
        return None

    async def list_active_for_follower(self, follower_id: int) -> list[CopyTradeSession]:
        return [_copy(r) for r in self.rows.values() if r.active and r.follower_id == follower_id]

    async def list_all_active(self) -> list[CopyTradeSession]:
        return [_copy(r) for r in self.rows.values() if r.active]

    async def deactivate(self, session_id: int) -> bool:
        row = self.rows.get(session_id)
        if row is None:
            return False
        row.deactivate()
        return True

    async def advance_watermark(self, session_id: int, version: int) -> bool:
        row = self.rows.get(session_id)
        if row is None:
            return False
        return row.advance_watermark(version)


class InMemoryWalletRepository(WalletRepository):
    def __init__(self) -> None:
        self.wallets: dict[int, WalletRecord] = {}

    async def get_default_wallet(self, follower_id: int) -> WalletRecord | None:
        return self.wallets.get(follower_id)


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, sessions: InMemorySessionRepository, wallets: InMemoryWalletRepository):
        self._sessions = sessions
        self._wallets = wallets
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass

    @property
    def copy_sessions(self) -> InMemorySessionRepository:
        return self._sessions

    @property
    def wallets(self) -> InMemoryWalletRepository:
        return self._wallets


class RecordingEventBus(EventBus):
    """EventBus що запам'ятовує всі published events."""

    def __init__(self) -> None:
        super().__init__()
        self.published: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.published.append(event)
        await super().publish(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [e for e in self.published if isinstance(e, event_type)]


# ====== Fixtures ======


@pytest.fixture
def chain_reader() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
def credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider()


@pytest.fixture
def executor() -> FakeTradeExecutor:
    return FakeTradeExecutor()


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def session_repo() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def wallet_repo() -> InMemoryWalletRepository:
    repo = InMemoryWalletRepository()
    repo.wallets[FOLLOWER_ID] = WalletRecord(
        id=1,
        follower_id=FOLLOWER_ID,
        address="0x" + "cd" * 32,
        encrypted_private_key="encrypted",
    )
    return repo


@pytest.fixture
def uow_factory(session_repo, wallet_repo):
    return lambda: InMemoryUnitOfWork(session_repo, wallet_repo)


@pytest.fixture
def store(uow_factory) -> SessionStore:
    return SessionStore(uow_factory)


@pytest.fixture
def tx_factory():
    """make_tx(version, function=..., type_arguments=..., arguments=...)."""
    return make_tx


@pytest.fixture
def swap_intent_factory():
    from copytrader.domain.copytrading import SwapIntent

    def factory(version: int = 100, **overrides: Any) -> SwapIntent:
        intent = SwapIntent(
            version=version,
            tx_hash=f"0x{version:064x}",
            function="0x190d::scripts_v2::swap",
            input_asset=APT,
            output_asset=USDT,
            input_amount_raw=100_000_000,
            input_decimals=8,
        )
        return replace(intent, **overrides)

    return factory
