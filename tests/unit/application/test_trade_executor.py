"""Unit tests for TradeExecutor."""

from unittest.mock import AsyncMock, Mock

import pytest

from copytrader.application.copytrading.services import TradeExecutor
from copytrader.application.copytrading.services.trade_executor import (
    is_already_registered_error,
)
from copytrader.domain.chain import (
    ChainError,
    ChainReadError,
    DexRouter,
    EntryFunctionPayload,
    QuoteError,
    TransactionConfirmationError,
    TransactionSubmissionError,
    TransactionSubmitter,
)
from copytrader.domain.copytrading import TradeExecutionError

APT = "0x1::aptos_coin::AptosCoin"
USDT = "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa::asset::USDT"
COIN_STORE_USDT = f"0x1::coin::CoinStore<{USDT}>"
SWAP_PAYLOAD = EntryFunctionPayload(
    function="0x190d::scripts_v2::swap",
    type_arguments=(APT, USDT, "0x190d::curves::Uncorrelated"),
    arguments=("100000000", "995"),
)


@pytest.fixture
def signer(credentials):
    return credentials.signer


@pytest.fixture
def mock_router():
    router = Mock(spec=DexRouter)
    router.quote = AsyncMock(return_value=1000)
    router.build_swap_payload = Mock(return_value=SWAP_PAYLOAD)
    return router


@pytest.fixture
def mock_submitter():
    submitter = AsyncMock(spec=TransactionSubmitter)
    submitter.submit.return_value = "0xswap"
    submitter.wait_for_transaction.return_value = {"success": True}
    return submitter


@pytest.fixture
def trade_executor(chain_reader, mock_router, mock_submitter):
    return TradeExecutor(
        chain_reader, mock_router, mock_submitter, slippage=0.005, preflight_balance_check=False
    )


def registered(chain_reader, signer):
    chain_reader.resources[(signer.address, COIN_STORE_USDT)] = {"coin": {"value": "0"}}


class TestTradeExecutor:
    """Tests для happy path і failures."""

    @pytest.mark.asyncio
    async def test_execute_swap_with_registered_output(
        self, trade_executor, chain_reader, signer, mock_router, mock_submitter
    ):
        # Arrange
        registered(chain_reader, signer)

        # Act
        tx_hash = await trade_executor.execute(signer, APT, USDT, 100_000_000)

        # Assert
        assert tx_hash == "0xswap"
        mock_router.quote.assert_awaited_once_with(APT, USDT, 100_000_000)
        mock_router.build_swap_payload.assert_called_once_with(APT, USDT, 100_000_000, 1000, 0.005)
        mock_submitter.submit.assert_awaited_once_with(signer, SWAP_PAYLOAD)
        mock_submitter.wait_for_transaction.assert_awaited_once_with("0xswap")

    @pytest.mark.asyncio
    async def test_registers_output_asset_first(
        self, trade_executor, signer, mock_submitter
    ):
        # Arrange
        mock_submitter.submit.side_effect = ["0xregister", "0xswap"]

        # Act
        tx_hash = await trade_executor.execute(signer, APT, USDT, 100)

        # Assert
        assert tx_hash == "0xswap"
        register_payload = mock_submitter.submit.await_args_list[0].args[1]
        assert register_payload.function == "0x1::managed_coin::register"
        assert register_payload.type_arguments == (USDT,)
        assert mock_submitter.wait_for_transaction.await_count == 2

    @pytest.mark.asyncio
    async def test_already_registered_error_is_ignored(
        self, trade_executor, signer, mock_submitter
    ):
        mock_submitter.submit.side_effect = [
            TransactionSubmissionError("Move abort: ECOINSTORE_ALREADY_PUBLISHED"),
            "0xswap",
        ]

        assert await trade_executor.execute(signer, APT, USDT, 100) == "0xswap"

    @pytest.mark.asyncio
    async def test_registration_failure_does_not_fail_swap(
        self, trade_executor, signer, mock_submitter
    ):
        mock_submitter.submit.side_effect = ["0xregister", "0xswap"]
        mock_submitter.wait_for_transaction.side_effect = [
            TransactionConfirmationError("OUT_OF_GAS"),
            {"success": True},
        ]

        assert await trade_executor.execute(signer, APT, USDT, 100) == "0xswap"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "lookup_error",
        [ChainError("400 bad request: invalid type tag"), ChainReadError("node timeout")],
    )
    async def test_coin_store_lookup_failure_still_swaps(
        self, trade_executor, chain_reader, signer, mock_router, mock_submitter, lookup_error
    ):
        # Arrange
        chain_reader.get_account_resource = AsyncMock(side_effect=lookup_error)
        mock_submitter.submit.side_effect = ["0xregister", "0xswap"]

        # Act
        tx_hash = await trade_executor.execute(signer, APT, USDT, 100)

        # Assert
        assert tx_hash == "0xswap"
        mock_router.quote.assert_awaited_once_with(APT, USDT, 100)
        register_payload = mock_submitter.submit.await_args_list[0].args[1]
        assert register_payload.function == "0x1::managed_coin::register"

    @pytest.mark.asyncio
    async def test_quote_failure(self, trade_executor, chain_reader, signer, mock_router):
        registered(chain_reader, signer)
        mock_router.quote.side_effect = QuoteError("No Liquidswap pool for pair")

        with pytest.raises(TradeExecutionError) as exc_info:
            await trade_executor.execute(signer, APT, USDT, 100)

        assert exc_info.value.reason.startswith("Quote failed: No Liquidswap pool")

    @pytest.mark.asyncio
    async def test_failed_swap_transaction(
        self, trade_executor, chain_reader, signer, mock_submitter
    ):
        # Arrange
        registered(chain_reader, signer)
        mock_submitter.wait_for_transaction.side_effect = TransactionConfirmationError(
            "Move abort in 0x1::coin: EINSUFFICIENT_BALANCE(0x10006)"
        )

        # Act
        with pytest.raises(TradeExecutionError) as exc_info:
            await trade_executor.execute(signer, APT, USDT, 100)

        # Assert
        assert "EINSUFFICIENT_BALANCE" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_submission_failure(self, trade_executor, chain_reader, signer, mock_submitter):
        registered(chain_reader, signer)
        mock_submitter.submit.side_effect = TransactionSubmissionError("SEQUENCE_NUMBER_TOO_OLD")

        with pytest.raises(TradeExecutionError) as exc_info:
            await trade_executor.execute(signer, APT, USDT, 100)

        assert exc_info.value.reason == "Swap submission failed: SEQUENCE_NUMBER_TOO_OLD"

    @pytest.mark.asyncio
    async def test_preflight_balance_check(
        self, chain_reader, signer, mock_router, mock_submitter
    ):
        # Arrange
        registered(chain_reader, signer)
        chain_reader.balances[(signer.address, APT)] = 50
        executor = TradeExecutor(
            chain_reader, mock_router, mock_submitter, preflight_balance_check=True
        )

        # Act
        with pytest.raises(TradeExecutionError) as exc_info:
            await executor.execute(signer, APT, USDT, 100)

        # Assert
        assert exc_info.value.reason.startswith("Insufficient balance")
        mock_router.quote.assert_not_awaited()


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Move abort: ECOINSTORE_ALREADY_PUBLISHED", True),
        ("coin store already exists", True),
        ("OUT_OF_GAS", False),
        ("Transaction already in mempool", False),
        ("SEQUENCE_NUMBER_TOO_OLD: already used", False),
    ],
)
def test_is_already_registered_error(message, expected):
    assert is_already_registered_error(TransactionSubmissionError(message)) is expected
