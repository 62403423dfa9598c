"""TradeExecutor - replicates one swap from the follower's account.

Steps:
1. Best-effort output asset registration (`0x1::managed_coin::register`)
2. Optional balance pre-check
3. Quote через DexRouter
4. Build swap payload зі slippage
5. Sign + submit + wait for confirmation
"""

from decimal import Decimal

from copytrader.config import get_logger, get_settings
from copytrader.domain.chain import (
    ChainError,
    ChainReader,
    ChainResourceNotFoundError,
    DexRouter,
    EntryFunctionPayload,
    TransactionSigner,
    TransactionSubmitter,
)
from copytrader.domain.copytrading import TradeExecutionError

logger = get_logger(__name__)

REGISTER_FUNCTION = "0x1::managed_coin::register"
COIN_STORE = "0x1::coin::CoinStore"
ALREADY_REGISTERED_MARKERS = ("ecoinstore_already_published", "already exists")


def is_already_registered_error(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in ALREADY_REGISTERED_MARKERS)


class TradeExecutor:
    """Executes a replicated swap and returns the follower's tx hash.

    Amount копіюється як є (raw units), без масштабування під баланс
    follower-а.

    Example:
        >>> tx_hash = await executor.execute(
        ...     signer,
        ...     input_asset="0x1::aptos_coin::AptosCoin",
        ...     output_asset="0xf22b...::asset::USDT",
        ...     input_amount_raw=100_000_000,
        ... )

    Raises:
        TradeExecutionError: Any step after registration failed.
    """

    def __init__(
        self,
        chain_reader: ChainReader,
        router: DexRouter,
        submitter: TransactionSubmitter,
        *,
        slippage: float | None = None,
        preflight_balance_check: bool | None = None,
    ) -> None:
        settings = get_settings()
        self._chain_reader = chain_reader
        self._router = router
        self._submitter = submitter
        self.slippage = settings.swap_slippage if slippage is None else slippage
        self.preflight_balance_check = (
            settings.preflight_balance_check
            if preflight_balance_check is None
            else preflight_balance_check
        )

    async def execute(
        self,
        signer: TransactionSigner,
        input_asset: str,
        output_asset: str,
        input_amount_raw: int,
    ) -> str:
        log = logger.bind(
            follower_address=signer.address,
            input_asset=input_asset,
            output_asset=output_asset,
            amount_raw=input_amount_raw,
        )
        log.info("trade_executor.started")

        await self._ensure_registered(signer, output_asset)

        if self.preflight_balance_check:
            await self._check_balance(signer, input_asset, input_amount_raw)

        try:
            expected_out = await self._router.quote(input_asset, output_asset, input_amount_raw)
        except ChainError as e:
            raise TradeExecutionError(f"Quote failed: {e.message}") from e

        payload = self._router.build_swap_payload(
            input_asset, output_asset, input_amount_raw, expected_out, self.slippage
        )

        try:
            tx_hash = await self._submitter.submit(signer, payload)
        except ChainError as e:
            raise TradeExecutionError(f"Swap submission failed: {e.message}") from e

        try:
            await self._submitter.wait_for_transaction(tx_hash)
        except ChainError as e:
            raise TradeExecutionError(
                f"Swap transaction failed: {e.message}", tx_hash=tx_hash
            ) from e

        log.info("trade_executor.completed", tx_hash=tx_hash, expected_out=expected_out)
        return tx_hash

    async def _ensure_registered(self, signer: TransactionSigner, asset_type: str) -> None:
        """Register CoinStore for the output asset; never fails the swap."""
        try:
            await self._chain_reader.get_account_resource(
                signer.address, f"{COIN_STORE}<{asset_type}>"
            )
            return
        except ChainResourceNotFoundError:
            pass
        except ChainError as e:
            # Lookup failure: register anyway, "already exists" is tolerated below
            logger.warning("trade_executor.coin_store_lookup_failed", error=str(e))

        payload = EntryFunctionPayload(function=REGISTER_FUNCTION, type_arguments=(asset_type,))
        try:
            tx_hash = await self._submitter.submit(signer, payload)
            await self._submitter.wait_for_transaction(tx_hash)
            logger.info("trade_executor.asset_registered", asset_type=asset_type, tx_hash=tx_hash)
        except ChainError as e:
            if is_already_registered_error(e):
                logger.debug("trade_executor.asset_already_registered", asset_type=asset_type)
                return
            logger.warning(
                "trade_executor.registration_failed",
                asset_type=asset_type,
                error=str(e),
            )

    async def _check_balance(
        self, signer: TransactionSigner, asset_type: str, amount_raw: int
    ) -> None:
        try:
            balance = await self._chain_reader.get_coin_balance(signer.address, asset_type)
        except ChainError as e:
            raise TradeExecutionError(f"Balance check failed: {e.message}") from e

        if balance < amount_raw:
            raise TradeExecutionError(
                f"Insufficient balance: have {Decimal(balance)}, need {Decimal(amount_raw)} (raw units)",
                asset_type=asset_type,
            )
