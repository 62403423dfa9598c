"""WalletCredentialProvider - loads follower signer from the wallets table."""

from typing import Callable

from copytrader.config import get_logger
from copytrader.domain.chain import CredentialProvider, TransactionSigner
from copytrader.domain.copytrading import WalletNotFoundError
from copytrader.application.shared import UnitOfWork
from copytrader.infrastructure.encryption import EncryptionManager

from .signer import Ed25519Signer

logger = get_logger(__name__)


class WalletCredentialProvider(CredentialProvider):
    """Decrypts the follower's default wallet on every call.

    Signer не кешується: credential borrowed тільки на час execution.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        encryption: EncryptionManager,
    ) -> None:
        self._uow_factory = uow_factory
        self._encryption = encryption

    async def load(self, follower_id: int) -> TransactionSigner:
        async with self._uow_factory() as uow:
            wallet = await uow.wallets.get_default_wallet(follower_id)

        if wallet is None:
            raise WalletNotFoundError(follower_id)

        private_key = self._encryption.decrypt(wallet.encrypted_private_key)
        signer = Ed25519Signer.from_private_key(private_key, address=wallet.address)
        logger.debug("credential_provider.loaded", follower_id=follower_id, address=signer.address)
        return signer
