"""TransactionSigner - PORT для follower signing credential.

Credential borrowed на час одного execution і ніколи не зберігається
в session state.
"""

from abc import ABC, abstractmethod


class TransactionSigner(ABC):
    """Ed25519 account able to sign Aptos transactions."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Account address (0x-prefixed hex)."""
        pass

    @property
    @abstractmethod
    def public_key_hex(self) -> str:
        pass

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Raw 64-byte ed25519 signature of `message`."""
        pass


class CredentialProvider(ABC):
    """Loads a follower's signing credential on demand.

    Example:
        >>> signer = await credential_provider.load(follower_id=42)
        >>> tx_hash = await executor.execute(signer, ...)
    """

    @abstractmethod
    async def load(self, follower_id: int) -> TransactionSigner:
        """Load and decrypt the follower's default wallet.

        Raises:
            WalletNotFoundError: Follower has no usable wallet.
            InvalidCredentialError: Stored key cannot be parsed/decrypted.
        """
        pass
