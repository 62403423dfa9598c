"""Encryption Manager for wallet private keys.

Private keys лежать в `wallets.private_key` зашифровані Fernet.
Ключ Fernet виводиться з settings.secret_key.
"""

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from copytrader.config import get_settings
from copytrader.domain.copytrading import InvalidCredentialError


class EncryptionManager:
    """Handles encryption and decryption of wallet secrets."""

    def __init__(self, secret_key: str | None = None):
        """Initialize encryption manager.

        Args:
            secret_key: Base secret for key derivation.
                       Uses settings.secret_key if not provided.
        """
        key = secret_key or get_settings().secret_key
        derived_key = hashlib.sha256(key.encode()).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(derived_key))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt an encrypted string.

        Raises:
            InvalidCredentialError: Token is corrupt or was encrypted with another key.
        """
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as e:
            raise InvalidCredentialError("Stored private key cannot be decrypted") from e


_encryption_manager: EncryptionManager | None = None


def get_encryption_manager() -> EncryptionManager:
    """Get or create the encryption manager singleton."""
    global _encryption_manager
    if _encryption_manager is None:
        _encryption_manager = EncryptionManager()
    return _encryption_manager
