"""Ed25519 signer for follower accounts (PyNaCl)."""

import hashlib

from nacl.signing import SigningKey

from copytrader.domain.chain import TransactionSigner
from copytrader.domain.copytrading import InvalidCredentialError

PRIVATE_KEY_PREFIX = "ed25519-priv-"
ED25519_SCHEME = b"\x00"


def parse_private_key(raw: str) -> bytes:
    """32-byte seed from a stored private key.

    Accepts AIP-80 strings (`ed25519-priv-0x...`), `0x`-prefixed hex and
    bare hex.

    Raises:
        InvalidCredentialError: Not 32 bytes of hex.
    """
    key = (raw or "").strip()
    if key.startswith(PRIVATE_KEY_PREFIX):
        key = key[len(PRIVATE_KEY_PREFIX):]
    if key[:2].lower() == "0x":
        key = key[2:]

    try:
        seed = bytes.fromhex(key)
    except ValueError as e:
        raise InvalidCredentialError("Private key is not valid hex") from e
    if len(seed) != 32:
        raise InvalidCredentialError("Private key must be 32 bytes", length=len(seed))
    return seed


def derive_address(public_key: bytes) -> str:
    """Account address of a single-key ed25519 account (no key rotation)."""
    return "0x" + hashlib.sha3_256(public_key + ED25519_SCHEME).hexdigest()


class Ed25519Signer(TransactionSigner):
    """Follower signing credential.

    Example:
        >>> signer = Ed25519Signer.from_private_key("ed25519-priv-0x" + "11" * 32)
        >>> signature = signer.sign(b"message")
        >>> len(signature)
        64
    """

    def __init__(self, signing_key: SigningKey, address: str | None = None) -> None:
        self._signing_key = signing_key
        public_key = bytes(signing_key.verify_key)
        self._public_key_hex = "0x" + public_key.hex()
        self._address = (address or derive_address(public_key)).lower()

    @classmethod
    def from_private_key(cls, raw: str, address: str | None = None) -> "Ed25519Signer":
        return cls(SigningKey(parse_private_key(raw)), address=address)

    @property
    def address(self) -> str:
        return self._address

    @property
    def public_key_hex(self) -> str:
        return self._public_key_hex

    def sign(self, message: bytes) -> bytes:
        return self._signing_key.sign(message).signature

    def __repr__(self) -> str:
        return f"Ed25519Signer(address={self._address})"
