from .encryption_manager import EncryptionManager, get_encryption_manager

__all__ = ["EncryptionManager", "get_encryption_manager"]
