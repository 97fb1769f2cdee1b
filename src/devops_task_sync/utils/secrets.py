"""Encryption of stored Personal Access Tokens."""

import os
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken

ENCRYPTION_KEY_ENV = "DEVOPS_TASK_SYNC_ENCRYPTION_KEY"


class SecretDecryptionError(Exception):
    """Raised when a stored secret cannot be decrypted."""


class SecretStore(Protocol):
    """Turns stored ciphertext into a plaintext secret."""

    def encrypt(self, secret: str) -> str:
        ...

    def decrypt(self, ciphertext: str) -> str:
        ...


class FernetSecretStore:
    """Secret store backed by a Fernet key."""

    def __init__(self, key: str | None = None) -> None:
        """Initialize secret store.

        Args:
            key: Fernet key. Defaults to the DEVOPS_TASK_SYNC_ENCRYPTION_KEY
                environment variable.

        Raises:
            ValueError: If no valid key is available.
        """
        key = key or os.getenv(ENCRYPTION_KEY_ENV)
        if not key:
            raise ValueError(f"{ENCRYPTION_KEY_ENV} environment variable is not set")
        try:
            self._fernet = Fernet(key.encode())
        except ValueError as e:
            raise ValueError(
                f"Invalid {ENCRYPTION_KEY_ENV}. Generate one with Fernet.generate_key()."
            ) from e

    def encrypt(self, secret: str) -> str:
        if not secret:
            raise ValueError("Secret cannot be empty")
        return self._fernet.encrypt(secret.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        if not ciphertext:
            raise SecretDecryptionError("Encrypted secret cannot be empty")
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as e:
            raise SecretDecryptionError("Failed to decrypt stored secret") from e
