"""Utility modules for devops task sync."""

from devops_task_sync.utils.logging import get_logger, setup_logging
from devops_task_sync.utils.redaction import mask_secret, redact_headers
from devops_task_sync.utils.secrets import FernetSecretStore, SecretDecryptionError, SecretStore
from devops_task_sync.utils.storage import StorageManager

__all__ = [
    "get_logger",
    "setup_logging",
    "mask_secret",
    "redact_headers",
    "FernetSecretStore",
    "SecretDecryptionError",
    "SecretStore",
    "StorageManager",
]
