"""File-backed key store: one raw key file per endpoint."""

import logging
from pathlib import Path
from typing import Protocol

from hookgate.errors import SecretNotFound

logger = logging.getLogger(__name__)


class SecretLoader(Protocol):
    def load(self, key_id: str) -> bytes: ...


class FileSecretLoader:
    """Reads key files from a directory, byte for byte.

    Keys are used exactly as stored, so a trailing newline in the file is part
    of the secret.
    """

    def __init__(self, keys_dir: str | Path):
        self.keys_dir = Path(keys_dir)

    def _path(self, key_id: str) -> Path:
        root = self.keys_dir.resolve()
        path = (root / key_id).resolve()
        if not path.is_relative_to(root):
            raise SecretNotFound(f"Key {key_id!r} is outside the keys directory")
        return path

    def load(self, key_id: str) -> bytes:
        path = self._path(key_id)
        try:
            secret = path.read_bytes()
        except OSError as e:
            raise SecretNotFound(f"Key {key_id!r} could not be read: {e.strerror}") from e
        if not secret:
            raise SecretNotFound(f"Key {key_id!r} is empty")
        logger.debug(f"Loaded key {key_id!r}")
        return secret
