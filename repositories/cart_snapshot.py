"""Cart snapshot stores.

The cart engine persists its snapshot after every mutation and reads it once
on startup. A store is a key-value blob holder with a unified interface
(Adapter Pattern): Redis when carts must survive across app instances, a JSON
file when the cart lives on a single device.

Stores raise CartPersistenceException for I/O failures and
CartSnapshotCorruptedException for content that cannot be decoded. They never
decide what to do about it; the engine does.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError
from redis import Redis, RedisError

from exceptions.cart import CartPersistenceException, CartSnapshotCorruptedException
from models.cart import CartSnapshotDTO

logger = logging.getLogger(__name__)


class CartSnapshotStore(ABC):
    """Abstract base class for cart snapshot stores."""

    @property
    @abstractmethod
    def key(self) -> str:
        """Name the snapshot is stored under (used in logs and errors)."""

    @abstractmethod
    def save(self, snapshot: CartSnapshotDTO) -> None:
        """Replace the stored snapshot.

        Raises:
            CartPersistenceException: If the store cannot be written
        """

    @abstractmethod
    def load(self) -> CartSnapshotDTO | None:
        """Read the stored snapshot.

        Returns:
            CartSnapshotDTO, or None when nothing was stored yet

        Raises:
            CartPersistenceException: If the store cannot be read
            CartSnapshotCorruptedException: If the content cannot be decoded
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored snapshot (no-op when absent)."""

    def _decode(self, raw: str | bytes) -> CartSnapshotDTO:
        try:
            return CartSnapshotDTO.model_validate_json(raw)
        except ValidationError as e:
            raise CartSnapshotCorruptedException(self.key, f"{e.error_count()} validation errors") from e
        except UnicodeDecodeError as e:
            raise CartSnapshotCorruptedException(self.key, f"not UTF-8 ({e.reason})") from e


class RedisCartSnapshotRepository(CartSnapshotStore):
    """Snapshot stored as a JSON string under one Redis key."""

    def __init__(self, redis: Redis, key: str):
        """
        Args:
            redis: Sync Redis client
            key: Redis key, usually CART_STORE_NAME or CART_STORE_NAME:<client id>
        """
        self.redis = redis
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, snapshot: CartSnapshotDTO) -> None:
        try:
            self.redis.set(self._key, snapshot.model_dump_json())
        except RedisError as e:
            raise CartPersistenceException(self._key, str(e)) from e

    def load(self) -> CartSnapshotDTO | None:
        try:
            raw = self.redis.get(self._key)
        except RedisError as e:
            raise CartPersistenceException(self._key, str(e)) from e
        if raw is None:
            return None
        return self._decode(raw)

    def clear(self) -> None:
        try:
            self.redis.delete(self._key)
        except RedisError as e:
            raise CartPersistenceException(self._key, str(e)) from e


class FileCartSnapshotRepository(CartSnapshotStore):
    """Snapshot stored as a JSON file.

    Writes go to a temp file in the same directory followed by os.replace(),
    so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @property
    def key(self) -> str:
        return str(self.path)

    def save(self, snapshot: CartSnapshotDTO) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(snapshot.model_dump_json())
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CartPersistenceException(self.key, str(e)) from e

    def load(self) -> CartSnapshotDTO | None:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CartPersistenceException(self.key, str(e)) from e
        logger.debug(f"Loaded cart snapshot from {self.path} ({len(raw)} bytes)")
        return self._decode(raw)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise CartPersistenceException(self.key, str(e)) from e
