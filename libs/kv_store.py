"""
Key-value storage for Hush SOS preferences.

Values are raw bytes; callers own the encoding. Two backends are provided:
- MemoryKeyValueStore: process-local dict, used in tests and local dev
- RedisKeyValueStore: durable storage on Redis with graceful degradation

Read and write errors never propagate: a failed read is reported as "no data"
(None) and a failed write as False, after logging.

Environment Variables:
    STORAGE_BACKEND: "memory" or "redis" (default: memory)
    REDIS_HOST: Redis server host (default: localhost)
    REDIS_PORT: Redis server port (default: 6379)
    REDIS_PASSWORD: Redis password (optional)
    REDIS_DB: Redis database number (default: 0)
"""

import logging
import os
import threading
from typing import Dict, Optional

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from common.constants import REDIS_DB, REDIS_HOST, REDIS_PORT
from libs.config import Config

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Base class for byte-valued key-value stores"""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError("Store must implement get()")

    def set(self, key: str, value: bytes) -> bool:
        raise NotImplementedError("Store must implement set()")

    def delete(self, key: str) -> bool:
        raise NotImplementedError("Store must implement delete()")


class MemoryKeyValueStore(KeyValueStore):
    """In-process store; contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        with self._lock:
            self._data[key] = bytes(value)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed store.

    Keeps decode_responses off so values come back as bytes. If Redis is
    unreachable at startup the store stays usable and every call degrades to
    "no data".
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self._client: Optional[redis.Redis] = client
        if self._client is None:
            self._client = self._connect()

    def _connect(self) -> Optional[redis.Redis]:
        password = os.getenv("REDIS_PASSWORD") or None
        try:
            client = redis.Redis(
                host=REDIS_HOST,
                port=REDIS_PORT,
                db=REDIS_DB,
                password=password,
                decode_responses=False,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            client.ping()
            logger.info(f"Redis connected: host={REDIS_HOST}, port={REDIS_PORT}, db={REDIS_DB}")
            return client
        except (RedisConnectionError, RedisError) as e:
            logger.error(f"Redis connection failed: {e}. Preferences will not be persisted.")
            return None

    @property
    def client(self) -> Optional[redis.Redis]:
        return self._client

    def is_connected(self) -> bool:
        if self._client is None:
            return False
        try:
            self._client.ping()
            return True
        except (RedisConnectionError, RedisError):
            return False

    def get(self, key: str) -> Optional[bytes]:
        if self._client is None:
            return None
        try:
            return self._client.get(key)
        except (RedisConnectionError, RedisError) as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    def set(self, key: str, value: bytes) -> bool:
        if self._client is None:
            return False
        try:
            return bool(self._client.set(key, value))
        except (RedisConnectionError, RedisError) as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        if self._client is None:
            return False
        try:
            return bool(self._client.delete(key))
        except (RedisConnectionError, RedisError) as e:
            logger.error(f"Redis DELETE error for key {key}: {e}")
            return False


# Singleton instance
_kv_store: Optional[KeyValueStore] = None


def get_key_value_store() -> KeyValueStore:
    """Get or create the configured key-value store singleton"""
    global _kv_store
    if _kv_store is None:
        backend = Config.STORAGE_BACKEND.lower()
        if backend == "redis":
            _kv_store = RedisKeyValueStore()
        elif backend == "memory":
            _kv_store = MemoryKeyValueStore()
        else:
            raise ValueError(f"Unsupported storage backend: {backend}")
    return _kv_store


def reset_key_value_store() -> None:
    """Drop the singleton so the next call re-reads configuration."""
    global _kv_store
    _kv_store = None
