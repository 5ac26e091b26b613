"""Key-value store for counters and audit records.

Production uses a Vercel KV / Upstash style REST endpoint: every command
is POSTed as a JSON array (``["GET", key]``) and answered with
``{"result": ...}`` or ``{"error": ...}``. Values are stored JSON-encoded.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict

import requests

LOG = logging.getLogger("daebot.services.kv_store")


class StoreError(Exception):
    """Raised when the key-value store cannot be read or written."""

    pass


class KeyValueStore(ABC):
    """get/set by string key."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value or None when the key does not exist."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key (overwrites)."""
        ...


class MemoryKVStore(KeyValueStore):
    """In-process store for local runs (data is lost on restart)."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value


class RestKVStore(KeyValueStore):
    """Vercel KV / Upstash REST client."""

    def __init__(self, url: str, token: str) -> None:
        self._url = url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"

    def _command(self, *args: Any) -> Any:
        try:
            resp = self._session.post(self._url, json=list(args), timeout=30)
        except requests.RequestException as e:
            raise StoreError(f"{args[0]}: {e}") from e
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400 or "error" in data:
            msg = data.get("error") or resp.text or resp.reason or str(resp.status_code)
            raise StoreError(f"{resp.status_code}: {msg}")
        return data.get("result")

    def get(self, key: str) -> Any | None:
        raw = self._command("GET", key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return raw

    def set(self, key: str, value: Any) -> None:
        self._command("SET", key, json.dumps(value))
        LOG.debug("kv set %s", key)


def make_kv_store(config: Any) -> KeyValueStore:
    """REST store when kv.rest_api_url is configured, in-memory otherwise."""
    url = config.kv_url_resolved
    token = config.kv_token_resolved
    if url and token:
        return RestKVStore(url, token)
    LOG.warning("KV REST API not configured; using in-memory store")
    return MemoryKVStore()
