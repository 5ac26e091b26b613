"""Collaborator clients: key-value store, Telegram messenger, tracing."""

from daebot.services.kv_store import KeyValueStore, MemoryKVStore, RestKVStore, StoreError, make_kv_store
from daebot.services.telegram import MessengerError, TelegramClient

__all__ = [
    "KeyValueStore",
    "MemoryKVStore",
    "MessengerError",
    "RestKVStore",
    "StoreError",
    "TelegramClient",
    "make_kv_store",
]
