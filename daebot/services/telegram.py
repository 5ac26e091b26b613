"""Telegram Bot API client for audit notifications."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

import requests

LOG = logging.getLogger("daebot.services.telegram")


class MessengerError(Exception):
    """Raised when a notification could not be delivered."""

    pass


class TelegramClient:
    """Sends Markdown messages to channels via sendMessage."""

    def __init__(self, token: str | None, api_url: str = "https://api.telegram.org") -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self._token)

    def send_message(self, chat_id: str, text: str) -> Dict[str, Any]:
        """Send one message; returns the API result object."""
        url = f"{self._api_url}/bot{self._token}/sendMessage"
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }
        try:
            resp = self._session.post(url, json=payload, timeout=30)
        except requests.RequestException as e:
            # str(e) would contain the token-bearing URL
            raise MessengerError(f"sendMessage to {chat_id}: {type(e).__name__}") from e
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400 or not data.get("ok", False):
            desc = data.get("description") or resp.reason or str(resp.status_code)
            raise MessengerError(f"sendMessage to {chat_id}: {resp.status_code}: {desc}")
        return data.get("result") or {}

    def send_msg(self, text: str, channels: List[str]) -> None:
        """Send text to every channel concurrently; raises the first failure.

        Empty channel ids are dropped. Does nothing when no token is set.
        """
        targets = [c for c in channels if c]
        if not targets:
            LOG.debug("No channels to notify")
            return
        if not self.enabled:
            LOG.info("Telegram token not configured; not sending: %s", text)
            return
        with ThreadPoolExecutor(max_workers=len(targets)) as pool:
            futures = [pool.submit(self.send_message, chat, text) for chat in targets]
        for future in futures:
            future.result()
