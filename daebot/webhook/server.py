"""Webhook HTTP server for GitHub events.

Serves a health check and the webhook path. Every delivery is verified,
parsed and dispatched on its own thread; the handler outcome is returned as
the JSON response body.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict
from urllib.parse import parse_qs

from daebot.config import AppConfig
from daebot.logging import delivery_context
from daebot.webhook.dispatcher import Dispatcher
from daebot.webhook.errors import PayloadError, SignatureError, WebhookError
from daebot.webhook.events import WebhookEvent
from daebot.webhook.signature import verify_signature

LOG = logging.getLogger("daebot.webhook")


def parse_webhook_body(body: bytes, content_type: str = "") -> Dict[str, Any]:
    """Parse webhook body as JSON.

    Supports raw JSON and application/x-www-form-urlencoded (payload=...).
    """
    if not body:
        raise PayloadError("empty body")
    try:
        if "application/x-www-form-urlencoded" in content_type:
            parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
            raw = (parsed.get("payload") or [None])[0]
            if raw is None:
                raise PayloadError("form body without payload field")
            data = json.loads(raw)
        else:
            data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError("payload is not a JSON object")
    return data


class WebhookHandler(BaseHTTPRequestHandler):
    """Handle GET /health and POST <github.webhook_path>."""

    config: AppConfig
    dispatcher: Dispatcher

    def do_GET(self) -> None:
        if self.path == "/health" or self.path == "/":
            self._send_json(200, {"status": "ok", "service": "daebot"})
            return
        self.send_response(404)
        self.end_headers()

    def do_POST(self) -> None:
        if self.path == self.config.github.webhook_path:
            self._handle_github_webhook()
            return
        self.send_response(404)
        self.end_headers()

    def _send_json(self, status: int, data: Dict[str, Any]) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def _verify(self, body: bytes) -> None:
        secret = self.config.webhook_secret_resolved
        if not secret:
            raise SignatureError("no webhook secret configured; refusing unverifiable delivery")
        signature = self.headers.get("X-Hub-Signature-256") or self.headers.get("X-Hub-Signature")
        verify_signature(secret, body, signature)

    def _handle_github_webhook(self) -> None:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length) if length else b""
        delivery_id = self.headers.get("X-GitHub-Delivery")
        name = self.headers.get("X-GitHub-Event", "")
        with delivery_context(delivery_id, name):
            try:
                self._verify(body)
                payload = parse_webhook_body(body, self.headers.get("Content-Type", ""))
                event = WebhookEvent(
                    name=name,
                    action=payload.get("action"),
                    delivery_id=delivery_id,
                    payload=payload,
                )
                with delivery_context(delivery_id, event.key):
                    LOG.info("Webhook event: %s (delivery %s)", event.key, delivery_id)
                    outcome = self.dispatcher.dispatch(event)
            except WebhookError as e:
                LOG.warning("Rejected delivery %s: %s", delivery_id, e)
                self._send_json(e.status, {"error": str(e)})
                return
            except Exception as e:
                LOG.exception("Delivery %s failed: %s", delivery_id, e)
                self._send_json(500, {"error": "Ooops, something goes wrong"})
                return
        self._send_json(200, outcome.model_dump(exclude_none=True))

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def make_webhook_server(config: AppConfig, dispatcher: Dispatcher) -> ThreadingHTTPServer:
    """HTTP server bound to webhook.host:port (not started)."""
    handler = type(
        "BoundWebhookHandler",
        (WebhookHandler,),
        {"config": config, "dispatcher": dispatcher},
    )
    return ThreadingHTTPServer((config.webhook.host, config.webhook.port), handler)


def run_webhook_server(config: AppConfig, dispatcher: Dispatcher) -> None:
    """Run HTTP server for webhooks and health check."""
    server = make_webhook_server(config, dispatcher)
    if not config.webhook_secret_resolved:
        LOG.error("No webhook secret configured (WEBHOOK_SECRET); every delivery will be rejected")
    LOG.info("Webhook server listening on %s:%s", config.webhook.host, config.webhook.port)
    try:
        server.serve_forever()
    finally:
        server.server_close()
