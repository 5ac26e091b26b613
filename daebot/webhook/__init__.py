"""Webhook receiver: signature check, payload schemas, dispatch and HTTP server.

Submodules are imported directly (daebot.webhook.server,
daebot.webhook.dispatcher); payload schemas live in daebot.webhook.events.
"""

from daebot.webhook.errors import PayloadError, SignatureError, WebhookError

__all__ = ["PayloadError", "SignatureError", "WebhookError"]
