"""Transport-level webhook failures (mapped to HTTP status codes)."""


class WebhookError(Exception):
    """A delivery that cannot be processed at all."""

    status = 500


class SignatureError(WebhookError):
    """Missing or mismatching X-Hub-Signature(-256)."""

    status = 401


class PayloadError(WebhookError):
    """Body is not JSON or does not match the event's schema."""

    status = 400
