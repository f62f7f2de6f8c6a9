"""
Error taxonomy for the reading relay.
Each error carries the HTTP status and the message the device sees; main.py renders them as {"error": message}.
"""
from __future__ import annotations


class RelayError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidMethod(RelayError):
    status_code = 405
    message = "Method Not Allowed"
    allowed = ("POST",)


class MissingRequiredField(RelayError):
    status_code = 400
    message = "Missing required fields: hr, userId"


class InvalidPayload(RelayError):
    status_code = 400
    message = "Request body must be a JSON object"


class ConfigurationMissing(RelayError):
    status_code = 500

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__("Server misconfigured: missing " + ", ".join(self.missing))


class UpstreamCallFailed(RelayError):
    """Prediction API unreachable or answered non-2xx. Detail stays in the server log."""

    status_code = 500
    message = "Internal - API Call Failed"

    def __init__(self, detail: str | None = None, upstream_status: int | None = None):
        self.detail = detail
        self.upstream_status = upstream_status
        super().__init__()


class UpstreamBadResponse(RelayError):
    """Prediction API answered 2xx but without a usable stress_level."""

    status_code = 500
    message = "Internal - Bad API Response"

    def __init__(self, body: object = None):
        self.body = body
        super().__init__()


class PersistenceFailed(RelayError):
    """Firestore write failed. Never surfaced to the device; see relay.relay_reading."""

    def __init__(self, detail: str | None = None, upstream_status: int | None = None):
        self.detail = detail
        self.upstream_status = upstream_status
        super().__init__(f"Firestore write failed: {detail}")
