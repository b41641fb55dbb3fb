"""Error taxonomy for the generator.

Request-level errors (validation, configuration, total failure, archive)
abort a request and carry the HTTP status they map to. Gateway errors are
per-task: the orchestrator records them in the status map and never lets
them escape.
"""

from typing import List, Optional


class CapsError(Exception):
    """Base class for every error raised by this package."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RequestValidationError(CapsError):
    """The inbound request could not be turned into a GenerationRequest.

    ``kind`` is ``"malformed_json"`` when the body is not JSON at all and
    ``"schema"`` when it is JSON that violates the request schema.
    """

    status_code = 400

    MALFORMED_JSON = "malformed_json"
    SCHEMA = "schema"

    def __init__(self, kind: str, issues: Optional[List[str]] = None):
        self.kind = kind
        self.issues = list(issues or [])
        if kind == self.MALFORMED_JSON:
            message = "Invalid JSON payload"
        else:
            message = f"Invalid input: {', '.join(self.issues)}"
        super().__init__(message)


class ConfigurationError(CapsError):
    """The credential for the selected provider is not configured."""

    def __init__(self, provider: str, credential: str):
        self.provider = provider
        self.credential = credential
        super().__init__(
            f"Server configuration error: missing credential {credential} "
            f"for provider '{provider}'."
        )


class GatewayError(CapsError):
    """A single model invocation failed."""

    label = "model call failed"

    def __init__(self, provider: str, raw_message: str):
        self.provider = provider
        self.raw_message = raw_message
        super().__init__(f"{provider}: {self.label}: {raw_message}")


class AuthError(GatewayError):
    label = "credential rejected"


class QuotaError(GatewayError):
    label = "rate or usage limit reached"


class TransportError(GatewayError):
    label = "service unavailable"


class TotalFailureError(CapsError):
    """Dynamic content was requested but none of it was generated."""

    def __init__(self, failed_keys: Optional[List[str]] = None):
        self.failed_keys = list(failed_keys or [])
        super().__init__(
            "Failed to generate the selected dynamic content. Please check server logs."
        )


class ArchiveError(CapsError):
    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__("Failed to create ZIP archive.")
