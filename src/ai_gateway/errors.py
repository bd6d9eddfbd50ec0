"""Error taxonomy for the gateway.

Every failure the gateway reports is one of these types. The service layer
raises them; the handler layer turns them into HTTP error bodies.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""

    status_code = 500
    public_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(GatewayError):
    """Input had a structurally wrong, non-coercible shape."""

    status_code = 400
    public_message = "Invalid request"


class ConfigError(GatewayError):
    """The gateway is missing required configuration (the API key)."""

    status_code = 500
    public_message = "Missing OPENAI_API_KEY environment variable"


class UpstreamError(GatewayError):
    """The provider answered with a non-success status.

    Attributes:
        status: HTTP status returned by the provider
        body: Raw response body, passed through unchanged
    """

    status_code = 502
    public_message = "OpenAI API failed"

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500


class TransportError(GatewayError):
    """The provider could not be reached (connection failure or timeout)."""

    status_code = 502
    public_message = "OpenAI API unreachable"


class InternalError(GatewayError):
    """Any other unexpected failure, caught at the gateway boundary."""

    status_code = 500
    public_message = "Internal error"
