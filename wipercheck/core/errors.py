# wipercheck/core/errors.py


class WiperCheckError(Exception):
    """
    Base class for errors that are returned to the API caller.

    Each subclass carries the HTTP status it is surfaced with; ``message``
    is safe to show to the client.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(WiperCheckError):
    """Missing or invalid request parameters. No upstream call is made."""

    status_code = 400


class NotFoundError(WiperCheckError):
    """An address could not be geocoded to any result."""

    status_code = 400

    def __init__(self, address: str) -> None:
        super().__init__(
            f"Unrecognized address '{address}'. Check spelling or be more specific."
        )
        self.address = address


class UpstreamFailureError(WiperCheckError):
    """A required upstream call failed; details are logged, not returned."""

    status_code = 500


class ProviderError(Exception):
    """
    Raised by provider adapters and the HTTP retry wrapper.

    Never returned to the client as-is: the pipeline turns it into an
    UpstreamFailureError or drops the affected step.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ForecastUnavailableError(ProviderError):
    """The requested hour lies outside the provider's hourly forecast."""
