class RepricerError(Exception):
    """Base exception for all repricer errors."""


class ConfigurationError(RepricerError):
    """Raised when a required secret or key is not configured."""


class AuthError(RepricerError):
    """Raised for a missing or invalid caller token or webhook signature."""


class UpstreamError(RepricerError):
    """Raised when the marketplace or identity provider answers non-2xx."""

    def __init__(self, status_code, body=''):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Takealot API unreachable: {body}"
        else:
            message = f"Takealot API error: {status_code}"
        super().__init__(message)


class NotFoundError(RepricerError):
    """Raised when a product or offer lookup misses."""


class MissingOfferIdError(NotFoundError):
    """Raised when a product has no linked Takealot offer id."""


class PersistenceError(RepricerError):
    """Raised when a local store write fails."""


class InvalidPayloadError(RepricerError):
    """Raised when an inbound payload cannot be interpreted."""
