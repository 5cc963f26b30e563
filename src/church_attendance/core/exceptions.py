class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class NotFoundError(DomainError):
    """Raised when a member, session or record does not exist."""

    status_code = 404


class SessionExpiredError(DomainError):
    """Raised when a QR attendance session is inactive or past its expiry."""

    status_code = 410


class ConfigurationError(DomainError):
    """Raised when required store credentials or settings are missing."""


class DataFetchError(DomainError):
    """Raised when the data store fails (network, timeout, bad query)."""
