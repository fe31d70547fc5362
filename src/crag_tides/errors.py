"""Error kinds raised at the configuration and provider boundaries.

The window math never raises; only these do.  Each carries the HTTP status
the API layer answers with.
"""
from __future__ import annotations


class TidesError(Exception):
    """Base exception for tidal forecast errors."""

    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or ""


class ConfigurationError(TidesError):
    """Tidal mode enabled without the GPS/threshold it needs."""

    status_code = 400


class NotFoundError(TidesError):
    """Unknown location identifier."""

    status_code = 404


class UpstreamProviderError(TidesError):
    """Tide provider unreachable, failing, or returning a malformed response."""

    status_code = 502


class InsufficientDataError(UpstreamProviderError):
    """Provider returned fewer than two usable samples."""


class StoreUnavailableError(TidesError):
    """Location configuration store is not available."""

    status_code = 503


class CacheDeserializationError(TidesError):
    """Cached payload could not be decoded; treated as a cache miss."""


class InvalidRequestError(TidesError):
    """Malformed request parameters."""

    status_code = 400


class CacheUnavailableError(TidesError):
    """Configured cache could not be reached to apply an invalidation."""

    status_code = 503
