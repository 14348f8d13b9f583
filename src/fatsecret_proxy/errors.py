"""Exception types mapped to HTTP error responses."""

from typing import Any


class ProxyError(Exception):
    """Base exception for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(
        self, message: str, status_code: int | None = None, details: Any = None
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(ProxyError):
    """Required request input is missing or malformed."""

    status_code = 400


class NotFound(ProxyError):
    """The vendor has no match for the requested id or barcode."""

    status_code = 404


class UpstreamUnavailable(ProxyError):
    """The vendor could not be reached at the network level."""

    status_code = 503


class UpstreamError(ProxyError):
    """The vendor answered with an error status or error envelope."""

    status_code = 502

    def __init__(
        self, message: str, vendor_status: int | None = None, details: Any = None
    ) -> None:
        super().__init__(
            message, status_code=_forwardable_status(vendor_status), details=details
        )
        self.vendor_status = vendor_status


class TokenAcquisitionFailed(ProxyError):
    """The client-credentials grant did not yield an access token."""

    status_code = 500


class TransformError(ProxyError):
    """A vendor payload had an unexpected shape."""

    status_code = 500


class NoServingData(TransformError):
    """A food detail payload carries no serving entries."""

    status_code = 404


def _forwardable_status(vendor_status: int | None) -> int:
    """Return the vendor status when it is safe to pass through."""
    if vendor_status is None or vendor_status in {401, 403}:
        return 502
    if 400 <= vendor_status <= 599:  # noqa: PLR2004
        return vendor_status
    return 502
