"""Errors raised by the resolution service

Every error carries an `error_code` (returned to clients as `errorCode`)
and the HTTP `status_code` the transport layer should respond with.

Classes:
    LinkResolverError:
        Base exception for all application-specific errors.
    InvalidAddressError:
        The target address is malformed.
    BadRequestError:
        A required identifier or field is missing or invalid.
    NotFoundError:
        No active entry exists for the given identifier.
    ConflictError:
        The generated or supplied shortcode is already in use.
    UnavailableError:
        The persistent store failed or timed out.
"""


class LinkResolverError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'INTERNAL_ERROR'
    status_code = 500


class InvalidAddressError(LinkResolverError):
    """Raised when a target address cannot be parsed or lacks a scheme/host."""

    error_code = 'INVALID_ADDRESS'
    status_code = 400


class BadRequestError(LinkResolverError):
    """Raised when a required identifier is missing or an input is invalid."""

    error_code = 'BAD_REQUEST'
    status_code = 400


class NotFoundError(LinkResolverError):
    """Raised when no active entry exists for the given identifier."""

    error_code = 'NOT_FOUND'
    status_code = 404


class ConflictError(LinkResolverError):
    """Raised when a shortcode is already in use."""

    error_code = 'CONFLICT'
    status_code = 409


class UnavailableError(LinkResolverError):
    """Raised when the persistent store is unreachable or times out."""

    error_code = 'UNAVAILABLE'
    status_code = 503
