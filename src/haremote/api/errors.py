"""Error taxonomy for hub requests.

Every failure the command layer can observe is reduced to an ErrorKind.
Callers assert on the kind; the message text is for display only.
"""

import errno
import http.client
import json
import socket
import urllib.error
from enum import Enum


class ErrorKind(Enum):
    """Failure categories surfaced by the catalog and the dispatcher."""

    MISSING_CONFIGURATION = "missing_configuration"
    INVALID_URL = "invalid_url"
    INVALID_ARGUMENT = "invalid_argument"
    SERVER_ERROR = "server_error"
    NO_CONNECTIVITY = "no_connectivity"
    TIMEOUT = "timeout"
    HOST_UNREACHABLE = "host_unreachable"
    BAD_SERVER_RESPONSE = "bad_server_response"
    GENERIC_NETWORK_ERROR = "generic_network_error"
    DECODING_ERROR = "decoding_error"
    INVALID_RESPONSE = "invalid_response"
    UNEXPECTED_ERROR = "unexpected_error"


class EntityDecodeError(ValueError):
    """Hub response body did not have the expected entity structure."""


# errno values meaning the local network itself is down
_NO_CONNECTIVITY_ERRNOS = frozenset({errno.ENETUNREACH, errno.ENETDOWN})
_HOST_UNREACHABLE_ERRNOS = frozenset({errno.EHOSTUNREACH, errno.ECONNREFUSED})


def _unwrap(exc: BaseException) -> BaseException:
    """Return the underlying reason of a urllib URLError."""
    # HTTPError is a URLError too, but carries a response rather than a reason
    if isinstance(exc, urllib.error.URLError) and not isinstance(exc, urllib.error.HTTPError):
        reason = exc.reason
        if isinstance(reason, BaseException):
            return reason
    return exc


def classify_error(exc: BaseException) -> ErrorKind:  # noqa: PLR0911
    """Map an exception raised while talking to the hub to an ErrorKind.

    Args:
        exc: Exception from the transport or from response parsing.

    Returns:
        The matching ErrorKind. Unknown network failures fall back to
        GENERIC_NETWORK_ERROR, anything else to UNEXPECTED_ERROR.
    """
    # Decoding failures first: JSONDecodeError is a ValueError, not a network error.
    # RecursionError only reaches here from decoding an over-nested body.
    if isinstance(
        exc, (json.JSONDecodeError, UnicodeDecodeError, EntityDecodeError, RecursionError)
    ):
        return ErrorKind.DECODING_ERROR

    cause = _unwrap(exc)

    if isinstance(cause, TimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(cause, socket.gaierror):
        return ErrorKind.HOST_UNREACHABLE
    if isinstance(cause, http.client.HTTPException):
        return ErrorKind.BAD_SERVER_RESPONSE
    if isinstance(cause, OSError):
        if cause.errno in _NO_CONNECTIVITY_ERRNOS:
            return ErrorKind.NO_CONNECTIVITY
        if isinstance(cause, ConnectionRefusedError) or cause.errno in _HOST_UNREACHABLE_ERRNOS:
            return ErrorKind.HOST_UNREACHABLE
        return ErrorKind.GENERIC_NETWORK_ERROR
    if isinstance(exc, urllib.error.URLError):
        return ErrorKind.GENERIC_NETWORK_ERROR
    return ErrorKind.UNEXPECTED_ERROR


def describe_error(kind: ErrorKind, detail: str = "", status: int | None = None) -> str:  # noqa: PLR0911
    """Return a human-readable message for an error.

    Args:
        kind: The error category.
        detail: Extra context (exception text, offending value).
        status: HTTP status code for SERVER_ERROR.

    Returns:
        Message suitable for showing to the user.
    """
    if kind is ErrorKind.MISSING_CONFIGURATION:
        return detail or "API URL or API key is not configured"
    if kind is ErrorKind.INVALID_URL:
        return "Invalid API URL format"
    if kind is ErrorKind.INVALID_ARGUMENT:
        return f"Invalid argument: {detail}" if detail else "Invalid argument"
    if kind is ErrorKind.SERVER_ERROR:
        return f"Server returned error: {status if status is not None else 0}"
    if kind is ErrorKind.NO_CONNECTIVITY:
        return "No internet connection. Please check your network."
    if kind is ErrorKind.TIMEOUT:
        return "Request timed out. Please try again."
    if kind is ErrorKind.HOST_UNREACHABLE:
        return "Server not found. Please check the API URL."
    if kind is ErrorKind.BAD_SERVER_RESPONSE:
        return "Invalid server response. Please check your API key."
    if kind is ErrorKind.GENERIC_NETWORK_ERROR:
        return f"Network error: {detail}" if detail else "Network error"
    if kind is ErrorKind.DECODING_ERROR:
        return "Could not parse the server response. Format may have changed."
    if kind is ErrorKind.INVALID_RESPONSE:
        return "Invalid JSON structure"
    return f"An unexpected error occurred: {detail}" if detail else "An unexpected error occurred"
