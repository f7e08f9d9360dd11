"""HTTP access to the Home Assistant REST API."""

from haremote.api.errors import EntityDecodeError, ErrorKind, classify_error, describe_error
from haremote.api.hub import InvalidUrlError, compose_url
from haremote.api.transport import HttpRequest, HttpResponse, Transport, UrllibTransport

__all__ = [
    "EntityDecodeError",
    "ErrorKind",
    "HttpRequest",
    "HttpResponse",
    "InvalidUrlError",
    "Transport",
    "UrllibTransport",
    "classify_error",
    "compose_url",
    "describe_error",
]
