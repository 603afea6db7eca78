"""Structured exception classes for the ZStack Edge client.

Every error raised by the client derives from :class:`EdgeError` and
carries the backend's wire code (``"ServerError"``, ``"NotFoundError"``,
``"InvalidAccessKeyID"`` ...) so callers can classify failures without
string matching.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Type

import httpx


class EdgeError(Exception):
    """Base exception for all ZStack Edge errors.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    :param cause: Optional underlying exception
    """

    wire_code = "EdgeError"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.wire_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict(), default=str)

    def __str__(self) -> str:
        return self.message


# Status-level classification


class ServerError(EdgeError):
    """Raised when the backend answers with a 5xx status."""

    wire_code = "ServerError"


class ClientError(EdgeError):
    """Raised when the backend rejects a request with a 4xx status."""

    wire_code = "ClientError"


class UnclassifiedError(EdgeError):
    """Raised for responses that fit no other category."""

    wire_code = "UnclassifiedError"


# Transport-level failures


class TransportError(EdgeError):
    """Parent class for failures below the HTTP layer."""

    wire_code = "NetworkError"


class DNSError(TransportError):
    wire_code = "DNSError"


class UnexpectedEOFError(TransportError):
    wire_code = "EOFError"


class NetworkError(TransportError):
    wire_code = "NetworkError"


class ConnectRefusedError(TransportError):
    wire_code = "ConnectRefusedError"


class ConnectResetError(TransportError):
    wire_code = "ConnectResetError"


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds its timeout or stall ceiling."""

    wire_code = "TimeoutError"


# Semantic failures reported by the backend


class NotFoundError(EdgeError):
    wire_code = "NotFoundError"


class DuplicateIdError(EdgeError):
    wire_code = "DuplicateIdError"


class NotSupportedError(EdgeError):
    wire_code = "NotSupportedError"


class AccountReadOnlyError(EdgeError):
    wire_code = "AccountReadOnlyError"


class InvalidAccessKeyIDError(EdgeError):
    wire_code = "InvalidAccessKeyID"


class InvalidAccessKeySecretError(EdgeError):
    wire_code = "InvalidAccessKeySecret"


class InvalidAdminPermissionError(EdgeError):
    wire_code = "InvalidAdminPermission"


class InvalidAdminPasswordError(EdgeError):
    wire_code = "InvalidAdminPassword"


class AggregateError(EdgeError):
    """Collects several errors that were detected together.

    :param message: Summary message
    :param errors: The individual errors
    """

    wire_code = "AggregateError"

    def __init__(self, message: str, errors: Iterable[EdgeError]):
        """Initialize aggregate error with the collected errors."""
        self.errors: List[EdgeError] = list(errors)
        details = {"errors": [e.to_dict() for e in self.errors]}
        joined = "; ".join(e.message for e in self.errors)
        super().__init__(f"{message}: {joined}" if joined else message, details=details)


class ParameterError(EdgeError):
    """Raised when caller-supplied parameters are invalid.

    :param message: Description of the parameter problem
    :param field: Optional name of the offending parameter
    """

    wire_code = "ParameterError"

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize parameter error with message and optional field."""
        details = {}
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.field = field


class KeyNotFoundError(EdgeError):
    """Raised when a response envelope lacks a requested key path.

    :param keys: The full key path that was requested
    :param missing: The first key that could not be resolved
    """

    wire_code = "KeyNotFoundError"

    def __init__(self, keys: Iterable[str], missing: str):
        """Initialize with the requested key path."""
        self.keys = tuple(keys)
        self.missing = missing
        path = ".".join(self.keys)
        super().__init__(
            f"key {missing!r} not found in response (path {path!r})",
            details={"path": path, "missing": missing},
        )


class JobRunningError(EdgeError):
    """Signals that a deferred backend job has not finished yet.

    Used by the action poller as its retry signal. It only reaches a caller
    when the attempt budget is exhausted.
    """

    wire_code = "JobRunningError"


class ProviderError(EdgeError):
    """Raised by resource handlers with a user-facing summary.

    :param summary: Short title of the failed operation
    :param error: The underlying client error
    """

    wire_code = "ProviderError"

    def __init__(self, summary: str, error: Optional[BaseException] = None):
        """Initialize provider error from a summary and the underlying error."""
        message = f"{summary}: {error}" if error is not None else summary
        details: Dict[str, Any] = {"summary": summary}
        if isinstance(error, EdgeError):
            details["cause"] = error.code
        super().__init__(message, details=details, cause=error)
        self.summary = summary


_CODE_TABLE: Dict[str, Type[EdgeError]] = {
    cls.wire_code: cls
    for cls in (
        ServerError,
        ClientError,
        UnclassifiedError,
        DNSError,
        UnexpectedEOFError,
        NetworkError,
        ConnectRefusedError,
        ConnectResetError,
        RequestTimeoutError,
        NotFoundError,
        DuplicateIdError,
        NotSupportedError,
        AccountReadOnlyError,
        InvalidAccessKeyIDError,
        InvalidAccessKeySecretError,
        InvalidAdminPermissionError,
        InvalidAdminPasswordError,
        ParameterError,
    )
}

_STATUS_TABLE: Dict[int, Type[EdgeError]] = {
    401: InvalidAccessKeySecretError,
    403: InvalidAdminPermissionError,
    404: NotFoundError,
    405: NotSupportedError,
    409: DuplicateIdError,
    501: NotSupportedError,
}


def error_for_code(code: Optional[str]) -> Optional[Type[EdgeError]]:
    """Look up the exception class for a backend error code.

    :param code: Wire code such as ``"NotFoundError"``
    :return: Matching exception class or None
    """
    if not code:
        return None
    return _CODE_TABLE.get(code)


def error_for_status(
    status_code: int,
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> EdgeError:
    """Build a classified error for a non-success HTTP status.

    An explicit error code from the response body wins over the status.

    :param status_code: HTTP status code
    :param message: Error message
    :param code: Optional backend error code from the body
    :param details: Optional extra context
    :return: Instance of the most specific error class
    """
    details = dict(details or {})
    details["status_code"] = status_code
    cls = error_for_code(code)
    if cls is None or cls is ParameterError:
        cls = _STATUS_TABLE.get(status_code)
    if cls is None:
        if 400 <= status_code < 500:
            cls = ClientError
        elif 500 <= status_code < 600:
            cls = ServerError
        else:
            cls = UnclassifiedError
    return cls(message, details=details)


def error_for_transport(exc: httpx.TransportError, context: str) -> TransportError:
    """Classify an httpx transport failure.

    :param exc: The exception raised by httpx
    :param context: Operation context, e.g. ``"GET http://host/path"``
    :return: Classified transport error wrapping ``exc``
    """
    text = str(exc).lower()
    if isinstance(exc, httpx.TimeoutException):
        cls: Type[TransportError] = RequestTimeoutError
    elif isinstance(exc, httpx.RemoteProtocolError):
        cls = UnexpectedEOFError
    elif "refused" in text:
        cls = ConnectRefusedError
    elif "reset" in text:
        cls = ConnectResetError
    elif (
        "name or service not known" in text
        or "nodename nor servname" in text
        or "getaddrinfo" in text
        or "temporary failure in name resolution" in text
    ):
        cls = DNSError
    else:
        cls = NetworkError
    return cls(f"{context}: {exc}", details={"context": context}, cause=exc)


def wrap_error(error: EdgeError, context: str) -> EdgeError:
    """Prefix operation context onto an error, keeping its class.

    :param error: The error to wrap
    :param context: Context such as method, URL and serialized params
    :return: New error of the same class with the prefixed message
    """
    cls = type(error)
    wrapped = cls.__new__(cls)
    wrapped.__dict__.update(error.__dict__)
    wrapped.message = f"{context}: {error.message}"
    wrapped.args = (wrapped.message,)
    wrapped.details = {**error.details, "context": context}
    wrapped.cause = error
    return wrapped
