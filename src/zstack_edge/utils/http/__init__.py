"""HTTP utilities public API (barrel module).

This package provides:
- Request signing with access-key HMAC signatures
- A signed transport with stall retry for GET requests
- Response envelope parsing
- The deferred-action poller

Recommended import pattern for consumers:
    from zstack_edge.utils.http import Transport, ActionPoller, Envelope
"""

from .envelope import (
    KEY_ACTION_ID,
    KEY_CONTENT,
    KEY_RESULT,
    KEY_TOTAL,
    Envelope,
    parse_body,
)
from .poller import (
    RESULT_RESOURCE,
    ActionPoller,
    PollOutcome,
    PollState,
    classify_poll_response,
)
from .request import HTTPResponse, describe_request
from .retry import retry_on_stall
from .signing import RequestSigner, compute_signature, format_date
from .transport import Transport, create_limits, create_timeout

__all__ = [
    "KEY_ACTION_ID",
    "KEY_CONTENT",
    "KEY_RESULT",
    "KEY_TOTAL",
    "Envelope",
    "parse_body",
    "RESULT_RESOURCE",
    "ActionPoller",
    "PollOutcome",
    "PollState",
    "classify_poll_response",
    "HTTPResponse",
    "describe_request",
    "retry_on_stall",
    "RequestSigner",
    "compute_signature",
    "format_date",
    "Transport",
    "create_limits",
    "create_timeout",
]
