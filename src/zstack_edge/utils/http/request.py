"""HTTP response wrapper and request context helpers.

:class:`HTTPResponse` wraps an ``httpx.Response`` and gives access to the
parsed :class:`~.envelope.Envelope` plus status checks. Failed responses are
turned into classified client errors by :meth:`HTTPResponse.to_error`.
"""

import json
from typing import Any, Mapping, Optional

import httpx

from ...exceptions import EdgeError, error_for_code, error_for_status
from ..security import safe_log_dict, sanitize_url
from .envelope import KEY_CONTENT, Envelope

_MESSAGE_KEYS = ("message", "msg", "error", "detail", "description")
_CODE_KEYS = ("code", "errorCode", "errCode", "error")
_MAX_BODY_IN_MESSAGE = 500


def describe_request(
    method: str,
    url: str,
    params: Optional[Mapping[str, Any]] = None,
    payload: Any = None,
) -> str:
    """Format method, URL and serialized parameters for error context.

    Secrets are redacted before they reach the message.

    :param method: HTTP method
    :param url: Request URL
    :param params: Optional query parameters
    :param payload: Optional JSON body
    :return: Context string such as ``POST http://h/ze/x {"name": "a"}``
    """
    parts = [method.upper(), sanitize_url(url)]
    if params:
        parts.append(json.dumps(safe_log_dict(dict(params)), default=str))
    if payload is not None:
        parts.append(json.dumps(safe_log_dict(payload), default=str))
    return " ".join(parts)


class HTTPResponse:
    """Wrapper for HTTP responses with envelope access.

    :param response: The underlying httpx.Response object
    :type response: httpx.Response
    """

    def __init__(self, response: httpx.Response):
        self.response = response
        self._envelope: Optional[Envelope] = None

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def text(self) -> str:
        return self.response.text

    @property
    def envelope(self) -> Envelope:
        """Parsed body, cached after the first access.

        :return: Envelope of the response body
        :rtype: Envelope
        """
        if self._envelope is None:
            self._envelope = Envelope.parse(self.response.content)
        return self._envelope

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def to_error(self) -> EdgeError:
        """Classify a failed response.

        The message and error code are taken from the body when it carries
        them (at the top level or under ``content``); otherwise the raw body
        is quoted.

        :return: Classified error for this response
        :rtype: EdgeError
        """
        message, code = _extract_message(self.envelope.data)
        if not message:
            body = self.text.strip()[:_MAX_BODY_IN_MESSAGE]
            message = f"StatusCode: {self.status_code}, Response: {body or '<empty>'}"
        return error_for_status(self.status_code, message, code=code)


def _extract_message(data: Any):
    message: Optional[str] = None
    code: Optional[str] = None
    candidates = [data]
    if isinstance(data, dict) and isinstance(data.get(KEY_CONTENT), dict):
        candidates.append(data[KEY_CONTENT])
    for node in candidates:
        if not isinstance(node, dict):
            continue
        if message is None:
            for key in _MESSAGE_KEYS:
                value = node.get(key)
                if isinstance(value, str) and value:
                    message = value
                    break
        if code is None:
            for key in _CODE_KEYS:
                value = node.get(key)
                if isinstance(value, str) and error_for_code(value) is not None:
                    code = value
                    break
    return message, code
