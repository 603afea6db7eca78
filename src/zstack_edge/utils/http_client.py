"""Signing HTTP client for the ZStack Edge API.

This module provides an ``httpx.AsyncClient`` subclass that signs every
outgoing request with the configured access key. Signing happens in
:meth:`SignedClient.send`, the single interception point httpx routes all
requests through, so direct ``client.request()`` calls and re-sent request
objects are covered alike.

Examples:
    >>> signer = RequestSigner("ak", "sk", context_path="/ze")
    >>> client = SignedClient(signer=signer)
    >>> response = await client.get("http://edge:80/ze/open-api/v1/cluster")
"""

import json
import logging
from typing import TYPE_CHECKING, Optional

import httpx

from .security import safe_log_dict, sanitize_headers, sanitize_url

if TYPE_CHECKING:
    from .http.signing import RequestSigner

logger = logging.getLogger(__name__)


class SignedClient(httpx.AsyncClient):
    """HTTP client that attaches access-key signature headers.

    Headers are recomputed on every send: the Date header is part of the
    signed string, so a request that is sent twice carries two different
    signatures.

    :param signer: Signer producing the Authorization and Date headers
    :type signer: RequestSigner
    :param debug: Log request and response details at DEBUG level
    :type debug: bool
    """

    def __init__(
        self,
        *args,
        signer: Optional["RequestSigner"] = None,
        debug: bool = False,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.signer = signer
        self.debug = debug

    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        """Sign and send a request.

        :param request: The HTTP request to send
        :type request: httpx.Request
        :param kwargs: Additional arguments to pass to the parent send method
        :return: The HTTP response
        :rtype: httpx.Response
        """
        if self.signer is not None:
            request.headers.update(
                self.signer.headers_for(request.method, request.url.path)
            )

        # The debug flag promotes wire logging to INFO
        level = logging.INFO if self.debug else logging.DEBUG
        if logger.isEnabledFor(level):
            logger.log(level, f"=== SEND: {request.method} {sanitize_url(str(request.url))}")
            logger.log(level, f"    Headers: {sanitize_headers(dict(request.headers))}")
            if request.content:
                logger.log(level, f"    Body: {_loggable_body(request.content)}")

        response = await super().send(request, **kwargs)

        if logger.isEnabledFor(level):
            logger.log(
                level,
                f"=== RECV: {response.status_code} {request.method} "
                f"{sanitize_url(str(request.url))}",
            )
        return response


def _loggable_body(content: bytes):
    try:
        return safe_log_dict(json.loads(content))
    except ValueError:
        return f"<{len(content)} bytes>"
