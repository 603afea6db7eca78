"""Signed HTTP transport for the ZStack Edge API.

:class:`Transport` owns the :class:`~zstack_edge.utils.http_client.SignedClient`
of one Edge client instance. It sends JSON requests, retries GET requests
that stall while waiting for response headers, and converts every failure
into a classified :class:`~zstack_edge.exceptions.EdgeError` carrying the
method, URL and parameters of the failed call.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Tuple, Union

import httpx

from ...exceptions import EdgeError, error_for_transport, wrap_error
from ..http_client import SignedClient
from .request import HTTPResponse, describe_request
from .retry import STALL_CEILING_SECONDS, STALL_PAUSE_SECONDS, retry_on_stall
from .signing import RequestSigner

if TYPE_CHECKING:
    from ...client.config import EdgeConfig

logger = logging.getLogger(__name__)

QueryValue = Union[str, int, float, bool, None]
Params = Union[Mapping[str, Any], Sequence[Tuple[str, QueryValue]]]

_TLS_HANDSHAKE_TIMEOUT = 10.0


def create_timeout(total: float) -> httpx.Timeout:
    """Create the timeout configuration for an Edge client.

    :param total: Overall request timeout in seconds
    :type total: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(total, connect=min(_TLS_HANDSHAKE_TIMEOUT, total))


def create_limits() -> httpx.Limits:
    return httpx.Limits(
        max_keepalive_connections=10, max_connections=20, keepalive_expiry=60.0
    )


class Transport:
    """Executes signed JSON requests against one Edge endpoint.

    :param config: Connection settings
    :type config: EdgeConfig
    :param transport: Optional httpx transport, e.g. ``httpx.MockTransport``
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param stall_ceiling: Wall-clock limit for retrying stalled GET requests
    :type stall_ceiling: float
    :param stall_pause: Pause between stalled GET attempts
    :type stall_pause: float
    """

    def __init__(
        self,
        config: "EdgeConfig",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        stall_ceiling: float = STALL_CEILING_SECONDS,
        stall_pause: float = STALL_PAUSE_SECONDS,
    ):
        self.config = config
        signer = RequestSigner(
            config.access_key_id,
            config.access_key_secret,
            context_path=config.context_path,
        )
        self.client = SignedClient(
            signer=signer,
            debug=config.debug_enabled,
            transport=transport,
            verify=not config.insecure,
            timeout=create_timeout(config.timeout_seconds),
            limits=create_limits(),
            headers={"Accept": "application/json"},
        )
        self._send_get = retry_on_stall(ceiling=stall_ceiling, pause=stall_pause)(
            self._send
        )

    async def _send(
        self,
        method: str,
        url: str,
        params: Optional[Params] = None,
        payload: Any = None,
    ) -> httpx.Response:
        if payload is None:
            return await self.client.request(method, url, params=params)
        return await self.client.request(method, url, params=params, json=payload)

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Params] = None,
        payload: Any = None,
        raise_for_status: bool = True,
    ) -> HTTPResponse:
        """Send one request and classify the outcome.

        GET requests that time out waiting for response headers are retried
        until the stall ceiling. Mutations are never replayed.

        :param method: HTTP method
        :param url: Fully qualified URL
        :param params: Optional query parameters
        :param payload: Optional JSON body
        :param raise_for_status: Raise a classified error for non-2xx statuses
        :return: Wrapped response
        :rtype: HTTPResponse
        :raises EdgeError: On transport failures, and on non-2xx statuses
            when ``raise_for_status`` is set
        """
        method = method.upper()
        context = describe_request(method, url, _as_dict(params), payload)
        sender = self._send_get if method == "GET" else self._send

        try:
            response = await sender(method, url, params=params, payload=payload)
        except httpx.TransportError as e:
            logger.debug(f"Transport failure: {context}: {e}")
            raise error_for_transport(e, context) from e
        except EdgeError as e:
            raise wrap_error(e, context) from e

        wrapped = HTTPResponse(response)
        if raise_for_status and not wrapped.is_success():
            error = wrapped.to_error()
            logger.debug(f"Request failed with {wrapped.status_code}: {context}")
            raise wrap_error(error, context)
        return wrapped

    async def close(self) -> None:
        await self.client.aclose()


def _as_dict(params: Optional[Params]) -> Optional[dict]:
    if params is None:
        return None
    if isinstance(params, Mapping):
        return dict(params)
    merged: dict = {}
    for key, value in params:
        merged.setdefault(key, []).append(value)
    return {k: v[0] if len(v) == 1 else v for k, v in merged.items()}
