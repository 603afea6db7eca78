"""Verb-level dispatcher for the ZStack Edge API.

:class:`EdgeHttpClient` builds resource URLs, sends requests through the
signed :class:`~zstack_edge.utils.http.Transport`, binds envelope content to
result types, and decides whether a mutating call waits for its deferred
action:

- ``post`` / ``put`` / ``delete`` wait for the action and return the bound
  result of the final poll.
- ``post_with_async`` / ``put_with_async`` / ``delete_with_async`` take a
  ``run_async`` flag. When set, the action ID is returned at once and the
  caller checks it later with the result endpoint.

A mutating call whose response carries no action ID completed inline; its
own response is used and nothing is polled.
"""

import logging
from typing import List, Optional, Tuple, Type, TypeVar, Union

import httpx
from pydantic import BaseModel

from ..models.params import QueryParam, struct_to_params, to_payload
from ..utils.http import (
    KEY_CONTENT,
    KEY_RESULT,
    ActionPoller,
    Envelope,
    Transport,
    describe_request,
)
from .config import EdgeConfig, RetryBudget

logger = logging.getLogger(__name__)

T = TypeVar("T")

Payload = Union[BaseModel, dict, list, None]


class EdgeHttpClient:
    """Dispatcher over one configured Edge endpoint.

    :param config: Connection settings
    :type config: EdgeConfig
    :param transport: Optional httpx transport, e.g. ``httpx.MockTransport``
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param stall_ceiling: Optional override of the GET stall ceiling
    :type stall_ceiling: Optional[float]

    .. example::
       >>> async with EdgeHttpClient(config) as client:
       ...     clusters, total = await client.page(
       ...         "/open-api/v1/cluster", QueryParam(), List[ClusterView]
       ...     )
    """

    def __init__(
        self,
        config: EdgeConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        stall_ceiling: Optional[float] = None,
    ):
        self.config = config
        kwargs = {}
        if stall_ceiling is not None:
            kwargs["stall_ceiling"] = stall_ceiling
        self.transport = Transport(config, transport=transport, **kwargs)
        self.poller = ActionPoller(self.transport, config)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    def _url(
        self, resource: str, resource_id: Optional[str] = None, spec: Optional[str] = None
    ) -> str:
        return self.config.resource_url(
            resource, str(resource_id) if resource_id is not None else None, spec
        )

    # Reads

    async def get(
        self,
        resource: str,
        target: Optional[Type[T]] = None,
        resource_id: Optional[Union[str, int]] = None,
        spec: Optional[str] = None,
        params: Optional[BaseModel] = None,
        response_key: str = KEY_CONTENT,
    ) -> Optional[T]:
        """Fetch a single resource.

        :param resource: Resource path, e.g. ``/open-api/v1/cluster``
        :param target: Result type; None discards the body
        :param resource_id: Optional resource ID appended to the path
        :param spec: Optional sub-action segment after the ID
        :param params: Optional model converted to query parameters
        :param response_key: Envelope key holding the result, ``""`` for the
            whole body
        :return: Bound result, or None when ``target`` is None
        """
        url = self._url(resource, resource_id, spec)
        query = struct_to_params(params) if params is not None else None
        response = await self.transport.request("GET", url, params=query)
        if target is None:
            return None
        return response.envelope.bind(target, response_key)

    async def list(
        self,
        resource: str,
        target: Type[T],
        params: Optional[QueryParam] = None,
        response_key: str = KEY_CONTENT,
        resource_id: Optional[Union[str, int]] = None,
        spec: Optional[str] = None,
    ) -> T:
        """Fetch a collection.

        When ``params`` asks for ``replyWithCount``, the result is read from
        ``<response_key>.result`` and the total is stored back into
        ``params`` under ``totalCount``.

        :param resource: Resource path
        :param target: Result type, usually ``List[SomeView]``
        :param params: Optional query builder
        :param response_key: Envelope key holding the collection
        :return: Bound collection
        """
        url = self._url(resource, resource_id, spec)
        query = params.to_params() if params is not None else None
        response = await self.transport.request("GET", url, params=query)
        envelope = response.envelope

        if not response_key:
            return envelope.bind(target)
        if params is not None and params.get("replyWithCount"):
            params.set("totalCount", envelope.total_count(response_key))
            return envelope.bind(target, response_key, KEY_RESULT)
        return envelope.bind(target, response_key)

    async def page(
        self,
        resource: str,
        params: Optional[QueryParam],
        target: Type[T],
        response_key: str = KEY_CONTENT,
    ) -> Tuple[T, int]:
        """Fetch one page of a collection together with the total count.

        :param resource: Resource path
        :param params: Query builder; ``replyWithCount`` is forced on
        :param target: Result type, usually ``List[SomeView]``
        :param response_key: Envelope key holding ``totalCount`` and ``result``
        :return: Tuple of (page items, total count)
        """
        params = params.copy() if params is not None else QueryParam()
        params.reply_with_count(True)
        items = await self.list(resource, target, params, response_key)
        return items, int(params.get("totalCount"))

    # Mutations

    async def _mutate(
        self,
        method: str,
        url: str,
        payload: Payload,
        query: Optional[List[Tuple[str, str]]],
        run_async: bool,
        budget: Optional[RetryBudget],
    ) -> Tuple[Optional[str], Envelope]:
        body = to_payload(payload) if isinstance(payload, BaseModel) else payload
        # an invalid budget must fail before the job is started
        budget = budget or self.config.retry_budget
        response = await self.transport.request(method, url, params=query, payload=body)
        envelope = response.envelope
        action_id = envelope.action_id

        if run_async:
            return action_id, envelope
        if action_id is None:
            logger.debug(f"{method} {url} completed without a deferred action")
            return None, envelope

        context = describe_request(method, url, dict(query or []), body)
        result = await self.poller.wait(action_id, budget, context)
        return action_id, result

    def _bind(
        self, envelope: Envelope, target: Optional[Type[T]], response_key: str
    ) -> Optional[T]:
        if target is None:
            return None
        return envelope.bind(target, response_key)

    async def post_with_async(
        self,
        resource: str,
        payload: Payload = None,
        target: Optional[Type[T]] = None,
        resource_id: Optional[Union[str, int]] = None,
        spec: Optional[str] = None,
        response_key: str = "",
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Tuple[Optional[str], Optional[T]]:
        """Create a resource, optionally without waiting for the job.

        :param resource: Resource path
        :param payload: Request body
        :param target: Result type bound from the final response
        :param response_key: Envelope key of the result, ``""`` for the whole body
        :param run_async: Return the action ID without polling
        :param budget: Poll budget, defaults to the client's budget
        :return: Tuple of (action ID or None, bound result or None)
        """
        url = self._url(resource, resource_id, spec)
        action_id, envelope = await self._mutate(
            "POST", url, payload, None, run_async, budget
        )
        if run_async:
            return action_id, None
        return action_id, self._bind(envelope, target, response_key)

    async def post(
        self,
        resource: str,
        payload: Payload = None,
        target: Optional[Type[T]] = None,
        response_key: str = "",
        budget: Optional[RetryBudget] = None,
    ) -> Optional[T]:
        _, result = await self.post_with_async(
            resource, payload, target, response_key=response_key, budget=budget
        )
        return result

    async def put_with_async(
        self,
        resource: str,
        resource_id: Union[str, int],
        payload: Payload = None,
        target: Optional[Type[T]] = None,
        spec: Optional[str] = "actions",
        response_key: str = "",
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Tuple[Optional[str], Optional[T]]:
        """Update a resource, optionally without waiting for the job.

        The sub-action segment defaults to ``actions``.

        :return: Tuple of (action ID or None, bound result or None)
        """
        url = self._url(resource, resource_id, spec)
        action_id, envelope = await self._mutate(
            "PUT", url, payload, None, run_async, budget
        )
        if run_async:
            return action_id, None
        return action_id, self._bind(envelope, target, response_key)

    async def put(
        self,
        resource: str,
        resource_id: Union[str, int],
        payload: Payload = None,
        target: Optional[Type[T]] = None,
        response_key: str = "",
        budget: Optional[RetryBudget] = None,
    ) -> Optional[T]:
        _, result = await self.put_with_async(
            resource,
            resource_id,
            payload,
            target,
            response_key=response_key,
            budget=budget,
        )
        return result

    async def delete_with_async(
        self,
        resource: str,
        resource_id: Optional[Union[str, int]] = None,
        spec: Optional[str] = None,
        params: Optional[List[Tuple[str, str]]] = None,
        target: Optional[Type[T]] = None,
        run_async: bool = False,
        budget: Optional[RetryBudget] = None,
    ) -> Tuple[Optional[str], Optional[T]]:
        """Delete a resource, optionally without waiting for the job.

        :param params: Optional query pairs, e.g. ``[("deleteMode", "Permissive")]``
        :return: Tuple of (action ID or None, bound result or None)
        """
        url = self._url(resource, resource_id, spec)
        action_id, envelope = await self._mutate(
            "DELETE", url, None, params, run_async, budget
        )
        if run_async:
            return action_id, None
        return action_id, self._bind(envelope, target, "")

    async def delete(
        self,
        resource: str,
        resource_id: Optional[Union[str, int]] = None,
        delete_mode: Optional[str] = None,
        budget: Optional[RetryBudget] = None,
    ) -> None:
        params = [("deleteMode", delete_mode)] if delete_mode else None
        await self.delete_with_async(resource, resource_id, params=params, budget=budget)
