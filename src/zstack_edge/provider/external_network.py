"""External network resource handler."""

import logging
from typing import Optional

from ..client import EdgeClient
from ..exceptions import (
    EdgeError,
    NotFoundError,
    NotSupportedError,
    ProviderError,
    wrap_error,
)
from ..models.params import QueryParam
from .state import ExternalNetworkState

logger = logging.getLogger(__name__)


class ExternalNetworkResource:
    """Create and track external networks of a cluster.

    The backend has no delete API for external networks, so deleting only
    drops the resource from state.

    :param client: Configured Edge client
    :type client: EdgeClient
    """

    def __init__(self, client: EdgeClient):
        self.client = client

    async def _refresh(self, state: ExternalNetworkState) -> ExternalNetworkState:
        params = QueryParam().add_q(f"name={state.name}")
        networks, _ = await self.client.page_external_network(state.cluster_id, params)
        if not networks:
            raise NotFoundError(
                f"external network {state.name!r} not found in cluster {state.cluster_id}"
            )
        return state.apply_view(networks[0])

    async def create(self, state: ExternalNetworkState) -> ExternalNetworkState:
        """Create the network, then read it back for its ID and times.

        :param state: Planned network
        :type state: ExternalNetworkState
        :return: State with computed attributes
        :rtype: ExternalNetworkState
        :raises ProviderError: If creation or the read-back fails
        """
        param = state.to_create_param()
        logger.debug(
            f"Creating external network {param.name} on cluster {param.cluster_id} "
            f"(interface {param.iface})"
        )
        try:
            action_id = await self.client.create_external_network(param)
        except EdgeError as e:
            raise ProviderError(
                "Failed to create external network",
                _with_hint(e, param.cluster_id, param.iface, param.gateway, param.netmask),
            ) from e
        logger.info(f"External network {param.name} created (action {action_id})")

        try:
            return await self._refresh(state)
        except EdgeError as e:
            raise ProviderError(
                "Failed to read external network after creation", e
            ) from e

    async def read(self, state: ExternalNetworkState) -> Optional[ExternalNetworkState]:
        """Refresh the network.

        :return: Updated state, or None when the network is gone and should
            be removed from state
        """
        try:
            return await self._refresh(state)
        except NotFoundError:
            logger.warning(
                f"External network {state.name} not found in backend, removing from state"
            )
            return None
        except EdgeError as e:
            raise ProviderError("Failed to read external network", e) from e

    async def update(self, state: ExternalNetworkState) -> ExternalNetworkState:
        raise ProviderError(
            "Update not supported",
            NotSupportedError(
                "External network does not support update operations. Please "
                "destroy and recreate the resource."
            ),
        )

    async def delete(self, state: ExternalNetworkState) -> None:
        logger.warning(
            f"External network {state.id} removed from state only: the API "
            "provides no delete operation"
        )

    @staticmethod
    def import_state(import_id: str) -> str:
        return import_id


def _with_hint(
    error: EdgeError, cluster_id: int, iface: str, gateway: str, netmask: str
) -> EdgeError:
    return wrap_error(
        error,
        f"check that cluster {cluster_id} exists, interface '{iface}' exists on "
        f"the cluster nodes, and gateway {gateway} / netmask {netmask} are valid",
    )
