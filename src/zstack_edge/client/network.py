"""External network endpoints."""

import logging
from typing import List, Optional, Tuple

from ..models.params import (
    CandidateInterfaceQuery,
    ExternalNetworkCreateIpPoolParam,
    ExternalNetworkCreateParam,
    QueryParam,
)
from ..models.views import (
    ExternalNetworkIpPoolView,
    ExternalNetworkView,
    NodeIfaceAllResult,
)

logger = logging.getLogger(__name__)

EXTERNAL_NETWORK_RESOURCE = "/open-api/v1/external-network"


def _network_path(cluster_id: int, *segments) -> str:
    return "/".join(
        [EXTERNAL_NETWORK_RESOURCE, str(cluster_id)] + [str(s) for s in segments]
    )


class ExternalNetworkActions:
    """Mixin with external network endpoints. Requires :class:`EdgeHttpClient`."""

    async def create_external_network(
        self, param: ExternalNetworkCreateParam
    ) -> Optional[str]:
        """Create an external network and wait for the job.

        :param param: Network definition
        :type param: ExternalNetworkCreateParam
        :return: Action ID of the creation job, None if it completed inline
        :rtype: Optional[str]
        """
        logger.info(
            f"Creating external network {param.name} on cluster {param.cluster_id}"
        )
        action_id, _ = await self.post_with_async(
            _network_path(param.cluster_id), param
        )
        return action_id

    async def page_external_network(
        self, cluster_id: int, params: Optional[QueryParam] = None
    ) -> Tuple[List[ExternalNetworkView], int]:
        return await self.page(
            _network_path(cluster_id), params, List[ExternalNetworkView]
        )

    async def get_external_network_candidate_interface(
        self, cluster_id: int, refresh: bool = False
    ) -> NodeIfaceAllResult:
        """Interfaces that can carry an external network on this cluster.

        :param cluster_id: Cluster to inspect
        :param refresh: Re-scan the nodes instead of using cached data
        """
        return await self.get(
            _network_path(cluster_id, "candidate-interface"),
            NodeIfaceAllResult,
            params=CandidateInterfaceQuery(refresh=refresh),
        )

    async def page_external_network_ip_pool(
        self,
        cluster_id: int,
        network_id: int,
        params: Optional[QueryParam] = None,
    ) -> Tuple[List[ExternalNetworkIpPoolView], int]:
        return await self.page(
            _network_path(cluster_id, network_id),
            params,
            List[ExternalNetworkIpPoolView],
        )

    async def create_external_network_ip_pool(
        self,
        cluster_id: int,
        network_id: int,
        param: ExternalNetworkCreateIpPoolParam,
    ) -> None:
        await self.post(_network_path(cluster_id, network_id), param)

    async def get_external_network_available_ips(
        self, cluster_id: int, network_name: str
    ) -> List[str]:
        return await self.get(
            _network_path(cluster_id, network_name, "availableIps"), List[str]
        )

    async def page_external_network_for_svc(
        self,
        cluster_id: int,
        project_id: int,
        params: Optional[QueryParam] = None,
    ) -> Tuple[List[ExternalNetworkView], int]:
        """External networks a project's services may use."""
        return await self.page(
            _network_path(cluster_id, project_id, "forSvc"),
            params,
            List[ExternalNetworkView],
        )
