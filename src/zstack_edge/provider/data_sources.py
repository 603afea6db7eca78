"""Read-only data sources."""

import logging
from typing import List, Optional

from pydantic import BaseModel

from ..client import EdgeClient
from ..exceptions import EdgeError, ProviderError
from ..models.params import QueryParam
from ..models.views import ClusterDetailsView, ClusterView, ExternalNetworkView, NodeView

logger = logging.getLogger(__name__)

DEFAULT_CLUSTER_LIMIT = 20
DEFAULT_CLUSTER_OFFSET = 0


class ClustersPage(BaseModel):
    clusters: List[ClusterView]
    limit: int
    offset: int
    total: int


class ClusterDataSource:
    def __init__(self, client: EdgeClient):
        self.client = client

    async def read(self, cluster_id: int) -> ClusterDetailsView:
        try:
            return await self.client.get_cluster_details(cluster_id)
        except EdgeError as e:
            raise ProviderError("Error reading cluster", e) from e


class ClustersDataSource:
    """One page of the cluster list.

    :param client: Configured Edge client
    :type client: EdgeClient
    """

    def __init__(self, client: EdgeClient):
        self.client = client

    async def read(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> ClustersPage:
        """List clusters.

        :param limit: Page size, 20 when omitted
        :param offset: Index of the first cluster, 0 when omitted
        :return: Clusters with the paging window and the total count
        :rtype: ClustersPage
        """
        limit = DEFAULT_CLUSTER_LIMIT if limit is None else limit
        offset = DEFAULT_CLUSTER_OFFSET if offset is None else offset
        logger.info(f"Reading clusters list (limit={limit}, offset={offset})")
        try:
            clusters, total = await self.client.page_cluster(
                QueryParam().limit(limit).start(offset)
            )
        except EdgeError as e:
            raise ProviderError("Error reading clusters", e) from e
        return ClustersPage(clusters=clusters, limit=limit, offset=offset, total=total)


class NodesDataSource:
    def __init__(self, client: EdgeClient):
        self.client = client

    async def read(self, cluster_id: int, name: Optional[str] = None) -> List[NodeView]:
        params = QueryParam()
        if name:
            params.add_q(f"name={name}")
        try:
            nodes, _ = await self.client.page_node(cluster_id, params)
        except EdgeError as e:
            raise ProviderError("Failed to query nodes", e) from e
        return nodes


class ExternalNetworksDataSource:
    def __init__(self, client: EdgeClient):
        self.client = client

    async def read(
        self, cluster_id: int, name: Optional[str] = None
    ) -> List[ExternalNetworkView]:
        params = QueryParam()
        if name:
            params.add_q(f"name={name}")
        try:
            networks, _ = await self.client.page_external_network(cluster_id, params)
        except EdgeError as e:
            raise ProviderError("Failed to query external networks", e) from e
        return networks
