"""ZStack Edge API client.

:class:`EdgeClient` combines the verb dispatcher with the resource action
catalogue. One instance owns one connection pool; close it with
:meth:`EdgeClient.close` or use it as an async context manager::

    config = EdgeConfig.default("10.0.0.5").access_key("ak", "sk")
    async with EdgeClient(config) as client:
        clusters, total = await client.page_cluster(QueryParam().limit(20))
"""

from .basic import BasicActions
from .cluster import ClusterActions
from .http_client import EdgeHttpClient
from .network import ExternalNetworkActions
from .node import NodeActions


class EdgeClient(
    BasicActions,
    ClusterActions,
    NodeActions,
    ExternalNetworkActions,
    EdgeHttpClient,
):
    """Client for the ZStack Edge open API."""
