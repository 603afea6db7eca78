"""Resource and data source handlers on top of the Edge client."""

from .cluster import ClusterResource
from .data_sources import (
    ClusterDataSource,
    ClustersDataSource,
    ClustersPage,
    ExternalNetworksDataSource,
    NodesDataSource,
)
from .external_network import ExternalNetworkResource
from .node import NodeResource
from .provider import EdgeProvider
from .state import (
    ClusterNodeState,
    ClusterState,
    ExternalNetworkState,
    NodeAddState,
    NodeState,
)

__all__ = [
    "ClusterResource",
    "ClusterDataSource",
    "ClustersDataSource",
    "ClustersPage",
    "ExternalNetworksDataSource",
    "NodesDataSource",
    "ExternalNetworkResource",
    "NodeResource",
    "EdgeProvider",
    "ClusterNodeState",
    "ClusterState",
    "ExternalNetworkState",
    "NodeAddState",
    "NodeState",
]
