"""ZStack Edge models package.

Request parameter models and the fluent query builder live in
:mod:`.params`; response views live in :mod:`.views`.
"""

from .params import (
    BaseParam,
    CandidateInterfaceQuery,
    ClusterCreateNodeParam,
    ClusterCreateParam,
    ClusterNodeRole,
    ContainerRuntime,
    ExternalNetworkCreateIpPoolParam,
    ExternalNetworkCreateParam,
    ExternalNetworkIpPoolType,
    GPUProduct,
    NodeAddObjParam,
    NodeAddParam,
    NodeDiskQuery,
    QueryParam,
    struct_to_params,
    to_payload,
)
from .views import (
    CLUSTER_CREATE_FAILED,
    BaseView,
    ClusterConfigView,
    ClusterDetailsView,
    ClusterOperationView,
    ClusterView,
    DiskInfoView,
    ExternalNetworkIpPoolView,
    ExternalNetworkView,
    NodeIfaceAllResult,
    NodeIfaceMap,
    NodeIfaceWithRouteIface,
    NodeInterfaceInfo,
    NodeView,
    UserProjectSimpleView,
)

__all__ = [
    "BaseParam",
    "CandidateInterfaceQuery",
    "ClusterCreateNodeParam",
    "ClusterCreateParam",
    "ClusterNodeRole",
    "ContainerRuntime",
    "ExternalNetworkCreateIpPoolParam",
    "ExternalNetworkCreateParam",
    "ExternalNetworkIpPoolType",
    "GPUProduct",
    "NodeAddObjParam",
    "NodeAddParam",
    "NodeDiskQuery",
    "QueryParam",
    "struct_to_params",
    "to_payload",
    "CLUSTER_CREATE_FAILED",
    "BaseView",
    "ClusterConfigView",
    "ClusterDetailsView",
    "ClusterOperationView",
    "ClusterView",
    "DiskInfoView",
    "ExternalNetworkIpPoolView",
    "ExternalNetworkView",
    "NodeIfaceAllResult",
    "NodeIfaceMap",
    "NodeIfaceWithRouteIface",
    "NodeInterfaceInfo",
    "NodeView",
    "UserProjectSimpleView",
]
