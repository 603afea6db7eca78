"""Response view models for the ZStack Edge API.

Views tolerate unknown fields and missing values: the backend adds fields
between releases, and a missing field takes its zero value.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CLUSTER_CREATE_FAILED = "Status_Cluster_Create_Failed"


class BaseView(BaseModel):
    """Base model for all API views.

    Provides consistent configuration including extra field handling,
    alias population, and string processing.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Go encodes empty slices and maps as null
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# Cluster views


class ClusterView(BaseView):
    """Cluster summary returned by the cluster list.

    :param id: Cluster ID
    :type id: int
    :param name: Cluster name
    :type name: str
    :param status: Lifecycle status, e.g. ``Status_Cluster_Running``
    :type status: str
    :param node_count: Number of nodes
    :type node_count: int
    :param cpu: CPU usage summary
    :type cpu: str
    :param memory: Memory usage summary
    :type memory: str
    :param storage: Storage usage summary
    :type storage: str
    """

    id: int = 0
    name: str = ""
    create_time: Optional[datetime] = Field(None, alias="createTime")
    prometheus_url: str = Field("", alias="prometheusURL")
    create_type: str = Field("", alias="createType")
    status: str = ""
    version: str = ""
    platform_component_version: str = Field("", alias="platformComponentVersion")
    node_count: int = Field(0, alias="nodeCount")
    cpu: str = ""
    memory: str = ""
    storage: str = ""

    @property
    def create_failed(self) -> bool:
        return self.status == CLUSTER_CREATE_FAILED


class ClusterDetailsView(ClusterView):
    description: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)


class ClusterConfigView(BaseView):
    kubeconfig: str = ""
    config: str = ""


class ClusterOperationView(BaseView):
    """One entry of a cluster's operation log."""

    id: int = 0
    cluster_id: int = Field(0, alias="clusterId")
    operation: str = ""
    status: str = ""
    message: str = ""
    create_time: Optional[datetime] = Field(None, alias="createTime")
    finish_time: Optional[datetime] = Field(None, alias="finishTime")
    operate_user: str = Field("", alias="operateUser")


# Node views


class NodeView(BaseView):
    id: int = 0
    name: str = ""
    cluster_id: int = Field(0, alias="clusterId")
    ip: str = ""
    role: str = ""
    status: str = ""
    cpu: str = ""
    memory: str = ""
    storage: str = ""
    create_time: Optional[datetime] = Field(None, alias="createTime")
    update_time: Optional[datetime] = Field(None, alias="updateTime")


class DiskInfoView(BaseView):
    """A non-system disk found on a prospective node.

    :param used: Whether the disk is already in use
    :type used: bool
    """

    name: str = ""
    size: int = 0
    size_str: str = Field("", alias="sizeStr")
    used: bool = False


# External network views


class ExternalNetworkView(BaseView):
    """External network attached to a cluster.

    ``cluster_id`` is sent by the backend in snake case, unlike the other
    fields.
    """

    id: int = 0
    cluster_id: int = 0
    name: str = ""
    description: str = ""
    iface: str = ""
    type: str = ""
    exist_network: bool = Field(False, alias="existNetwork")
    spider_pool_ready: bool = Field(False, alias="spiderPoolReady")
    metallb_ready: bool = Field(False, alias="metallbReady")
    netmask: str = ""
    gateway: str = ""
    cidr: str = ""
    ip_total_num: int = Field(0, alias="ipTotalNum")
    ip_used_num: int = Field(0, alias="ipUsedNum")
    create_time: Optional[datetime] = Field(None, alias="createTime")

    @property
    def status(self) -> str:
        return "Active" if self.exist_network else "Inactive"


class ExternalNetworkIpPoolView(BaseView):
    name: str = ""
    l2_name: str = Field("", alias="l2Name")
    type: str = ""
    share_type: str = Field("", alias="shareType")
    project_ids: List[int] = Field(default_factory=list, alias="projectIDs")
    ip_ranges: List[str] = Field(default_factory=list, alias="ipRanges")
    ip6_ranges: List[str] = Field(default_factory=list, alias="ip6Ranges")
    ip_total_num: int = Field(0, alias="ipTotalNum")
    ip_used_num: int = Field(0, alias="ipUsedNum")
    create_time: Optional[datetime] = Field(None, alias="createTime")
    exist_ip_used: bool = Field(False, alias="existIpUsed")
    disabled: bool = False


class NodeInterfaceInfo(BaseView):
    interface: str = ""
    ip_range: str = Field("", alias="ipRange")


class NodeIfaceMap(BaseView):
    vlan_map: Dict[str, str] = Field(default_factory=dict, alias="VlanMap")
    br_map: Dict[str, str] = Field(default_factory=dict, alias="BrMap")
    route_map: Dict[str, NodeInterfaceInfo] = Field(
        default_factory=dict, alias="RouteMap"
    )


class NodeIfaceWithRouteIface(BaseView):
    host: str = ""
    name: str = ""
    is_master: bool = Field(False, alias="isMaster")
    ifaces: List[str] = Field(default_factory=list)
    iface_with_vlan: List[str] = Field(default_factory=list, alias="ifaceWithVlan")
    node_iface_map: Optional[NodeIfaceMap] = Field(None, alias="nodeIfaceMap")


class NodeIfaceAllResult(BaseView):
    """Interfaces usable for an external network.

    :param same_ifaces: Interfaces present on every node
    :param master_same_ifaces: Interfaces present on every master node
    :param node_ifaces: Per-node interface listing
    """

    same_ifaces: List[str] = Field(default_factory=list, alias="sameIfaces")
    master_same_ifaces: List[str] = Field(
        default_factory=list, alias="masterSameIfaces"
    )
    node_ifaces: List[NodeIfaceWithRouteIface] = Field(
        default_factory=list, alias="nodeIfaces"
    )


# Project views


class UserProjectSimpleView(BaseView):
    id: int = Field(0, alias="ID")
    name: str = ""
    readonly: bool = False
    create_time: Optional[datetime] = Field(None, alias="createTime")
    operation_fail_flag: str = Field("", alias="operationFailFlag")
