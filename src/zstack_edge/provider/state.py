"""Resource state models for the provider handlers.

A state model holds the user-supplied arguments of a resource together
with the computed attributes filled in from the backend. Handlers receive a
state, call the client, and return the updated state.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.params import (
    ClusterCreateNodeParam,
    ClusterCreateParam,
    ContainerRuntime,
    ExternalNetworkCreateParam,
    NodeAddObjParam,
    NodeAddParam,
)
from ..models.views import ClusterView, ExternalNetworkView

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class BaseState(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


# Cluster


class ClusterNodeState(BaseState):
    name: str
    roles: List[str]
    gpu_product: Optional[str] = None
    management_ipv4_addr: str
    business_ipv4_addr: str = ""

    def to_param(self) -> ClusterCreateNodeParam:
        return ClusterCreateNodeParam(
            name=self.name,
            roles=self.roles,
            gpu_product=self.gpu_product or "",
            management_ipv4_addr=self.management_ipv4_addr,
            business_ipv4_addr=self.business_ipv4_addr,
        )


class ClusterState(BaseState):
    """Arguments and computed attributes of a cluster resource.

    :param id: Cluster ID, set once the cluster exists
    :type id: Optional[int]
    :param password: SSH password of the nodes (sent encrypted)
    :type password: str
    :param nodes: Initial cluster nodes
    :type nodes: List[ClusterNodeState]
    :param data_disk: Data disks per node name
    :type data_disk: Dict[str, List[str]]
    :param status: Computed lifecycle status
    :type status: Optional[str]
    """

    id: Optional[int] = None
    name: str
    enable_ha: Optional[bool] = None
    net_combined: Optional[bool] = None
    port: int = 22
    password: str = ""
    management_vip_v4: str = ""
    business_vip_v4: str = ""
    max_pod_per_node: Optional[int] = None
    pod_cidr_v4: str = ""
    service_cidr_v4: str = ""
    dns_server: str = ""
    istio_enabled: Optional[bool] = None
    k8s_version: Optional[str] = None
    iluvatar_gpu_model: Optional[str] = None
    iluvatar_license: Optional[str] = None
    nodes: List[ClusterNodeState] = Field(default_factory=list)
    data_disk: Dict[str, List[str]] = Field(default_factory=dict)
    image_data_disk: Optional[Dict[str, List[str]]] = None

    status: Optional[str] = None
    version: Optional[str] = None
    node_count: Optional[int] = None
    create_time: Optional[str] = None
    prometheus_url: Optional[str] = None

    def to_create_param(self) -> ClusterCreateParam:
        """Build the creation request. Unset optionals take backend defaults.

        :return: Cluster creation parameters
        :rtype: ClusterCreateParam
        """
        return ClusterCreateParam(
            name=self.name,
            enable_ha=bool(self.enable_ha),
            net_combined=bool(self.net_combined),
            port=self.port,
            password=self.password,
            management_vip_v4=self.management_vip_v4,
            business_vip_v4=self.business_vip_v4,
            max_pod_per_node=self.max_pod_per_node or 0,
            pod_cidr_v4=self.pod_cidr_v4,
            service_cidr_v4=self.service_cidr_v4,
            dns_server=self.dns_server,
            istio_enabled=bool(self.istio_enabled),
            k8s_version=self.k8s_version or "",
            iluvatar_gpu_model=self.iluvatar_gpu_model or "",
            iluvatar_license=self.iluvatar_license or "",
            nodes=[node.to_param() for node in self.nodes],
            data_disk=self.data_disk,
            image_data_disk=self.image_data_disk,
        )

    def apply_view(self, view: ClusterView) -> "ClusterState":
        self.status = view.status
        self.version = view.version
        self.node_count = view.node_count
        self.create_time = str(view.create_time) if view.create_time else ""
        self.prometheus_url = view.prometheus_url
        return self


# Node


class NodeAddState(BaseState):
    name: str
    ip: str
    business_ip: str = ""
    ip6: str = ""
    port: int = 22
    roles: List[str] = Field(default_factory=list)
    gpu_product: str = ""

    def to_param(self) -> NodeAddObjParam:
        return NodeAddObjParam(
            name=self.name,
            ip=self.ip,
            business_ip=self.business_ip,
            ip6=self.ip6,
            port=self.port,
            roles=self.roles,
            gpu_product=self.gpu_product,
        )


class NodeState(BaseState):
    """Nodes joined to a cluster as one resource.

    The resource ID is the list of node names.
    """

    id: Optional[str] = None
    cluster_id: int
    password: str = ""
    container_runtime: Optional[str] = None
    dns_server: str = ""
    iluvatar_license: str = ""
    nodes: List[NodeAddState] = Field(default_factory=list)
    image_data_disk: Optional[Dict[str, List[str]]] = None

    @property
    def node_names(self) -> List[str]:
        return [node.name for node in self.nodes]

    def to_add_param(self) -> NodeAddParam:
        return NodeAddParam(
            cluster_id=self.cluster_id,
            nodes=[node.to_param() for node in self.nodes],
            container_runtime=self.container_runtime or ContainerRuntime.CONTAINERD,
            dns_server=self.dns_server,
            image_data_disk=self.image_data_disk,
            iluvatar_license=self.iluvatar_license,
            password=self.password,
        )


# External network


class ExternalNetworkState(BaseState):
    id: Optional[str] = None
    cluster_id: int
    name: str
    description: str = ""
    gateway: str = ""
    netmask: str = ""
    interface: str = ""

    status: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    def to_create_param(self) -> ExternalNetworkCreateParam:
        return ExternalNetworkCreateParam(
            cluster_id=self.cluster_id,
            name=self.name,
            description=self.description,
            gateway=self.gateway,
            netmask=self.netmask,
            iface=self.interface,
        )

    def apply_view(self, view: ExternalNetworkView) -> "ExternalNetworkState":
        """Copy backend attributes onto the state.

        The backend reports no update time, so the creation time is used
        for both.
        """
        self.id = str(view.id)
        self.cluster_id = view.cluster_id
        self.name = view.name
        self.description = view.description
        self.gateway = view.gateway
        self.netmask = view.netmask
        self.interface = view.iface
        self.status = view.status
        created = view.create_time.strftime(TIME_FORMAT) if view.create_time else ""
        self.create_time = created
        self.update_time = created
        return self
