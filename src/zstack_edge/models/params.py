"""Request parameter models for the ZStack Edge API.

Bodies are pydantic models whose field aliases are the backend's camelCase
JSON names; they are serialized with :func:`to_payload`. List queries are
built with the fluent :class:`QueryParam`, whose filter syntax mirrors a
MySQL ``WHERE`` clause (``q=name=cluster-1``).
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ClusterNodeRole(str, Enum):
    """Roles a node can take in an Edge Kubernetes cluster."""

    MASTER = "Master"
    WORKER = "Worker"
    GPU = "GPU"


class GPUProduct(str, Enum):
    """GPU vendors supported on cluster nodes."""

    ASCEND = "Ascend"
    NVIDIA = "Nvidia"
    ILUVATAR = "Iluvatar"
    HYGON = "Hygon"
    ENFLAME = "Enflame"


class ContainerRuntime(str, Enum):
    DOCKER = "docker"
    CONTAINERD = "containerd"


class ExternalNetworkIpPoolType(str, Enum):
    """Usage of an external network IP pool.

    ``Svc`` pools back LoadBalancer services, ``Pod`` pools provide
    additional pod networks.
    """

    SVC = "Svc"
    POD = "Pod"


class BaseParam(BaseModel):
    """Base model for request bodies.

    Fields are populated by name and serialized by alias.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


def to_payload(param: BaseModel) -> Dict[str, Any]:
    """Serialize a parameter model to its JSON wire form.

    :param param: Parameter model
    :type param: BaseModel
    :return: JSON-compatible dictionary with camelCase keys
    :rtype: Dict[str, Any]
    """
    return param.model_dump(mode="json", by_alias=True)


# Cluster


class ClusterCreateNodeParam(BaseParam):
    """A node of a cluster being created.

    :param name: Kubernetes node name
    :param roles: Node roles
    :param gpu_product: GPU vendor, empty when the node has no GPU
    :param management_ipv4_addr: Address on the management network
    :param business_ipv4_addr: Address on the business network
    """

    name: str
    roles: List[ClusterNodeRole] = Field(default_factory=list)
    gpu_product: str = Field("", alias="gpuProduct")
    management_ipv4_addr: str = Field(alias="managementIPv4Addr")
    business_ipv4_addr: str = Field("", alias="businessIPv4Addr")


class ClusterCreateParam(BaseParam):
    """Body of a cluster creation request.

    ``password`` is the SSH password shared by all nodes. It is encrypted
    with the access key secret before the request is sent.
    """

    name: str
    enable_ha: bool = Field(False, alias="enableHA")
    nodes: List[ClusterCreateNodeParam] = Field(default_factory=list)
    net_combined: bool = Field(False, alias="netCombined")
    port: int = 22
    password: str
    management_vip_v4: str = Field("", alias="managementVipV4")
    business_vip_v4: str = Field("", alias="businessVipV4")
    max_pod_per_node: int = Field(0, alias="maxPodPerNode")
    data_disk: Dict[str, List[str]] = Field(default_factory=dict, alias="dataDisk")
    image_data_disk: Optional[Dict[str, List[str]]] = Field(None, alias="imageDataDisk")
    pod_cidr_v4: str = Field("", alias="podCidrV4")
    service_cidr_v4: str = Field("", alias="serviceCidrV4")
    dns_server: str = Field("", alias="dnsServer")
    istio_enabled: bool = Field(False, alias="enableIstio")
    k8s_version: str = Field("", alias="k8sVersion")
    iluvatar_gpu_model: str = Field("", alias="iluvatarGpuModel")
    iluvatar_license: str = Field("", alias="iluvatarLicense")


# Node


class NodeAddObjParam(BaseParam):
    name: str
    ip: str
    business_ip: str = Field("", alias="businessIp")
    ip6: str = ""
    port: int = 22
    roles: List[ClusterNodeRole] = Field(default_factory=list)
    gpu_product: str = Field("", alias="gpuProduct")


class NodeAddParam(BaseParam):
    """Body of an add-node request.

    :param cluster_id: Target cluster
    :param nodes: Nodes to join
    :param container_runtime: Runtime installed on the new nodes
    :param password: SSH password of the nodes, encrypted before sending
    """

    cluster_id: int = Field(alias="clusterID")
    nodes: List[NodeAddObjParam] = Field(default_factory=list)
    container_runtime: ContainerRuntime = Field(
        ContainerRuntime.CONTAINERD, alias="containerRuntime"
    )
    dns_server: str = Field("", alias="dnsServer")
    image_data_disk: Optional[Dict[str, List[str]]] = Field(None, alias="imageDataDisk")
    iluvatar_license: str = Field("", alias="iluvatarLicense")
    password: str = ""


class NodeDiskQuery(BaseParam):
    ssh_ip: str = Field(alias="sshIP")
    ssh_port: int = Field(alias="sshPort")
    ssh_password: str = Field(alias="sshPassword")


# External network


class ExternalNetworkCreateParam(BaseParam):
    cluster_id: int = Field(alias="clusterID")
    name: str
    description: str = ""
    gateway: str = ""
    iface: str = ""
    netmask: str = ""


class ExternalNetworkCreateIpPoolParam(BaseParam):
    """Body of an IP pool creation request.

    The pool covers the inclusive address range ``start_ip``..``end_ip``.
    """

    name: str
    ip_pool_type: ExternalNetworkIpPoolType = Field(
        ExternalNetworkIpPoolType.SVC, alias="ipPoolType"
    )
    start_ip: str = Field(alias="startIp")
    end_ip: str = Field(alias="endIp")


class CandidateInterfaceQuery(BaseParam):
    refresh: bool = False


# Query parameters


class QueryParam:
    """Multi-valued query string builder for list endpoints.

    Every setter returns the same instance so calls can be chained::

        QueryParam().add_q("name=cluster-1").limit(20).start(0)
    """

    def __init__(self):
        self._values: Dict[str, List[str]] = {}

    def get(self, key: str) -> str:
        """Return the first value of ``key``, or an empty string."""
        values = self._values.get(key)
        return values[0] if values else ""

    def get_all(self, key: str) -> List[str]:
        return list(self._values.get(key, []))

    def set(self, key: str, value: Any) -> "QueryParam":
        self._values[key] = [_format_value(value)]
        return self

    def add(self, key: str, value: Any) -> "QueryParam":
        self._values.setdefault(key, []).append(_format_value(value))
        return self

    def add_q(self, q: str) -> "QueryParam":
        """Add a filter condition. Several conditions are combined by the backend.

        :param q: Condition such as ``name=cluster-1``
        :return: self
        """
        if self.get("q") == "":
            return self.set("q", q)
        return self.add("q", q)

    def limit(self, limit: int) -> "QueryParam":
        return self.set("limit", limit)

    def start(self, start: int) -> "QueryParam":
        return self.set("start", start)

    def count(self, count: bool) -> "QueryParam":
        return self.set("count", count)

    def group_by(self, group_by: str) -> "QueryParam":
        return self.set("groupBy", group_by)

    def reply_with_count(self, reply_with_count: bool) -> "QueryParam":
        return self.set("replyWithCount", reply_with_count)

    def filter_name(self, filter_name: str) -> "QueryParam":
        return self.set("filterName", filter_name)

    def sort(self, sort: str) -> "QueryParam":
        """Sort by a field.

        ``+key`` sorts ascending by ``key``. ``-key`` sorts descending and
        is sent as ``-key``. A bare key sorts ascending.

        :param sort: Sort expression
        :return: self
        """
        if sort.startswith("+"):
            self.set("sortDirection", "asc")
            return self.set("sort", sort[1:])
        if sort.startswith("-"):
            self.set("sortDirection", "desc")
            return self.set("sort", sort)
        self.set("sortDirection", "asc")
        return self.set("sort", sort)

    def fields(self, fields: Iterable[str]) -> "QueryParam":
        return self.set("fields", ",".join(fields))

    def to_params(self) -> List[Tuple[str, str]]:
        """Flatten into ``(key, value)`` pairs for httpx.

        :return: Query pairs, repeated keys preserved
        :rtype: List[Tuple[str, str]]
        """
        return [(k, v) for k, values in self._values.items() for v in values]

    def copy(self) -> "QueryParam":
        clone = QueryParam()
        clone._values = {k: list(v) for k, v in self._values.items()}
        return clone

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParam):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"QueryParam({self._values!r})"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def struct_to_params(param: BaseModel) -> List[Tuple[str, str]]:
    """Convert a model into query parameters.

    Field aliases become keys and list values become repeated keys.
    ``None`` fields are omitted.

    :param param: Model to convert
    :type param: BaseModel
    :return: Query pairs
    :rtype: List[Tuple[str, str]]
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in param.model_dump(by_alias=True, exclude_none=True).items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _format_value(item)) for item in value)
        else:
            pairs.append((key, _format_value(value)))
    return pairs
