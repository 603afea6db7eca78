"""Unit tests for query builders and request/response models."""

from zstack_edge.models.params import (
    CandidateInterfaceQuery,
    ClusterCreateNodeParam,
    ClusterCreateParam,
    ClusterNodeRole,
    ContainerRuntime,
    NodeAddObjParam,
    NodeAddParam,
    NodeDiskQuery,
    QueryParam,
    struct_to_params,
    to_payload,
)
from zstack_edge.models.views import (
    ClusterView,
    ExternalNetworkView,
    NodeIfaceAllResult,
    UserProjectSimpleView,
)


class TestQueryParam:
    def test_fluent_setters(self):
        params = (
            QueryParam()
            .add_q("name=c1")
            .add_q("status=Running")
            .limit(20)
            .start(40)
            .count(False)
            .group_by("status")
            .reply_with_count(True)
            .filter_name("edge")
            .fields(["id", "name"])
        )
        assert params.to_params() == [
            ("q", "name=c1"),
            ("q", "status=Running"),
            ("limit", "20"),
            ("start", "40"),
            ("count", "false"),
            ("groupBy", "status"),
            ("replyWithCount", "true"),
            ("filterName", "edge"),
            ("fields", "id,name"),
        ]
        assert params.get("q") == "name=c1"
        assert params.get_all("q") == ["name=c1", "status=Running"]
        assert params.get("missing") == ""

    def test_sort(self):
        assert QueryParam().sort("+name").to_params() == [
            ("sortDirection", "asc"),
            ("sort", "name"),
        ]
        assert QueryParam().sort("-createTime").to_params() == [
            ("sortDirection", "desc"),
            ("sort", "-createTime"),
        ]
        assert QueryParam().sort("id").to_params() == [
            ("sortDirection", "asc"),
            ("sort", "id"),
        ]

    def test_copy_is_independent(self):
        params = QueryParam().add_q("name=c1")
        clone = params.copy()
        clone.reply_with_count(True)

        assert "replyWithCount" in clone
        assert "replyWithCount" not in params
        assert clone != params
        assert params == QueryParam().add_q("name=c1")


class TestStructToParams:
    def test_aliases_and_bools(self):
        query = NodeDiskQuery(ssh_ip="10.0.0.9", ssh_port=22, ssh_password="enc")
        assert struct_to_params(query) == [
            ("sshIP", "10.0.0.9"),
            ("sshPort", "22"),
            ("sshPassword", "enc"),
        ]
        assert struct_to_params(CandidateInterfaceQuery(refresh=True)) == [
            ("refresh", "true")
        ]

    def test_lists_repeat_and_none_dropped(self):
        node = ClusterCreateNodeParam(
            name="n1",
            roles=[ClusterNodeRole.MASTER, ClusterNodeRole.WORKER],
            management_ipv4_addr="10.0.0.1",
        )
        pairs = struct_to_params(node)
        assert ("roles", "Master") in pairs
        assert ("roles", "Worker") in pairs


class TestPayloads:
    def test_cluster_create_payload_uses_wire_names(self):
        param = ClusterCreateParam(
            name="c1",
            password="pw",
            enable_ha=True,
            istio_enabled=True,
            nodes=[
                ClusterCreateNodeParam(
                    name="n1",
                    roles=[ClusterNodeRole.MASTER],
                    management_ipv4_addr="10.0.0.1",
                )
            ],
            data_disk={"n1": ["/dev/sdb"]},
        )
        payload = to_payload(param)

        assert payload["enableHA"] is True
        assert payload["enableIstio"] is True
        assert payload["dataDisk"] == {"n1": ["/dev/sdb"]}
        assert payload["nodes"][0]["managementIPv4Addr"] == "10.0.0.1"
        assert payload["nodes"][0]["roles"] == ["Master"]
        assert payload["imageDataDisk"] is None

    def test_node_add_defaults_to_containerd(self):
        param = NodeAddParam(
            cluster_id=3, nodes=[NodeAddObjParam(name="n2", ip="10.0.0.2")]
        )
        payload = to_payload(param)
        assert payload["clusterID"] == 3
        assert payload["containerRuntime"] == ContainerRuntime.CONTAINERD.value
        assert payload["nodes"][0]["port"] == 22


class TestViews:
    def test_cluster_view_aliases(self):
        view = ClusterView.model_validate(
            {
                "id": 7,
                "name": " c1 ",
                "status": "Status_Cluster_Create_Failed",
                "nodeCount": 3,
                "prometheusURL": "http://prom",
                "createTime": "2024-05-01T10:00:00+08:00",
            }
        )
        assert view.name == "c1"
        assert view.node_count == 3
        assert view.prometheus_url == "http://prom"
        assert view.create_failed is True
        assert view.create_time.year == 2024

    def test_external_network_status(self):
        active = ExternalNetworkView.model_validate({"id": 1, "cluster_id": 2, "existNetwork": True})
        assert active.cluster_id == 2
        assert active.status == "Active"
        assert ExternalNetworkView().status == "Inactive"

    def test_interface_listing_with_nulls(self):
        result = NodeIfaceAllResult.model_validate(
            {
                "sameIfaces": ["eth0"],
                "masterSameIfaces": None,
                "nodeIfaces": [
                    {
                        "host": "10.0.0.1",
                        "isMaster": True,
                        "ifaces": None,
                        "nodeIfaceMap": {"RouteMap": {"eth0": {"interface": "eth0"}}},
                    }
                ],
            }
        )
        assert result.master_same_ifaces == []
        assert result.node_ifaces[0].ifaces == []
        assert result.node_ifaces[0].node_iface_map.route_map["eth0"].interface == "eth0"

    def test_project_view_id_alias(self):
        assert UserProjectSimpleView.model_validate({"ID": 4, "name": "p"}).id == 4
