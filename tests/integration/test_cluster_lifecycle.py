"""Integration tests for the cluster and node resource handlers.

A stateful fake Edge backend served through ``httpx.MockTransport`` runs
deferred jobs the way the real API does: mutating calls answer with an
action ID and the result endpoint reports the job outcome.
"""

import itertools
import json
import re
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from zstack_edge.exceptions import NotFoundError, NotSupportedError, ProviderError
from zstack_edge.models.params import QueryParam
from zstack_edge.models.views import CLUSTER_CREATE_FAILED
from zstack_edge.provider import (
    ClusterDataSource,
    ClusterNodeState,
    ClusterResource,
    ClustersDataSource,
    ClusterState,
    NodeAddState,
    NodeResource,
    NodesDataSource,
    NodeState,
)

BASE = "/ze/open-api/v1"
RUNNING = "Status_Cluster_Running"


class FakeEdge:
    """In-memory Edge backend.

    ``job_statuses`` lists the status codes the result endpoint returns for
    each poll of a job (the last one repeats). Jobs apply their effect when
    they succeed.
    """

    def __init__(self, job_statuses=(200,)):
        self.clusters = {}
        self.nodes = {}
        self.jobs = {}
        self.job_statuses = list(job_statuses)
        self.requests = []
        self._ids = itertools.count(1)
        self._actions = itertools.count(1)

    def add_cluster(self, name, status=RUNNING):
        cluster_id = next(self._ids)
        self.clusters[cluster_id] = {
            "id": cluster_id,
            "name": name,
            "status": status,
            "version": "v1.28.2",
            "nodeCount": 1,
            "createTime": "2024-05-01T10:00:00+08:00",
            "prometheusURL": f"http://prom/{cluster_id}",
            "description": None,
        }
        return cluster_id

    def _defer(self, effect):
        action_id = f"act-{next(self._actions)}"
        self.jobs[action_id] = {"polls": 0, "effect": effect}
        return httpx.Response(200, json={"content": {"actionId": action_id}})

    def _poll(self, action_id):
        job = self.jobs.get(action_id)
        if job is None:
            return httpx.Response(404, json={"message": f"action {action_id} not found"})
        status = self.job_statuses[min(job["polls"], len(self.job_statuses) - 1)]
        job["polls"] += 1
        if status == 200:
            job["effect"]()
            return httpx.Response(200, json={"content": {}})
        if status == 202:
            return httpx.Response(202)
        return httpx.Response(status, json={"message": "job failed on node n1"})

    def _page(self, items, request):
        for condition in request.url.params.get_list("q"):
            key, _, value = condition.partition("=")
            items = [item for item in items if str(item.get(key)) == value]
        limit = int(request.url.params.get("limit", len(items) or 1))
        start = int(request.url.params.get("start", 0))
        return httpx.Response(
            200,
            json={"content": {"totalCount": len(items), "result": items[start : start + limit]}},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        assert request.headers["Authorization"].startswith("Zstack test-access-key:")

        if method == "GET" and (m := re.fullmatch(f"{BASE}/result/(.+)", path)):
            return self._poll(m.group(1))

        if path == f"{BASE}/cluster":
            if method == "GET":
                return self._page(list(self.clusters.values()), request)
            if method == "POST":
                body = json.loads(request.content)
                return self._defer(lambda: self.add_cluster(body["name"]))

        if m := re.fullmatch(f"{BASE}/cluster/(\\d+)", path):
            cluster_id = int(m.group(1))
            if cluster_id not in self.clusters:
                return httpx.Response(404, json={"message": f"cluster {cluster_id} not found"})
            if method == "GET":
                return httpx.Response(200, json={"content": self.clusters[cluster_id]})
            if method == "DELETE":
                return self._defer(lambda: self.clusters.pop(cluster_id))

        if m := re.fullmatch(f"{BASE}/cluster/(\\d+)/recreate", path):
            cluster_id = int(m.group(1))
            return self._defer(
                lambda: self.clusters[cluster_id].update(status=RUNNING)
            )

        if m := re.fullmatch(f"{BASE}/cluster/(\\d+)/node", path):
            cluster_id = int(m.group(1))
            nodes = self.nodes.setdefault(cluster_id, [])
            if method == "GET":
                return self._page(list(nodes), request)
            if method == "POST":
                body = json.loads(request.content)
                new = [
                    {"name": n["name"], "ip": n["ip"], "clusterId": cluster_id}
                    for n in body["nodes"]
                ]
                return self._defer(lambda: nodes.extend(new))
            if method == "DELETE":
                names = request.url.params["nodenames"].split(",")
                return self._defer(
                    lambda: nodes.__setitem__(
                        slice(None), [n for n in nodes if n["name"] not in names]
                    )
                )

        return httpx.Response(404, json={"message": f"no route {method} {path}"})


@pytest.fixture(autouse=True)
def mock_sleep():
    with patch(
        "zstack_edge.utils.http.poller.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        yield sleep


def _cluster_state(name="c1"):
    return ClusterState(
        name=name,
        password="root-pw",
        nodes=[
            ClusterNodeState(
                name="n1", roles=["Master", "Worker"], management_ipv4_addr="10.0.0.1"
            )
        ],
        data_disk={"n1": ["/dev/sdb"]},
    )


@pytest.mark.integration
@pytest.mark.asyncio
class TestClusterResource:
    async def test_create_then_list_by_name(self, make_client, mock_sleep):
        backend = FakeEdge(job_statuses=[202, 202, 200])
        async with make_client(backend) as client:
            state = await ClusterResource(client).create(_cluster_state())

            clusters, total = await client.page_cluster(QueryParam().add_q("name=c1"))

        assert total == 1
        assert clusters[0].name == "c1"
        assert clusters[0].id != 0
        assert clusters[0].status != CLUSTER_CREATE_FAILED
        assert state.id == clusters[0].id
        assert state.status == RUNNING
        assert state.version == "v1.28.2"
        assert state.prometheus_url == f"http://prom/{state.id}"
        # cluster jobs poll every 10 seconds
        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(10)

    async def test_failed_cluster_is_recreated(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1", status=CLUSTER_CREATE_FAILED)
        async with make_client(backend) as client:
            state = await ClusterResource(client).create(_cluster_state())

        assert state.id == cluster_id
        assert state.status == RUNNING
        methods = [(r.method, r.url.path) for r in backend.requests]
        assert ("POST", f"{BASE}/cluster/{cluster_id}/recreate") in methods
        assert ("POST", f"{BASE}/cluster") not in methods

    async def test_existing_healthy_cluster_is_adopted(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        async with make_client(backend) as client:
            state = await ClusterResource(client).create(_cluster_state())

        assert state.id == cluster_id
        assert all(r.method == "GET" for r in backend.requests)

    async def test_create_job_failure(self, make_client, mock_sleep):
        backend = FakeEdge(job_statuses=[202, 500])
        async with make_client(backend) as client:
            with pytest.raises(ProviderError) as exc_info:
                await ClusterResource(client).create(_cluster_state())

        assert exc_info.value.summary == "Error creating cluster"
        assert "job failed on node n1" in str(exc_info.value)
        assert "root-pw" not in str(exc_info.value)
        assert backend.clusters == {}

    async def test_read_and_delete(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        async with make_client(backend) as client:
            resource = ClusterResource(client)
            state = await resource.read(ClusterState(id=cluster_id, name="c1"))
            assert state.node_count == 1

            await resource.delete(state)
            assert backend.clusters == {}

            with pytest.raises(ProviderError) as exc_info:
                await resource.read(state)
            assert exc_info.value.summary == "Error reading cluster"
            assert isinstance(exc_info.value.cause, NotFoundError)


@pytest.mark.integration
@pytest.mark.asyncio
class TestNodeResource:
    def _state(self, cluster_id):
        return NodeState(
            cluster_id=cluster_id,
            password="node-pw",
            nodes=[
                NodeAddState(name="n2", ip="10.0.0.2", roles=["Worker"]),
                NodeAddState(name="n3", ip="10.0.0.3", roles=["Worker"]),
            ],
        )

    async def test_add_and_delete_nodes(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        async with make_client(backend) as client:
            resource = NodeResource(client)
            state = await resource.create(self._state(cluster_id))
            assert state.id == "['n2', 'n3']"
            assert [n["name"] for n in backend.nodes[cluster_id]] == ["n2", "n3"]

            await resource.delete(state)
        assert backend.nodes[cluster_id] == []

    async def test_delete_not_acknowledged(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        backend.nodes[cluster_id] = [{"name": "n2"}, {"name": "n3"}]
        backend.job_statuses = [500]
        async with make_client(backend) as client:
            with pytest.raises(ProviderError) as exc_info:
                await NodeResource(client).delete(self._state(cluster_id))

        assert exc_info.value.summary == "Failed to delete nodes"
        assert [n["name"] for n in backend.nodes[cluster_id]] == ["n2", "n3"]
        polls = [r for r in backend.requests if "/result/" in r.url.path]
        assert len(polls) == 1

    async def test_update_not_supported(self, make_client):
        async with make_client(FakeEdge()) as client:
            with pytest.raises(ProviderError) as exc_info:
                await NodeResource(client).update(self._state(1))
        assert isinstance(exc_info.value.cause, NotSupportedError)


@pytest.mark.integration
@pytest.mark.asyncio
class TestDataSources:
    async def test_clusters_page_defaults(self, make_client):
        backend = FakeEdge()
        for i in range(3):
            backend.add_cluster(f"c{i}")
        async with make_client(backend) as client:
            page = await ClustersDataSource(client).read()

        assert page.limit == 20
        assert page.offset == 0
        assert page.total == 3
        assert [c.name for c in page.clusters] == ["c0", "c1", "c2"]
        params = backend.requests[0].url.params
        assert params["limit"] == "20"
        assert params["start"] == "0"

    async def test_clusters_page_window(self, make_client):
        backend = FakeEdge()
        for i in range(5):
            backend.add_cluster(f"c{i}")
        async with make_client(backend) as client:
            page = await ClustersDataSource(client).read(limit=2, offset=2)

        assert [c.name for c in page.clusters] == ["c2", "c3"]
        assert page.total == 5

    async def test_cluster_details(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        async with make_client(backend) as client:
            details = await ClusterDataSource(client).read(cluster_id)
            assert details.description == ""

            with pytest.raises(ProviderError, match="Error reading cluster"):
                await ClusterDataSource(client).read(999)

    async def test_nodes_by_name(self, make_client):
        backend = FakeEdge()
        cluster_id = backend.add_cluster("c1")
        backend.nodes[cluster_id] = [
            {"name": "n1", "ip": "10.0.0.1"},
            {"name": "n2", "ip": "10.0.0.2"},
        ]
        async with make_client(backend) as client:
            assert len(await NodesDataSource(client).read(cluster_id)) == 2
            nodes = await NodesDataSource(client).read(cluster_id, name="n2")

        assert [n.ip for n in nodes] == ["10.0.0.2"]


def test_cluster_import_state():
    assert ClusterResource.import_state("12") == 12
    with pytest.raises(ProviderError, match="Error parsing cluster ID"):
        ClusterResource.import_state("abc")
