"""Integration tests for provider configuration and external networks."""

import json
import re
from unittest.mock import patch

import httpx
import pytest

from zstack_edge.config.settings import Settings
from zstack_edge.exceptions import AggregateError, NotSupportedError, ParameterError, ProviderError
from zstack_edge.provider import (
    EdgeProvider,
    ExternalNetworkResource,
    ExternalNetworksDataSource,
    ExternalNetworkState,
)

BASE = "/ze/open-api/v1"


@pytest.fixture(autouse=True)
def no_logging_setup():
    # keep pytest's log capture handlers on the root logger
    with patch("zstack_edge.provider.provider.setup_secure_logging") as setup:
        yield setup


class NetworkBackend:
    """Fake external network API for one cluster."""

    def __init__(self, create_status=200):
        self.networks = []
        self.create_status = create_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        if method == "GET" and path == f"{BASE}/result/net-job":
            return httpx.Response(200, json={"content": {}})

        m = re.fullmatch(f"{BASE}/external-network/(\\d+)", path)
        if m and method == "POST":
            if self.create_status != 200:
                return httpx.Response(
                    self.create_status, json={"message": "interface eth9 not found"}
                )
            body = json.loads(request.content)
            self.networks.append(
                {
                    "id": len(self.networks) + 1,
                    "cluster_id": body["clusterID"],
                    "name": body["name"],
                    "description": body["description"],
                    "iface": body["iface"],
                    "gateway": body["gateway"],
                    "netmask": body["netmask"],
                    "existNetwork": True,
                    "createTime": "2024-05-01T10:00:00+08:00",
                }
            )
            return httpx.Response(200, json={"content": {"actionId": "net-job"}})
        if m and method == "GET":
            items = self.networks
            for condition in request.url.params.get_list("q"):
                key, _, value = condition.partition("=")
                items = [n for n in items if str(n.get(key)) == value]
            return httpx.Response(
                200, json={"content": {"totalCount": len(items), "result": items}}
            )
        return httpx.Response(404, json={"message": f"no route {method} {path}"})


def _state(**overrides):
    values = dict(
        cluster_id=5,
        name="ext-net",
        description="uplink",
        gateway="10.2.0.1",
        netmask="255.255.255.0",
        interface="eth1",
    )
    values.update(overrides)
    return ExternalNetworkState(**values)


@pytest.mark.integration
class TestProviderConfigure:
    def test_uses_environment_settings(self):
        provider = EdgeProvider()
        client = provider.configure()

        assert client.config.base_url == "http://edge.test:80/ze"
        assert client.config.access_key_id == "test-access-key"
        assert provider.client is client

    def test_explicit_arguments_win(self):
        client = EdgeProvider().configure(host="10.9.9.9", access_key="ak2", secret_key="sk2")
        assert client.config.hostname == "10.9.9.9"
        assert client.config.access_key_secret == "sk2"

    def test_reports_every_missing_value(self, monkeypatch, no_logging_setup):
        for name in ("ZSTACK_HOST", "ZSTACK_ACCESS_KEY", "ZSTACK_SECRET_KEY"):
            monkeypatch.delenv(name)

        with pytest.raises(AggregateError) as exc_info:
            EdgeProvider(Settings(_env_file=None)).configure()

        errors = exc_info.value.errors
        assert [e.field for e in errors] == ["host", "access_key", "secret_key"]
        assert all(isinstance(e, ParameterError) for e in errors)
        assert "ZSTACK_HOST" in str(exc_info.value)
        no_logging_setup.assert_called_once_with("INFO")


@pytest.mark.integration
@pytest.mark.asyncio
class TestExternalNetworkResource:
    async def test_create_reads_back(self, make_client):
        backend = NetworkBackend()
        async with make_client(backend) as client:
            state = await ExternalNetworkResource(client).create(_state())

        assert state.id == "1"
        assert state.status == "Active"
        assert state.create_time == "2024-05-01 10:00:00"
        assert state.update_time == state.create_time
        paths = [(r.method, r.url.path) for r in backend.requests]
        assert paths == [
            ("POST", f"{BASE}/external-network/5"),
            ("GET", f"{BASE}/result/net-job"),
            ("GET", f"{BASE}/external-network/5"),
        ]

    async def test_create_failure_has_hint(self, make_client):
        async with make_client(NetworkBackend(create_status=400)) as client:
            with pytest.raises(ProviderError) as exc_info:
                await ExternalNetworkResource(client).create(_state(interface="eth9"))

        message = str(exc_info.value)
        assert message.startswith("Failed to create external network: ")
        assert "interface 'eth9'" in message
        assert "interface eth9 not found" in message

    async def test_read_missing_returns_none(self, make_client):
        async with make_client(NetworkBackend()) as client:
            assert await ExternalNetworkResource(client).read(_state()) is None

    async def test_update_and_delete(self, make_client):
        backend = NetworkBackend()
        async with make_client(backend) as client:
            resource = ExternalNetworkResource(client)
            with pytest.raises(ProviderError) as exc_info:
                await resource.update(_state())
            assert isinstance(exc_info.value.cause, NotSupportedError)

            await resource.delete(_state(id="1"))
        assert backend.requests == []

    async def test_data_source_filters_by_name(self, make_client):
        backend = NetworkBackend()
        async with make_client(backend) as client:
            await ExternalNetworkResource(client).create(_state(name="a"))
            await ExternalNetworkResource(client).create(_state(name="b"))
            networks = await ExternalNetworksDataSource(client).read(5, name="b")
            everything = await ExternalNetworksDataSource(client).read(5)

        assert [n.name for n in networks] == ["b"]
        assert len(everything) == 2


@pytest.mark.integration
@pytest.mark.asyncio
async def test_provider_close(make_client):
    provider = EdgeProvider()
    provider.configure(transport=httpx.MockTransport(NetworkBackend()))
    await provider.close()
    assert provider.client is None
