"""Tests for the Elasticsearch substrate request shaping and error mapping."""

from __future__ import annotations

from typing import Any

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ConnectionError as EsConnectionError
from elasticsearch import ConnectionTimeout, NotFoundError

import resources.substrates.elasticsearch.elasticsearch_substrate as substrate_module
from packages.reporting_shared.errors import (
    DataIntegrityError,
    DependencyError,
    ErrorCategory,
    codes,
)
from resources.substrates.elasticsearch import (
    ElasticsearchClientSubstrate,
    ElasticsearchSettings,
)


class _FakeResponse:
    def __init__(self, body: Any) -> None:
        self.body = body


class _FakeIndices:
    def __init__(self, client: "_FakeClient") -> None:
        self._client = client

    def get_mapping(self, **kwargs: Any) -> _FakeResponse:
        self._client.calls.append(("get_mapping", kwargs))
        if self._client.error is not None:
            raise self._client.error
        return _FakeResponse(self._client.mapping)


class _FakeClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.timeouts: list[float] = []
        self.error: Exception | None = None
        self.alive = True
        self.search_body: dict[str, Any] = {"took": 3, "hits": {}}
        self.mapping: dict[str, Any] = {
            "devices-t1": {"mappings": {"properties": {}}}
        }
        self.indices = _FakeIndices(self)
        self.closed = False

    def options(self, *, request_timeout: float) -> "_FakeClient":
        self.timeouts.append(request_timeout)
        return self

    def search(self, **kwargs: Any) -> _FakeResponse:
        self.calls.append(("search", kwargs))
        if self.error is not None:
            raise self.error
        return _FakeResponse(self.search_body)

    def ping(self) -> bool:
        if self.error is not None:
            raise self.error
        return self.alive

    def close(self) -> None:
        self.closed = True


def _api_meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr(
        substrate_module, "create_elasticsearch_client", lambda _settings: client
    )
    return client


def _substrate() -> ElasticsearchClientSubstrate:
    return ElasticsearchClientSubstrate(ElasticsearchSettings())


def test_search_targets_tenant_index_with_routing(fake_client: _FakeClient) -> None:
    """Search should hit the tenant index, route by tenant and bound the call."""
    body = {"query": {"bool": {"must": []}}, "size": 20}

    result = _substrate().search(tenant_id="t1", body=body, timeout_seconds=2.5)

    assert result == {"took": 3, "hits": {}}
    name, kwargs = fake_client.calls[0]
    assert name == "search"
    assert kwargs == {"index": "devices-t1", "body": body, "routing": "t1"}
    assert fake_client.timeouts == [2.5]


def test_search_without_tenant_uses_shared_index(fake_client: _FakeClient) -> None:
    """Empty tenant should use the shared index without routing."""
    _substrate().search(tenant_id="", body={}, timeout_seconds=1.0)

    _, kwargs = fake_client.calls[0]
    assert kwargs["index"] == "devices"
    assert kwargs["routing"] is None


def test_search_timeout_maps_to_retryable_dependency_error(
    fake_client: _FakeClient,
) -> None:
    """Client timeouts should surface as retryable dependency timeouts."""
    fake_client.error = ConnectionTimeout("read timed out")

    with pytest.raises(DependencyError) as exc_info:
        _substrate().search(tenant_id="t1", body={}, timeout_seconds=1.0)

    assert exc_info.value.code == codes.DEPENDENCY_TIMEOUT
    assert exc_info.value.retryable is True
    assert exc_info.value.metadata["index"] == "devices-t1"


def test_search_connection_failure_is_unavailable(fake_client: _FakeClient) -> None:
    """Connection failures should surface as retryable unavailability."""
    fake_client.error = EsConnectionError("refused")

    with pytest.raises(DependencyError) as exc_info:
        _substrate().search(tenant_id="t1", body={}, timeout_seconds=1.0)

    assert exc_info.value.code == codes.DEPENDENCY_UNAVAILABLE
    assert exc_info.value.retryable is True


def test_missing_index_is_non_retryable(fake_client: _FakeClient) -> None:
    """A 404 from the engine should not be retried."""
    fake_client.error = NotFoundError("index_not_found", _api_meta(404), {})

    with pytest.raises(DependencyError) as exc_info:
        _substrate().get_devices_index_mapping(tenant_id="t1", timeout_seconds=1.0)

    assert exc_info.value.retryable is False
    assert exc_info.value.metadata["status"] == "404"
    assert exc_info.value.category == ErrorCategory.DEPENDENCY


def test_get_mapping_unwraps_single_index(fake_client: _FakeClient) -> None:
    """Mapping lookup should return the only index description."""
    fake_client.mapping = {
        "devices-000001": {"mappings": {"properties": {"id": {"type": "keyword"}}}}
    }

    description = _substrate().get_devices_index_mapping(
        tenant_id="t1", timeout_seconds=1.0
    )

    assert description == {"mappings": {"properties": {"id": {"type": "keyword"}}}}
    assert fake_client.calls[0] == ("get_mapping", {"index": "devices-t1"})


def test_get_mapping_rejects_multiple_indices(fake_client: _FakeClient) -> None:
    """More than one matching index is a data-integrity failure."""
    fake_client.mapping = {"a": {"mappings": {}}, "b": {"mappings": {}}}

    with pytest.raises(DataIntegrityError, match="exactly one index"):
        _substrate().get_devices_index_mapping(tenant_id="t1", timeout_seconds=1.0)


def test_ping_false_raises_dependency_error(fake_client: _FakeClient) -> None:
    """A cluster that does not answer ping is unavailable."""
    fake_client.alive = False

    with pytest.raises(DependencyError, match="ping failed") as exc_info:
        _substrate().ping(timeout_seconds=0.5)

    assert exc_info.value.code == codes.DEPENDENCY_UNAVAILABLE
    assert fake_client.timeouts == [0.5]


def test_close_releases_client(fake_client: _FakeClient) -> None:
    substrate = _substrate()

    substrate.close()

    assert fake_client.closed is True
