"""Unit tests for response envelope parsing."""

import json
from typing import Dict, List

import pytest
from pydantic import ValidationError

from zstack_edge.exceptions import KeyNotFoundError, ParameterError
from zstack_edge.models.views import ClusterView
from zstack_edge.utils.http.envelope import Envelope, parse_body


class TestParseBody:
    @pytest.mark.parametrize("body", [None, b"", "   ", b"OK", "<html></html>"])
    def test_non_json_bodies_are_absent(self, body):
        assert parse_body(body) is None

    def test_broken_json_is_absent(self):
        assert parse_body(b'{"content": ') is None

    def test_object_and_array(self):
        assert parse_body(b' {"a": 1}') == {"a": 1}
        assert parse_body("[1, 2]") == [1, 2]


class TestEnvelope:
    def test_action_id(self):
        body = json.dumps({"content": {"actionId": "X"}}).encode()
        assert Envelope.parse(body).action_id == "X"

    @pytest.mark.parametrize(
        "data",
        [None, {}, {"content": {}}, {"content": {"actionId": ""}}, {"content": []}],
    )
    def test_missing_action_id(self, data):
        assert Envelope(data).action_id is None

    def test_page_with_total(self):
        items = [{"id": 1, "name": "c1"}, {"id": 2, "name": "c2"}]
        envelope = Envelope.parse(
            json.dumps({"content": {"totalCount": 42, "result": items}})
        )

        assert envelope.total_count() == 42
        clusters = envelope.bind(List[ClusterView], "content", "result")
        assert [c.model_dump(include={"id", "name"}) for c in clusters] == items

    @pytest.mark.parametrize("total", [None, "n/a", [3]])
    def test_non_integer_total(self, total):
        envelope = Envelope({"content": {"totalCount": total, "result": []}})
        with pytest.raises(ParameterError) as exc_info:
            envelope.total_count()
        assert exc_info.value.field == "totalCount"

    def test_numeric_string_total(self):
        assert Envelope({"content": {"totalCount": "7"}}).total_count() == 7

    def test_get_nested_and_whole_document(self):
        envelope = Envelope({"content": {"inner": {"value": 3}}})
        assert envelope.get("content", "inner", "value") == 3
        assert envelope.get("") == envelope.data
        assert envelope.contains("content", "inner")
        assert not envelope.contains("content", "other")

    def test_missing_key_raises(self):
        envelope = Envelope({"content": {"inner": 1}})
        with pytest.raises(KeyNotFoundError) as exc_info:
            envelope.get("content", "result")
        assert exc_info.value.missing == "result"
        assert exc_info.value.keys == ("content", "result")

    def test_empty_envelope_raises(self):
        with pytest.raises(KeyNotFoundError):
            Envelope(None).get("content")

    def test_bind_scalar_and_dict(self):
        envelope = Envelope({"content": {"flag": True, "meta": {"a": 1}}})
        assert envelope.bind(bool, "content", "flag") is True
        assert envelope.bind(Dict[str, int], "content", "meta") == {"a": 1}

    def test_bind_type_mismatch(self):
        with pytest.raises(ValidationError):
            Envelope({"content": "not-a-list"}).bind(List[int], "content")

    def test_bind_view_tolerates_nulls_and_unknown_fields(self):
        envelope = Envelope(
            {"content": {"id": 5, "name": None, "nodeCount": None, "newField": 1}}
        )
        view = envelope.bind(ClusterView, "content")
        assert view.id == 5
        assert view.name == ""
        assert view.node_count == 0
