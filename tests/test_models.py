"""Tests for nrkeys.models — wire models, Operation, results."""

import pytest
from pydantic import ValidationError

from nrkeys.models import ApiError, Credential, Envelope, MutationResult, Operation


class TestApiError:
    def test_message_only(self):
        err = ApiError.model_validate({"message": "boom"})
        assert err.locations is None
        assert err.path is None

    def test_mixed_path_segments(self):
        err = ApiError.model_validate({"message": "bad", "path": ["actor", "keys", 0]})
        assert err.path == ["actor", "keys", 0]

    def test_message_required(self):
        with pytest.raises(ValidationError):
            ApiError.model_validate({"locations": [{"line": 1, "column": 2}]})


class TestEnvelope:
    def test_has_errors(self):
        assert Envelope.model_validate({"errors": [{"message": "x"}]}).has_errors
        assert not Envelope.model_validate({"errors": []}).has_errors
        assert not Envelope.model_validate({"data": {}}).has_errors


class TestOperation:
    def test_scalars_accepted(self):
        op = Operation("q", {"s": "a", "i": 1, "f": 1.5, "b": False, "n": None})
        assert op.variables["b"] is False

    def test_no_variables(self):
        assert Operation("q").variables is None

    def test_rejects_list(self):
        with pytest.raises(TypeError, match="'ids'"):
            Operation("q", {"ids": ["a", "b"]})

    def test_rejects_dict(self):
        with pytest.raises(TypeError):
            Operation("q", {"filter": {"id": "a"}})

    def test_detached_from_caller(self):
        variables = {"id": "a"}
        op = Operation("q", variables)
        variables["id"] = "b"
        assert op.variables == {"id": "a"}

    def test_frozen(self):
        op = Operation("q")
        with pytest.raises(AttributeError):
            op.document = "other"  # type: ignore[misc]


class TestCredential:
    def test_defaults_are_na(self):
        c = Credential.from_payload({})
        assert c.to_dict() == {"id": "N/A", "key": "N/A", "name": "N/A", "type": "N/A", "notes": "N/A"}

    def test_to_dict_uses_wire_names(self):
        c = Credential.from_payload({"key": "k", "name": "n", "type": "INGEST", "notes": "x", "id": "1"})
        assert c.to_dict()["type"] == "INGEST"


class TestMutationResult:
    def test_non_dict_data(self):
        result = MutationResult(root_field="apiAccessDeleteKeys", keys_field="deletedKeys", data=[1, 2])
        assert result.payload is None
        assert result.keys == []
        assert result.ok

    def test_payload_missing(self):
        result = MutationResult(root_field="apiAccessDeleteKeys", keys_field="deletedKeys", data={})
        assert result.payload is None

    def test_null_entries_skipped(self):
        data = {"apiAccessDeleteKeys": {"deletedKeys": [None, {"id": "k1"}], "errors": [None]}}
        result = MutationResult(root_field="apiAccessDeleteKeys", keys_field="deletedKeys", data=data)
        assert result.keys == [{"id": "k1"}]
        assert result.payload_errors == []
        assert result.ok
