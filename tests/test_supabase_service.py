from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest
from supabase import PostgrestAPIError

from fakes import FakeQuery
from gemify.errors import ConfigurationError, PreferenceStoreError
from gemify.supabase_client.supabase_service import SupabaseService


def _service(query: FakeQuery):
    client = MagicMock()
    client.table.return_value = query
    return SupabaseService(client=client), client


def test_requires_environment(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        SupabaseService()


def test_get_preferences_updated_at():
    query = FakeQuery(data=[{"updated_at": "2026-01-01T00:00:00+00:00"}])
    service, client = _service(query)
    assert service.get_preferences_updated_at("u1") == "2026-01-01T00:00:00+00:00"
    client.table.assert_called_with("user_preferences")
    assert ("eq", ("user_id", "u1"), {}) in query.calls


def test_get_preferences_missing_row():
    service, _ = _service(FakeQuery(data=[]))
    assert service.get_preferences("u1") is None
    assert service.get_preferences_updated_at("u1") is None


def test_upsert_preferences_conflicts_on_user_id():
    query = FakeQuery(data=[{"user_id": "u1"}])
    service, _ = _service(query)
    service.upsert_preferences("u1", {"cozy": 0.2}, "2026-01-01T00:00:00+00:00")
    name, args, kwargs = query.calls[0]
    assert name == "upsert"
    assert args[0] == {"user_id": "u1", "cozy": 0.2, "updated_at": "2026-01-01T00:00:00+00:00"}
    assert kwargs == {"on_conflict": "user_id"}


def test_get_recent_interactions_orders_and_limits():
    rows = [{"action": "view", "count": 1, "places": {"price": 2, "ambiance": ["cozy"]}}]
    query = FakeQuery(data=rows)
    service, client = _service(query)
    assert service.get_recent_interactions("u1", limit=50) == rows
    client.table.assert_called_with("user_interactions")
    assert ("order", ("created_at",), {"desc": True}) in query.calls
    assert ("limit", (50,), {}) in query.calls


def test_read_failure_is_wrapped():
    error = PostgrestAPIError({"message": "boom", "code": "500"})
    service, _ = _service(FakeQuery(error=error))
    with pytest.raises(PreferenceStoreError) as excinfo:
        service.get_recent_interactions("u1")
    assert excinfo.value.message == "DB join error"


def test_write_failure_is_wrapped():
    error = PostgrestAPIError({"message": "boom", "code": "500"})
    service, _ = _service(FakeQuery(error=error))
    with pytest.raises(PreferenceStoreError) as excinfo:
        service.upsert_preferences("u1", {}, "2026-01-01T00:00:00+00:00")
    assert excinfo.value.message == "DB write error"


def test_transport_failure_is_wrapped():
    service, _ = _service(FakeQuery(error=httpx.ConnectError("down")))
    with pytest.raises(PreferenceStoreError) as excinfo:
        service.get_preferences_updated_at("u1")
    assert excinfo.value.message == "DB read error"


def test_interaction_rows():
    query = FakeQuery(data=[{"id": 3, "count": 2}])
    service, _ = _service(query)
    assert service.get_interaction("u1", 7, "view") == {"id": 3, "count": 2}
    service.update_interaction_count(3, 3)
    assert ("update", ({"count": 3},), {}) in query.calls
    service.insert_interaction("u1", 8, "share")
    assert ("insert", ({"user_id": "u1", "place_id": 8, "action": "share", "count": 1},), {}) in query.calls
