from __future__ import annotations

import pytest

from backend.app.core.exceptions import MalformedEnvelope
from backend.app.services.jsonrpc import NoReply, Reply, SessionHandler
from backend.app.services.note_store import NoteStore
from backend.app.services.tool_dispatcher import ToolDispatcher


@pytest.fixture()
def store() -> NoteStore:
    return NoteStore()


@pytest.fixture()
def handler(store: NoteStore) -> SessionHandler:
    return SessionHandler(ToolDispatcher(store))


def _call(handler: SessionHandler, request_id, name, arguments=None):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return handler.handle({"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params})


def test_initialize_returns_server_identity(handler):
    outcome = handler.handle(
        {
            "jsonrpc": "2.0",
            "id": 0,
            "method": "initialize",
            "params": {"protocolVersion": "2024-11-05", "clientInfo": {"name": "tester"}},
        }
    )
    assert isinstance(outcome, Reply)
    assert outcome.envelope == {
        "jsonrpc": "2.0",
        "id": 0,
        "result": {
            "protocolVersion": "2024-11-05",
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {"name": "sticky-notes-mcp", "version": "1.0.0"},
        },
    }


def test_initialized_notification_has_no_reply(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert outcome == NoReply(ok=True)


def test_tools_list(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "id": "list", "method": "tools/list"})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["id"] == "list"
    names = [tool["name"] for tool in outcome.envelope["result"]["tools"]]
    assert names == ["list_notes", "create_note", "update_note", "delete_note", "search_notes"]


def test_request_id_is_echoed_exactly_once(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "id": 7, "method": "tools/list"})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["id"] == 7
    assert "result" in outcome.envelope
    assert "error" not in outcome.envelope


def test_null_id_still_counts_as_request(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "id": None, "method": "tools/list"})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["id"] is None


def test_create_note_scenario(handler, store):
    outcome = _call(handler, 1, "create_note", {"title": "A", "text": "B"})
    assert isinstance(outcome, Reply)
    text = outcome.envelope["result"]["content"][0]["text"]
    note = store.list()[0]
    assert "A" in text
    assert note.id in text

    listed = _call(handler, 2, "list_notes", {})
    assert isinstance(listed, Reply)
    assert '"title": "A"' in listed.envelope["result"]["content"][0]["text"]
    assert store.count == 1


def test_update_missing_note_maps_to_internal_error(handler):
    outcome = _call(handler, 3, "update_note", {"id": "missing", "title": "x"})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["id"] == 3
    assert outcome.envelope["error"]["code"] == -32603
    assert "not found" in outcome.envelope["error"]["message"].lower()
    assert "result" not in outcome.envelope


def test_unknown_tool_is_an_error_and_store_unchanged(handler, store):
    store.create("Existing", "note")
    before = store.list()

    outcome = _call(handler, 4, "nonexistent_tool", {})

    assert isinstance(outcome, Reply)
    assert outcome.envelope["error"]["code"] == -32603
    assert "nonexistent_tool" in outcome.envelope["error"]["message"]
    assert store.list() == before


def test_invalid_arguments_map_to_internal_error(handler, store):
    outcome = _call(handler, 5, "create_note", {"title": "only title"})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["error"]["code"] == -32603
    assert "text" in outcome.envelope["error"]["message"]
    assert store.count == 0


def test_tools_call_requires_name(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "id": 6, "method": "tools/call", "params": {}})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["error"]["code"] == -32603


def test_non_object_params_map_to_error(handler):
    outcome = handler.handle({"jsonrpc": "2.0", "id": 8, "method": "tools/list", "params": [1, 2]})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["error"]["code"] == -32603


def test_failing_notification_has_no_reply(handler, store):
    outcome = handler.handle(
        {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "delete_note", "arguments": {"id": "missing"}},
        }
    )
    assert outcome == NoReply(ok=False)


def test_notification_tool_call_still_runs(handler, store):
    outcome = handler.handle(
        {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "create_note", "arguments": {"title": "Quiet", "text": "no reply"}},
        }
    )
    assert outcome == NoReply(ok=True)
    assert store.list()[0].title == "Quiet"


def test_unknown_method_is_ignored(handler):
    request = handler.handle({"jsonrpc": "2.0", "id": 9, "method": "ping"})
    assert isinstance(request, Reply)
    assert request.envelope == {"jsonrpc": "2.0", "id": 9, "result": {}}

    notification = handler.handle({"jsonrpc": "2.0", "method": "notifications/cancelled"})
    assert notification == NoReply(ok=True)


def test_unexpected_failure_is_translated(handler, monkeypatch):
    def explode(name, arguments=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(handler.dispatcher, "call", explode)
    outcome = _call(handler, 10, "list_notes", {})
    assert isinstance(outcome, Reply)
    assert outcome.envelope["error"] == {"code": -32603, "message": "boom"}


@pytest.mark.parametrize(
    "payload",
    [
        {"jsonrpc": "2.0", "id": 1},
        {"jsonrpc": "2.0", "id": 1, "method": 12},
        {"jsonrpc": "2.0", "id": True, "method": "tools/list"},
        {"jsonrpc": "2.0", "id": [1], "method": "tools/list"},
        ["not", "an", "object"],
        "tools/list",
    ],
)
def test_malformed_envelopes_raise(handler, payload):
    with pytest.raises(MalformedEnvelope):
        handler.handle(payload)


def test_float_and_string_ids_are_echoed_unchanged(handler):
    for request_id in (2.5, "abc-1", 0):
        outcome = handler.handle({"jsonrpc": "2.0", "id": request_id, "method": "tools/list"})
        assert isinstance(outcome, Reply)
        assert outcome.envelope["id"] == request_id
        assert type(outcome.envelope["id"]) is type(request_id)
