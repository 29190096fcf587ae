"""End-to-end presence scenarios over the WebSocket transport."""

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from page_presence.adapters.config import AppConfig
from page_presence.adapters.web import PresenceWebAdapter
from page_presence.main import create_presence_server


def _make_adapter(**overrides: object) -> PresenceWebAdapter:
    return create_presence_server(AppConfig(_env_file=None, **overrides))


def _update(page_id: str, count: int) -> dict[str, object]:
    return {"event": "countUpdate", "pageId": page_id, "count": count}


def test_join_then_disconnect_updates_remaining_joiner() -> None:
    """Given C1 and C2 on /home, when C2 disconnects, then C1 is told the count is 1."""
    adapter = _make_adapter()

    with TestClient(adapter.app) as client, client.websocket_connect("/ws") as c1:
        c1.send_json({"event": "join", "pageId": "/home"})
        assert c1.receive_json() == _update("/home", 1)

        with client.websocket_connect("/ws") as c2:
            c2.send_json({"event": "join", "pageId": "/home"})
            assert c2.receive_json() == _update("/home", 2)
            assert c1.receive_json() == _update("/home", 2)

        assert c1.receive_json() == _update("/home", 1)
        assert adapter.engine.count("/home") == 1


def test_monitor_receives_current_count_without_being_counted() -> None:
    """Given two joiners, when a dashboard monitors the page, then it gets count 2."""
    adapter = _make_adapter()

    with TestClient(adapter.app) as client, client.websocket_connect("/ws") as c1:
        c1.send_json({"event": "join", "pageId": "/home"})
        assert c1.receive_json() == _update("/home", 1)

        with client.websocket_connect("/ws") as dashboard:
            with client.websocket_connect("/ws") as c2:
                c2.send_json({"event": "join", "pageId": "/home"})
                assert c2.receive_json() == _update("/home", 2)
                assert c1.receive_json() == _update("/home", 2)

                dashboard.send_json({"event": "monitor", "pageId": "/home"})
                assert dashboard.receive_json() == _update("/home", 2)
                assert adapter.engine.count("/home") == 2

            # Monitors receive later broadcasts for the page
            assert dashboard.receive_json() == _update("/home", 1)
            assert c1.receive_json() == _update("/home", 1)


def test_moving_to_another_page_updates_both_pages() -> None:
    """Given C on /a watched by a dashboard, when C joins /b, then /a drops and /b rises."""
    adapter = _make_adapter()

    with TestClient(adapter.app) as client:
        with client.websocket_connect("/ws") as dashboard, client.websocket_connect("/ws") as c:
            dashboard.send_json({"event": "monitor", "pageId": "/a"})
            assert dashboard.receive_json() == _update("/a", 0)
            dashboard.send_json({"event": "monitor", "pageId": "/b"})
            assert dashboard.receive_json() == _update("/b", 0)

            c.send_json({"event": "join", "pageId": "/a"})
            assert c.receive_json() == _update("/a", 1)
            assert dashboard.receive_json() == _update("/a", 1)

            c.send_json({"event": "join", "pageId": "/b"})
            assert dashboard.receive_json() == _update("/a", 0)
            assert dashboard.receive_json() == _update("/b", 1)
            assert c.receive_json() == _update("/b", 1)


def test_invalid_frames_are_ignored_and_connection_stays_open() -> None:
    """Given garbage and overlong frames, when sent, then they are ignored and later joins work."""
    adapter = _make_adapter(page_id_max_length=16)

    with TestClient(adapter.app) as client, client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        ws.send_json({"event": "join", "pageId": ""})
        ws.send_json({"event": "join", "pageId": "/" + "x" * 40})
        ws.send_json({"event": "dance", "pageId": "/home"})
        ws.send_bytes(b'{"event": "join-page", "pagePath": "/legacy"}')

        assert ws.receive_json() == _update("/legacy", 1)
        assert adapter.engine.snapshot().page_counts == {"/legacy": 1}


def test_closed_connections_leave_no_state_behind() -> None:
    """Given joiners and monitors, when all disconnect, then the engine is empty."""
    adapter = _make_adapter()

    with TestClient(adapter.app) as client:
        with client.websocket_connect("/ws") as c, client.websocket_connect("/ws") as d:
            c.send_json({"event": "join", "pageId": "/x"})
            assert c.receive_json() == _update("/x", 1)
            d.send_json({"event": "monitor", "pageId": "/x"})
            assert d.receive_json() == _update("/x", 1)

        snapshot = client.get("/api/presence").json()

    assert snapshot["page_counts"] == {}
    assert snapshot["connection_count"] == 0
    assert snapshot["monitored_page_count"] == 0
    assert adapter.hub.connected_count == 0


def test_admin_reset_closes_live_sockets() -> None:
    """Given a joined socket, when an admin resets, then the socket is closed for reconnect."""
    adapter = _make_adapter(admin_command_token="test-token")

    with TestClient(adapter.app) as client, client.websocket_connect("/ws") as ws:
        ws.send_json({"event": "join", "pageId": "/home"})
        assert ws.receive_json() == _update("/home", 1)

        response = client.post(
            "/admin/reset-connections", headers={"X-Admin-Token": "test-token"}
        )

        assert response.json()["forgotten_connections"] == 1
        assert response.json()["closed_sockets"] == 1
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
        assert exc_info.value.code == 1012
    assert adapter.engine.count("/home") == 0
