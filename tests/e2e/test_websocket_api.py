"""
E2E tests for live delivery over WebSocket.
"""

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from salon.infrastructure.shutdown.shutdown_manager import ShutdownState
from salon.main import SalonApp


def greet(ws) -> str:
    """Consume the greeting and return the socket id."""
    greeting = ws.receive_json()
    assert greeting["type"] == "connected"
    return greeting["socket_id"]


def subscribe(ws, channel_id):
    """Subscribe and return the presence snapshot."""
    ws.send_json({"type": "subscribe", "channel_id": channel_id})
    here = ws.receive_json()
    assert here["type"] == "presence.here"
    assert ws.receive_json() == {"type": "subscribed", "channel_id": channel_id}
    return here


def assert_nothing_pending(ws):
    """A ping is answered next, so nothing else was queued before it."""
    ws.send_json({"type": "ping"})
    assert ws.receive_json() == {"type": "pong"}


@pytest.fixture
def general(client, headers_for, alice, bob):
    """Public channel created by Alice and joined by Bob."""
    channel = client.post(
        "/channels", json={"name": "general"}, headers=headers_for(alice)
    ).json()
    client.post(f"/channels/{channel['id']}/join", headers=headers_for(bob))
    return channel["id"]


class TestWebSocketFlow:
    """E2E tests for the full live messaging flow."""

    # ================================================================
    # Delivery
    # ================================================================

    def test_message_reaches_others_not_sender(
        self, client, general, token_for, headers_for, alice, bob
    ):
        """
        Alice and Bob subscribe, Alice sends "hi": Bob gets message.sent,
        Alice only gets the message.stored ack, history holds "hi".
        """
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            greet(wa)
            subscribe(wa, general)

            with client.websocket_connect(f"/ws?token={token_for(bob)}") as wb:
                greet(wb)
                here = subscribe(wb, general)
                assert [m["id"] for m in here["members"]] == ["alice", "bob"]

                joining = wa.receive_json()
                assert joining["type"] == "presence.joining"
                assert joining["member"] == {"id": "bob", "display_name": "Bob"}

                wa.send_json({"type": "send", "channel_id": general, "content": "hi"})

                stored = wa.receive_json()
                assert stored["type"] == "message.stored"
                assert stored["content"] == "hi"

                sent = wb.receive_json()
                assert sent["type"] == "message.sent"
                assert sent["id"] == stored["id"]
                assert sent["channel_id"] == general
                assert sent["sender"] == {"id": "alice", "display_name": "Alice"}
                assert sent["created_at"].endswith("Z")

                assert_nothing_pending(wa)

        history = client.get(
            f"/channels/{general}/messages", headers=headers_for(bob)
        ).json()
        assert [m["content"] for m in history["items"]] == ["hi"]

    def test_http_send_excludes_socket_id(
        self, client, general, token_for, headers_for, alice, bob
    ):
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            socket_id = greet(wa)
            subscribe(wa, general)

            with client.websocket_connect(f"/ws?token={token_for(bob)}") as wb:
                greet(wb)
                subscribe(wb, general)
                wa.receive_json()  # presence.joining

                response = client.post(
                    f"/channels/{general}/messages",
                    json={"content": "from http"},
                    headers={**headers_for(alice), "X-Socket-ID": socket_id},
                )

                assert response.status_code == 201
                assert wb.receive_json()["content"] == "from http"
                assert_nothing_pending(wa)

    def test_leave_evicts_live_subscription(
        self, client, general, token_for, headers_for, alice, bob
    ):
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            greet(wa)
            subscribe(wa, general)

            with client.websocket_connect(f"/ws?token={token_for(bob)}") as wb:
                greet(wb)
                subscribe(wb, general)
                wa.receive_json()  # presence.joining

                client.post(f"/channels/{general}/leave", headers=headers_for(bob))

                assert wb.receive_json() == {
                    "type": "unsubscribed",
                    "channel_id": general,
                    "reason": "left",
                }
                leaving = wa.receive_json()
                assert leaving["type"] == "presence.leaving"
                assert leaving["member"]["id"] == "bob"

                wa.send_json({"type": "send", "channel_id": general, "content": "bye"})
                assert wa.receive_json()["type"] == "message.stored"
                assert_nothing_pending(wb)

    def test_disconnect_announces_leaving(self, client, general, token_for, alice, bob):
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            greet(wa)
            subscribe(wa, general)

            with client.websocket_connect(f"/ws?token={token_for(bob)}") as wb:
                greet(wb)
                subscribe(wb, general)
                assert wa.receive_json()["type"] == "presence.joining"

            leaving = wa.receive_json()
            assert leaving["type"] == "presence.leaving"
            assert leaving["member"]["id"] == "bob"

    # ================================================================
    # Errors
    # ================================================================

    def test_subscribe_non_member_refused(self, client, general, token_for, carol):
        with client.websocket_connect(f"/ws?token={token_for(carol)}") as wc:
            greet(wc)
            wc.send_json({"type": "subscribe", "channel_id": general})

            error = wc.receive_json()

        assert error["type"] == "error"
        assert error["code"] == "FORBIDDEN"
        assert "members" not in error

    def test_send_non_member_refused(self, client, general, token_for, carol):
        with client.websocket_connect(f"/ws?token={token_for(carol)}") as wc:
            greet(wc)
            wc.send_json({"type": "send", "channel_id": general, "content": "hey"})

            assert wc.receive_json()["code"] == "FORBIDDEN"

    def test_invalid_frames(self, client, token_for, alice):
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            greet(wa)
            wa.send_text("not json")
            not_json = wa.receive_json()
            wa.send_json({"type": "send", "channel_id": 1, "content": ""})
            blank = wa.receive_json()

            assert_nothing_pending(wa)

        assert not_json["code"] == "VALIDATION_ERROR"
        assert not_json["errors"][0]["field"] == "frame"
        assert blank["errors"] == [
            {"field": "content", "message": "The content field is required."}
        ]

    def test_stats_count_traffic(self, client, general, token_for, alice):
        with client.websocket_connect(f"/ws?token={token_for(alice)}") as wa:
            greet(wa)
            subscribe(wa, general)
            stats = client.get("/stats").json()

        assert stats["active_connections"] == 1
        assert stats["topics"] == {f"channel.{general}": 1}
        assert stats["total_frames_received"] >= 1


class TestWebSocketAdmission:
    """E2E tests for connection admission."""

    def test_missing_token_rejected(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws"):
                pass

        assert exc_info.value.code == 1008

    def test_bad_token_rejected(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws?token=garbage"):
                pass

        assert exc_info.value.code == 1008

    def test_rejected_during_shutdown(self, client, salon_app, token_for, alice):
        salon_app.container.shutdown_manager.state = ShutdownState.SHUTTING_DOWN

        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(f"/ws?token={token_for(alice)}"):
                pass

        assert exc_info.value.code == 1001

    def test_per_user_limit(self, settings, alice):
        app = SalonApp(settings.model_copy(update={"max_connections_per_user": 1}))
        token = app.container.jwt_verifier.create_token(alice)

        with TestClient(app.app) as client:
            with client.websocket_connect(f"/ws?token={token}") as first:
                greet(first)

                with client.websocket_connect(f"/ws?token={token}") as second:
                    error = second.receive_json()
                    assert error["code"] == "CONNECTION_LIMIT_EXCEEDED"
                    assert error["limit_type"] == "per_user"
                    with pytest.raises(WebSocketDisconnect) as exc_info:
                        second.receive_json()
                    assert exc_info.value.code == 1008

            stats = client.get("/stats").json()

        assert stats["connection_rejections_by_type"] == {"per_user": 1}
