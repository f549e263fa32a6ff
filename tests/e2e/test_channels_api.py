"""
E2E tests for the channel and message HTTP API.
"""

from salon.infrastructure.auth import JWTVerifier


def create_channel(client, headers, name, channel_type="public", **extra):
    response = client.post(
        "/channels", json={"name": name, "type": channel_type, **extra}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthentication:
    """E2E tests for bearer authentication."""

    def test_missing_token(self, client):
        response = client.get("/channels")

        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_expired_token(self, client, salon_app, alice):
        token = salon_app.container.jwt_verifier.create_token(alice, ttl_seconds=-5)

        response = client.get("/channels", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_foreign_signature(self, client, alice):
        token = JWTVerifier(secret="someone-else").create_token(alice)

        response = client.get("/channels", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestChannelsAPI:
    """E2E tests for channel endpoints."""

    # ================================================================
    # Create
    # ================================================================

    def test_create_channel(self, client, headers_for, alice):
        body = create_channel(
            client, headers_for(alice), "General Chat", description="hello"
        )

        assert body["name"] == "General Chat"
        assert body["slug"] == "general-chat"
        assert body["type"] == "public"
        assert body["created_by"] == "alice"
        assert body["member_count"] == 1
        assert body["topic"] == f"channel.{body['id']}"
        assert body["created_at"].endswith("Z")

    def test_duplicate_name(self, client, headers_for, alice, bob):
        create_channel(client, headers_for(alice), "general")

        response = client.post(
            "/channels", json={"name": "general"}, headers=headers_for(bob)
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["errors"] == [
            {"field": "name", "message": "The name has already been taken."}
        ]

    def test_invalid_type(self, client, headers_for, alice):
        response = client.post(
            "/channels", json={"name": "x", "type": "hidden"}, headers=headers_for(alice)
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "type"

    def test_missing_name(self, client, headers_for, alice):
        response = client.post("/channels", json={}, headers=headers_for(alice))

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "The given data was invalid."
        assert body["errors"][0]["field"] == "name"

    # ================================================================
    # Read
    # ================================================================

    def test_get_by_id_and_slug(self, client, headers_for, alice, bob):
        created = create_channel(client, headers_for(alice), "Off Topic")

        by_id = client.get(f"/channels/{created['id']}", headers=headers_for(bob))
        by_slug = client.get("/channels/slug/off-topic", headers=headers_for(bob))

        assert by_id.status_code == 200
        assert by_slug.json()["id"] == created["id"]

    def test_unknown_channel(self, client, headers_for, alice):
        response = client.get("/channels/999", headers=headers_for(alice))

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_private_channel_hidden(self, client, headers_for, alice, bob):
        secret = create_channel(client, headers_for(alice), "secret", "private")

        assert client.get(
            f"/channels/{secret['id']}", headers=headers_for(bob)
        ).status_code == 404
        assert client.get(
            "/channels/slug/secret", headers=headers_for(bob)
        ).status_code == 404
        assert client.get(
            f"/channels/{secret['id']}", headers=headers_for(alice)
        ).status_code == 200

    def test_public_listing(self, client, headers_for, alice, bob):
        create_channel(client, headers_for(alice), "one")
        create_channel(client, headers_for(alice), "two")
        create_channel(client, headers_for(alice), "hidden", "private")

        body = client.get("/channels", headers=headers_for(bob)).json()

        assert [c["name"] for c in body["items"]] == ["two", "one"]
        assert body["total"] == 2
        assert body["has_more"] is False

    def test_listing_pagination(self, client, headers_for, alice):
        for i in range(5):
            create_channel(client, headers_for(alice), f"room {i}")

        body = client.get(
            "/channels", params={"page": 3, "page_size": 2}, headers=headers_for(alice)
        ).json()

        assert len(body["items"]) == 1
        assert body["last_page"] == 3

    def test_my_channels(self, client, headers_for, alice, bob):
        create_channel(client, headers_for(alice), "alice-only", "private")
        shared = create_channel(client, headers_for(alice), "shared")
        client.post(f"/channels/{shared['id']}/join", headers=headers_for(bob))

        body = client.get("/channels/mine", headers=headers_for(bob)).json()

        assert [c["name"] for c in body["items"]] == ["shared"]

    # ================================================================
    # Join / leave
    # ================================================================

    def test_join_is_idempotent(self, client, headers_for, alice, bob):
        channel = create_channel(client, headers_for(alice), "general")

        first = client.post(f"/channels/{channel['id']}/join", headers=headers_for(bob))
        second = client.post(f"/channels/{channel['id']}/join", headers=headers_for(bob))

        assert first.status_code == 200
        assert second.json()["member_count"] == 2

    def test_join_private_forbidden(self, client, headers_for, alice, bob):
        secret = create_channel(client, headers_for(alice), "secret", "private")

        response = client.post(f"/channels/{secret['id']}/join", headers=headers_for(bob))

        assert response.status_code == 403
        assert response.json() == {
            "error": "FORBIDDEN",
            "message": "Cannot join a private channel without an invitation.",
        }

    def test_join_missing(self, client, headers_for, bob):
        response = client.post("/channels/404/join", headers=headers_for(bob))

        assert response.status_code == 404

    def test_leave(self, client, headers_for, alice, bob):
        channel = create_channel(client, headers_for(alice), "general")
        client.post(f"/channels/{channel['id']}/join", headers=headers_for(bob))

        first = client.post(f"/channels/{channel['id']}/leave", headers=headers_for(bob))
        second = client.post(
            f"/channels/{channel['id']}/leave", headers=headers_for(bob)
        )

        assert first.json() == {"channel_id": channel["id"], "left": True}
        assert second.json()["left"] is False


class TestMessagesAPI:
    """E2E tests for message endpoints."""

    def test_send_and_read_history(self, client, headers_for, alice, bob):
        channel = create_channel(client, headers_for(alice), "general")
        client.post(f"/channels/{channel['id']}/join", headers=headers_for(bob))

        for principal, content in ((alice, "a"), (bob, "b"), (alice, "c")):
            response = client.post(
                f"/channels/{channel['id']}/messages",
                json={"content": content},
                headers=headers_for(principal),
            )
            assert response.status_code == 201

        body = client.get(
            f"/channels/{channel['id']}/messages", headers=headers_for(bob)
        ).json()

        assert [m["content"] for m in body["items"]] == ["a", "b", "c"]
        assert [m["position"] for m in body["items"]] == [1, 2, 3]
        assert body["items"][1]["sender"] == {"id": "bob", "display_name": "Bob"}
        assert body["items"][0]["is_read"] is False

    def test_history_pages(self, client, headers_for, alice):
        channel = create_channel(client, headers_for(alice), "general")
        for i in range(1, 6):
            client.post(
                f"/channels/{channel['id']}/messages",
                json={"content": f"m{i}"},
                headers=headers_for(alice),
            )
        url = f"/channels/{channel['id']}/messages"

        single = client.get(url, params={"page_size": 10}, headers=headers_for(alice))
        pages = [
            client.get(
                url, params={"page": n, "page_size": 2}, headers=headers_for(alice)
            ).json()
            for n in (1, 2, 3)
        ]

        assert len(single.json()["items"]) == 5
        assert [len(p["items"]) for p in pages] == [2, 2, 1]
        assert pages[0]["has_more"] and not pages[2]["has_more"]

    def test_non_member_cannot_send_or_read(self, client, headers_for, alice, carol):
        channel = create_channel(client, headers_for(alice), "general")
        url = f"/channels/{channel['id']}/messages"

        send = client.post(url, json={"content": "hi"}, headers=headers_for(carol))
        read = client.get(url, headers=headers_for(carol))

        assert send.status_code == 403
        assert send.json()["message"] == (
            "You must be a member of this channel to send messages."
        )
        assert read.status_code == 403

    def test_send_to_missing_channel(self, client, headers_for, alice):
        response = client.post(
            "/channels/77/messages", json={"content": "hi"}, headers=headers_for(alice)
        )

        assert response.status_code == 404

    def test_send_to_private_channel_looks_missing(
        self, client, headers_for, alice, carol
    ):
        """Test a non-member gets the same answer as for a missing channel."""
        secret = create_channel(client, headers_for(alice), "secret", "private")

        hidden = client.post(
            f"/channels/{secret['id']}/messages",
            json={"content": "hi"},
            headers=headers_for(carol),
        )
        missing = client.post(
            "/channels/77/messages", json={"content": "hi"}, headers=headers_for(carol)
        )
        history = client.get(
            f"/channels/{secret['id']}/messages", headers=headers_for(carol)
        )

        assert hidden.status_code == missing.status_code == history.status_code == 404
        assert hidden.json() == missing.json()

    def test_empty_content(self, client, headers_for, alice):
        channel = create_channel(client, headers_for(alice), "general")

        response = client.post(
            f"/channels/{channel['id']}/messages",
            json={"content": "   "},
            headers=headers_for(alice),
        )

        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "content", "message": "The content field is required."}
        ]


class TestBroadcastingAuth:
    """E2E tests for the subscribe authorization callback."""

    def test_member_admitted(self, client, headers_for, alice):
        channel = create_channel(client, headers_for(alice), "general")

        response = client.post(
            "/broadcasting/auth",
            json={"channel_name": f"presence-channel.{channel['id']}", "socket_id": "s1"},
            headers=headers_for(alice),
        )

        assert response.status_code == 200
        assert response.json()["channel_data"] == {"id": "alice", "display_name": "Alice"}

    def test_non_member_denied(self, client, headers_for, alice, bob):
        channel = create_channel(client, headers_for(alice), "general")

        response = client.post(
            "/broadcasting/auth",
            json={"channel_name": f"channel.{channel['id']}"},
            headers=headers_for(bob),
        )

        assert response.status_code == 403
