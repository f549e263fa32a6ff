"""
Unit tests for application use cases.

Dependencies are mocked with AsyncMock.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from salon.application.services import AuthorizationGate
from salon.application.use_cases import (
    AuthenticatePrincipal,
    CreateChannel,
    CreateChannelCommand,
    GetChannel,
    GetMessageHistory,
    JoinChannel,
    LeaveChannel,
    ListChannels,
    SendMessage,
    SendMessageCommand,
)
from salon.domain.entities.channel import Channel, Visibility
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from salon.domain.value_objects import Page

ALICE = Principal(id="alice", display_name="Alice")
PUBLIC = Channel(id=1, name="general", slug="general", created_by="alice")
PRIVATE = Channel(
    id=2, name="secret", slug="secret", created_by="bob", visibility=Visibility.PRIVATE
)


def store_with(channel, is_member=False):
    store = AsyncMock()
    store.find_by_id.return_value = channel
    store.find_by_slug.return_value = channel
    store.is_member.return_value = is_member
    return store


class TestCreateChannel:
    """Unit tests for CreateChannel."""

    async def test_create_public_by_default(self):
        store = AsyncMock()
        store.create.return_value = PUBLIC

        result = await CreateChannel(store).execute(
            ALICE, CreateChannelCommand(name="general")
        )

        assert result == PUBLIC
        store.create.assert_awaited_once_with(
            name="general",
            visibility=Visibility.PUBLIC,
            creator_id="alice",
            description=None,
        )

    async def test_create_private(self):
        store = AsyncMock()
        store.create.return_value = PRIVATE

        await CreateChannel(store).execute(
            ALICE, CreateChannelCommand(name="secret", visibility="private")
        )

        assert store.create.await_args.kwargs["visibility"] is Visibility.PRIVATE

    async def test_invalid_visibility(self):
        store = AsyncMock()

        with pytest.raises(ValidationError) as exc_info:
            await CreateChannel(store).execute(
                ALICE, CreateChannelCommand(name="x", visibility="secretive")
            )

        assert exc_info.value.errors[0].field == "type"
        store.create.assert_not_awaited()


class TestJoinChannel:
    """Unit tests for JoinChannel."""

    async def test_join_public(self):
        store = store_with(PUBLIC)
        use_case = JoinChannel(store, AuthorizationGate(store))

        await use_case.execute(ALICE, 1)

        store.add_member.assert_awaited_once_with(1, "alice")

    async def test_join_private_forbidden(self):
        store = store_with(PRIVATE)
        use_case = JoinChannel(store, AuthorizationGate(store))

        with pytest.raises(AuthorizationError):
            await use_case.execute(ALICE, 2)

        store.add_member.assert_not_awaited()

    async def test_join_missing(self):
        store = store_with(None)
        use_case = JoinChannel(store, AuthorizationGate(store))

        with pytest.raises(NotFoundError):
            await use_case.execute(ALICE, 9)


class TestLeaveChannel:
    """Unit tests for LeaveChannel."""

    async def test_leave_goes_through_broker(self):
        store = store_with(PUBLIC, is_member=True)
        broker = AsyncMock()
        broker.leave.return_value = True
        use_case = LeaveChannel(store, AuthorizationGate(store), broker)

        assert await use_case.execute(ALICE, 1) is True

        broker.leave.assert_awaited_once_with(1, "alice")

    async def test_leave_twice_is_noop(self):
        store = store_with(PUBLIC)
        broker = AsyncMock()
        broker.leave.return_value = False

        result = await LeaveChannel(store, AuthorizationGate(store), broker).execute(
            ALICE, 1
        )

        assert result is False

    async def test_leave_hidden_private(self):
        store = store_with(PRIVATE, is_member=False)
        broker = AsyncMock()

        with pytest.raises(NotFoundError):
            await LeaveChannel(store, AuthorizationGate(store), broker).execute(
                ALICE, 2
            )

        broker.leave.assert_not_awaited()


class TestGetChannel:
    """Unit tests for GetChannel."""

    async def test_by_slug(self):
        store = store_with(PUBLIC)

        result = await GetChannel(store, AuthorizationGate(store)).by_slug(
            ALICE, "general"
        )

        assert result == PUBLIC

    async def test_private_hidden_from_non_member(self):
        store = store_with(PRIVATE)

        with pytest.raises(NotFoundError):
            await GetChannel(store, AuthorizationGate(store)).by_id(ALICE, 2)

    async def test_private_visible_to_member(self):
        store = store_with(PRIVATE, is_member=True)

        assert await GetChannel(store, AuthorizationGate(store)).by_id(ALICE, 2)


class TestListChannels:
    """Unit tests for ListChannels."""

    async def test_default_page_size(self):
        store = AsyncMock()
        store.list_public.return_value = Page()

        await ListChannels(store, default_page_size=20).public()

        store.list_public.assert_awaited_once_with(1, 20)

    async def test_page_size_clamped(self):
        store = AsyncMock()
        store.list_for_user.return_value = Page()

        await ListChannels(store, max_page_size=100).mine(ALICE, page=2, page_size=500)

        store.list_for_user.assert_awaited_once_with("alice", 2, 100)


class TestGetMessageHistory:
    """Unit tests for GetMessageHistory."""

    async def test_member_reads(self):
        store = store_with(PUBLIC, is_member=True)
        messages = AsyncMock()
        messages.page_for_channel.return_value = Page()
        use_case = GetMessageHistory(store, messages, AuthorizationGate(store))

        await use_case.execute(ALICE, 1, page=1, page_size=10)

        messages.page_for_channel.assert_awaited_once_with(1, 1, 10)

    async def test_non_member_forbidden(self):
        store = store_with(PUBLIC, is_member=False)
        messages = AsyncMock()
        use_case = GetMessageHistory(store, messages, AuthorizationGate(store))

        with pytest.raises(AuthorizationError):
            await use_case.execute(ALICE, 1)

        messages.page_for_channel.assert_not_awaited()

    async def test_private_non_member_not_found(self):
        store = store_with(PRIVATE, is_member=False)
        use_case = GetMessageHistory(store, AsyncMock(), AuthorizationGate(store))

        with pytest.raises(NotFoundError):
            await use_case.execute(ALICE, 2)


class TestSendMessage:
    """Unit tests for SendMessage."""

    async def test_delegates_to_broker_with_origin(self):
        broker = AsyncMock()

        await SendMessage(broker).execute(
            ALICE, SendMessageCommand(channel_id=1, content="hi", socket_id="conn_1")
        )

        broker.send.assert_awaited_once_with(
            ALICE, 1, "hi", origin_connection_id="conn_1"
        )


class TestAuthenticatePrincipal:
    """Unit tests for AuthenticatePrincipal."""

    def test_missing_token(self):
        with pytest.raises(AuthenticationError):
            AuthenticatePrincipal(Mock()).execute(None)

    def test_valid_token(self):
        verifier = Mock()
        verifier.authenticate.return_value = ALICE

        assert AuthenticatePrincipal(verifier).execute("token") == ALICE
        verifier.authenticate.assert_called_once_with("token")
