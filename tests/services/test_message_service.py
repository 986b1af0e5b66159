from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from messenger.exceptions import InvalidActionError, NotFoundError, PermissionDeniedError
from messenger.models.schemas.messages import MessageResponse
from messenger.services.message_service import MAX_MESSAGE_LENGTH, MessageService


class TestMessageService:
    """Unit tests for MessageService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> MessageService:
        return MessageService(mock_db)

    @pytest.fixture
    def sample_message(self) -> MessageResponse:
        return MessageResponse(
            msg_id=11,
            msg_text="hello there",
            msg_timestamp=datetime(2024, 3, 1, 12, 30),
            sender_login="alice",
            chat_id=7,
        )

    @pytest.mark.asyncio
    async def test_send_message(
        self, service: MessageService, mock_db: Any, sample_message: MessageResponse
    ) -> None:
        with (
            patch.object(
                service.chat_repo, "is_member", new_callable=AsyncMock, return_value=True
            ),
            patch.object(
                service.message_repo,
                "create_message",
                new_callable=AsyncMock,
                return_value=sample_message,
            ) as mock_create,
        ):
            result = await service.send_message("alice", 7, "hello there")

        mock_create.assert_called_once_with("alice", 7, "hello there")
        mock_db.commit.assert_awaited_once()
        assert result == sample_message

    @pytest.mark.asyncio
    async def test_send_message_not_member(
        self, service: MessageService, mock_db: Any
    ) -> None:
        with (
            patch.object(
                service.chat_repo, "is_member", new_callable=AsyncMock, return_value=False
            ),
            patch.object(
                service.message_repo, "create_message", new_callable=AsyncMock
            ) as mock_create,
        ):
            with pytest.raises(PermissionDeniedError, match="not a member"):
                await service.send_message("mallory", 7, "hi")

        mock_create.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "x" * (MAX_MESSAGE_LENGTH + 1)])
    async def test_send_message_invalid_text(
        self, service: MessageService, text: str
    ) -> None:
        with patch.object(
            service.chat_repo, "is_member", new_callable=AsyncMock, return_value=True
        ):
            with pytest.raises(InvalidActionError):
                await service.send_message("alice", 7, text)

    @pytest.mark.asyncio
    async def test_chat_messages(
        self, service: MessageService, sample_message: MessageResponse
    ) -> None:
        with (
            patch.object(
                service.chat_repo, "is_member", new_callable=AsyncMock, return_value=True
            ),
            patch.object(
                service.message_repo,
                "get_by_chat",
                new_callable=AsyncMock,
                return_value=[sample_message],
            ) as mock_get,
        ):
            result = await service.chat_messages("alice", 7)

        mock_get.assert_called_once_with(7)
        assert result == [sample_message]

    @pytest.mark.asyncio
    async def test_chat_messages_not_member(self, service: MessageService) -> None:
        with patch.object(
            service.chat_repo, "is_member", new_callable=AsyncMock, return_value=False
        ):
            with pytest.raises(PermissionDeniedError):
                await service.chat_messages("mallory", 7)

    @pytest.mark.asyncio
    async def test_own_messages(self, service: MessageService) -> None:
        with patch.object(
            service.message_repo,
            "get_by_sender_in_chat",
            new_callable=AsyncMock,
            return_value=[],
        ) as mock_get:
            assert await service.own_messages("alice", 7) == []

        mock_get.assert_called_once_with("alice", 7)

    @pytest.mark.asyncio
    async def test_edit_message(self, service: MessageService, mock_db: Any) -> None:
        with (
            patch.object(
                service.message_repo, "is_sender", new_callable=AsyncMock, return_value=True
            ),
            patch.object(
                service.message_repo,
                "update_text",
                new_callable=AsyncMock,
                return_value=True,
            ) as mock_update,
        ):
            await service.edit_message("alice", 11, "fixed typo")

        mock_update.assert_called_once_with(11, "fixed typo")
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_edit_someone_elses_message(
        self, service: MessageService, mock_db: Any
    ) -> None:
        with (
            patch.object(
                service.message_repo, "is_sender", new_callable=AsyncMock, return_value=False
            ),
            patch.object(
                service.message_repo, "update_text", new_callable=AsyncMock
            ) as mock_update,
        ):
            with pytest.raises(PermissionDeniedError):
                await service.edit_message("bob", 11, "hijacked")

        mock_update.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_message(self, service: MessageService, mock_db: Any) -> None:
        with (
            patch.object(
                service.message_repo, "is_sender", new_callable=AsyncMock, return_value=True
            ),
            patch.object(
                service.message_repo, "delete", new_callable=AsyncMock, return_value=True
            ) as mock_delete,
        ):
            await service.delete_message("alice", 11)

        mock_delete.assert_called_once_with(11)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_vanished_message(self, service: MessageService) -> None:
        with (
            patch.object(
                service.message_repo, "is_sender", new_callable=AsyncMock, return_value=True
            ),
            patch.object(
                service.message_repo, "delete", new_callable=AsyncMock, return_value=False
            ),
        ):
            with pytest.raises(NotFoundError):
                await service.delete_message("alice", 11)
