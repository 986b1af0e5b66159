import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.exceptions import InvalidActionError, NotFoundError, PermissionDeniedError
from messenger.models.schemas.messages import MessageResponse
from messenger.repositories.chat_repository import ChatRepository
from messenger.repositories.message_repository import MessageRepository
from messenger.services.chat_service import NOT_A_MEMBER

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 300


class MessageService:
    """Service for writing, browsing, editing and deleting chat messages."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.chat_repo = ChatRepository(db)
        self.message_repo = MessageRepository(db)

    async def send_message(self, login: str, chat_id: int, text: str) -> MessageResponse:
        """
        Post a message to a chat:

        1. Verify the sender is a member of the chat
        2. Validate the text
        3. Save it with the current timestamp
        """
        if not await self.chat_repo.is_member(chat_id, login):
            raise PermissionDeniedError(NOT_A_MEMBER)

        self._validate_text(text)
        message = await self.message_repo.create_message(login, chat_id, text)
        await self.db.commit()
        logger.info("%s sent message %d to chat %d", login, message.msg_id, chat_id)
        return message

    async def chat_messages(self, login: str, chat_id: int) -> List[MessageResponse]:
        """All messages of a chat, newest first; members only."""
        if not await self.chat_repo.is_member(chat_id, login):
            raise PermissionDeniedError(NOT_A_MEMBER)
        return await self.message_repo.get_by_chat(chat_id)

    async def own_messages(self, login: str, chat_id: int) -> List[MessageResponse]:
        return await self.message_repo.get_by_sender_in_chat(login, chat_id)

    async def edit_message(self, login: str, msg_id: int, text: str) -> None:
        await self._require_sender(login, msg_id)
        self._validate_text(text)

        if not await self.message_repo.update_text(msg_id, text):
            raise NotFoundError(f"Message {msg_id} does not exist")
        await self.db.commit()
        logger.info("%s edited message %d", login, msg_id)

    async def delete_message(self, login: str, msg_id: int) -> None:
        await self._require_sender(login, msg_id)

        if not await self.message_repo.delete(msg_id):
            raise NotFoundError(f"Message {msg_id} does not exist")
        await self.db.commit()
        logger.info("%s deleted message %d", login, msg_id)

    async def _require_sender(self, login: str, msg_id: int) -> None:
        if not await self.message_repo.is_sender(msg_id, login):
            raise PermissionDeniedError(
                "Permission denied: you can only change messages you sent"
            )

    @staticmethod
    def _validate_text(text: str) -> None:
        if not text.strip():
            raise InvalidActionError("Message text must not be empty.")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidActionError(
                f"Messages are limited to {MAX_MESSAGE_LENGTH} characters."
            )
