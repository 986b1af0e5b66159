from typing import Any, List

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from messenger.models.db.message_model import MessageModel
from messenger.models.schemas.messages import MessageResponse
from messenger.repositories.base_repository import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel, "msg_id")

    async def create_message(
        self, sender_login: str, chat_id: int, text: str
    ) -> MessageResponse:
        """Store a message stamped with the server's current time."""
        message = MessageModel(
            msg_text=text,
            msg_timestamp=func.now(),
            sender_login=sender_login,
            chat_id=chat_id,
        )
        return await self.create(message)

    async def get_by_chat(self, chat_id: int) -> List[MessageResponse]:
        """Get all messages for a chat, newest first."""
        query = (
            select(self.model_class)
            .where(self.model_class.chat_id == chat_id)
            .order_by(
                self.model_class.msg_timestamp.desc(), self.model_class.msg_id.desc()
            )
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def get_by_sender_in_chat(
        self, sender_login: str, chat_id: int
    ) -> List[MessageResponse]:
        """Get the messages one user wrote in a chat, oldest first."""
        query = (
            select(self.model_class)
            .where(
                self.model_class.sender_login == sender_login,
                self.model_class.chat_id == chat_id,
            )
            .order_by(self.model_class.msg_timestamp, self.model_class.msg_id)
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def is_sender(self, msg_id: int, login: str) -> bool:
        query = select(self.model_class.msg_id).where(
            self.model_class.msg_id == msg_id,
            self.model_class.sender_login == login,
        )
        return await self._exists(query)

    async def update_text(self, msg_id: int, text: str) -> bool:
        """Replace a message's text and move its timestamp to now."""
        query = (
            update(self.model_class)
            .where(self.model_class.msg_id == msg_id)
            .values(msg_text=text, msg_timestamp=func.now())
        )
        result = await self.db.execute(query)
        await self.db.flush()
        return result.rowcount > 0

    def _to_pydantic(self, db_model: Any) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        return MessageResponse(
            msg_id=db_model.msg_id,
            msg_text=db_model.msg_text,
            msg_timestamp=db_model.msg_timestamp,
            sender_login=db_model.sender_login,
            chat_id=db_model.chat_id,
        )
