from typing import Any, List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased

from messenger.models.db.chat_model import ChatMemberModel, ChatModel
from messenger.models.db.message_model import MessageModel
from messenger.models.db.user_list_model import UserListMemberModel
from messenger.models.db.user_model import UserModel
from messenger.models.schemas.chats import ChatResponse
from messenger.repositories.base_repository import BaseRepository


class ChatRepository(BaseRepository[ChatModel, ChatResponse]):
    """Repository for chats and chat membership."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ChatModel, "chat_id")

    async def create_chat(
        self, chat_type: str, init_sender: str, members: List[str]
    ) -> ChatResponse:
        """Create a chat and its member rows in the current transaction."""
        chat = await self.create(ChatModel(chat_type=chat_type, init_sender=init_sender))
        for member in members:
            self.db.add(ChatMemberModel(chat_id=chat.chat_id, member=member))
        await self.db.flush()
        return chat

    async def chat_ids_for(self, login: str, chat_type: str) -> List[int]:
        """Ids of the chats of one type the user belongs to.

        Private chats shared with someone on the user's block list are hidden.
        """
        query = (
            select(ChatMemberModel.chat_id)
            .join(ChatModel, ChatModel.chat_id == ChatMemberModel.chat_id)
            .where(ChatMemberModel.member == login, ChatModel.chat_type == chat_type)
            .order_by(ChatMemberModel.chat_id)
        )

        if chat_type == "private":
            blocked = (
                select(UserListMemberModel.list_member)
                .join(UserModel, UserModel.block_list == UserListMemberModel.list_id)
                .where(UserModel.login == login)
            )
            other = aliased(ChatMemberModel)
            with_blocked = select(other.chat_id).where(other.member.in_(blocked))
            query = query.where(ChatMemberModel.chat_id.not_in(with_blocked))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def members(self, chat_id: int) -> List[str]:
        """Logins of the members of a chat."""
        query = (
            select(ChatMemberModel.member)
            .where(ChatMemberModel.chat_id == chat_id)
            .order_by(ChatMemberModel.member)
        )
        result = await self.db.execute(query)
        return [member.strip() for member in result.scalars().all()]

    async def is_member(self, chat_id: int, login: str) -> bool:
        query = select(ChatMemberModel.chat_id).where(
            ChatMemberModel.chat_id == chat_id, ChatMemberModel.member == login
        )
        return await self._exists(query)

    async def is_initiator(self, chat_id: int, login: str) -> bool:
        """Check whether the user started the chat."""
        query = select(ChatModel.chat_id).where(
            ChatModel.chat_id == chat_id, ChatModel.init_sender == login
        )
        return await self._exists(query)

    async def is_group(self, chat_id: int) -> bool:
        query = select(ChatModel.chat_id).where(
            ChatModel.chat_id == chat_id, ChatModel.chat_type == "group"
        )
        return await self._exists(query)

    async def contacts_not_in_chat(self, login: str, chat_id: int) -> List[str]:
        """Contacts of the user who are not yet members of the chat."""
        in_chat = select(ChatMemberModel.member).where(
            ChatMemberModel.chat_id == chat_id
        )
        query = (
            select(UserListMemberModel.list_member)
            .join(UserModel, UserModel.contact_list == UserListMemberModel.list_id)
            .where(
                UserModel.login == login,
                UserListMemberModel.list_member.not_in(in_chat),
            )
            .order_by(UserListMemberModel.list_member)
        )
        result = await self.db.execute(query)
        return [member.strip() for member in result.scalars().all()]

    async def add_member(self, chat_id: int, member: str) -> None:
        self.db.add(ChatMemberModel(chat_id=chat_id, member=member))
        await self.db.flush()

    async def remove_member(self, chat_id: int, member: str) -> bool:
        query = delete(ChatMemberModel).where(
            ChatMemberModel.chat_id == chat_id, ChatMemberModel.member == member
        )
        result = await self.db.execute(query)
        await self.db.flush()
        return result.rowcount > 0

    async def delete_chat(self, chat_id: int) -> bool:
        """Delete a chat along with its messages and memberships."""
        await self.db.execute(delete(MessageModel).where(MessageModel.chat_id == chat_id))
        await self.db.execute(
            delete(ChatMemberModel).where(ChatMemberModel.chat_id == chat_id)
        )
        result = await self.db.execute(delete(ChatModel).where(ChatModel.chat_id == chat_id))
        await self.db.flush()
        return result.rowcount > 0

    def _to_pydantic(self, db_model: Any) -> ChatResponse:
        """Convert SQLAlchemy ChatModel to Pydantic ChatResponse."""
        return ChatResponse(
            chat_id=db_model.chat_id,
            chat_type=db_model.chat_type,
            init_sender=db_model.init_sender,
        )
