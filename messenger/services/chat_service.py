import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.exceptions import InvalidActionError, NotFoundError, PermissionDeniedError
from messenger.models.schemas.chats import ChatResponse, ChatSummary
from messenger.repositories.chat_repository import ChatRepository
from messenger.repositories.user_list_repository import UserListRepository

logger = logging.getLogger(__name__)

NOT_A_MEMBER = "Action denied: You are not a member of this chat"
NOT_THE_INITIATOR = "Permission denied: you are not the initial sender of the chat"


class ChatService:
    """Service for chats, their members and the rights over them.

    Every check is a fresh single-row query; nothing is remembered between
    calls.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.chat_repo = ChatRepository(db)
        self.list_repo = UserListRepository(db)

    async def chat_ids(self, login: str, chat_type: str) -> List[int]:
        return await self.chat_repo.chat_ids_for(login, chat_type)

    async def chat_summaries(self, login: str, chat_type: str) -> List[ChatSummary]:
        """Chats of one type with the logins of their members."""
        summaries = []
        for chat_id in await self.chat_repo.chat_ids_for(login, chat_type):
            members = await self.chat_repo.members(chat_id)
            summaries.append(
                ChatSummary(chat_id=chat_id, chat_type=chat_type, members=members)
            )
        return summaries

    async def chat_members(self, login: str, chat_id: int) -> List[str]:
        await self.require_member(login, chat_id)
        return await self.chat_repo.members(chat_id)

    async def create_group_chat(self, login: str) -> ChatResponse:
        """Start a group chat with the creator as its only member."""
        chat = await self.chat_repo.create_chat("group", login, [login])
        await self.db.commit()
        logger.info("%s created group chat %d", login, chat.chat_id)
        return chat

    async def create_private_chat(self, login: str, contact: str) -> ChatResponse:
        """Start a private chat between the user and one of their contacts."""
        contact = contact.strip()
        if contact == login:
            raise InvalidActionError("You cannot start a private chat with yourself.")
        if not await self.list_repo.contains(login, "contact", contact):
            raise NotFoundError(f"{contact} is not in your contact list")

        chat = await self.chat_repo.create_chat("private", login, [login, contact])
        await self.db.commit()
        logger.info("%s created private chat %d with %s", login, chat.chat_id, contact)
        return chat

    async def addable_contacts(self, login: str, chat_id: int) -> List[str]:
        """Contacts the chat's initiator can still add to a group chat."""
        await self._require_group_editor(
            login,
            chat_id,
            "Action denied: you can not add members to a private chat, "
            "you could start a new group chat",
        )
        return await self.chat_repo.contacts_not_in_chat(login, chat_id)

    async def add_member(self, login: str, chat_id: int, member: str) -> None:
        candidates = await self.addable_contacts(login, chat_id)
        if member not in candidates:
            raise InvalidActionError(
                f"Action denied: {member} is not a contact outside this chat"
            )

        await self.chat_repo.add_member(chat_id, member)
        await self.db.commit()
        logger.info("%s added %s to chat %d", login, member, chat_id)

    async def removable_members(self, login: str, chat_id: int) -> List[str]:
        await self._require_group_editor(
            login,
            chat_id,
            "Action denied: you can not delete members in a private chat, "
            "but you can delete the chat.",
        )
        return await self.chat_repo.members(chat_id)

    async def remove_member(self, login: str, chat_id: int, member: str) -> None:
        await self.removable_members(login, chat_id)
        if member == login:
            raise InvalidActionError(
                "Action denied: You can not delete yourself from a chat initiated by you"
            )

        if not await self.chat_repo.remove_member(chat_id, member):
            raise NotFoundError(f"{member} is not a member of this chat")
        await self.db.commit()
        logger.info("%s removed %s from chat %d", login, member, chat_id)

    async def delete_chat(self, login: str, chat_id: int) -> None:
        """Delete a chat with all of its messages; initiator only."""
        await self.require_initiator(login, chat_id)
        if not await self.chat_repo.delete_chat(chat_id):
            raise NotFoundError(f"Chat {chat_id} does not exist")
        await self.db.commit()
        logger.info("%s deleted chat %d", login, chat_id)

    async def require_member(self, login: str, chat_id: int) -> None:
        if not await self.chat_repo.is_member(chat_id, login):
            raise PermissionDeniedError(NOT_A_MEMBER)

    async def require_initiator(self, login: str, chat_id: int) -> None:
        if not await self.chat_repo.is_initiator(chat_id, login):
            raise PermissionDeniedError(NOT_THE_INITIATOR)

    async def _require_group_editor(self, login: str, chat_id: int, denial: str) -> None:
        await self.require_initiator(login, chat_id)
        if not await self.chat_repo.is_group(chat_id):
            raise InvalidActionError(denial)
