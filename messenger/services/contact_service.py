import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.exceptions import InvalidActionError, NotFoundError
from messenger.models.schemas.users import ListEntry
from messenger.repositories.user_list_repository import UserListRepository
from messenger.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

OPPOSITE_LIST = {"contact": "block", "block": "contact"}


class ContactService:
    """Service for a user's contact list and block list.

    A login is never on both lists of the same owner: adding it to one list
    takes it off the other.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.list_repo = UserListRepository(db)

    async def list_contacts(self, login: str) -> List[ListEntry]:
        return await self.list_repo.members(login, "contact")

    async def list_blocks(self, login: str) -> List[ListEntry]:
        return await self.list_repo.members(login, "block")

    async def add_contact(self, login: str, other: str) -> bool:
        """Add to the contact list. True when ``other`` was unblocked on the way."""
        return await self._add(login, other.strip(), "contact")

    async def add_block(self, login: str, other: str) -> bool:
        """Add to the block list. True when ``other`` was dropped from contacts."""
        return await self._add(login, other.strip(), "block")

    async def remove_contact(self, login: str, other: str) -> None:
        await self._remove(login, other.strip(), "contact")

    async def remove_block(self, login: str, other: str) -> None:
        await self._remove(login, other.strip(), "block")

    async def _add(self, login: str, other: str, list_type: str) -> bool:
        if other == login:
            raise InvalidActionError(f"You cannot add yourself to your {list_type} list.")

        if not await self.user_repo.exists(other):
            raise NotFoundError("This user does NOT exist.")

        if await self.list_repo.contains(login, list_type, other):
            raise InvalidActionError(f"This user already exists in your {list_type} list.")

        opposite = OPPOSITE_LIST[list_type]
        moved = False
        if await self.list_repo.contains(login, opposite, other):
            moved = await self.list_repo.remove_member(login, opposite, other)

        await self.list_repo.add_member(login, list_type, other)
        await self.db.commit()
        logger.info("%s added %s to the %s list", login, other, list_type)
        return moved

    async def _remove(self, login: str, other: str, list_type: str) -> None:
        if not await self.list_repo.remove_member(login, list_type, other):
            raise NotFoundError(f"This user is not in your {list_type} list")

        await self.db.commit()
        logger.info("%s removed %s from the %s list", login, other, list_type)
