from typing import Any, List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased

from messenger.models.db.user_list_model import UserListMemberModel
from messenger.models.db.user_model import UserModel
from messenger.models.schemas.users import ListEntry

LIST_TYPES = ("contact", "block")


class UserListRepository:
    """Repository for the contact and block lists of a user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_id(self, login: str, list_type: str) -> Optional[int]:
        """Id of the user's list of the given type."""
        query = select(self._list_column(UserModel, list_type)).where(
            UserModel.login == login
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def members(self, login: str, list_type: str) -> List[ListEntry]:
        """Logins and status messages of everyone on the user's list."""
        owner = aliased(UserModel)
        member = aliased(UserModel)
        query = (
            select(member.login, member.status)
            .select_from(owner)
            .join(
                UserListMemberModel,
                self._list_column(owner, list_type) == UserListMemberModel.list_id,
            )
            .join(member, UserListMemberModel.list_member == member.login)
            .where(owner.login == login)
            .order_by(member.login)
        )
        result = await self.db.execute(query)
        return [ListEntry(login=row.login, status=row.status) for row in result.all()]

    async def contains(self, login: str, list_type: str, member: str) -> bool:
        """Check whether ``member`` is on the user's list."""
        query = (
            select(UserListMemberModel.list_member)
            .join(
                UserModel,
                self._list_column(UserModel, list_type) == UserListMemberModel.list_id,
            )
            .where(UserModel.login == login, UserListMemberModel.list_member == member)
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.first() is not None

    async def add_member(self, login: str, list_type: str, member: str) -> bool:
        list_id = await self.list_id(login, list_type)
        if list_id is None:
            return False

        self.db.add(UserListMemberModel(list_id=list_id, list_member=member))
        await self.db.flush()
        return True

    async def remove_member(self, login: str, list_type: str, member: str) -> bool:
        list_id = await self.list_id(login, list_type)
        if list_id is None:
            return False

        query = delete(UserListMemberModel).where(
            UserListMemberModel.list_id == list_id,
            UserListMemberModel.list_member == member,
        )
        result = await self.db.execute(query)
        await self.db.flush()
        return result.rowcount > 0

    @staticmethod
    def _list_column(user: Any, list_type: str) -> Any:
        if list_type not in LIST_TYPES:
            raise ValueError(f"Unknown list type: {list_type}")
        return user.contact_list if list_type == "contact" else user.block_list
