from typing import Any, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from messenger.models.db.user_list_model import UserListModel
from messenger.models.db.user_model import UserModel
from messenger.models.schemas.users import UserResponse
from messenger.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[UserModel, UserResponse]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserModel, "login")

    async def get_by_login(self, login: str) -> Optional[UserResponse]:
        return await self.get_by_id(login)

    async def exists(self, login: str) -> bool:
        """Check whether an account with this login exists."""
        return await self._exists(select(UserModel.login).where(UserModel.login == login))

    async def authenticate(self, login: str, password: str) -> bool:
        """Check a login/password pair against the usr table."""
        query = select(UserModel.login).where(
            UserModel.login == login, UserModel.password == password
        )
        return await self._exists(query)

    async def create_with_lists(
        self, login: str, password: str, phone: str
    ) -> UserResponse:
        """Create a user together with an empty block list and contact list."""
        block_list = UserListModel(list_type="block")
        contact_list = UserListModel(list_type="contact")
        self.db.add_all([block_list, contact_list])
        # Flush to obtain the generated list ids
        await self.db.flush()

        user = UserModel(
            login=login,
            password=password,
            phonenum=phone,
            block_list=block_list.list_id,
            contact_list=contact_list.list_id,
        )
        return await self.create(user)

    async def update_status(self, login: str, status: str) -> bool:
        query = update(UserModel).where(UserModel.login == login).values(status=status)
        result = await self.db.execute(query)
        await self.db.flush()
        return result.rowcount > 0

    async def delete_account(self, login: str) -> bool:
        """Delete a user and the two lists owned by that user."""
        user = await self.get_by_login(login)
        if not user:
            return False

        await self.db.execute(delete(UserModel).where(UserModel.login == login))
        owned_lists = [
            list_id
            for list_id in (user.block_list, user.contact_list)
            if list_id is not None
        ]
        if owned_lists:
            await self.db.execute(
                delete(UserListModel).where(UserListModel.list_id.in_(owned_lists))
            )
        await self.db.flush()
        return True

    def _to_pydantic(self, db_model: Any) -> UserResponse:
        """Convert SQLAlchemy UserModel to Pydantic UserResponse."""
        return UserResponse(
            login=db_model.login,
            phonenum=db_model.phonenum,
            status=db_model.status,
            block_list=db_model.block_list,
            contact_list=db_model.contact_list,
        )
