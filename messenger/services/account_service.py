import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.exceptions import ConflictError, InvalidActionError, NotFoundError
from messenger.models.schemas.users import UserResponse
from messenger.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

MAX_STATUS_LENGTH = 140


class AccountService:
    """Service for creating, authenticating and removing accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def create_user(self, login: str, password: str, phone: str) -> UserResponse:
        """
        Create a new account:

        1. Reject empty credentials and taken logins
        2. Create the empty block and contact lists, then the user
        3. Commit, translating constraint violations into ConflictError
        """
        login = login.strip()
        phone = phone.strip()
        if not login or not password:
            raise InvalidActionError("Login and password must not be empty.")

        if await self.user_repo.exists(login):
            raise ConflictError(f"User {login} already exists.")

        try:
            user = await self.user_repo.create_with_lists(login, password, phone or None)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("Login or phone number is already taken.") from e

        logger.info("Created user %s", login)
        return user

    async def log_in(self, login: str, password: str) -> Optional[str]:
        """Return the login when the credentials match, otherwise None."""
        if await self.user_repo.authenticate(login, password):
            logger.info("User %s logged in", login)
            return login

        logger.info("Rejected credentials for %s", login)
        return None

    async def update_status(self, login: str, status: str) -> None:
        """Set the status message shown next to the user in other people's lists."""
        status = status.strip()
        if len(status) > MAX_STATUS_LENGTH:
            raise InvalidActionError(
                f"Status message is limited to {MAX_STATUS_LENGTH} characters."
            )

        if not await self.user_repo.update_status(login, status):
            raise NotFoundError("This user does NOT exist.")
        await self.db.commit()

    async def delete_account(self, login: str) -> None:
        """Delete the account; refused while chats or messages still reference it."""
        try:
            deleted = await self.user_repo.delete_account(login)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                "You cannot delete your account while chats you started "
                "or messages you sent still exist."
            ) from e

        if not deleted:
            raise NotFoundError("This user does NOT exist.")
        logger.info("Deleted account %s", login)
