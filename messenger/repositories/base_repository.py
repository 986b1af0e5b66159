from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from messenger.database import Base

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic base repository with common CRUD operations.

    Writes are flushed, not committed: the calling service decides when a
    unit of work is complete.
    """

    def __init__(self, db: AsyncSession, model_class: Any, id_field: str):
        self.db = db
        self.model_class = model_class
        self.id_field = id_field

    @property
    def id_column(self) -> Any:
        return getattr(self.model_class, self.id_field)

    async def get_by_id(self, id: Any) -> Optional[PydanticType]:
        """Get a single record by primary key."""
        db_model = await self._get_model(id)
        return self._to_pydantic(db_model) if db_model else None

    async def create(self, db_model: ModelType) -> PydanticType:
        """Add a new record and load its generated columns."""
        self.db.add(db_model)
        await self.db.flush()
        await self.db.refresh(db_model)
        return self._to_pydantic(db_model)

    async def delete(self, id: Any) -> bool:
        """Delete a record by primary key."""
        db_model = await self._get_model(id)

        if not db_model:
            return False

        await self.db.delete(db_model)
        await self.db.flush()
        return True

    async def _exists(self, query: Any) -> bool:
        """True when the query yields at least one row."""
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def _get_model(self, id: Any) -> Optional[ModelType]:
        query = select(self.model_class).where(self.id_column == id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError
