import os
from typing import Any, AsyncGenerator, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import messenger.models  # noqa: F401
from messenger.cli.view import ConsoleView
from messenger.database import Base

load_dotenv()


class ScriptedView(ConsoleView):
    """ConsoleView fed from a list of answers, recording everything shown."""

    def __init__(self, answers: List[str]) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []
        self.errors: List[str] = []
        self.output = ""

    def prompt(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def prompt_secret(self, question: str) -> str:
        return self.prompt(question)

    def show(self, text: str = "", end: str = "\n") -> None:
        self.output += text + end

    def show_error(self, text: str) -> None:
        self.errors.append(text)

    @property
    def lines(self) -> List[str]:
        """Output split into lines; a trailing partial line is kept."""
        lines = self.output.split("\n")
        return lines[:-1] if lines[-1] == "" else lines


@pytest.fixture(scope="function")
def mock_db() -> AsyncMock:
    """Create a mock database session for unit tests."""
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.flush = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.delete = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async
    mock_session.add_all = MagicMock()
    return mock_session


def make_result(
    *,
    scalar: Any = None,
    scalars: Any = None,
    rows: Any = None,
    first: Any = None,
    rowcount: int = 0,
) -> MagicMock:
    """Build a stand-in for an SQLAlchemy Result."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalar.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    result.all.return_value = rows or []
    result.first.return_value = first
    result.rowcount = rowcount
    return result


@pytest.fixture
def result_factory() -> Any:
    """Factory for stand-ins of SQLAlchemy Result objects."""
    return make_result


@pytest.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine for integration tests."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL is not set; skipping integration tests")

    engine = create_async_engine(database_url, future=True)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session whose work is rolled back after each test."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session_factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )
        async with session_factory() as session:
            yield session
        await transaction.rollback()


@pytest.fixture
def scripted_view() -> Any:
    """Factory for ScriptedView instances."""
    return ScriptedView
