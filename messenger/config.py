"""Runtime settings built from the command line and the environment."""

import os
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from messenger.exceptions import UsageError

# Load environment variables from .env file
load_dotenv()

USAGE = "Usage: messenger <dbname> <port> <user>"


class Settings(BaseModel):
    """Connection and session settings for one client run."""

    dbname: str
    port: int = Field(..., gt=0, lt=65536)
    user: str
    password: str = ""
    host: str = "localhost"
    sql_debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    page_size: int = Field(default=10, gt=0)

    @classmethod
    def from_argv(cls, argv: List[str]) -> "Settings":
        """Build settings from ``<dbname> <port> <user>`` plus environment."""
        if len(argv) != 3:
            raise UsageError(USAGE)

        dbname, port, user = argv
        try:
            port_number = int(port)
        except ValueError:
            raise UsageError(f"Port must be a number, got '{port}'\n{USAGE}")

        try:
            return cls(
                dbname=dbname,
                port=port_number,
                user=user,
                password=os.getenv("MESSENGER_DB_PASSWORD", ""),
                host=os.getenv("MESSENGER_DB_HOST", "localhost"),
                sql_debug=os.getenv("SQL_DEBUG", "false").lower() == "true",
                log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
                page_size=int(os.getenv("MESSENGER_PAGE_SIZE", "10")),
            )
        except (ValidationError, ValueError) as e:
            raise UsageError(f"Invalid settings: {e}\n{USAGE}") from e

    @property
    def database_url(self) -> str:
        return self._url(self.password or None)

    @property
    def display_url(self) -> str:
        """Connection URL safe to print (no password)."""
        return self._url(None)

    def _url(self, password: Optional[str]) -> str:
        credentials = self.user if password is None else f"{self.user}:{password}"
        return (
            f"postgresql+asyncpg://{credentials}@{self.host}:{self.port}/{self.dbname}"
        )
