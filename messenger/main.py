"""Entry point: parse arguments, connect, run the menus, disconnect."""

import asyncio
import logging
import sys
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from messenger.cli.app import MessengerApp
from messenger.cli.view import ConsoleView
from messenger.config import Settings
from messenger.database import (
    check_connection,
    close_engine,
    create_engine,
    create_session_factory,
)
from messenger.exceptions import UsageError

logger = logging.getLogger(__name__)

GREETING = (
    "\n\n*******************************************************\n"
    "              User Interface                      \n"
    "*******************************************************\n"
)

EXIT_OK = 0
EXIT_CONNECTION_FAILED = 1
EXIT_USAGE = 2


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout belongs to the menus."""
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def start(settings: Settings, view: ConsoleView) -> int:
    """Open the single connection, run the session and close it again."""
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        async with session_factory() as session:
            view.show("Connecting to database...")
            view.show(f"Connection URL: {settings.display_url}\n")
            try:
                await check_connection(session)
            except (SQLAlchemyError, OSError) as e:
                view.show_error(f"Error - Unable to Connect to Database: {e}")
                view.show_error("Make sure you started postgres on this machine")
                return EXIT_CONNECTION_FAILED
            view.show("Done")

            app = MessengerApp(session, view, page_size=settings.page_size)
            try:
                await app.run()
            except EOFError:
                # stdin closed
                view.show()
            finally:
                view.show("Disconnecting from database...", end="")
    finally:
        await close_engine(engine)

    view.show("Done\n\nBye !")
    return EXIT_OK


def run(argv: Optional[List[str]] = None) -> int:
    """Run the client with ``argv`` (defaults to ``sys.argv[1:]``)."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = Settings.from_argv(argv)
    except UsageError as e:
        print(e, file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level)
    view = ConsoleView()
    view.show(GREETING)

    try:
        return asyncio.run(start(settings, view))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        view.show("\nBye !")
        return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
