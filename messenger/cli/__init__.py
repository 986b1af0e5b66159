# Console front end
from .app import MessengerApp
from .view import ConsoleView

__all__ = ["ConsoleView", "MessengerApp"]
