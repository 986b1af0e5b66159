# Repository classes for database operations
from .base_repository import BaseRepository
from .chat_repository import ChatRepository
from .message_repository import MessageRepository
from .user_list_repository import UserListRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ChatRepository",
    "MessageRepository",
    "UserListRepository",
    "UserRepository",
]
