# Read models returned by repositories
from .chats import ChatResponse, ChatSummary
from .messages import MessageResponse
from .users import ListEntry, UserResponse

__all__ = [
    "ChatResponse",
    "ChatSummary",
    "ListEntry",
    "MessageResponse",
    "UserResponse",
]
