# Export all models
from .db import (
    ChatMemberModel,
    ChatModel,
    MessageModel,
    UserListMemberModel,
    UserListModel,
    UserModel,
)
from .schemas import (
    ChatResponse,
    ChatSummary,
    ListEntry,
    MessageResponse,
    UserResponse,
)

__all__ = [
    # Read models
    "ChatResponse",
    "ChatSummary",
    "ListEntry",
    "MessageResponse",
    "UserResponse",
    # DB models
    "ChatMemberModel",
    "ChatModel",
    "MessageModel",
    "UserListMemberModel",
    "UserListModel",
    "UserModel",
]
