# SQLAlchemy database models
from .chat_model import ChatMemberModel, ChatModel
from .message_model import MessageModel
from .user_list_model import UserListMemberModel, UserListModel
from .user_model import UserModel

__all__ = [
    "ChatMemberModel",
    "ChatModel",
    "MessageModel",
    "UserListMemberModel",
    "UserListModel",
    "UserModel",
]
