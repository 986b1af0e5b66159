from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from messenger.database import Base


class ChatModel(Base):
    """SQLAlchemy model for chat table."""

    __tablename__ = "chat"

    chat_id = Column(Integer, primary_key=True, autoincrement=True)
    chat_type = Column(String(10), nullable=False)
    init_sender = Column(String(50), ForeignKey("usr.login"), nullable=False)

    # Relationships
    members = relationship(
        "ChatMemberModel",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "MessageModel",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # chat_type IN ('group', 'private')


class ChatMemberModel(Base):
    """SQLAlchemy model for chat_list table."""

    __tablename__ = "chat_list"

    chat_id = Column(
        Integer, ForeignKey("chat.chat_id", ondelete="CASCADE"), primary_key=True
    )
    member = Column(
        String(50), ForeignKey("usr.login", ondelete="CASCADE"), primary_key=True
    )

    # Relationships
    chat = relationship("ChatModel", back_populates="members")
