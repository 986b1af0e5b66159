from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from messenger.database import Base


class MessageModel(Base):
    """SQLAlchemy model for message table."""

    __tablename__ = "message"

    msg_id = Column(Integer, primary_key=True, autoincrement=True)
    msg_text = Column(String(300))
    msg_timestamp = Column(DateTime, nullable=False, default=func.now())
    sender_login = Column(String(50), ForeignKey("usr.login"))
    chat_id = Column(
        Integer, ForeignKey("chat.chat_id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    chat = relationship("ChatModel", back_populates="messages")
