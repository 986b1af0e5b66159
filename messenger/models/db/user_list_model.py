from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from messenger.database import Base


class UserListModel(Base):
    """SQLAlchemy model for user_list table."""

    __tablename__ = "user_list"

    list_id = Column(Integer, primary_key=True, autoincrement=True)
    list_type = Column(String(10), nullable=False)

    # Relationships
    members = relationship(
        "UserListMemberModel",
        back_populates="user_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # list_type IN ('block', 'contact')


class UserListMemberModel(Base):
    """SQLAlchemy model for user_list_contains table."""

    __tablename__ = "user_list_contains"

    list_id = Column(
        Integer,
        ForeignKey("user_list.list_id", ondelete="CASCADE"),
        primary_key=True,
    )
    list_member = Column(
        String(50), ForeignKey("usr.login", ondelete="CASCADE"), primary_key=True
    )

    # Relationships
    user_list = relationship("UserListModel", back_populates="members")
