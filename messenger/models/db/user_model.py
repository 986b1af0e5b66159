from sqlalchemy import Column, ForeignKey, Integer, String

from messenger.database import Base


class UserModel(Base):
    """SQLAlchemy model for usr table."""

    __tablename__ = "usr"

    login = Column(String(50), primary_key=True)
    phonenum = Column(String(16), unique=True)
    password = Column(String(50), nullable=False)
    status = Column(String(140))
    block_list = Column(
        Integer, ForeignKey("user_list.list_id", ondelete="SET NULL")
    )
    contact_list = Column(
        Integer, ForeignKey("user_list.list_id", ondelete="SET NULL")
    )
