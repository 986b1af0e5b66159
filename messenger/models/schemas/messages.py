from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .users import _strip


class MessageResponse(BaseModel):
    """Response model for message data."""

    msg_id: int
    msg_text: Optional[str]
    msg_timestamp: datetime
    sender_login: Optional[str]
    chat_id: int

    model_config = ConfigDict(from_attributes=True)

    @field_validator("msg_text", "sender_login", mode="before")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    def preview(self, width: int = 18) -> str:
        """First ``width`` characters of the text, as shown in pick lists."""
        return (self.msg_text or "")[:width]
