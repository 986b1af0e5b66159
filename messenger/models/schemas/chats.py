from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .users import _strip


class ChatResponse(BaseModel):
    """Response model for chat data."""

    chat_id: int
    chat_type: str  # 'group' or 'private'
    init_sender: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("chat_type", "init_sender", mode="before")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    @property
    def is_group(self) -> bool:
        return self.chat_type == "group"


class ChatSummary(BaseModel):
    """A chat id with the logins of its members, as shown in chat lists."""

    chat_id: int
    chat_type: str
    members: List[str]
