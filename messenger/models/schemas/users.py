from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _strip(value: Optional[str]) -> Optional[str]:
    # Legacy schemas store fixed-width CHAR columns
    return value.strip() if isinstance(value, str) else value


class UserResponse(BaseModel):
    """Response model for user data."""

    login: str
    phonenum: Optional[str] = None
    status: Optional[str] = None
    block_list: Optional[int] = None
    contact_list: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("login", "phonenum", "status", mode="before")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)


class ListEntry(BaseModel):
    """One member of a contact or block list."""

    login: str
    status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("login", "status", mode="before")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)
