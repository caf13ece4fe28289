from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from academy_client.schemas.message import Message
from academy_client.utils.wire import Identifier


class Conversation(BaseModel):
    """One row of the conversation list, keyed by the other participant."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    other_user_id: Identifier = Field(alias="otherUserId")
    other_user_name: Optional[str] = Field(default=None, alias="otherUserName")
    last_message: Optional[Message] = Field(default=None, alias="lastMessage")
    unread_count: int = Field(default=0, alias="unreadCount")

    @field_validator("unread_count", mode="before")
    @classmethod
    def _clamp_unread(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, int) and not isinstance(value, bool) and value < 0:
            return 0
        return value

    @property
    def id(self) -> str:
        return self.other_user_id

    @property
    def display_name(self) -> str:
        return self.other_user_name or self.other_user_id

    @property
    def last_message_at(self) -> str:
        return self.last_message.created_at if self.last_message else ""

    @property
    def last_message_text(self) -> str:
        return self.last_message.text if self.last_message else "No messages"
