from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from academy_client.models.message import MessagePayload, SendMessageBody
from academy_client.utils.wire import Identifier, OptionalTimestamp, Timestamp, utc_now


LOCAL_MESSAGE_PREFIX = "local-"


class Message(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    sender_id: Identifier = Field(alias="senderId")
    receiver_id: Identifier = Field(alias="receiverId")
    text: str = Field(alias="message")
    is_read: bool = Field(default=False, alias="isRead")
    created_at: Timestamp = Field(alias="createdAt")
    updated_at: OptionalTimestamp = Field(default=None, alias="updatedAt")

    @property
    def is_local(self) -> bool:
        return self.id.startswith(LOCAL_MESSAGE_PREFIX)

    def mark_read(self) -> "Message":
        if self.is_read:
            return self
        return self.model_copy(update={"is_read": True})

    def to_wire(self) -> MessagePayload:
        return self.model_dump(by_alias=True)

    @classmethod
    def local(cls, sender_id: str, receiver_id: str, text: str) -> "Message":
        """A message the user just sent, before the server confirmed it."""
        now = utc_now()
        return cls(
            id=f"{LOCAL_MESSAGE_PREFIX}{uuid4().hex}",
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            is_read=True,
            created_at=now,
            updated_at=now,
        )


class SendMessageRequest(BaseModel):

    model_config = ConfigDict(populate_by_name=True)

    sender_id: str = Field(alias="senderId")
    receiver_id: str = Field(alias="receiverId")
    text: str = Field(min_length=1, alias="message")

    def to_wire(self) -> SendMessageBody:
        return self.model_dump(by_alias=True)
