from typing import Any, Optional, TypedDict


class MessagePayload(TypedDict, total=False):
    # _id may arrive as a plain string or as {"$oid": ...}
    _id: Any
    senderId: Any
    receiverId: Any
    message: str
    isRead: bool
    createdAt: str
    updatedAt: Optional[str]


class SendMessageBody(TypedDict):
    senderId: str
    receiverId: str
    message: str
