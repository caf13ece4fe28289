from typing import List
from urllib.parse import quote

from academy_client.schemas.conversation import Conversation
from academy_client.schemas.message import Message, SendMessageRequest
from academy_client.utils.http import Transport
from academy_client.utils.wire import decode_list, decode_model, parse_json


class ChatService:

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_conversations(self, user_id: str) -> List[Conversation]:
        raw = await self._transport.send("GET", f"chat/conversations/{quote(user_id)}")
        # a partial conversation list is worse than a clear error
        return decode_list(Conversation, parse_json(raw))

    async def get_messages(self, user_id: str, other_user_id: str) -> List[Message]:
        raw = await self._transport.send("GET", f"chat/{quote(user_id)}/{quote(other_user_id)}")
        return decode_list(Message, parse_json(raw))

    async def send_message(self, sender_id: str, receiver_id: str, text: str) -> Message:
        if not text or not text.strip():
            raise ValueError("Message content cannot be empty")
        body = SendMessageRequest(sender_id=sender_id, receiver_id=receiver_id, text=text)
        raw = await self._transport.send("POST", "chat/send", body.to_wire())
        return decode_model(Message, parse_json(raw))

    async def mark_as_read(self, message_id: str) -> Message:
        raw = await self._transport.send("PATCH", f"chat/read/{quote(message_id)}")
        return decode_model(Message, parse_json(raw))
