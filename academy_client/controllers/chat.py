import logging
from typing import List, Optional

from academy_client.controllers.base import run_query
from academy_client.controllers.conversations import ConversationsController
from academy_client.schemas.message import Message
from academy_client.services.chat_service import ChatService
from academy_client.services.reconciler import dedupe_by_key, replace_by_key, upsert_by_key
from academy_client.utils.errors import DecodeError, PreconditionError, TransportError
from academy_client.utils.resource import Error, Success
from academy_client.utils.store import ResourceStore


logger = logging.getLogger(__name__)


def _message_id(message: Message) -> str:
    return message.id


def _chronological(messages: List[Message]) -> List[Message]:
    return sorted(messages, key=lambda m: m.created_at)


class ChatController:
    """One chat thread between the signed-in user and another user."""

    def __init__(
        self,
        chat_service: ChatService,
        current_user_id: Optional[str],
        other_user_id: str,
        conversations: Optional[ConversationsController] = None,
    ) -> None:
        if not current_user_id:
            raise PreconditionError("a chat thread needs a signed-in user")
        self._chat = chat_service
        self._conversations = conversations
        self.current_user_id = current_user_id
        self.other_user_id = other_user_id
        self.messages: ResourceStore[List[Message]] = ResourceStore("messages")
        # action states live apart from the thread so a failed send keeps the list
        self.send_state: ResourceStore[Message] = ResourceStore("send_message")
        self.read_state: ResourceStore[Message] = ResourceStore("mark_read")

    async def load_thread(self) -> Optional[List[Message]]:
        async def fetch() -> List[Message]:
            messages = await self._chat.get_messages(self.current_user_id, self.other_user_id)
            return _chronological(dedupe_by_key(messages, _message_id))

        return await run_query(self.messages, fetch)

    async def send_message(self, text: str) -> Optional[Message]:
        if not text or not text.strip():
            return None
        local = Message.local(self.current_user_id, self.other_user_id, text.strip())
        self._merge_into_thread(local)
        if self._conversations is not None:
            self._conversations.receive_message(local, self.current_user_id)

        ticket = self.send_state.begin()
        try:
            confirmed = await self._chat.send_message(self.current_user_id, self.other_user_id, local.text)
        except (TransportError, DecodeError) as exc:
            # the optimistic entry stays; only the send action reports the failure
            logger.warning("sending message to %s failed: %s", self.other_user_id, exc)
            self.send_state.resolve(ticket, Error(str(exc)))
            return None

        current = self.messages.current_value() or []
        self.messages.publish(Success(_chronological(replace_by_key(current, local.id, confirmed, _message_id))))
        self.send_state.resolve(ticket, Success(confirmed))
        return confirmed

    async def mark_message_read(self, message_id: str) -> Optional[Message]:
        updated = await run_query(self.read_state, lambda: self._chat.mark_as_read(message_id))
        if updated is not None:
            self._merge_into_thread(updated)
            if self._conversations is not None and updated.sender_id == self.other_user_id:
                self._conversations.mark_read(self.other_user_id)
        return updated

    def receive_message(self, message: Message) -> None:
        """A message pushed for this thread while it is open."""
        if {message.sender_id, message.receiver_id} != {self.current_user_id, self.other_user_id}:
            return
        self._merge_into_thread(message)
        if self._conversations is not None:
            self._conversations.receive_message(message, self.current_user_id)

    def clear_error(self) -> None:
        self.send_state.reset()

    def _merge_into_thread(self, message: Message) -> None:
        current = self.messages.current_value() or []
        self.messages.publish(Success(_chronological(upsert_by_key(current, message, _message_id))))
