import asyncio
import logging
from typing import Any, List, Optional

from academy_client.repositories.session_repository import SessionRepository
from academy_client.schemas.conversation import Conversation
from academy_client.schemas.message import Message
from academy_client.services.chat_service import ChatService
from academy_client.services.enrichment import EnrichmentCoordinator
from academy_client.services.reconciler import (
    apply_display_names,
    dedupe_by_key,
    mark_conversation_read,
    sort_conversations,
    upsert_conversation,
)
from academy_client.utils.errors import DecodeError, TransportError
from academy_client.utils.resource import Error, Success
from academy_client.utils.store import ResourceStore


logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "No user is signed in"


def _conversation_key(conversation: Conversation) -> str:
    return conversation.other_user_id


def _with_profile(conversation: Conversation, profile: Any) -> Conversation:
    name = getattr(profile, "display_name", None)
    if not name:
        return conversation
    return conversation.model_copy(update={"other_user_name": name})


class ConversationsController:
    """Conversation list screen: load, background name enrichment, live upserts."""

    def __init__(self, chat_service: ChatService, directory: Any, session: SessionRepository) -> None:
        self._chat = chat_service
        self._session = session
        self._coordinator = EnrichmentCoordinator(directory.get_profile)
        self.conversations: ResourceStore[List[Conversation]] = ResourceStore("conversations")
        self.current_user_id: Optional[str] = None
        self.enrichment_task: Optional[asyncio.Task] = None

    async def refresh_user_id(self) -> Optional[str]:
        self.current_user_id = await self._session.current_user_id()
        return self.current_user_id

    async def refresh(self) -> Optional[asyncio.Task]:
        user_id = await self.refresh_user_id()
        if not user_id:
            ticket = self.conversations.begin()
            self.conversations.resolve(ticket, Error(NOT_SIGNED_IN))
            return None
        return await self.load_conversations(user_id)

    async def load_conversations(self, user_id: str) -> Optional[asyncio.Task]:
        """Publish the list as soon as it arrives, then names once every lookup settled.

        Returns the background enrichment task, or None when nothing was published.
        """
        ticket = self.conversations.begin()
        try:
            conversations = await self._chat.get_conversations(user_id)
        except (TransportError, DecodeError) as exc:
            logger.warning("loading conversations for %s failed: %s", user_id, exc)
            self.conversations.resolve(ticket, Error(str(exc)))
            return None
        # one row per other user, the later row wins
        conversations = sort_conversations(dedupe_by_key(conversations, _conversation_key))
        if not self.conversations.resolve(ticket, Success(conversations)):
            return None

        self.enrichment_task = self._coordinator.start(
            conversations,
            key=_conversation_key,
            apply=_with_profile,
            on_complete=lambda enriched: self._publish_enriched(ticket, enriched),
        )
        return self.enrichment_task

    def _publish_enriched(self, ticket: int, enriched: List[Conversation]) -> None:
        if not self.conversations.is_current(ticket):
            logger.debug("dropping names resolved for a superseded conversation load")
            return
        current = self.conversations.current_value()
        if current is None:
            return
        names = {c.other_user_id: c.other_user_name for c in enriched if c.other_user_name}
        # messages upserted while lookups were running stay in place
        self.conversations.resolve(ticket, Success(apply_display_names(current, names)))

    def receive_message(self, message: Message, local_user_id: Optional[str] = None) -> List[Conversation]:
        """Merge one message, from the server or sent locally, into the list."""
        current = self.conversations.current_value() or []
        updated = upsert_conversation(current, message, local_user_id or self.current_user_id)
        self.conversations.publish(Success(updated))
        return updated

    def mark_read(self, other_user_id: str) -> List[Conversation]:
        current = self.conversations.current_value()
        if current is None:
            return []
        updated = mark_conversation_read(current, other_user_id)
        self.conversations.publish(Success(updated))
        return updated
