"""Pure merge functions for locally held collections.

Every function returns a new list; inputs are never mutated. Server
responses and optimistic local updates go through the same functions.
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from academy_client.schemas.conversation import Conversation
from academy_client.schemas.message import Message
from academy_client.utils.errors import PreconditionError


T = TypeVar("T")


def _require_local_user(local_user_id: Optional[str]) -> str:
    if not local_user_id:
        raise PreconditionError("local user id is required to merge messages")
    return local_user_id


def other_user_id(message: Message, local_user_id: str) -> str:
    return message.receiver_id if message.sender_id == local_user_id else message.sender_id


def _is_incoming_unread(message: Message, local_user_id: str) -> bool:
    return message.receiver_id == local_user_id and not message.is_read


def sort_conversations(conversations: Iterable[Conversation]) -> List[Conversation]:
    # sorted() is stable, so equal timestamps keep their list order
    return sorted(conversations, key=lambda c: c.last_message_at, reverse=True)


def upsert_conversation(
    conversations: Sequence[Conversation], message: Message, local_user_id: Optional[str]
) -> List[Conversation]:
    local_user_id = _require_local_user(local_user_id)
    other = other_user_id(message, local_user_id)
    incoming_unread = _is_incoming_unread(message, local_user_id)

    updated = list(conversations)
    index = next((i for i, c in enumerate(updated) if c.other_user_id == other), None)
    if index is None:
        updated.append(
            Conversation(
                other_user_id=other,
                other_user_name=None,
                last_message=message,
                unread_count=1 if incoming_unread else 0,
            )
        )
    else:
        existing = updated[index]
        # a replayed last message (same id) is not counted again, unlike the
        # mobile client's addOrUpdateConversation which bumps on every delivery
        # keep this guard: upserting the same message twice must be a no-op
        already_counted = existing.last_message is not None and existing.last_message.id == message.id
        bump = 1 if incoming_unread and not already_counted else 0
        updated[index] = existing.model_copy(
            update={"last_message": message, "unread_count": existing.unread_count + bump}
        )
    return sort_conversations(updated)


def apply_messages(
    conversations: Sequence[Conversation], messages: Iterable[Message], local_user_id: Optional[str]
) -> List[Conversation]:
    result = list(conversations)
    for message in messages:
        result = upsert_conversation(result, message, local_user_id)
    return result


def mark_conversation_read(conversations: Sequence[Conversation], other_user_id: str) -> List[Conversation]:
    """Explicit read-clearing: the only path that lowers an unread count."""
    updated = []
    for conversation in conversations:
        if conversation.other_user_id == other_user_id:
            last = conversation.last_message.mark_read() if conversation.last_message else None
            conversation = conversation.model_copy(update={"unread_count": 0, "last_message": last})
        updated.append(conversation)
    return updated


def apply_display_names(conversations: Sequence[Conversation], names: dict) -> List[Conversation]:
    """Fill in resolved names by other_user_id, leaving everything else as is."""
    updated = []
    for conversation in conversations:
        name = names.get(conversation.other_user_id)
        if name and name != conversation.other_user_name:
            conversation = conversation.model_copy(update={"other_user_name": name})
        updated.append(conversation)
    return updated


def upsert_by_key(
    items: Sequence[T],
    item: T,
    key: Callable[[T], Any],
    sort_key: Optional[Callable[[T], Any]] = None,
    reverse: bool = False,
) -> List[T]:
    """Replace the item sharing ``key`` in place, or append it; then sort if asked."""
    target = key(item)
    updated = list(items)
    for index, existing in enumerate(updated):
        if key(existing) == target:
            updated[index] = item
            break
    else:
        updated.append(item)
    if sort_key is not None:
        updated.sort(key=sort_key, reverse=reverse)
    return updated


def merge_by_key(
    existing: Sequence[T],
    incoming: Iterable[T],
    key: Callable[[T], Any],
    sort_key: Optional[Callable[[T], Any]] = None,
    reverse: bool = False,
) -> List[T]:
    result = list(existing)
    for item in incoming:
        result = upsert_by_key(result, item, key)
    if sort_key is not None:
        result.sort(key=sort_key, reverse=reverse)
    return result


def dedupe_by_key(items: Iterable[T], key: Callable[[T], Any]) -> List[T]:
    """Collapse duplicates; a later item wins but keeps the first one's position."""
    return merge_by_key([], items, key)


def remove_by_key(items: Sequence[T], target: Any, key: Callable[[T], Any]) -> List[T]:
    return [item for item in items if key(item) != target]


def replace_by_key(items: Sequence[T], target: Any, item: T, key: Callable[[T], Any]) -> List[T]:
    """Swap the entry keyed ``target`` for ``item`` (e.g. a local message for its server copy).

    An entry already carrying ``item``'s key is dropped so the result holds it once.
    """
    item_key = key(item)
    updated = []
    replaced = False
    for existing in items:
        existing_key = key(existing)
        if existing_key == target or existing_key == item_key:
            if not replaced:
                updated.append(item)
                replaced = True
            continue
        updated.append(existing)
    if not replaced:
        updated.append(item)
    return updated
