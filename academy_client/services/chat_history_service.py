import json
import logging
from typing import List

from academy_client.repositories.local_store import LocalStore
from academy_client.schemas.chat_session import AIChatSession
from academy_client.services.reconciler import remove_by_key, upsert_by_key
from academy_client.utils.errors import DecodeError
from academy_client.utils.wire import decode_list_lenient, parse_json


logger = logging.getLogger(__name__)

SAVED_SESSIONS_KEY = "saved_chat_sessions"


def _session_id(session: AIChatSession) -> str:
    return session.id


def _session_date(session: AIChatSession) -> str:
    return session.date


class ChatHistoryService:
    """Saved assistant conversations, newest first."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self.sessions: List[AIChatSession] = []

    async def load_sessions(self) -> List[AIChatSession]:
        blob = await self._store.get(SAVED_SESSIONS_KEY)
        sessions: List[AIChatSession] = []
        if blob:
            try:
                sessions = decode_list_lenient(AIChatSession, parse_json(blob))
            except DecodeError as exc:
                logger.warning("saved chat sessions are unreadable, starting empty: %s", exc)
        self.sessions = sorted(sessions, key=_session_date, reverse=True)
        return self.sessions

    async def save_session(self, session: AIChatSession) -> List[AIChatSession]:
        self.sessions = upsert_by_key(self.sessions, session, _session_id, sort_key=_session_date, reverse=True)
        await self._persist()
        return self.sessions

    async def delete_session(self, session_id: str) -> List[AIChatSession]:
        self.sessions = remove_by_key(self.sessions, session_id, _session_id)
        await self._persist()
        return self.sessions

    async def _persist(self) -> None:
        payload = json.dumps([session.model_dump() for session in self.sessions])
        await self._store.set(SAVED_SESSIONS_KEY, payload.encode("utf-8"))
