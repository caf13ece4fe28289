import json
import logging
from typing import Optional

from academy_client.repositories.local_store import LocalStore
from academy_client.schemas.user import UserProfile
from academy_client.utils.errors import DecodeError
from academy_client.utils.wire import decode_model, parse_json


logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "currentUser"
AUTH_TOKEN_KEY = "userToken"


class SessionRepository:
    """Read-mostly view of who is signed in, backed by the local store."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    async def current_user(self) -> Optional[UserProfile]:
        blob = await self._store.get(CURRENT_USER_KEY)
        if not blob:
            return None
        try:
            return decode_model(UserProfile, parse_json(blob))
        except DecodeError as exc:
            logger.warning("stored current user is unreadable: %s", exc)
            return None

    async def current_user_id(self) -> Optional[str]:
        user = await self.current_user()
        return user.id if user else None

    async def auth_token(self) -> Optional[str]:
        blob = await self._store.get(AUTH_TOKEN_KEY)
        if not blob:
            return None
        return blob.decode("utf-8")

    async def save_current_user(self, profile: UserProfile) -> None:
        payload = json.dumps(profile.to_wire())
        await self._store.set(CURRENT_USER_KEY, payload.encode("utf-8"))

    async def save_token(self, token: str) -> None:
        await self._store.set(AUTH_TOKEN_KEY, token.encode("utf-8"))

    async def clear(self) -> None:
        await self._store.delete(CURRENT_USER_KEY)
        await self._store.delete(AUTH_TOKEN_KEY)
