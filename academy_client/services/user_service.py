from urllib.parse import quote

from academy_client.schemas.user import UserProfile
from academy_client.utils.http import Transport
from academy_client.utils.wire import decode_model, parse_json


class UserService:
    """User directory: profile lookups by id."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_profile(self, user_id: str) -> UserProfile:
        raw = await self._transport.send("GET", f"users/{quote(user_id)}")
        return decode_model(UserProfile, parse_json(raw))

    async def get_display_name(self, user_id: str) -> str:
        profile = await self.get_profile(user_id)
        return profile.display_name
