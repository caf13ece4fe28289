from typing import List
from urllib.parse import quote

from academy_client.schemas.injury import (
    AddEvolutionRequest,
    AddRecommendationRequest,
    CreateInjuryRequest,
    Injury,
    UpdateStatusRequest,
)
from academy_client.utils.http import Transport
from academy_client.utils.wire import decode_list, decode_model, parse_json


# UI labels -> backend enums
INJURY_TYPES = {
    "Fracture": "fracture",
    "Entorse": "articulation",
    "Déchirure musculaire": "muscle",
    "Contusion": "choc",
    "Luxation": "articulation",
    "Tendinite": "tendon",
}
SEVERITIES = {
    "Légère": "light",
    "Modérée": "medium",
    "Grave": "severe",
    "Très grave": "severe",
}


def map_injury_type(label: str) -> str:
    return INJURY_TYPES.get(label, "other")


def map_severity(label: str) -> str:
    return SEVERITIES.get(label, "medium")


class InjuryService:

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def _list(self, path: str) -> List[Injury]:
        raw = await self._transport.send("GET", path)
        return decode_list(Injury, parse_json(raw))

    async def _one(self, method: str, path: str, body=None) -> Injury:
        raw = await self._transport.send(method, path, body)
        return decode_model(Injury, parse_json(raw))

    async def get_my_injuries(self) -> List[Injury]:
        # the backend resolves the player from the auth token
        return await self._list("injury/my")

    async def get_academy_injuries(self, academy_id: str) -> List[Injury]:
        return await self._list(f"injury/academy/{quote(academy_id)}")

    async def get_unavailable_players(self) -> List[Injury]:
        return await self._list("injury/unavailable")

    async def create_injury(self, request: CreateInjuryRequest) -> Injury:
        return await self._one("POST", "injury", request.model_dump())

    async def add_evolution(self, injury_id: str, request: AddEvolutionRequest) -> Injury:
        return await self._one("POST", f"injury/{quote(injury_id)}/evolution", request.model_dump(by_alias=True))

    async def add_recommendation(self, injury_id: str, request: AddRecommendationRequest) -> Injury:
        return await self._one("PATCH", f"injury/{quote(injury_id)}/recommendations", request.model_dump())

    async def update_status(self, injury_id: str, request: UpdateStatusRequest) -> Injury:
        return await self._one("PATCH", f"injury/{quote(injury_id)}/status", request.model_dump())
