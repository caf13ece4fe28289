from typing import List
from urllib.parse import quote

from academy_client.schemas.terrain import CreateTerrainRequest, Terrain, UpdateTerrainRequest
from academy_client.utils.http import Transport
from academy_client.utils.wire import decode_list, decode_model, parse_json


class TerrainService:

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_all_stadiums(self) -> List[Terrain]:
        raw = await self._transport.send("GET", "terrains")
        return decode_list(Terrain, parse_json(raw))

    async def get_stadiums_by_academy(self, academy_id: str) -> List[Terrain]:
        raw = await self._transport.send("GET", f"terrains/academie/{quote(academy_id)}")
        return decode_list(Terrain, parse_json(raw))

    async def get_stadium(self, stadium_id: str) -> Terrain:
        raw = await self._transport.send("GET", f"terrains/{quote(stadium_id)}")
        return decode_model(Terrain, parse_json(raw))

    async def create_stadium(self, request: CreateTerrainRequest) -> Terrain:
        raw = await self._transport.send("POST", "terrains", request.model_dump(exclude_none=True))
        return decode_model(Terrain, parse_json(raw))

    async def update_stadium(self, stadium_id: str, request: UpdateTerrainRequest) -> Terrain:
        raw = await self._transport.send("PATCH", f"terrains/{quote(stadium_id)}", request.model_dump(exclude_none=True))
        return decode_model(Terrain, parse_json(raw))

    async def delete_stadium(self, stadium_id: str) -> None:
        await self._transport.send("DELETE", f"terrains/{quote(stadium_id)}")
