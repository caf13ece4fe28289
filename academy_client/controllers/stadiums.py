import logging
from typing import List, Optional

from academy_client.controllers.base import run_query
from academy_client.schemas.terrain import Coordinates, CreateTerrainRequest, Terrain, UpdateTerrainRequest
from academy_client.services.reconciler import remove_by_key, upsert_by_key
from academy_client.services.terrain_service import TerrainService
from academy_client.utils.errors import TransportError
from academy_client.utils.resource import Error, Success
from academy_client.utils.store import ResourceStore


logger = logging.getLogger(__name__)


def _terrain_id(terrain: Terrain) -> str:
    return terrain.id


class StadiumsController:

    def __init__(self, terrain_service: TerrainService) -> None:
        self._service = terrain_service
        self.stadiums: ResourceStore[List[Terrain]] = ResourceStore("stadiums")
        self.selected_stadium: ResourceStore[Terrain] = ResourceStore("selected_stadium")
        self.create_state: ResourceStore[Terrain] = ResourceStore("create_stadium")
        self.update_state: ResourceStore[Terrain] = ResourceStore("update_stadium")
        self.delete_state: ResourceStore[None] = ResourceStore("delete_stadium")

    async def load_all(self) -> Optional[List[Terrain]]:
        return await run_query(self.stadiums, self._service.get_all_stadiums)

    async def load_by_academy(self, academy_id: str) -> Optional[List[Terrain]]:
        return await run_query(self.stadiums, lambda: self._service.get_stadiums_by_academy(academy_id))

    async def load_one(self, stadium_id: str) -> Optional[Terrain]:
        return await run_query(self.selected_stadium, lambda: self._service.get_stadium(stadium_id))

    async def create_stadium(
        self,
        academy_id: str,
        name: str,
        location_verbal: str,
        latitude: float,
        longitude: float,
        capacity: int,
        number_of_fields: int,
        field_names: Optional[List[str]] = None,
        has_lights: Optional[bool] = False,
        amenities: Optional[List[str]] = None,
        is_available: Optional[bool] = True,
    ) -> Optional[Terrain]:
        async def create() -> Terrain:
            request = CreateTerrainRequest(
                id_academie=academy_id,
                name=name,
                location_verbal=location_verbal,
                coordinates=Coordinates(latitude=latitude, longitude=longitude),
                capacity=capacity,
                number_of_fields=number_of_fields,
                field_names=field_names,
                has_lights=has_lights,
                amenities=amenities,
                is_available=is_available,
            )
            return await self._service.create_stadium(request)

        stadium = await run_query(self.create_state, create)
        if stadium is not None:
            await self.load_by_academy(academy_id)
        return stadium

    async def update_stadium(
        self,
        stadium_id: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        **changes,
    ) -> Optional[Terrain]:
        async def update() -> Terrain:
            coordinates = None
            if latitude is not None and longitude is not None:
                coordinates = Coordinates(latitude=latitude, longitude=longitude)
            request = UpdateTerrainRequest(coordinates=coordinates, **changes)
            return await self._service.update_stadium(stadium_id, request)

        stadium = await run_query(self.update_state, update)
        if stadium is not None:
            current = self.stadiums.current_value()
            if current is not None and any(_terrain_id(s) == stadium.id for s in current):
                self.stadiums.publish(Success(upsert_by_key(current, stadium, _terrain_id)))
            selected = self.selected_stadium.current_value()
            if selected is not None and selected.id == stadium.id:
                self.selected_stadium.publish(Success(stadium))
        return stadium

    async def delete_stadium(self, stadium_id: str) -> bool:
        ticket = self.delete_state.begin()
        try:
            await self._service.delete_stadium(stadium_id)
        except TransportError as exc:
            logger.warning("deleting stadium %s failed: %s", stadium_id, exc)
            self.delete_state.resolve(ticket, Error(str(exc)))
            return False
        self.delete_state.resolve(ticket, Success(None))
        current = self.stadiums.current_value()
        if current is not None:
            self.stadiums.publish(Success(remove_by_key(current, stadium_id, _terrain_id)))
        return True
