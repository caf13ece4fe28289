from typing import List, Optional

from academy_client.controllers.base import run_query
from academy_client.schemas.injury import (
    AddEvolutionRequest,
    AddRecommendationRequest,
    CreateInjuryRequest,
    Injury,
    UpdateStatusRequest,
)
from academy_client.services.injury_service import InjuryService, map_injury_type, map_severity
from academy_client.services.reconciler import remove_by_key, upsert_by_key
from academy_client.utils.resource import Success
from academy_client.utils.store import ResourceStore


def _injury_id(injury: Injury) -> str:
    return injury.id


class InjuriesController:

    def __init__(self, injury_service: InjuryService) -> None:
        self._service = injury_service
        self.my_injuries: ResourceStore[List[Injury]] = ResourceStore("my_injuries")
        self.academy_injuries: ResourceStore[List[Injury]] = ResourceStore("academy_injuries")
        self.unavailable_players: ResourceStore[List[Injury]] = ResourceStore("unavailable_players")
        self.create_state: ResourceStore[Injury] = ResourceStore("create_injury")
        self.add_evolution_state: ResourceStore[Injury] = ResourceStore("add_evolution")
        self.update_status_state: ResourceStore[Injury] = ResourceStore("update_status")
        self.add_recommendation_state: ResourceStore[Injury] = ResourceStore("add_recommendation")

    async def load_my_injuries(self) -> Optional[List[Injury]]:
        return await run_query(self.my_injuries, self._service.get_my_injuries)

    async def load_academy_injuries(self, academy_id: str) -> Optional[List[Injury]]:
        return await run_query(self.academy_injuries, lambda: self._service.get_academy_injuries(academy_id))

    async def load_unavailable_players(self) -> Optional[List[Injury]]:
        return await run_query(self.unavailable_players, self._service.get_unavailable_players)

    async def create_injury(self, type_label: str, severity_label: str, description: str) -> Optional[Injury]:
        async def create() -> Injury:
            request = CreateInjuryRequest(
                type=map_injury_type(type_label),
                severity=map_severity(severity_label),
                description=description,
            )
            return await self._service.create_injury(request)

        injury = await run_query(self.create_state, create)
        if injury is not None:
            await self.load_my_injuries()
        return injury

    async def add_evolution(self, injury_id: str, pain_level: int, note: str) -> Optional[Injury]:
        async def add() -> Injury:
            request = AddEvolutionRequest(pain_level=pain_level, note=note)
            return await self._service.add_evolution(injury_id, request)

        return self._merge(await run_query(self.add_evolution_state, add))

    async def update_status(self, injury_id: str, status: str) -> Optional[Injury]:
        async def update() -> Injury:
            return await self._service.update_status(injury_id, UpdateStatusRequest(status=status))

        return self._merge(await run_query(self.update_status_state, update))

    async def add_recommendation(self, injury_id: str, recommendation: str) -> Optional[Injury]:
        async def add() -> Injury:
            request = AddRecommendationRequest(recommendation=recommendation)
            return await self._service.add_recommendation(injury_id, request)

        return self._merge(await run_query(self.add_recommendation_state, add))

    def _merge(self, injury: Optional[Injury]) -> Optional[Injury]:
        """Fold an updated injury into whichever loaded lists already show it."""
        if injury is None:
            return None
        for store in (self.my_injuries, self.academy_injuries):
            current = store.current_value()
            if current is not None and any(_injury_id(i) == injury.id for i in current):
                store.publish(Success(upsert_by_key(current, injury, _injury_id)))
        unavailable = self.unavailable_players.current_value()
        if unavailable is not None:
            if injury.is_unavailable:
                unavailable = upsert_by_key(unavailable, injury, _injury_id)
            else:
                unavailable = remove_by_key(unavailable, injury.id, _injury_id)
            self.unavailable_players.publish(Success(unavailable))
        return injury

    def reset_create_state(self) -> None:
        self.create_state.reset()

    def reset_add_evolution_state(self) -> None:
        self.add_evolution_state.reset()

    def reset_update_status_state(self) -> None:
        self.update_status_state.reset()

    def reset_add_recommendation_state(self) -> None:
        self.add_recommendation_state.reset()
