from typing import List, Optional

from academy_client.controllers.base import run_query
from academy_client.schemas.tournament import Match, Tournament
from academy_client.services.reconciler import dedupe_by_key
from academy_client.services.tournament_service import TournamentService
from academy_client.utils.store import ResourceStore


def _bracket_order(match: Match):
    # unnumbered matches go last within their round
    return (
        match.round if match.round is not None else 0,
        match.match_number if match.match_number is not None else float("inf"),
    )


class TournamentsController:

    def __init__(self, tournament_service: TournamentService) -> None:
        self._service = tournament_service
        self.tournaments: ResourceStore[List[Tournament]] = ResourceStore("tournaments")
        self.selected_tournament: ResourceStore[Tournament] = ResourceStore("selected_tournament")
        self.matches: ResourceStore[List[Match]] = ResourceStore("matches")

    async def load_tournaments(self) -> Optional[List[Tournament]]:
        async def fetch() -> List[Tournament]:
            tournaments = await self._service.get_tournaments()
            return sorted(dedupe_by_key(tournaments, lambda t: t.id), key=lambda t: t.date, reverse=True)

        return await run_query(self.tournaments, fetch)

    async def load_tournament(self, tournament_id: str) -> Optional[Tournament]:
        return await run_query(self.selected_tournament, lambda: self._service.get_tournament(tournament_id))

    async def load_matches(self, tournament_id: str) -> Optional[List[Match]]:
        async def fetch() -> List[Match]:
            matches = await self._service.get_matches(tournament_id)
            return sorted(dedupe_by_key(matches, lambda m: m.id), key=_bracket_order)

        return await run_query(self.matches, fetch)
