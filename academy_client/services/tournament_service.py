from typing import List
from urllib.parse import quote

from academy_client.schemas.tournament import Match, Tournament
from academy_client.utils.http import Transport
from academy_client.utils.wire import decode_list, decode_list_lenient, decode_model, parse_json


class TournamentService:

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_tournaments(self) -> List[Tournament]:
        raw = await self._transport.send("GET", "coupes")
        # one badly shaped tournament should not hide the others
        return decode_list_lenient(Tournament, parse_json(raw))

    async def get_tournament(self, tournament_id: str) -> Tournament:
        raw = await self._transport.send("GET", f"coupes/{quote(tournament_id)}")
        return decode_model(Tournament, parse_json(raw))

    async def get_matches(self, tournament_id: str) -> List[Match]:
        raw = await self._transport.send("GET", f"match/tournament/{quote(tournament_id)}")
        return decode_list(Match, parse_json(raw))
