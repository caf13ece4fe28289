import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiohttp

from academy_client.config import Settings, get_settings
from academy_client.controllers.chat import ChatController
from academy_client.controllers.conversations import ConversationsController
from academy_client.controllers.injuries import InjuriesController
from academy_client.controllers.stadiums import StadiumsController
from academy_client.controllers.tournaments import TournamentsController
from academy_client.database.connection import close_mongo_connection, connect_to_mongo
from academy_client.repositories.local_store import LocalStore, MemoryLocalStore, MongoLocalStore
from academy_client.repositories.session_repository import SessionRepository
from academy_client.services.chat_history_service import ChatHistoryService
from academy_client.services.chat_service import ChatService
from academy_client.services.injury_service import InjuryService
from academy_client.services.terrain_service import TerrainService
from academy_client.services.tournament_service import TournamentService
from academy_client.services.user_service import UserService
from academy_client.utils.http import AiohttpTransport, Transport


logger = logging.getLogger(__name__)


@dataclass
class AcademyClient:
    """Everything a screen needs, wired to one transport and one local store."""

    settings: Settings
    transport: Transport
    local_store: LocalStore
    session: SessionRepository
    chat_service: ChatService
    user_service: UserService
    injury_service: InjuryService
    terrain_service: TerrainService
    tournament_service: TournamentService
    chat_history: ChatHistoryService

    @classmethod
    def build(cls, settings: Settings, transport: Transport, local_store: LocalStore, session: SessionRepository) -> "AcademyClient":
        return cls(
            settings=settings,
            transport=transport,
            local_store=local_store,
            session=session,
            chat_service=ChatService(transport),
            user_service=UserService(transport),
            injury_service=InjuryService(transport),
            terrain_service=TerrainService(transport),
            tournament_service=TournamentService(transport),
            chat_history=ChatHistoryService(local_store),
        )

    def conversations(self) -> ConversationsController:
        return ConversationsController(self.chat_service, self.user_service, self.session)

    def chat(
        self,
        current_user_id: Optional[str],
        other_user_id: str,
        conversations: Optional[ConversationsController] = None,
    ) -> ChatController:
        return ChatController(self.chat_service, current_user_id, other_user_id, conversations)

    def injuries(self) -> InjuriesController:
        return InjuriesController(self.injury_service)

    def stadiums(self) -> StadiumsController:
        return StadiumsController(self.terrain_service)

    def tournaments(self) -> TournamentsController:
        return TournamentsController(self.tournament_service)


@asynccontextmanager
async def lifespan(settings: Optional[Settings] = None) -> AsyncIterator[AcademyClient]:
    settings = settings or get_settings()
    db = await connect_to_mongo(settings)
    local_store: LocalStore = MongoLocalStore(db) if db is not None else MemoryLocalStore()
    if db is None:
        logger.info("MONGO_URL not set, keeping local data in memory")
    session = SessionRepository(local_store)

    http = aiohttp.ClientSession()
    try:
        transport = AiohttpTransport(
            http,
            settings.api_url,
            token_provider=session.auth_token,
            timeout_seconds=settings.read_timeout_seconds,
        )
        yield AcademyClient.build(settings, transport, local_store, session)
    finally:
        await http.close()
        await close_mongo_connection()
