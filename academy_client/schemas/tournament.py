from collections.abc import Mapping
from typing import Annotated, Any, List, Optional

from bson import ObjectId
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from academy_client.utils.wire import (
    IDENTIFIER_WRAPPER_KEY,
    Identifier,
    OptionalIdentifier,
    OptionalTimestamp,
    Timestamp,
    decode_optional_identifier,
)


PLACEHOLDER_TEAM_NAME = "Team"

# keys that only a full match document carries; anything else in "matches" is a bare id
_MATCH_DOCUMENT_KEYS = ("id_equipe1", "id_equipe2", "round", "score_eq1", "score_eq2", "status", "matchNumber")


def _lenient_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


LenientInt = Annotated[Optional[int], BeforeValidator(_lenient_int)]


class BracketTeamInfo(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: OptionalIdentifier = Field(default=None, validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("nom", "name"), serialization_alias="nom")
    logo: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or PLACEHOLDER_TEAM_NAME


def _team_from_wire(value: Any) -> Any:
    """A team is either a populated document or just its id."""
    if value is None:
        return None
    if isinstance(value, (str, ObjectId)):
        return {"_id": decode_optional_identifier(value), "nom": PLACEHOLDER_TEAM_NAME}
    if isinstance(value, Mapping):
        if IDENTIFIER_WRAPPER_KEY in value and len(value) == 1:
            return {"_id": decode_optional_identifier(value), "nom": PLACEHOLDER_TEAM_NAME}
        return value
    return None


TeamField = Annotated[Optional[BracketTeamInfo], BeforeValidator(_team_from_wire)]


class Match(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    team1: TeamField = Field(default=None, alias="id_equipe1")
    team2: TeamField = Field(default=None, alias="id_equipe2")
    score1: LenientInt = Field(default=None, alias="score_eq1")
    score2: LenientInt = Field(default=None, alias="score_eq2")
    date: OptionalTimestamp = None
    status: Optional[str] = None
    round: LenientInt = None
    match_number: LenientInt = Field(default=None, alias="matchNumber")
    next_match_id: OptionalIdentifier = Field(default=None, alias="nextMatchId")

    @field_validator("status", mode="before")
    @classmethod
    def _status_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None


class Organizer(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: OptionalIdentifier = Field(default=None, validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    first_name: str = Field(default="", alias="prenom")
    last_name: str = Field(default="", alias="nom")
    email: Optional[str] = None


def _organizer_from_wire(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value
    if value is None:
        return None
    resolved = decode_optional_identifier(value)
    return {"_id": resolved} if resolved else None


def _referees_from_wire(value: Any) -> Any:
    if not isinstance(value, list):
        return []
    referees = []
    for item in value:
        resolved = decode_optional_identifier(item)
        if resolved:
            referees.append(resolved)
    return referees


class Tournament(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: str = Field(alias="nom")
    tournament_name: str = Field(alias="tournamentName")
    participants: List[Identifier] = Field(default_factory=list)
    start_date: Timestamp = Field(alias="date_debut")
    end_date: Timestamp = Field(alias="date_fin")
    stadium: str
    date: Timestamp
    time: str
    max_participants: int = Field(alias="maxParticipants")
    entry_fee: LenientInt = Field(default=None, alias="entryFee")
    prize_pool: LenientInt = Field(default=None, alias="prizePool")
    referees: Annotated[List[str], BeforeValidator(_referees_from_wire)] = Field(default_factory=list, alias="referee")
    category: str = Field(alias="categorie")
    type: str
    organizer: Annotated[Optional[Organizer], BeforeValidator(_organizer_from_wire)] = Field(
        default=None, alias="id_organisateur"
    )
    matches: List[Match] = Field(default_factory=list)
    match_ids: List[Identifier] = Field(default_factory=list, alias="matchIds")
    is_bracket_generated: bool = Field(default=False, alias="isBracketGenerated")
    current_round: LenientInt = Field(default=None, alias="currentRound")

    @model_validator(mode="before")
    @classmethod
    def _split_matches(cls, data: Any) -> Any:
        """``matches`` holds either populated match documents or bare ids."""
        if not isinstance(data, Mapping):
            return data
        raw = data.get("matches")
        if not isinstance(raw, list):
            return data
        documents, ids = [], []
        for item in raw:
            if isinstance(item, Mapping) and any(key in item for key in _MATCH_DOCUMENT_KEYS):
                documents.append(item)
            else:
                ids.append(item)
        return {**data, "matches": documents, "matchIds": ids}

    @property
    def all_match_ids(self) -> List[str]:
        if self.matches:
            return [match.id for match in self.matches]
        return list(self.match_ids)
