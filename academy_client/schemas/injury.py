from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from academy_client.utils.wire import Identifier, OptionalIdentifier, OptionalTimestamp, Timestamp


INJURY_STATUS_FIT = "apte"
INJURY_STATUS_MONITORED = "surveille"
INJURY_STATUS_UNAVAILABLE = "indisponible"
INJURY_STATUSES = (INJURY_STATUS_FIT, INJURY_STATUS_MONITORED, INJURY_STATUS_UNAVAILABLE)


class Evolution(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: Timestamp
    pain_level: int = Field(ge=0, le=10, alias="painLevel")
    note: str = ""


class Injury(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    type: str
    severity: str
    description: str = ""
    status: str = INJURY_STATUS_FIT
    # playerId is sometimes populated with the whole player document
    player_id: OptionalIdentifier = Field(default=None, alias="playerId")
    academy_id: OptionalIdentifier = Field(default=None, alias="academyId")
    evolutions: List[Evolution] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    created_at: Timestamp = Field(alias="createdAt")
    updated_at: OptionalTimestamp = Field(default=None, alias="updatedAt")

    @property
    def last_evolution(self) -> Optional[Evolution]:
        return self.evolutions[-1] if self.evolutions else None

    @property
    def is_unavailable(self) -> bool:
        return self.status.lower() == INJURY_STATUS_UNAVAILABLE


class CreateInjuryRequest(BaseModel):
    # the backend takes the player from the auth token
    type: str
    severity: str
    description: str


class AddEvolutionRequest(BaseModel):

    model_config = ConfigDict(populate_by_name=True)

    pain_level: int = Field(ge=0, le=10, alias="painLevel")
    note: str


class AddRecommendationRequest(BaseModel):
    recommendation: str = Field(min_length=1)


class UpdateStatusRequest(BaseModel):
    status: str
