from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from academy_client.models.user import UserPayload
from academy_client.utils.wire import Identifier, OptionalIdentifier


class UserProfile(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    first_name: str = Field(default="", alias="prenom")
    last_name: str = Field(default="", alias="nom")
    email: Optional[str] = None
    role: Optional[str] = None
    academy_id: OptionalIdentifier = Field(default=None, alias="academieId")
    picture: Optional[str] = None
    is_verified: bool = Field(default=False, alias="isVerified")

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.id

    def to_wire(self) -> UserPayload:
        return self.model_dump(by_alias=True)
