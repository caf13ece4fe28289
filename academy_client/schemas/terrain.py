from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from academy_client.utils.wire import Identifier, OptionalTimestamp


class Coordinates(BaseModel):

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Terrain(BaseModel):

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Identifier = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    academy_id: Identifier = Field(alias="id_academie")
    name: str
    location_verbal: str = ""
    coordinates: Coordinates
    capacity: int = 0
    number_of_fields: int = 1
    field_names: List[str] = Field(default_factory=list)
    has_lights: bool = False
    amenities: List[str] = Field(default_factory=list)
    is_available: bool = True
    created_at: OptionalTimestamp = Field(default=None, alias="createdAt")
    updated_at: OptionalTimestamp = Field(default=None, alias="updatedAt")


class CreateTerrainRequest(BaseModel):

    id_academie: str
    name: str = Field(min_length=1)
    location_verbal: str
    coordinates: Coordinates
    capacity: int = Field(ge=0)
    number_of_fields: int = Field(ge=1)
    field_names: Optional[List[str]] = None
    has_lights: Optional[bool] = False
    amenities: Optional[List[str]] = None
    is_available: Optional[bool] = True


class UpdateTerrainRequest(BaseModel):

    name: Optional[str] = None
    location_verbal: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    number_of_fields: Optional[int] = Field(default=None, ge=1)
    field_names: Optional[List[str]] = None
    has_lights: Optional[bool] = None
    amenities: Optional[List[str]] = None
    is_available: Optional[bool] = None
