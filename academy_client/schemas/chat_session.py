from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from academy_client.utils.wire import Timestamp, utc_now


class AIChatMessage(BaseModel):

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str
    is_user: bool
    timestamp: Timestamp = Field(default_factory=utc_now)
    is_loading: bool = False
    has_error: bool = False


class AIChatSession(BaseModel):
    """A saved assistant conversation, persisted in the local store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    date: Timestamp = Field(default_factory=utc_now)
    messages: List[AIChatMessage] = Field(default_factory=list)
    preview_text: str = ""
