"""Four-state container every screen's view state is built from.

``Idle`` and ``Loading`` carry nothing and compare equal to themselves;
``Success`` and ``Error`` compare structurally on their payload.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True)
class Idle:

    def __repr__(self) -> str:
        return "Idle"


@dataclass(frozen=True)
class Loading:

    def __repr__(self) -> str:
        return "Loading"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Error:
    message: str


IDLE = Idle()
LOADING = Loading()

AsyncResource = Union[Idle, Loading, Success[T], Error]


def value_or(resource: Any, default: Optional[T] = None) -> Optional[T]:
    if isinstance(resource, Success):
        return resource.value
    return default
