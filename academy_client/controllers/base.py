import logging
from typing import Awaitable, Callable, Optional, TypeVar

from pydantic import ValidationError

from academy_client.utils.errors import DecodeError, TransportError
from academy_client.utils.resource import Error, Success
from academy_client.utils.store import ResourceStore


logger = logging.getLogger(__name__)

T = TypeVar("T")


def describe_failure(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        errors = exc.errors()
        if errors:
            return str(errors[0].get("msg", "invalid input"))
    return str(exc) or exc.__class__.__name__


async def run_query(store: ResourceStore[T], fetch: Callable[[], Awaitable[T]]) -> Optional[T]:
    """Loading -> Success/Error for one slot; returns the value only if it was published."""
    ticket = store.begin()
    try:
        value = await fetch()
    except (TransportError, DecodeError, ValidationError) as exc:
        logger.warning("%s failed: %s", store.name, exc)
        store.resolve(ticket, Error(describe_failure(exc)))
        return None
    if not store.resolve(ticket, Success(value)):
        return None
    return value
