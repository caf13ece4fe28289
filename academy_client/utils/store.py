import logging
from typing import Callable, Generic, List, Optional, TypeVar

from academy_client.utils.resource import IDLE, LOADING, AsyncResource, value_or


logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[AsyncResource], None]


class ResourceStore(Generic[T]):
    """Holds one AsyncResource for one query slot and notifies listeners.

    Every fetch takes a ticket from ``begin()``. Only the most recently
    issued ticket may resolve the slot; results carrying an older ticket
    are dropped, so the last *issued* request wins regardless of arrival
    order.
    """

    def __init__(self, name: str = "resource") -> None:
        self.name = name
        self._state: AsyncResource = IDLE
        self._listeners: List[Listener] = []
        self._issued = 0

    def get_state(self) -> AsyncResource:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def begin(self) -> int:
        self._issued += 1
        self._set(LOADING)
        return self._issued

    def is_current(self, ticket: int) -> bool:
        return ticket == self._issued

    def resolve(self, ticket: int, state: AsyncResource) -> bool:
        if not self.is_current(ticket):
            logger.debug("%s: dropping stale result for ticket %d (latest %d)", self.name, ticket, self._issued)
            return False
        self._set(state)
        return True

    def publish(self, state: AsyncResource) -> None:
        """Publish outside the ticket protocol (local and optimistic updates)."""
        self._set(state)

    def reset(self) -> None:
        self._issued += 1
        self._set(IDLE)

    def current_value(self) -> Optional[T]:
        return value_or(self._state)

    def _set(self, state: AsyncResource) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
