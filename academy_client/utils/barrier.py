from typing import Callable


class Countdown:
    """Counter that calls ``on_complete`` exactly once when it reaches zero.

    A countdown created with ``count == 0`` completes immediately.
    """

    def __init__(self, count: int, on_complete: Callable[[], None]) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._remaining = count
        self._on_complete = on_complete
        self._fired = False
        if count == 0:
            self._fire()

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def fired(self) -> bool:
        return self._fired

    def arrive(self) -> None:
        if self._fired:
            raise RuntimeError("countdown already completed")
        self._remaining -= 1
        if self._remaining == 0:
            self._fire()

    def _fire(self) -> None:
        self._fired = True
        self._on_complete()
