from typing import Optional


class ClientError(Exception):
    """Base class for every failure raised by the client core."""


class DecodeError(ClientError, ValueError):

    def __init__(self, reason: str, field: Optional[str] = None) -> None:
        self.reason = reason
        self.field = field
        super().__init__(f"{field}: {reason}" if field else reason)


class TransportError(ClientError):

    def __init__(self, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"


class PreconditionError(ClientError):
    pass


class PartialFailure(ClientError):
    """One lookup of an enrichment pass failed; absorbed by the coordinator."""

    def __init__(self, key: str, cause: BaseException) -> None:
        self.key = key
        self.cause = cause
        super().__init__(f"lookup for {key} failed: {cause}")
