import json
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Annotated, Any, Callable, List, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ValidationError

from academy_client.utils.errors import DecodeError


logger = logging.getLogger(__name__)

IDENTIFIER_WRAPPER_KEY = "$oid"
IDENTIFIER_FALLBACK_KEYS = ("_id", "id")

# yyyy-MM-dd'T'HH:mm:ss.SSSZ, what the backend emits for createdAt/updatedAt
BACKEND_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
_BACKEND_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}(Z|[+-]\d{2}:?\d{2})$")

M = TypeVar("M", bound=BaseModel)


# Identifier strategies: each returns the identifier or None, never raises.

def _identifier_from_string(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _identifier_from_object_id(value: Any) -> Optional[str]:
    if isinstance(value, ObjectId):
        return str(value)
    return None


def _identifier_from_wrapper(value: Any) -> Optional[str]:
    if not isinstance(value, Mapping):
        return None
    inner = value.get(IDENTIFIER_WRAPPER_KEY)
    if isinstance(inner, str):
        return inner
    return None


def _identifier_from_fallback_keys(value: Any) -> Optional[str]:
    if not isinstance(value, Mapping):
        return None
    for key in IDENTIFIER_FALLBACK_KEYS:
        if key in value:
            # {"_id": {"$oid": ...}} is common in exported documents
            return _resolve_identifier(value[key])
    return None


IDENTIFIER_STRATEGIES: List[Callable[[Any], Optional[str]]] = [
    _identifier_from_string,
    _identifier_from_object_id,
    _identifier_from_wrapper,
    _identifier_from_fallback_keys,
]


def _resolve_identifier(value: Any) -> Optional[str]:
    for strategy in IDENTIFIER_STRATEGIES:
        resolved = strategy(value)
        if resolved is not None:
            return resolved
    return None


def decode_identifier(value: Any, field: Optional[str] = None) -> str:
    resolved = _resolve_identifier(value)
    if resolved is None:
        raise DecodeError("invalid identifier shape", field=field)
    if not resolved:
        raise DecodeError("empty identifier", field=field)
    return resolved


def decode_optional_identifier(value: Any) -> Optional[str]:
    """Optional identifiers default to None when absent or malformed."""
    if value is None:
        return None
    return _resolve_identifier(value) or None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a wire timestamp, backend format first, then generic ISO-8601."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        parsed = None
        if _BACKEND_TIMESTAMP_RE.match(text):
            try:
                parsed = datetime.strptime(text, BACKEND_TIMESTAMP_FORMAT)
            except ValueError:
                parsed = None
        if parsed is None:
            if text.endswith("Z") or text.endswith("z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Canonical form: UTC, millisecond precision, trailing Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def decode_timestamp(value: Any, field: Optional[str] = None) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise DecodeError(f"unparseable timestamp {value!r}", field=field)
    return format_timestamp(parsed)


def decode_optional_timestamp(value: Any) -> Optional[str]:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return format_timestamp(parsed)


def utc_now() -> str:
    return format_timestamp(datetime.now(timezone.utc))


Identifier = Annotated[str, BeforeValidator(decode_identifier)]
OptionalIdentifier = Annotated[Optional[str], BeforeValidator(decode_optional_identifier)]
Timestamp = Annotated[str, BeforeValidator(decode_timestamp)]
OptionalTimestamp = Annotated[Optional[str], BeforeValidator(decode_optional_timestamp)]


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors()[:3]:
        location = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "invalid payload"


def parse_json(raw: bytes | str) -> Any:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("payload is not valid UTF-8") from exc
    if not raw.strip():
        raise DecodeError("empty payload")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"payload is not valid JSON: {exc.msg}") from exc


def decode_model(model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(_summarize(exc), field=model.__name__) from exc


def decode_list(model: Type[M], payload: Any) -> List[M]:
    """Decode every item; the first malformed item fails the whole list."""
    if not isinstance(payload, list):
        raise DecodeError("expected a list", field=model.__name__)
    return [decode_model(model, item) for item in payload]


def decode_list_lenient(model: Type[M], payload: Any) -> List[M]:
    """Decode what can be decoded; malformed items are logged and skipped."""
    if not isinstance(payload, list):
        raise DecodeError("expected a list", field=model.__name__)
    items: List[M] = []
    for index, raw in enumerate(payload):
        try:
            items.append(decode_model(model, raw))
        except DecodeError as exc:
            logger.warning("skipping malformed %s at index %d: %s", model.__name__, index, exc)
    return items
