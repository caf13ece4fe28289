import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol

import aiohttp

from academy_client.utils.errors import TransportError


logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[Optional[str]]]


class Transport(Protocol):

    async def send(self, method: str, path: str, body: Any = None) -> bytes: ...


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def extract_error_message(status: int, raw: bytes) -> str:
    """Best-effort server message: ``message`` or ``error`` field, else the raw body."""
    text = raw.decode("utf-8", errors="replace").strip()
    if not text:
        return f"HTTP {status}"
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(payload, dict):
        message = payload.get("message")
        # some validators answer with a list of messages
        if isinstance(message, list) and message:
            return "; ".join(str(m) for m in message)
        if isinstance(message, str) and message:
            return message
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return text


class AiohttpTransport:
    """Sends JSON requests to the academy backend with the bearer token attached."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._session = session
        self._base_url = base_url
        self._token_provider = token_provider
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def send(self, method: str, path: str, body: Any = None) -> bytes:
        url = build_url(self._base_url, path)
        headers = {"Content-Type": "application/json"}
        if self._token_provider is not None:
            token = await self._token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        data = json.dumps(body).encode("utf-8") if body is not None else None
        logger.debug("%s %s", method, url)
        try:
            async with self._session.request(method, url, data=data, headers=headers, timeout=self._timeout) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    message = extract_error_message(resp.status, raw)
                    logger.warning("%s %s failed with %d: %s", method, url, resp.status, message)
                    raise TransportError(resp.status, message)
                return raw
        except TransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise TransportError(None, f"request to {path} timed out") from exc
        except aiohttp.ClientError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(None, str(exc) or exc.__class__.__name__) from exc
