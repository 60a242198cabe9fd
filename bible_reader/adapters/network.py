"""Network reachability check for the remote engine host."""

from __future__ import annotations

import httpx

from bible_reader.core.config import config
from bible_reader.core.logging import get_logger
from bible_reader.core.ports import NetworkPort

logger = get_logger(__name__)


class HttpReachability(NetworkPort):
    """Treats any HTTP answer from ``url`` as proof of connectivity."""

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url or config.REMOTE_BIBLE_ENGINE_URL
        self._timeout = timeout if timeout is not None else config.REACHABILITY_TIMEOUT
        self._transport = transport

    async def internet_is_available(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                await client.head(self._url)
        except httpx.TimeoutException:
            logger.debug("Reachability check timed out: %s", self._url)
            return False
        except httpx.RequestError as exc:
            logger.info("Reachability check failed: %s", exc)
            return False
        return True


__all__ = ["HttpReachability"]
