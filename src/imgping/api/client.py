"""HTTP client for the image endpoint."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import aiohttp
import orjson

from imgping.models.config import RunConfig
from imgping.utils import fmt_bytes

logger = logging.getLogger(__name__)

# Characters of an unparseable body kept in the error message
_BODY_EXCERPT = 200


class InvalidResponseError(ValueError):
    """The endpoint answered with a body that is not valid JSON."""

    def __init__(self, status: int, body: bytes, reason: str) -> None:
        self.status = status
        self.body = body
        excerpt = body[:_BODY_EXCERPT].decode("utf-8", errors="replace")
        super().__init__(f"invalid JSON in response (HTTP {status}): {reason}; body={excerpt!r}")


def dumps_response(value: Any) -> str:
    """Compact JSON text of a parsed response, as stored in the log."""
    return orjson.dumps(value).decode("utf-8")


class ApiClient:
    """POSTs base64 payloads to a fixed endpoint over one shared session.

    Usage::

        async with ApiClient(config) as client:
            response = await client.submit(image_b64)

    The HTTP status is not inspected: any body that parses as JSON is
    returned. Transport failures surface as ``aiohttp.ClientError`` and
    unparseable bodies as :class:`InvalidResponseError`. No retries.
    """

    def __init__(self, config: RunConfig) -> None:
        self.endpoint = config.endpoint
        self.payload_field = config.payload_field
        self._limit = config.concurrency
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> ApiClient:
        connector = aiohttp.TCPConnector(limit=self._limit)
        self._session = aiohttp.ClientSession(connector=connector, json_serialize=dumps_response)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def submit(self, image_base64: str) -> Any:
        """Send one encoded image and return the parsed JSON response."""
        if self._session is None:
            raise RuntimeError("ApiClient must be used as an async context manager")

        payload = {self.payload_field: image_base64}
        logger.debug("POST %s (%s payload)", self.endpoint, fmt_bytes(len(image_base64)))
        async with self._session.post(self.endpoint, json=payload) as resp:
            body = await resp.read()
            logger.debug("HTTP %d from %s (%d bytes)", resp.status, self.endpoint, len(body))
            try:
                return orjson.loads(body)
            except orjson.JSONDecodeError as e:
                raise InvalidResponseError(resp.status, body, str(e)) from e
