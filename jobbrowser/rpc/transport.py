"""HTTP transport: one POST exchange per call, with an enforced deadline."""

from __future__ import annotations

import asyncio

import httpx
from loguru import logger

from jobbrowser.utils.exceptions import RpcTimeoutError, TransportError, sanitize_error_message


class HttpTransport:
    """Performs a single request/response exchange against one endpoint URL.

    No retries happen here. The deadline is enforced by cancelling the
    exchange; the response stream (and the client, when this transport owns
    it) is closed on every exit path.
    """

    def __init__(self, url: str, *, http_client: httpx.AsyncClient | None = None):
        if not url:
            raise ValueError("transport url is required")
        self.url = url
        self._http_client = http_client

    async def send(self, body: bytes, *, headers: dict[str, str], timeout: float) -> bytes:
        """POST ``body`` and return the raw 2xx response body.

        Raises:
            RpcTimeoutError: the deadline passed first.
            TransportError: network failure or non-2xx status.
        """
        try:
            return await asyncio.wait_for(self._exchange(body, headers, timeout), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise RpcTimeoutError(f"POST {self.url}", timeout) from exc
        except httpx.TimeoutException as exc:
            raise RpcTimeoutError(f"POST {self.url}", timeout) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"network error: POST {self.url}: {sanitize_error_message(str(exc)) or type(exc).__name__}"
            ) from exc

    async def _exchange(self, body: bytes, headers: dict[str, str], timeout: float) -> bytes:
        if self._http_client is not None:
            return await self._post(self._http_client, body, headers, timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await self._post(client, body, headers, timeout)

    async def _post(
        self,
        client: httpx.AsyncClient,
        body: bytes,
        headers: dict[str, str],
        timeout: float,
    ) -> bytes:
        async with client.stream("POST", self.url, content=body, headers=headers, timeout=timeout) as resp:
            raw = await resp.aread()
            status_code = resp.status_code
        if not 200 <= status_code < 300:
            message = _extract_error_message(raw)
            logger.warning(f"RPC transport got HTTP {status_code} from {self.url}")
            raise TransportError(f"http error {status_code}: {message}", status_code=status_code)
        return raw


def _extract_error_message(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace").strip()
    if not text:
        return "request failed"
    return sanitize_error_message(text[:200])


def build_headers(token: str | None) -> dict[str, str]:
    """JSON headers, plus the bearer credential verbatim when one is given."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if token:
        headers["Authorization"] = token
    return headers
