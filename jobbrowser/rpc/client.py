"""JSON-RPC client binding transport, codec and bearer credential."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from jobbrowser.rpc.protocol import Dialect, JsonRpcCodec, RpcErr, codec_for
from jobbrowser.rpc.transport import HttpTransport, build_headers
from jobbrowser.utils.exceptions import RemoteError, RpcTimeoutError, TransportError, sanitize_error_message

DEFAULT_TIMEOUT_SECONDS = 30.0


class JsonRpcClient:
    """
    Single ``call(method, params)`` interface over one JSON-RPC dialect.

    The dialect is fixed for the lifetime of the instance. The credential is
    the only mutable state; each call copies it before building headers, so
    replacing it never affects a call already in flight.
    """

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        dialect: Dialect | str = Dialect.V2_0,
        transport: HttpTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.url = url
        self.timeout = float(timeout)
        self._codec: JsonRpcCodec = codec_for(dialect)
        self._transport = transport or HttpTransport(url, http_client=http_client)
        self._token: str | None = token or None

    @property
    def dialect(self) -> Dialect:
        return self._codec.dialect

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token

    def clear_token(self) -> None:
        self._token = None

    async def call(self, method: str, params: Any = None) -> Any:
        """
        Invoke ``method`` and return its decoded result.

        Raises:
            RemoteError: the service answered with an error object.
            RpcTimeoutError: no response before the client timeout.
            TransportError: network/HTTP failure, or DecodeError for a bad body.
        """
        token = self._token
        request = self._codec.build_request(method, params)
        body = self._codec.encode(request)
        logger.debug(f"RPC call {method} id={request.id} dialect={request.dialect.value}")

        try:
            raw = await self._transport.send(body, headers=build_headers(token), timeout=self.timeout)
            outcome = self._codec.decode(raw, request_id=request.id)
        except RpcTimeoutError:
            logger.warning(f"RPC {method} id={request.id} timed out after {self.timeout}s")
            raise
        except TransportError as exc:
            logger.warning(f"RPC {method} id={request.id} failed: {sanitize_error_message(str(exc))}")
            raise

        if isinstance(outcome, RpcErr):
            logger.warning(
                f"RPC {method} id={request.id} remote error {outcome.code}: "
                f"{sanitize_error_message(outcome.message)}"
            )
            raise RemoteError(outcome.code, outcome.message, outcome.detail, name=outcome.name)
        return outcome.value
