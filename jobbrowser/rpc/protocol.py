"""JSON-RPC wire codecs for the two dialects spoken by KBase services.

Dialect "2.0" (JSON-RPC 2.0):

    request   {"jsonrpc": "2.0", "method": m, "id": i, "params": p}
    success   {"jsonrpc": "2.0", "id": i, "result": value}
    failure   {"jsonrpc": "2.0", "id": i, "error": {"code", "message", "data"?}}

Dialect "1.1" (KBase SDK services):

    request   {"version": "1.1", "method": m, "id": i, "params": [p]}
    success   {"version": "1.1", "id": i, "result": [value]}
    failure   {"version": "1.1", "id": i, "error": {"code", "message", "error"?, "name"?}}

A codec is picked once per client and never inferred from a reply.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import uuid4

from jobbrowser.utils.exceptions import DecodeError

_MISSING = object()


class Dialect(str, Enum):
    """Supported JSON-RPC wire dialects."""
    V1_1 = "1.1"
    V2_0 = "2.0"


@dataclass(slots=True, frozen=True)
class RpcRequest:
    """One outgoing call. Built fresh per call, never reused."""

    id: str
    method: str
    params: Any
    dialect: Dialect


@dataclass(slots=True, frozen=True)
class RpcOk:
    """Decoded success arm."""

    value: Any


@dataclass(slots=True, frozen=True)
class RpcErr:
    """Decoded error arm, normalized across dialects."""

    code: int
    message: str
    detail: Any = None
    name: str | None = None


RpcOutcome = RpcOk | RpcErr


def new_request_id() -> str:
    """Random 122-bit correlation id, never derived from request content."""
    return str(uuid4())


class JsonRpcCodec:
    """Shared envelope handling; subclasses define the dialect-specific shape."""

    dialect: Dialect
    version_key: str
    other_version_key: str
    error_payload_key: str

    def build_request(self, method: str, params: Any = None) -> RpcRequest:
        if not isinstance(method, str) or not method:
            raise ValueError("method must be a non-empty string")
        return RpcRequest(id=new_request_id(), method=method, params=params, dialect=self.dialect)

    def envelope(self, request: RpcRequest) -> dict[str, Any]:
        raise NotImplementedError

    def encode(self, request: RpcRequest) -> bytes:
        if request.dialect is not self.dialect:
            raise ValueError(f"request built for dialect {request.dialect.value}, codec speaks {self.dialect.value}")
        return json.dumps(self.envelope(request), separators=(",", ":")).encode("utf-8")

    def decode(self, raw: bytes | str, *, request_id: str | None = None) -> RpcOutcome:
        """Decode a reply body into exactly one of RpcOk / RpcErr.

        Raises DecodeError for anything that is not a valid reply in this dialect.
        """
        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"response body is not valid JSON: {exc}") from exc
        if not isinstance(body, dict):
            raise DecodeError(f"response must be a JSON object, got {type(body).__name__}")

        self._check_version(body)
        if request_id is not None:
            reply_id = body.get("id")
            if reply_id is not None and reply_id != request_id:
                raise DecodeError(f"response id {reply_id!r} does not match request id {request_id!r}")

        result = body.get("result", _MISSING)
        error = body.get("error", _MISSING)
        # A null error next to a result is how some servers spell "no error".
        if error is None and result is not _MISSING:
            error = _MISSING
        has_result = result is not _MISSING
        has_error = error is not _MISSING
        if has_result and has_error:
            raise DecodeError("response carries both result and error")
        if not has_result and not has_error:
            raise DecodeError("response carries neither result nor error")
        if has_error:
            return self._decode_error(error)
        return RpcOk(value=self._unwrap_result(result))

    def _check_version(self, body: dict[str, Any]) -> None:
        if self.other_version_key in body:
            raise DecodeError(
                f"response uses the '{self.other_version_key}' envelope, expected dialect {self.dialect.value}"
            )
        tag = body.get(self.version_key, _MISSING)
        if tag is not _MISSING and tag != self.dialect.value:
            raise DecodeError(f"response {self.version_key} is {tag!r}, expected {self.dialect.value!r}")

    def _decode_error(self, error: Any) -> RpcErr:
        if not isinstance(error, dict):
            raise DecodeError("error member must be an object")
        code = error.get("code")
        message = error.get("message")
        if not isinstance(code, int) or isinstance(code, bool):
            raise DecodeError("error.code must be an integer")
        if not isinstance(message, str):
            raise DecodeError("error.message must be a string")
        name = error.get("name")
        return RpcErr(
            code=code,
            message=message,
            detail=error.get(self.error_payload_key),
            name=name if isinstance(name, str) else None,
        )

    def _unwrap_result(self, result: Any) -> Any:
        return result


class JsonRpc20Codec(JsonRpcCodec):
    """JSON-RPC 2.0: bare params, bare result, error payload under ``data``."""

    dialect = Dialect.V2_0
    version_key = "jsonrpc"
    other_version_key = "version"
    error_payload_key = "data"

    def envelope(self, request: RpcRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": request.method,
            "id": request.id,
        }
        if request.params is not None:
            payload["params"] = request.params
        return payload


class JsonRpc11Codec(JsonRpcCodec):
    """KBase JSON-RPC 1.1: params and result wrapped in one-element arrays."""

    dialect = Dialect.V1_1
    version_key = "version"
    other_version_key = "jsonrpc"
    error_payload_key = "error"

    def envelope(self, request: RpcRequest) -> dict[str, Any]:
        return {
            "version": "1.1",
            "method": request.method,
            "id": request.id,
            "params": [] if request.params is None else [request.params],
        }

    def _unwrap_result(self, result: Any) -> Any:
        if not isinstance(result, list):
            raise DecodeError(f"1.1 result must be an array, got {type(result).__name__}")
        if len(result) != 1:
            raise DecodeError(f"1.1 result must hold exactly one element, got {len(result)}")
        return result[0]


_CODECS: dict[Dialect, JsonRpcCodec] = {
    Dialect.V2_0: JsonRpc20Codec(),
    Dialect.V1_1: JsonRpc11Codec(),
}


def codec_for(dialect: Dialect | str) -> JsonRpcCodec:
    """Return the codec for a configured dialect ("1.1" or "2.0")."""
    try:
        return _CODECS[Dialect(dialect)]
    except ValueError as exc:
        raise ValueError(f"unsupported JSON-RPC dialect: {dialect!r}") from exc
