"""JSON-RPC transport, dialect codecs and client."""

from jobbrowser.rpc.client import JsonRpcClient
from jobbrowser.rpc.protocol import (
    Dialect,
    JsonRpc11Codec,
    JsonRpc20Codec,
    JsonRpcCodec,
    RpcErr,
    RpcOk,
    RpcOutcome,
    RpcRequest,
    codec_for,
    new_request_id,
)
from jobbrowser.rpc.transport import HttpTransport

__all__ = [
    "Dialect",
    "HttpTransport",
    "JsonRpc11Codec",
    "JsonRpc20Codec",
    "JsonRpcClient",
    "JsonRpcCodec",
    "RpcErr",
    "RpcOk",
    "RpcOutcome",
    "RpcRequest",
    "codec_for",
    "new_request_id",
]
