"""ServiceWizard client for KBase dynamic service discovery (JSON-RPC 1.1)."""

from __future__ import annotations

import httpx
from loguru import logger
from pydantic import ValidationError

from jobbrowser.jobs.models import GetServiceStatusParams, ServiceStatus, to_wire
from jobbrowser.rpc.client import DEFAULT_TIMEOUT_SECONDS, JsonRpcClient
from jobbrowser.rpc.protocol import Dialect
from jobbrowser.utils.exceptions import DecodeError


class ServiceWizardClient:
    """Resolves a dynamic service module name to its current endpoint URL."""

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
        rpc: JsonRpcClient | None = None,
    ):
        self.rpc = rpc or JsonRpcClient(
            url,
            token=token,
            timeout=timeout,
            dialect=Dialect.V1_1,
            http_client=http_client,
        )

    def set_token(self, token: str) -> None:
        self.rpc.set_token(token)

    def clear_token(self) -> None:
        self.rpc.clear_token()

    async def get_service_status(self, module_name: str, version: str | None = None) -> ServiceStatus:
        params = GetServiceStatusParams(module_name=module_name, version=version)
        value = await self.rpc.call("ServiceWizard.get_service_status", to_wire(params, keep_none=("version",)))
        try:
            return ServiceStatus.model_validate(value)
        except ValidationError as exc:
            raise DecodeError(f"get_service_status returned an unexpected result shape: {exc}") from exc

    async def resolve_url(self, module_name: str, version: str | None = None) -> str:
        status = await self.get_service_status(module_name, version)
        if not status.url:
            raise DecodeError(f"service wizard returned no url for {module_name}")
        logger.info(f"Resolved {module_name} ({status.version or 'default'}) to {status.url}")
        return status.url
