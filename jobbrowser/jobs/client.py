"""Typed client for the JobBrowserBFF JSON-RPC service."""

from __future__ import annotations

from typing import Any, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from jobbrowser.jobs.models import (
    CancelJobParams,
    CancelJobResult,
    GetClientGroupsResult,
    GetJobLogParams,
    GetJobLogResult,
    GetJobsParams,
    GetJobsResult,
    IsAdminResult,
    JobFilter,
    JobInfo,
    QueryJobsParams,
    QueryJobsResult,
    SearchSpec,
    SortSpec,
    TimeSpan,
    to_wire,
)
from jobbrowser.rpc.client import DEFAULT_TIMEOUT_SECONDS, JsonRpcClient
from jobbrowser.rpc.protocol import Dialect
from jobbrowser.utils.exceptions import DecodeError

SERVICE_MODULE = "JobBrowserBFF"

M = TypeVar("M", bound=BaseModel)


def _parse_result(model: type[M], method: str, value: Any) -> M:
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise DecodeError(f"{method} returned an unexpected result shape: {exc.error_count()} error(s): {exc}") from exc


class JobBrowserClient:
    """
    Job query, log, and cancel operations over JSON-RPC.

    Failures from the RPC layer (RemoteError, RpcTimeoutError, TransportError)
    propagate unchanged. A result that does not match its model raises
    DecodeError.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        dialect: Dialect | str = Dialect.V2_0,
        rpc: JsonRpcClient | None = None,
        http_client: httpx.AsyncClient | None = None,
        module: str = SERVICE_MODULE,
    ):
        if rpc is None:
            if not url:
                raise ValueError("url is required when no rpc client is given")
            rpc = JsonRpcClient(url, token=token, timeout=timeout, dialect=dialect, http_client=http_client)
        self.rpc = rpc
        self.module = module

    def set_token(self, token: str) -> None:
        self.rpc.set_token(token)

    def clear_token(self) -> None:
        self.rpc.clear_token()

    def _method(self, name: str) -> str:
        return f"{self.module}.{name}"

    async def _call(self, name: str, params: dict[str, Any], model: type[M]) -> M:
        method = self._method(name)
        value = await self.rpc.call(method, params)
        return _parse_result(model, method, value)

    async def query_jobs(
        self,
        *,
        time_span: TimeSpan,
        offset: int,
        limit: int,
        timeout: int,
        sort: Sequence[SortSpec] | None = None,
        search: SearchSpec | None = None,
        filter: JobFilter | None = None,
        admin: bool | None = None,
    ) -> QueryJobsResult:
        """Fetch one page of jobs in ``time_span`` matching ``filter``."""
        params = QueryJobsParams(
            time_span=time_span,
            offset=offset,
            limit=limit,
            timeout=timeout,
            sort=list(sort) if sort is not None else None,
            search=search,
            filter=filter if filter is not None and not filter.is_empty() else None,
            admin=admin,
        )
        return await self.query_jobs_with(params)

    async def query_jobs_with(self, params: QueryJobsParams) -> QueryJobsResult:
        result = await self._call("query_jobs", to_wire(params), QueryJobsResult)
        if result.found_count < len(result.jobs) or result.total_count < result.found_count:
            raise DecodeError(
                f"query_jobs counts are inconsistent: jobs={len(result.jobs)} "
                f"found_count={result.found_count} total_count={result.total_count}"
            )
        return result

    async def get_jobs(self, job_ids: Sequence[str], *, timeout: int, admin: bool | None = None) -> list[JobInfo]:
        params = GetJobsParams(job_ids=list(job_ids), timeout=timeout, admin=admin)
        result = await self._call("get_jobs", to_wire(params), GetJobsResult)
        return result.jobs

    async def get_job_log(
        self,
        job_id: str,
        *,
        offset: int,
        limit: int,
        timeout: int,
        search: Sequence[str] | None = None,
        level: Sequence[str] | None = None,
        admin: bool | None = None,
    ) -> GetJobLogResult:
        params = GetJobLogParams(
            job_id=job_id,
            offset=offset,
            limit=limit,
            timeout=timeout,
            search=list(search) if search is not None else None,
            level=list(level) if level is not None else None,
            admin=admin,
        )
        return await self._call("get_job_log", to_wire(params), GetJobLogResult)

    async def cancel_job(self, job_id: str, *, timeout: int, admin: bool) -> CancelJobResult:
        """Ask the service to cancel a job. Always issues the call; the service decides."""
        params = CancelJobParams(job_id=job_id, timeout=timeout, admin=admin)
        return await self._call("cancel_job", to_wire(params), CancelJobResult)

    async def get_client_groups(self) -> list[str]:
        result = await self._call("get_client_groups", {}, GetClientGroupsResult)
        return result.client_groups

    async def is_admin(self) -> bool:
        result = await self._call("is_admin", {}, IsAdminResult)
        return result.is_admin
