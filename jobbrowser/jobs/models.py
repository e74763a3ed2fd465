"""Typed request/response models for the JobBrowserBFF service.

Job state and job context are closed unions discriminated by ``status`` and
``type``: each variant lists exactly the fields its tag allows, so a
``complete`` state without ``run_at`` (or a ``queue`` state with one) fails
validation instead of producing a half-valid record.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Job status as spelled on the wire."""
    CREATED = "create"
    QUEUED = "queue"
    RUNNING = "run"
    COMPLETED = "complete"
    ERRORED = "error"
    TERMINATED = "terminate"


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.ERRORED, JobStatus.TERMINATED})


# ---------------------------------------------------------------------------
# Job state
# ---------------------------------------------------------------------------


class _StateBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    create_at: int
    client_group: str


class JobStateCreate(_StateBase):
    status: Literal["create"]


class JobStateQueue(_StateBase):
    status: Literal["queue"]
    queue_at: int


class JobStateRun(_StateBase):
    status: Literal["run"]
    queue_at: int
    run_at: int


class JobStateComplete(_StateBase):
    status: Literal["complete"]
    queue_at: int
    run_at: int
    finish_at: int


class JobError(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: int
    message: str
    jsonrpc_error: Any = None


class JobStateError(_StateBase):
    status: Literal["error"]
    queue_at: int
    run_at: int
    finish_at: int
    error: JobError

    @property
    def error_code(self) -> int:
        return self.error.code

    @property
    def error_message(self) -> str:
        return self.error.message


class TerminationReason(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: int
    message: str | None = None


class JobStateTerminate(_StateBase):
    status: Literal["terminate"]
    queue_at: int
    run_at: int
    finish_at: int
    reason: TerminationReason

    @property
    def reason_code(self) -> int:
        return self.reason.code

    @property
    def reason_message(self) -> str | None:
        return self.reason.message


JobState = Annotated[
    Union[JobStateCreate, JobStateQueue, JobStateRun, JobStateComplete, JobStateError, JobStateTerminate],
    Field(discriminator="status"),
]


# ---------------------------------------------------------------------------
# Job context
# ---------------------------------------------------------------------------


class WorkspaceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    is_accessible: bool
    is_deleted: bool
    name: str


class NarrativeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str | None = None
    is_temporary: bool


class JobContextNarrative(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["narrative"]
    workspace: WorkspaceInfo
    narrative: NarrativeInfo


class JobContextWorkspace(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["workspace"]
    workspace: WorkspaceInfo


class JobContextExport(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["export"]


class JobContextUnknown(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["unknown"]


JobContext = Annotated[
    Union[JobContextNarrative, JobContextWorkspace, JobContextExport, JobContextUnknown],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Job record
# ---------------------------------------------------------------------------


class JobOwner(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    realname: str


class AppInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    module_name: str
    function_name: str
    title: str
    type: Literal["narrative", "unknown"] = "unknown"
    icon_url: str | None = None


class JobInfo(BaseModel):
    """Immutable snapshot of one job as returned by a query."""
    model_config = ConfigDict(frozen=True)

    job_id: str
    type: str
    owner: JobOwner
    state: JobState
    app: AppInfo | None = None
    context: JobContext
    node_class: str

    @property
    def status(self) -> JobStatus:
        return JobStatus(self.state.status)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TimeSpan(BaseModel):
    """Query time window, epoch milliseconds, inclusive."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(alias="from")
    to: int


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Literal["created"] = "created"
    direction: Literal["ascending", "descending"] = "descending"


class SearchSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    terms: list[str] = Field(default_factory=list)


class JobFilter(BaseModel):
    """Filter dimensions: AND across dimensions, OR within one dimension.

    ``None`` means no constraint on that dimension.
    """
    model_config = ConfigDict(frozen=True)

    workspace_id: list[int] | None = None
    status: list[JobStatus] | None = None
    user: list[str] | None = None
    client_group: list[str] | None = None
    app_id: list[str] | None = None
    app_module: list[str] | None = None
    app_function: list[str] | None = None
    job_id: list[str] | None = None
    error_code: list[int] | None = None
    terminated_code: list[int] | None = None

    def merged(self, **changes: Any) -> JobFilter:
        """Return a copy with ``changes`` applied; empty collections unset a dimension."""
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"unknown filter dimension(s): {', '.join(sorted(unknown))}")
        data = self.model_dump()
        for key, value in changes.items():
            data[key] = list(value) if value else None
        return type(self).model_validate(data)

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class QueryJobsParams(BaseModel):
    time_span: TimeSpan
    offset: int = Field(ge=0)
    limit: int = Field(ge=0)
    timeout: int = Field(gt=0)
    sort: list[SortSpec] | None = None
    search: SearchSpec | None = None
    filter: JobFilter | None = None
    admin: bool | None = None


class GetJobsParams(BaseModel):
    job_ids: list[str]
    timeout: int = Field(gt=0)
    admin: bool | None = None


class GetJobLogParams(BaseModel):
    job_id: str
    offset: int = Field(ge=0)
    limit: int = Field(ge=0)
    timeout: int = Field(gt=0)
    search: list[str] | None = None
    level: list[str] | None = None
    admin: bool | None = None


class CancelJobParams(BaseModel):
    job_id: str
    timeout: int = Field(gt=0)
    admin: bool


class GetServiceStatusParams(BaseModel):
    module_name: str
    version: str | None = None


def to_wire(params: BaseModel, *, keep_none: tuple[str, ...] = ()) -> dict[str, Any]:
    """Dump params for the wire: aliases applied, unset optionals dropped."""
    data = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    for key in keep_none:
        data.setdefault(key, None)
    return data


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class QueryJobsResult(BaseModel):
    """One page of jobs plus found (filtered) and total (unfiltered) counts."""
    model_config = ConfigDict(frozen=True)

    jobs: list[JobInfo]
    found_count: int = Field(ge=0)
    total_count: int = Field(ge=0)


class GetJobsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    jobs: list[JobInfo]


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    logged_at: int
    message: str
    level: Literal["normal", "error"]


class GetJobLogResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    job: JobInfo
    log: list[LogEntry]


class CancelJobResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    canceled: bool


class GetClientGroupsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_groups: list[str]


class IsAdminResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_admin: bool


class ServiceStatus(BaseModel):
    """Dynamic service record returned by the service wizard."""
    model_config = ConfigDict(frozen=True)

    module_name: str
    url: str
    version: str | None = None
    status: str | None = None
    health: str | None = None
    git_commit_hash: str | None = None
    hash: str | None = None
    release_tags: list[str] = Field(default_factory=list)
    up: int | None = None
