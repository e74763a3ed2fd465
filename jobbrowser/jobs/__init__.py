"""Job browser domain: typed service client and query/pagination model."""

from jobbrowser.jobs.client import JobBrowserClient
from jobbrowser.jobs.models import (
    JobFilter,
    JobInfo,
    JobStatus,
    QueryJobsResult,
    SearchSpec,
    SortSpec,
    TimeSpan,
)
from jobbrowser.jobs.query import (
    FetchPhase,
    JobQuerySession,
    QueryState,
    QueryView,
    build_query_params,
    last_n_days_time_span,
)

__all__ = [
    "FetchPhase",
    "JobBrowserClient",
    "JobFilter",
    "JobInfo",
    "JobQuerySession",
    "JobStatus",
    "QueryJobsResult",
    "QueryState",
    "QueryView",
    "SearchSpec",
    "SortSpec",
    "TimeSpan",
    "build_query_params",
    "last_n_days_time_span",
]
