"""Presentation helpers for job listings (no widgets, plain values)."""

from __future__ import annotations

from datetime import datetime

from jobbrowser.jobs.models import JobInfo, JobStatus

_STATUS_COLORS: dict[JobStatus, str] = {
    JobStatus.CREATED: "#9e9e9e",  # gray
    JobStatus.QUEUED: "#2196f3",  # blue
    JobStatus.RUNNING: "#ff9800",  # orange
    JobStatus.COMPLETED: "#4caf50",  # green
    JobStatus.ERRORED: "#f44336",  # red
    JobStatus.TERMINATED: "#9c27b0",  # purple
}
DEFAULT_STATUS_COLOR = "#757575"

_CANCELABLE = frozenset({JobStatus.QUEUED, JobStatus.RUNNING})


def status_color(status: JobStatus | str) -> str:
    try:
        return _STATUS_COLORS[JobStatus(status)]
    except ValueError:
        return DEFAULT_STATUS_COLOR


def format_timestamp(timestamp_ms: int) -> str:
    """Epoch milliseconds as a local date/time string."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def describe_time_range(days: int) -> str:
    if days == 1:
        return "last 1 day"
    return f"last {days} days"


def is_cancelable(job: JobInfo) -> bool:
    """Whether a cancel button makes sense; JobBrowserClient.cancel_job never checks this."""
    return job.status in _CANCELABLE
