"""Pytest hooks and fixtures."""

import json
from typing import Any, Callable

import httpx
import pytest

_BASE_MS = 1_700_000_000_000

_STATE_FIELDS: dict[str, dict[str, Any]] = {
    "create": {},
    "queue": {"queue_at": _BASE_MS + 1_000},
    "run": {"queue_at": _BASE_MS + 1_000, "run_at": _BASE_MS + 2_000},
    "complete": {"queue_at": _BASE_MS + 1_000, "run_at": _BASE_MS + 2_000, "finish_at": _BASE_MS + 3_000},
    "error": {
        "queue_at": _BASE_MS + 1_000,
        "run_at": _BASE_MS + 2_000,
        "finish_at": _BASE_MS + 3_000,
        "error": {"code": 1, "message": "job crashed"},
    },
    "terminate": {
        "queue_at": _BASE_MS + 1_000,
        "run_at": _BASE_MS + 2_000,
        "finish_at": _BASE_MS + 3_000,
        "reason": {"code": 0},
    },
}


def job_state_payload(status: str, **overrides: Any) -> dict[str, Any]:
    state = {"status": status, "create_at": _BASE_MS, "client_group": "njs"}
    state.update(_STATE_FIELDS[status])
    state.update(overrides)
    return state


def job_payload(job_id: str = "job-1", status: str = "complete", **state_overrides: Any) -> dict[str, Any]:
    return {
        "job_id": job_id,
        "type": "narrative",
        "owner": {"username": "alice", "realname": "Alice Example"},
        "state": job_state_payload(status, **state_overrides),
        "app": {
            "id": "kb_uploadmethods/import_fastq",
            "module_name": "kb_uploadmethods",
            "function_name": "import_fastq",
            "title": "Import FASTQ",
            "type": "narrative",
        },
        "context": {
            "type": "narrative",
            "workspace": {"id": 42, "is_accessible": True, "is_deleted": False, "name": "alice:narrative_1"},
            "narrative": {"title": "My Narrative", "is_temporary": False},
        },
        "node_class": "kb-worker",
    }


@pytest.fixture
def make_job() -> Callable[..., dict[str, Any]]:
    """Factory for wire-shaped job records."""
    return job_payload


@pytest.fixture
def make_state() -> Callable[..., dict[str, Any]]:
    """Factory for wire-shaped job states."""
    return job_state_payload


def rpc_echo_reply(request: httpx.Request, result: Any) -> httpx.Response:
    """2.0 success reply correlated with the given request."""
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


@pytest.fixture
def rpc_reply() -> Callable[[httpx.Request, Any], httpx.Response]:
    return rpc_echo_reply
