"""Wiring: build a JobBrowserClient (and query session) from configuration.

Every helper takes an optional ``Config``; without one the cached config from
the default location (``~/.jobbrowser/config.json`` plus ``JOBBROWSER_*``
environment overrides) is used.
"""

from __future__ import annotations

import httpx
from loguru import logger

from jobbrowser.config.access import resolve_config
from jobbrowser.config.schema import Config
from jobbrowser.discovery.service_wizard import ServiceWizardClient
from jobbrowser.jobs.client import JobBrowserClient
from jobbrowser.jobs.models import SortSpec
from jobbrowser.jobs.query import JobQuerySession, QueryState


async def resolve_job_browser_url(
    config: Config | None = None,
    *,
    token: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    """Configured URL, or the one the service wizard reports for the module."""
    config = resolve_config(config)
    if config.job_browser.url:
        return config.job_browser.url
    wizard = ServiceWizardClient(
        config.service_wizard.url,
        token=token,
        timeout=config.service_wizard.timeout_seconds,
        http_client=http_client,
    )
    return await wizard.resolve_url(config.job_browser.module_name, config.job_browser.version)


async def open_job_browser(
    config: Config | None = None,
    *,
    token: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> JobBrowserClient:
    config = resolve_config(config)
    url = await resolve_job_browser_url(config, token=token, http_client=http_client)
    logger.debug(f"Job browser client bound to {url} (dialect {config.job_browser.dialect})")
    return JobBrowserClient(
        url,
        token=token,
        timeout=config.job_browser.timeout_seconds,
        dialect=config.job_browser.dialect,
        http_client=http_client,
        module=config.job_browser.module_name,
    )


def initial_query_state(config: Config | None = None) -> QueryState:
    config = resolve_config(config)
    return QueryState(
        time_range_days=config.query.time_range_days,
        page_size=config.query.page_size,
        sort=(SortSpec(key="created", direction=config.query.sort_direction),),
        admin=config.query.admin,
    )


def new_query_session(client: JobBrowserClient, config: Config | None = None) -> JobQuerySession:
    config = resolve_config(config)
    return JobQuerySession(
        client,
        state=initial_query_state(config),
        timeout_ms=config.job_browser.query_timeout_ms,
    )
