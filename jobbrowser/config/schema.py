"""Configuration schema using Pydantic.

Persisted as JSON at ~/.jobbrowser/config.json; every field can also be set
from the environment, e.g. JOBBROWSER_JOB_BROWSER__URL.
"""

from typing import Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class ServiceWizardConfig(BaseModel):
    """Dynamic service discovery endpoint (always JSON-RPC 1.1)."""
    url: str = "https://kbase.us/services/service_wizard"
    timeout_seconds: float = Field(default=30.0, gt=0)


class JobBrowserServiceConfig(BaseModel):
    """JobBrowserBFF service endpoint."""
    url: str = ""  # Empty = resolve through the service wizard
    module_name: str = "JobBrowserBFF"
    version: str | None = None  # Service wizard release tag / version; None = default release
    dialect: Literal["1.1", "2.0"] = "2.0"
    timeout_seconds: float = Field(default=30.0, gt=0)  # Client-side deadline per call
    query_timeout_ms: int = Field(default=30000, gt=0)  # Server-side `timeout` param


class QueryDefaultsConfig(BaseModel):
    """Initial job listing state."""
    time_range_days: int = Field(default=7, ge=0)
    page_size: int = Field(default=20, gt=0)
    sort_direction: Literal["ascending", "descending"] = "descending"
    admin: bool = False


class Config(BaseSettings):
    """Root configuration for jobbrowser."""
    service_wizard: ServiceWizardConfig = Field(default_factory=ServiceWizardConfig)
    job_browser: JobBrowserServiceConfig = Field(default_factory=JobBrowserServiceConfig)
    query: QueryDefaultsConfig = Field(default_factory=QueryDefaultsConfig)

    model_config = ConfigDict(
        env_prefix="JOBBROWSER_",
        env_nested_delimiter="__"
    )
