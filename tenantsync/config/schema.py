# tenantsync Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProviderType(str, Enum):
    """Version-control backend type."""

    TFVC = "tfvc"
    GIT = "git"


class AuthMethod(str, Enum):
    """Authentication method for the provider."""

    PAT = "pat"
    BASIC = "basic"


class ProviderConfig(BaseModel):
    """Connection settings for the version-control provider."""

    model_config = ConfigDict(frozen=True)

    type: ProviderType = Field(default=ProviderType.TFVC, description="Provider backend")
    instance: str = Field(default="", description="Azure DevOps instance name (<instance>.visualstudio.com)")
    collection: str = Field(default="DefaultCollection", description="Project collection name")
    base_url: Optional[str] = Field(default=None, description="Explicit collection URL, overrides instance")
    repository: str = Field(default="", description="Repository name or id (git provider)")
    branch: str = Field(default="master", description="Branch used when no commit is given (git provider)")
    auth_method: AuthMethod = Field(default=AuthMethod.PAT, description="Authentication method")
    token: Optional[str] = Field(default=None, description="Personal access token")
    username: Optional[str] = Field(default=None, description="Username for basic authentication")
    password: Optional[str] = Field(default=None, description="Password for basic authentication")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    page_size: int = Field(default=100, ge=1, le=1000, description="Records per page for change listings")

    @model_validator(mode="after")
    def check_location(self) -> "ProviderConfig":
        """Require either an instance name or an explicit base URL."""
        if not self.instance and not self.base_url:
            raise ValueError("provider.instance or provider.base_url is required")
        if self.type == ProviderType.GIT and not self.repository:
            raise ValueError("provider.repository is required for the git provider")
        return self


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    model_config = ConfigDict(frozen=True)

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class TenantSyncConfig(BaseModel):
    """Root configuration model for tenantsync."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderConfig = Field(description="Provider settings")
    project_path: str = Field(description="Repository path holding the tenant configuration")
    concurrency: int = Field(default=8, ge=1, le=64, description="Maximum concurrent provider requests")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("project_path")
    @classmethod
    def strip_project_path(cls, v: str) -> str:
        """Normalize separators and drop trailing slashes."""
        v = v.strip().replace("\\", "/")
        while len(v) > 1 and v.endswith("/") and v != "$/":
            v = v[:-1]
        if not v:
            raise ValueError("project_path must not be empty")
        return v
