"""Memory subsystem configuration models."""

from pydantic import BaseModel, Field, SecretStr, model_validator


class MemoryConfig(BaseModel):
    """Behavioral settings for the memory orchestrator.

    Importance thresholds are conventions used by callers that store
    entries; the data layer does not enforce them.
    """

    enabled: bool = Field(default=True, description="Enable the memory subsystem")
    agent_id: str = Field(default="default", description="Logical owner of stored entries")
    max_entries: int = Field(
        default=1000,
        gt=0,
        description="Upper bound for the local cache and cleanup scans",
    )
    retention_days: int = Field(
        default=30,
        gt=0,
        description="Entries older than this are eligible for cleanup",
    )
    auto_cleanup: bool = Field(default=True, description="Allow cleanup() to delete entries")
    important_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Importance at or above which an entry is critical",
    )
    useful_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Importance at or above which an entry is useful",
    )
    enable_cross_tab: bool = Field(default=True, description="Share entries across tabs")
    enable_learning: bool = Field(default=True, description="Record workflow patterns")

    @model_validator(mode="after")
    def _check_thresholds(self) -> "MemoryConfig":
        if self.useful_threshold > self.important_threshold:
            raise ValueError("useful_threshold must not exceed important_threshold")
        return self


class RemoteStoreConfig(BaseModel):
    """Remote memory service configuration.

    The API key should come from the environment (AGENTMEM_REMOTE__API_KEY
    or MEM0_API_KEY), never from a committed config file.
    """

    api_key: SecretStr | None = Field(default=None, description="Remote service API key")
    base_url: str = Field(
        default="https://api.mem0.ai",
        description="Remote memory service base URL",
    )
    namespace_prefix: str = Field(
        default="browseros_agent",
        min_length=1,
        description="Prefix of the remote user identity derived from agent_id",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    probe_scope: str = Field(
        default="init-test",
        description="Scope used by the connectivity probe",
    )
