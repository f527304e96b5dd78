"""
Engine configuration.

``EngineConfig`` is the validated, immutable configuration of one probing
engine instance. ``EngineSettings`` loads the same values from
``SITEPROBE_*`` environment variables.
"""

import socket
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__

DEFAULT_TIMEOUT_MS = 30000
MAX_TIMEOUT_MS = 600000


class EngineConfig(BaseModel):
    """Configuration for a probing engine instance"""
    model_config = ConfigDict(frozen=True)

    worker_id: str = Field(..., description="Tag copied into every result")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, description="Per-probe timeout in milliseconds")
    max_concurrency: Optional[int] = Field(
        default=None,
        description="Maximum URLs checked at once in a batch (None = unbounded)",
    )
    ping_privileged: bool = Field(default=False, description="Use raw ICMP sockets")
    user_agent: str = Field(default=f"siteprobe/{__version__}")

    @field_validator('worker_id')
    @classmethod
    def validate_worker_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('worker_id must not be empty')
        return v

    @field_validator('timeout_ms')
    @classmethod
    def validate_timeout(cls, v):
        if not 1 <= v <= MAX_TIMEOUT_MS:
            raise ValueError(f'timeout_ms must be between 1 and {MAX_TIMEOUT_MS}')
        return v

    @field_validator('max_concurrency')
    @classmethod
    def validate_max_concurrency(cls, v):
        if v is not None and v < 1:
            raise ValueError('max_concurrency must be at least 1')
        return v

    @property
    def timeout_seconds(self) -> float:
        """Timeout in seconds, the unit ICMP and asyncio deadlines use."""
        return self.timeout_ms / 1000


class EngineSettings(BaseSettings):
    """Engine settings loaded from environment variables"""
    model_config = SettingsConfigDict(env_prefix="SITEPROBE_", case_sensitive=False)

    worker_id: str = Field(default_factory=socket.gethostname)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_concurrency: Optional[int] = None
    ping_privileged: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    def to_engine_config(self, **overrides) -> EngineConfig:
        """Build an ``EngineConfig``; ``None`` overrides are ignored."""
        values = {
            "worker_id": self.worker_id,
            "timeout_ms": self.timeout_ms,
            "max_concurrency": self.max_concurrency,
            "ping_privileged": self.ping_privileged,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return EngineConfig(**values)
