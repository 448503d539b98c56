"""Configuration loading and validation."""

from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

Endpoint = Literal["get_channel_stats", "get_video_stats", "get_recent_videos"]


class EndpointTTLConfig(BaseModel):
    """Cache TTL in milliseconds per endpoint. ``0`` disables caching."""

    model_config = ConfigDict(extra="forbid")

    get_channel_stats: int = 0
    get_video_stats: int = 0
    get_recent_videos: int = 0

    def for_endpoint(self, endpoint: Endpoint) -> int:
        return int(getattr(self, endpoint))


class TokenBucketConfig(BaseModel):
    """Token bucket parameters for one endpoint."""

    model_config = ConfigDict(extra="forbid")

    capacity: float = Field(default=20.0, gt=0)
    tokens_per_second: float = Field(default=5.0, ge=0)


class RateLimitConfig(BaseModel):
    """Token bucket parameters per endpoint; unspecified endpoints keep the defaults."""

    model_config = ConfigDict(extra="forbid")

    get_channel_stats: TokenBucketConfig = Field(default_factory=TokenBucketConfig)
    get_video_stats: TokenBucketConfig = Field(default_factory=TokenBucketConfig)
    get_recent_videos: TokenBucketConfig = Field(default_factory=TokenBucketConfig)

    def for_endpoint(self, endpoint: Endpoint) -> TokenBucketConfig:
        bucket: TokenBucketConfig = getattr(self, endpoint)
        return bucket


class CacheConfig(BaseModel):
    """Cache decorator configuration."""

    enabled: bool = False
    ttl_ms: EndpointTTLConfig = Field(default_factory=EndpointTTLConfig)


class RateLimitSettings(BaseModel):
    """Rate-limit decorator configuration."""

    enabled: bool = False
    limits: RateLimitConfig = Field(default_factory=RateLimitConfig)


class ProvidersConfig(BaseModel):
    """Where the fixture, real and record providers read and write data."""

    fixture_path: str = "fixtures/seed-data.json"
    real_fixture_path: str | None = None
    record_output_path: str = "recordings/latest.json"
    api_key_env: str = "YOUTUBE_API_KEY"


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    structured_logging: bool = False
    log_file: str | None = None


class AppConfig(BaseModel):
    """Top-level application configuration."""

    mode: Literal["fake", "real", "record"] = "fake"
    source: str = "local-runtime"
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)


def load_config(path: Path) -> AppConfig:
    """Load config from a YAML file, resolving relative paths against its directory."""
    load_dotenv(path.parent / ".env", override=False)
    cfg = AppConfig(**(yaml.safe_load(path.read_text()) or {}))
    return resolve_paths(cfg, path.parent)


def resolve_paths(cfg: AppConfig, base_dir: Path) -> AppConfig:
    """Return a copy of ``cfg`` with provider paths made absolute under ``base_dir``."""

    def _resolve(value: str | None) -> str | None:
        if value is None:
            return None
        candidate = Path(value)
        return str(candidate if candidate.is_absolute() else base_dir / candidate)

    providers = cfg.providers.model_copy(
        update={
            "fixture_path": _resolve(cfg.providers.fixture_path),
            "real_fixture_path": _resolve(cfg.providers.real_fixture_path),
            "record_output_path": _resolve(cfg.providers.record_output_path),
        }
    )
    return cfg.model_copy(update={"providers": providers})
