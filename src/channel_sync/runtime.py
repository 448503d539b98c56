"""Assemble providers, decorators and the mode manager from an AppConfig."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from channel_sync.config import AppConfig
from channel_sync.data.cached import CachedDataProvider
from channel_sync.data.fake import FakeDataProvider
from channel_sync.data.provider import DataProvider, ProviderAdapter
from channel_sync.data.rate_limit import RateLimitedDataProvider
from channel_sync.data.real import RealDataProvider
from channel_sync.data.recording import RecordingDataProvider
from channel_sync.errors import SYNC_MODE_BLOCKED, AppError, Err, Ok, Result
from channel_sync.modes import DataMode, DataModeManager, ModeGuard

logger = logging.getLogger(__name__)


def credentials_guard(
    providers: Mapping[DataMode, DataProvider],
    *,
    api_key_env: str,
    environ: Mapping[str, str] | None = None,
) -> ModeGuard:
    """Block switching to a provider that requires auth while ``api_key_env`` is unset."""

    def _guard(*, mode: DataMode) -> Result[None]:
        env = os.environ if environ is None else environ
        provider = providers[mode]
        if mode is DataMode.FAKE or not provider.requires_auth or env.get(api_key_env):
            return Ok(None)
        return Err(
            AppError.create(
                SYNC_MODE_BLOCKED,
                f"Mode {mode.value!r} requires credentials; set {api_key_env}",
                "warning",
                {"mode": mode.value, "provider": provider.name, "api_key_env": api_key_env},
            )
        )

    return _guard


def decorate(provider: DataProvider, cfg: AppConfig) -> DataProvider:
    """Apply the configured cache and rate limit around ``provider``.

    The rate limiter sits outside the cache so cache hits never spend tokens.
    """
    decorated = provider
    if cfg.cache.enabled:
        decorated = CachedDataProvider(decorated, ttl_ms=cfg.cache.ttl_ms)
    if cfg.rate_limit.enabled:
        decorated = RateLimitedDataProvider(decorated, limits=cfg.rate_limit.limits)
    return decorated


def build_mode_manager(
    cfg: AppConfig,
    *,
    adapter: ProviderAdapter | None = None,
    environ: Mapping[str, str] | None = None,
) -> DataModeManager:
    """Build the fake, real and record providers and the manager that switches between them.

    The real provider is decorated with the configured cache / rate limit and
    the record provider records through that same decorated stack.
    """
    providers_cfg = cfg.providers
    fake = FakeDataProvider(Path(providers_cfg.fixture_path))
    real_fixture = Path(providers_cfg.real_fixture_path) if providers_cfg.real_fixture_path else None
    real = decorate(RealDataProvider(adapter=adapter, fixture_path=real_fixture), cfg)
    record = RecordingDataProvider(real, Path(providers_cfg.record_output_path))

    guard = credentials_guard(
        {DataMode.FAKE: fake, DataMode.REAL: real, DataMode.RECORD: record},
        api_key_env=providers_cfg.api_key_env,
        environ=environ,
    )
    manager = DataModeManager(
        fake_provider=fake,
        real_provider=real,
        record_provider=record,
        initial_mode=cfg.mode,
        can_activate_mode=guard,
        source=cfg.source,
    )
    logger.info("Data mode manager ready in %s mode (source=%s)", manager.get_status().mode.value, cfg.source)
    return manager
