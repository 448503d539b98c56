"""Tests for config loading."""

import os
from pathlib import Path

import pytest
from channel_sync.config import AppConfig, load_config
from pydantic import ValidationError

SAMPLE_YAML = """\
mode: record
source: test-runtime

providers:
  fixture_path: fixtures/seed.json
  record_output_path: /tmp/recordings/out.json

cache:
  enabled: true
  ttl_ms:
    get_channel_stats: 60000

rate_limit:
  enabled: true
  limits:
    get_video_stats:
      capacity: 3
      tokens_per_second: 0.5
"""


def test_load_config_from_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(SAMPLE_YAML)
    config = load_config(config_file)
    assert config.mode == "record"
    assert config.source == "test-runtime"
    assert config.cache.enabled is True
    assert config.cache.ttl_ms.get_channel_stats == 60000
    assert config.cache.ttl_ms.get_video_stats == 0
    assert config.rate_limit.limits.get_video_stats.capacity == 3
    assert config.rate_limit.limits.get_video_stats.tokens_per_second == 0.5
    assert config.rate_limit.limits.get_channel_stats.capacity == 20


def test_relative_paths_resolve_against_config_dir(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(SAMPLE_YAML)
    config = load_config(config_file)
    assert config.providers.fixture_path == str(tmp_path / "fixtures" / "seed.json")
    assert config.providers.record_output_path == "/tmp/recordings/out.json"
    assert config.providers.real_fixture_path is None


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")
    config = load_config(config_file)
    assert config.mode == "fake"
    assert config.source == "local-runtime"
    assert config.cache.enabled is False


def test_defaults() -> None:
    config = AppConfig()
    assert config.providers.api_key_env == "YOUTUBE_API_KEY"
    assert config.rate_limit.limits.get_recent_videos.tokens_per_second == 5
    assert config.monitoring.structured_logging is False


def test_unknown_endpoint_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"cache": {"ttl_ms": {"getChannelStats": 1000}}})
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"rate_limit": {"limits": {"get_everything": {"capacity": 1}}}})


def test_invalid_bucket_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"rate_limit": {"limits": {"get_video_stats": {"capacity": 0}}}})


def test_invalid_mode_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"mode": "live"})


def test_load_config_reads_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CHANNEL_SYNC_TEST_KEY", raising=False)
    (tmp_path / ".env").write_text("CHANNEL_SYNC_TEST_KEY=from-dotenv\n")
    config_file = tmp_path / "config.yaml"
    config_file.write_text("mode: fake\n")
    load_config(config_file)
    assert os.environ["CHANNEL_SYNC_TEST_KEY"] == "from-dotenv"
    monkeypatch.delenv("CHANNEL_SYNC_TEST_KEY", raising=False)
