"""CLI entry point for channel-sync."""

import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from channel_sync import __version__
from channel_sync.config import AppConfig, load_config, resolve_paths
from channel_sync.errors import AppError, SyncError
from channel_sync.modes import DataModeManager
from channel_sync.monitoring.logging import configure_logging
from channel_sync.runtime import build_mode_manager

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"channel-sync {__version__}")
        raise typer.Exit()


app = typer.Typer(name="channel-sync", help="channel-sync: switchable analytics data providers")


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show version and exit", callback=_version_callback, is_eager=True)
    ] = False,
) -> None:
    """Switchable analytics data providers."""


DEFAULT_CONFIG = Path("config.yaml")

ConfigOption = Annotated[Path, typer.Option("--config", "-c", help="Path to config.yaml")]


def _load_config(config_path: Path) -> AppConfig:
    """Load config from file, falling back to defaults relative to the working directory."""
    if config_path.exists():
        return load_config(config_path)
    logger.warning("Config file %s not found, using defaults", config_path)
    return resolve_paths(AppConfig(), Path.cwd())


def _fail(error: AppError) -> NoReturn:
    typer.echo(f"{error.code}: {error.message}")
    raise typer.Exit(code=1)


def _build_manager(config_path: Path) -> DataModeManager:
    cfg = _load_config(config_path)
    configure_logging(cfg.monitoring, level=logging.WARNING)
    try:
        return build_mode_manager(cfg)
    except SyncError as exc:
        _fail(exc.error)


@app.command()
def status(config: ConfigOption = DEFAULT_CONFIG) -> None:
    """Show the active data mode and which modes are available."""
    manager = _build_manager(config)
    current = manager.get_status()
    active = manager.get_active_provider()
    typer.echo(f"Mode: {current.mode.value}")
    typer.echo(f"Available: {', '.join(m.value for m in current.available_modes) or '-'}")
    typer.echo(f"Source: {current.source}")
    typer.echo(f"Provider: {active.provider.name}")


@app.command()
def probe(
    channel_id: Annotated[str, typer.Option("--channel-id", help="Channel to probe")],
    config: ConfigOption = DEFAULT_CONFIG,
    mode: Annotated[str | None, typer.Option("--mode", "-m", help="Switch to fake, real or record first")] = None,
    video_ids: Annotated[
        list[str] | None, typer.Option("--video-id", help="Video id to request (repeatable)")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", help="Number of recent videos to request")] = 5,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result envelope as JSON")] = False,
) -> None:
    """Call the active provider's endpoints once and summarise what came back."""
    manager = _build_manager(config)

    if mode is not None:
        switched = manager.set_mode(mode)
        if not switched.ok:
            if as_json:
                typer.echo(json.dumps(switched.to_dict(), indent=2))
                raise typer.Exit(code=1)
            _fail(switched.error)

    payload: dict[str, object] = {"channel_id": channel_id, "recent_limit": limit}
    if video_ids:
        payload["video_ids"] = video_ids
    result = manager.probe(payload)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            raise typer.Exit(code=1)
        return
    if not result.ok:
        _fail(result.error)

    summary = result.value
    typer.echo(f"Mode: {summary.mode.value} ({summary.provider_name})")
    typer.echo(f"Channel: {summary.channel_id}")
    typer.echo(f"Recent videos: {summary.recent_videos_count}")
    typer.echo(f"Video stats: {summary.video_stats_count}")
    typer.echo(f"Failed calls: {summary.failed_calls}")
    if summary.mode.value == "record":
        typer.echo(f"Record file: {summary.record_file_path or '-'}")
