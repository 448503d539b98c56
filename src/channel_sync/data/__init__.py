"""Data providers and provider decorators."""

from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.data.provider import DataProvider, ProviderAdapter, RecordingProvider

__all__ = ["ChannelSnapshot", "DataProvider", "ProviderAdapter", "RecordingProvider", "VideoStat"]
