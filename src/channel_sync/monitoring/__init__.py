"""Logging setup for channel-sync."""
