"""channel-sync: provider abstraction layer for channel analytics ingestion."""

__version__ = "0.1.0"
