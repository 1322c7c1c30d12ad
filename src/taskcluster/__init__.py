"""Task Cluster - task tracking with pluggable, concurrency-safe storage."""

__version__ = "0.1.0"
