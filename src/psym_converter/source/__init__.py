"""
Snapshot Source Package
"""
from .source import SnapshotSource, ListSnapshotSource
