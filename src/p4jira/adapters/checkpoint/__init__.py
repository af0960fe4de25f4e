"""
Checkpoint Adapter - File-backed implementation of CheckpointStorePort.
"""

from .file_store import FileCheckpointStore

__all__ = ["FileCheckpointStore"]
