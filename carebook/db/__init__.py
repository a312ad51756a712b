from .snapshot import (
    SnapshotStore,
    MemorySnapshotStore,
    JsonFileSnapshotStore,
    create_snapshot_store
)

__all__ = [
    "SnapshotStore",
    "MemorySnapshotStore",
    "JsonFileSnapshotStore",
    "create_snapshot_store",
]
