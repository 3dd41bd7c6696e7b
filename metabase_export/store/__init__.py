"""Entity stores the dump reads from.

- base: MetadataStore interface with the per-run lookup cache
- api: ApiStore reading a live Metabase instance
- snapshot: SnapshotStore reading a local JSON snapshot
"""

from metabase_export.store.api import ApiStore
from metabase_export.store.base import MetadataStore
from metabase_export.store.snapshot import SnapshotStore

__all__ = ["ApiStore", "MetadataStore", "SnapshotStore"]
