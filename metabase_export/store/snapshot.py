"""Entity store backed by a local JSON snapshot.

The snapshot is a single JSON document with one list of records per
collection key::

    {
        "databases": [...], "tables": [...], "fields": [...],
        "metrics": [...], "segments": [...], "collections": [...],
        "cards": [...], "dashboards": [...],
        "dashboard_cards": [...], "dashboard_card_series": [...]
    }

Missing keys are treated as empty lists.
"""

import json
import logging
from pathlib import Path

from metabase_export.models import EntityKind
from metabase_export.store.base import MetadataStore

logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = {
    EntityKind.DATABASE: "databases",
    EntityKind.TABLE: "tables",
    EntityKind.FIELD: "fields",
    EntityKind.METRIC: "metrics",
    EntityKind.SEGMENT: "segments",
    EntityKind.COLLECTION: "collections",
    EntityKind.CARD: "cards",
    EntityKind.DASHBOARD: "dashboards",
}


class SnapshotStore(MetadataStore):
    """Serve entity lookups from an in-memory snapshot dict."""

    def __init__(self, snapshot):
        super().__init__()
        self._records = {
            kind: {
                record["id"]: record for record in (snapshot.get(key) or [])
            }
            for kind, key in SNAPSHOT_KEYS.items()
        }
        self._dashboard_cards = snapshot.get("dashboard_cards") or []
        self._series = snapshot.get("dashboard_card_series") or []

    @classmethod
    def from_file(cls, path):
        """Load a snapshot from a JSON file."""
        path = Path(path)
        logger.info("Loading snapshot from %s", path)
        with open(path, "r", encoding="utf-8") as f:
            snapshot = json.load(f)

        if not isinstance(snapshot, dict):
            raise ValueError(f"Snapshot {path} must contain a JSON object")
        missing = [key for key in SNAPSHOT_KEYS.values() if key not in snapshot]
        if missing:
            logger.warning("Snapshot is missing keys: %s", ", ".join(missing))
        return cls(snapshot)

    def _fetch(self, kind, entity_id):
        return self._records[kind].get(entity_id)

    def _fetch_all(self, kind):
        return list(self._records[kind].values())

    def _fetch_dashboard_cards(self, dashboard_id):
        return [
            dashcard
            for dashcard in self._dashboard_cards
            if dashcard.get("dashboard_id") == dashboard_id
        ]

    def _fetch_series(self, dashboard_card_id):
        series = [
            row
            for row in self._series
            if row.get("dashboardcard_id") == dashboard_card_id
        ]
        return sorted(series, key=lambda row: row.get("position") or 0)
