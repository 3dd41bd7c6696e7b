"""Read-only access to the entities being dumped."""

import logging
import threading

from metabase_export.models import EntityKind, EntityRef

logger = logging.getLogger(__name__)


class MetadataStore:
    """Base class for entity stores.

    Subclasses implement the ``_fetch*`` hooks. Lookups by id are memoized per
    store instance, keyed by (kind, id), so a single dump run does not ask the
    backend for the same parent twice. Cached records are never mutated.
    """

    def __init__(self):
        self._cache = {}
        self._lock = threading.Lock()

    def lookup(self, kind, entity_id):
        """Return the record for ``entity_id`` of ``kind`` or None if missing."""
        kind = EntityKind(kind)
        key = (kind, entity_id)
        if key in self._cache:
            return self._cache[key]

        record = self._fetch(kind, entity_id)
        with self._lock:
            self._cache.setdefault(key, record)
        if record is None:
            logger.debug("%s %s not found", kind, entity_id)
        return record

    def entity(self, kind, entity_id):
        """Like lookup, but wrap the record in an EntityRef."""
        record = self.lookup(kind, entity_id)
        return None if record is None else EntityRef(EntityKind(kind), record)

    def list_entities(self, kind):
        """Return all records of ``kind`` and warm the lookup cache with them."""
        kind = EntityKind(kind)
        records = self._fetch_all(kind)
        with self._lock:
            for record in records:
                if record.get("id") is not None:
                    self._cache.setdefault((kind, record["id"]), record)
        return records

    def list_dashboard_cards(self, dashboard_id):
        """Return the dashboard-card rows placed on a dashboard."""
        return self._fetch_dashboard_cards(dashboard_id)

    def list_series(self, dashboard_card_id):
        """Return the series rows attached to a dashboard card, in position order."""
        return self._fetch_series(dashboard_card_id)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()

    def _fetch(self, kind, entity_id):
        raise NotImplementedError

    def _fetch_all(self, kind):
        raise NotImplementedError

    def _fetch_dashboard_cards(self, dashboard_id):
        raise NotImplementedError

    def _fetch_series(self, dashboard_card_id):
        raise NotImplementedError
