"""Entity store backed by the Metabase REST API."""

import logging
import time

import requests

from metabase_export.common import (
    get_api_client,
    raise_for_api_error,
    raise_for_request_error,
)
from metabase_export.constants import MAX_API_RETRIES
from metabase_export.models import EntityKind
from metabase_export.store.base import MetadataStore

logger = logging.getLogger(__name__)

# List endpoints for kinds that have one; tables and fields are read per database
LIST_ENDPOINTS = {
    EntityKind.DATABASE: "database",
    EntityKind.METRIC: "metric",
    EntityKind.SEGMENT: "segment",
    EntityKind.COLLECTION: "collection",
    EntityKind.CARD: "card",
    EntityKind.DASHBOARD: "dashboard",
}


def _unwrap_list(payload):
    """Newer Metabase versions wrap list responses in {"data": [...]}."""
    if isinstance(payload, dict):
        return payload.get("data") or []
    return payload or []


class ApiStore(MetadataStore):
    """Fetch entities from a running Metabase instance."""

    def __init__(self, config=None, client=None, max_retries=MAX_API_RETRIES):
        super().__init__()
        self.client = get_api_client(config=config, client=client)
        self.max_retries = max_retries
        self._database_metadata = {}
        self._series_by_dashcard = {}
        self._fetched_dashboards = set()

    def get(self, path, params=None, allow_missing=False):
        """GET ``/api/<path>`` with retry on timeouts and connection errors.

        Returns the decoded JSON body, or None for a 404 when allow_missing
        is set.
        """
        url = f"{self.client['base_url']}/api/{path}"

        for attempt in range(self.max_retries + 1):
            try:
                timeout = 30 + (attempt * 15)
                if attempt > 0:
                    delay = 2**attempt
                    logger.info(
                        "Retrying %s (attempt %d/%d) after %ds delay",
                        path,
                        attempt + 1,
                        self.max_retries + 1,
                        delay,
                    )
                    time.sleep(delay)

                response = requests.get(
                    url,
                    params=params,
                    headers=self.client["headers"],
                    timeout=timeout,
                )
            except (
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
            ) as e:
                if attempt < self.max_retries:
                    logger.warning(
                        "Timeout/connection error for %s (attempt %d): %s",
                        path,
                        attempt + 1,
                        e,
                    )
                    continue
                raise_for_request_error(
                    path,
                    e,
                    base_url=self.client.get("base_url"),
                    retry_info=f"after {self.max_retries + 1} attempts",
                )
            except requests.exceptions.RequestException as e:
                raise_for_request_error(path, e)

            if response.status_code == 200:
                return response.json()
            if response.status_code == 404 and allow_missing:
                return None
            raise_for_api_error(response, path)

    def _fetch(self, kind, entity_id):
        logger.debug("Fetching %s %s", kind, entity_id)
        return self.get(f"{kind}/{entity_id}", allow_missing=True)

    def _fetch_all(self, kind):
        if kind == EntityKind.TABLE:
            records = [
                table
                for metadata in self._all_database_metadata()
                for table in metadata.get("tables") or []
            ]
        elif kind == EntityKind.FIELD:
            records = [
                field
                for metadata in self._all_database_metadata()
                for table in metadata.get("tables") or []
                for field in table.get("fields") or []
            ]
        else:
            records = _unwrap_list(self.get(LIST_ENDPOINTS[kind]))

        if kind == EntityKind.COLLECTION:
            # The synthetic root collection has id "root" and is never dumped
            records = [r for r in records if isinstance(r.get("id"), int)]
        records = [r for r in records if not r.get("archived")]

        logger.info("%s: Successfully fetched %d items", kind, len(records))
        return records

    def _all_database_metadata(self):
        for database in self.list_entities(EntityKind.DATABASE):
            database_id = database["id"]
            if database_id not in self._database_metadata:
                self._database_metadata[database_id] = (
                    self.get(f"database/{database_id}/metadata") or {}
                )
            yield self._database_metadata[database_id]

    def _fetch_dashboard_cards(self, dashboard_id):
        dashboard = self.get(f"dashboard/{dashboard_id}") or {}
        # "ordered_cards" was renamed to "dashcards" in Metabase 47
        dashcards = dashboard.get("dashcards") or dashboard.get("ordered_cards") or []
        self._fetched_dashboards.add(dashboard_id)

        rows = []
        for dashcard in dashcards:
            self._series_by_dashcard[dashcard["id"]] = [
                {
                    "dashboardcard_id": dashcard["id"],
                    "card_id": series_card["id"],
                    "position": position,
                }
                for position, series_card in enumerate(dashcard.get("series") or [])
            ]
            rows.append(
                {
                    key: value
                    for key, value in dashcard.items()
                    if key not in ("card", "series")
                }
            )
        return rows

    def _fetch_series(self, dashboard_card_id):
        if dashboard_card_id not in self._series_by_dashcard:
            # Series only come with their dashboard; load dashboards until found
            for dashboard in self.list_entities(EntityKind.DASHBOARD):
                if dashboard["id"] in self._fetched_dashboards:
                    continue
                self._fetch_dashboard_cards(dashboard["id"])
                if dashboard_card_id in self._series_by_dashcard:
                    break
        return list(self._series_by_dashcard.get(dashboard_card_id, []))
