"""Shared fixtures: a small Metabase instance as a snapshot store."""

import pytest

from metabase_export.store import SnapshotStore

ROOT = "out"

DB_PATH = f"{ROOT}/databases/Sample"
ORDERS_PATH = f"{DB_PATH}/schemas/PUBLIC/tables/ORDERS"
PRODUCTS_PATH = f"{DB_PATH}/schemas/PUBLIC/tables/PRODUCTS"
SALES_PATH = f"{ROOT}/collections/Sales"
EMEA_PATH = f"{SALES_PATH}/collections/EMEA"
GERMANY_PATH = f"{EMEA_PATH}/collections/Germany"
ORDERS_CARD_PATH = f"{EMEA_PATH}/cards/Orders"
BASE_CARD_PATH = f"{SALES_PATH}/cards/Base"


def build_snapshot():
    """Return a fresh snapshot dict (tests may mutate it)."""
    audit = {
        "creator_id": 1,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
    }
    return {
        "databases": [
            {
                "id": 1,
                "name": "Sample",
                "engine": "h2",
                "features": ["basic-aggregations", "foreign-keys"],
                "details": {"db": "file:sample"},
                **audit,
            }
        ],
        "tables": [
            {
                "id": 10,
                "db_id": 1,
                "schema": "PUBLIC",
                "name": "ORDERS",
                "display_name": "Orders",
                "fields_hash": "abc123",
                **audit,
            },
            {"id": 11, "db_id": 1, "schema": "PUBLIC", "name": "PRODUCTS"},
        ],
        "fields": [
            {"id": 100, "table_id": 10, "name": "TOTAL", "base_type": "type/Float"},
            {
                "id": 101,
                "table_id": 10,
                "name": "PRODUCT_ID",
                "fk_target_field_id": 110,
            },
            {"id": 110, "table_id": 11, "name": "ID"},
            {"id": 111, "table_id": 11, "name": "CATEGORY"},
        ],
        "metrics": [
            {
                "id": 42,
                "table_id": 10,
                "name": "orders_total",
                "definition": {
                    "source-table": 10,
                    "aggregation": [["sum", ["field-id", 100]]],
                },
                **audit,
            }
        ],
        "segments": [
            {
                "id": 5,
                "table_id": 11,
                "name": "gadgets",
                "definition": {
                    "source-table": 11,
                    "filter": ["=", ["field-id", 111], "Gadget"],
                },
                **audit,
            }
        ],
        "collections": [
            {"id": 1, "name": "Sales", "location": "/"},
            {"id": 2, "name": "EMEA", "location": "/1/"},
            {"id": 3, "name": "Germany", "location": "/1/2/"},
        ],
        "cards": [
            {
                "id": 3,
                "name": "Orders",
                "collection_id": 2,
                "database_id": 1,
                "table_id": 10,
                "display": "table",
                "dataset_query": {
                    "database": 1,
                    "type": "query",
                    "query": {
                        "source-table": 10,
                        "aggregation": [["metric", 42]],
                        "filter": ["segment", 5],
                    },
                },
                "made_public_by_id": 1,
                **audit,
            },
            {
                "id": 7,
                "name": "Base",
                "collection_id": 1,
                "dataset_query": {
                    "database": 1,
                    "type": "query",
                    "query": {"source-table": 10},
                },
            },
            {
                "id": 8,
                "name": "Derived",
                "collection_id": 3,
                "dataset_query": {
                    "database": -1337,
                    "type": "query",
                    "query": {"source-table": "card__7"},
                },
            },
            {
                "id": 9,
                "name": "Loose",
                "collection_id": None,
                "dataset_query": {
                    "database": 1,
                    "type": "native",
                    "native": {"query": "SELECT 1"},
                },
            },
        ],
        "dashboards": [
            {
                "id": 20,
                "name": "Revenue",
                "collection_id": 2,
                "parameters": [],
                **audit,
            },
            {"id": 21, "name": "Scratch", "collection_id": None},
        ],
        "dashboard_cards": [
            {
                "id": 200,
                "dashboard_id": 20,
                "card_id": 7,
                "row": 0,
                "col": 0,
                "size_x": 4,
                "size_y": 4,
                "parameter_mappings": [
                    {
                        "parameter_id": "p1",
                        "card_id": 7,
                        "target": ["dimension", ["fk->", 101, ["field-id", 111]]],
                    }
                ],
                **audit,
            },
            {
                "id": 201,
                "dashboard_id": 20,
                "card_id": None,
                "row": 4,
                "col": 0,
                "visualization_settings": {"text": "Notes"},
                **audit,
            },
        ],
        "dashboard_card_series": [
            {
                "id": 300,
                "dashboardcard_id": 200,
                "card_id": 3,
                "position": 0,
                **audit,
            }
        ],
    }


class RecordingWriter:
    """Writer double that keeps written records in memory."""

    def __init__(self):
        self.writes = []

    def write(self, path, value):
        self.writes.append((path, value))
        return path

    @property
    def paths(self):
        return [path for path, _ in self.writes]


@pytest.fixture
def snapshot():
    return build_snapshot()


@pytest.fixture
def store(snapshot):
    return SnapshotStore(snapshot)


@pytest.fixture
def writer():
    return RecordingWriter()
