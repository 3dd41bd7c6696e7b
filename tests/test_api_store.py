"""Tests for metabase_export/store/api.py REST access."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from metabase_export.models import EntityKind
from metabase_export.store.api import ApiStore, _unwrap_list

REQUESTS_GET = "metabase_export.store.api.requests.get"
CLIENT = {"base_url": "https://mb.test", "headers": {"X-API-KEY": "key"}}


def _response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = text
    return response


def _routes(mapping):
    """Build a requests.get side effect answering by URL."""

    def fake_get(url, params=None, headers=None, timeout=None):
        path = url.split("/api/", 1)[1]
        if path not in mapping:
            return _response(404, text="Not found")
        return _response(200, mapping[path])

    return fake_get


class TestGet:
    """Tests for ApiStore.get()."""

    @patch("metabase_export.store.api.requests.get")
    def test_success(self, mock_get):
        """JSON body is returned; API key header is sent."""
        mock_get.return_value = _response(200, {"id": 1})
        store = ApiStore(client=CLIENT)

        assert store.get("card/1") == {"id": 1}
        args, kwargs = mock_get.call_args
        assert args[0] == "https://mb.test/api/card/1"
        assert kwargs["headers"]["X-API-KEY"] == "key"

    @patch("metabase_export.store.api.requests.get")
    def test_missing_allowed(self, mock_get):
        """404 returns None when allow_missing is set."""
        mock_get.return_value = _response(404)
        store = ApiStore(client=CLIENT)

        assert store.get("card/404", allow_missing=True) is None

    @patch("metabase_export.store.api.requests.get")
    def test_missing_not_allowed(self, mock_get):
        """404 raises otherwise."""
        mock_get.return_value = _response(404, text="Not found")
        store = ApiStore(client=CLIENT)

        with pytest.raises(RuntimeError, match="404"):
            store.get("card/404")

    @patch("metabase_export.store.api.requests.get")
    def test_authentication_error(self, mock_get):
        """401 names the API key."""
        mock_get.return_value = _response(401, text="Unauthenticated")
        store = ApiStore(client=CLIENT)

        with pytest.raises(RuntimeError, match="Authentication failed"):
            store.get("card")

    @patch("metabase_export.store.api.time.sleep")
    @patch("metabase_export.store.api.requests.get")
    def test_retries_then_succeeds(self, mock_get, mock_sleep):
        """Timeouts are retried with exponential backoff."""
        mock_get.side_effect = [
            requests.exceptions.Timeout("slow"),
            requests.exceptions.ConnectionError("reset"),
            _response(200, []),
        ]
        store = ApiStore(client=CLIENT, max_retries=3)

        assert store.get("card") == []
        assert [call.args[0] for call in mock_sleep.call_args_list] == [2, 4]
        timeouts = [call.kwargs["timeout"] for call in mock_get.call_args_list]
        assert timeouts == [30, 45, 60]

    @patch("metabase_export.store.api.time.sleep")
    @patch("metabase_export.store.api.requests.get")
    def test_gives_up_after_retries(self, mock_get, mock_sleep):
        """Connection errors surface after the last attempt."""
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        store = ApiStore(client=CLIENT, max_retries=2)

        with pytest.raises(RuntimeError, match="after 3 attempts"):
            store.get("card")
        assert mock_get.call_count == 3

    @patch("metabase_export.store.api.requests.get")
    def test_other_request_errors_not_retried(self, mock_get):
        """Non-transient request errors fail immediately."""
        mock_get.side_effect = requests.exceptions.InvalidURL("bad url")
        store = ApiStore(client=CLIENT)

        with pytest.raises(RuntimeError, match="Request failed for card"):
            store.get("card")
        assert mock_get.call_count == 1

    def test_requires_config_or_client(self):
        """A store needs either a config or a client."""
        with pytest.raises(ValueError, match="Either client or config"):
            ApiStore()


class TestUnwrapList:
    """Tests for _unwrap_list."""

    def test_plain_list(self):
        assert _unwrap_list([{"id": 1}]) == [{"id": 1}]

    def test_wrapped_list(self):
        assert _unwrap_list({"data": [{"id": 1}], "total": 1}) == [{"id": 1}]

    def test_empty(self):
        assert _unwrap_list(None) == []
        assert _unwrap_list({"total": 0}) == []


class TestListing:
    """Listing entities through the API."""

    @pytest.fixture
    def routes(self):
        return {
            "database": {"data": [{"id": 1, "name": "Sample"}]},
            "database/1/metadata": {
                "id": 1,
                "tables": [
                    {
                        "id": 10,
                        "db_id": 1,
                        "name": "ORDERS",
                        "fields": [
                            {"id": 100, "table_id": 10, "name": "TOTAL"},
                            {"id": 101, "table_id": 10, "name": "TAX"},
                        ],
                    }
                ],
            },
            "collection": [
                {"id": "root", "name": "Our analytics"},
                {"id": 1, "name": "Sales", "location": "/"},
                {"id": 2, "name": "Old", "location": "/", "archived": True},
            ],
            "card": [{"id": 3, "name": "Orders"}],
            "card/3": {"id": 3, "name": "Orders"},
            "dashboard": [{"id": 20, "name": "Revenue"}],
            "dashboard/20": {
                "id": 20,
                "name": "Revenue",
                "dashcards": [
                    {
                        "id": 200,
                        "card_id": 3,
                        "card": {"id": 3, "name": "Orders"},
                        "series": [{"id": 7}, {"id": 8}],
                    }
                ],
            },
        }

    def test_tables_and_fields_from_metadata(self, routes):
        """Tables and fields are read from the database metadata endpoint."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            store = ApiStore(client=CLIENT)
            tables = store.list_entities(EntityKind.TABLE)
            fields = store.list_entities(EntityKind.FIELD)

        assert [table["name"] for table in tables] == ["ORDERS"]
        assert [field["name"] for field in fields] == ["TOTAL", "TAX"]

    def test_metadata_fetched_once(self, routes):
        """Database metadata is reused between table and field listings."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)) as mock_get:
            store = ApiStore(client=CLIENT)
            store.list_entities(EntityKind.TABLE)
            store.list_entities(EntityKind.FIELD)

        urls = [call.args[0] for call in mock_get.call_args_list]
        assert urls.count("https://mb.test/api/database/1/metadata") == 1

    def test_collections_skip_root_and_archived(self, routes):
        """The synthetic root collection and archived collections are skipped."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            collections = ApiStore(client=CLIENT).list_entities(EntityKind.COLLECTION)

        assert [collection["id"] for collection in collections] == [1]

    def test_lookup_uses_item_endpoint(self, routes):
        """Single lookups use GET <kind>/<id> and cache misses as None."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            store = ApiStore(client=CLIENT)
            assert store.lookup(EntityKind.CARD, 3)["name"] == "Orders"
            assert store.lookup(EntityKind.CARD, 4) is None

    def test_dashboard_cards_and_series(self, routes):
        """Dashboard cards come from the dashboard; series are split off."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            store = ApiStore(client=CLIENT)
            dashcards = store.list_dashboard_cards(20)
            series = store.list_series(200)

        assert dashcards == [{"id": 200, "card_id": 3}]
        assert series == [
            {"dashboardcard_id": 200, "card_id": 7, "position": 0},
            {"dashboardcard_id": 200, "card_id": 8, "position": 1},
        ]

    def test_series_without_listing_dashboard_cards(self, routes):
        """list_series finds the owning dashboard on its own."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            series = ApiStore(client=CLIENT).list_series(200)

        assert [row["card_id"] for row in series] == [7, 8]

    def test_series_dashboard_fetched_once(self, routes):
        """A dashboard already loaded is not fetched again for its series."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)) as mock_get:
            store = ApiStore(client=CLIENT)
            store.list_series(200)
            store.list_series(999)

        urls = [call.args[0] for call in mock_get.call_args_list]
        assert urls.count("https://mb.test/api/dashboard/20") == 1

    def test_series_unknown_dashcard(self, routes):
        """A dashboard card found on no dashboard has no series."""
        with patch(REQUESTS_GET, side_effect=_routes(routes)):
            assert ApiStore(client=CLIENT).list_series(999) == []
