"""Common utilities for Metabase API interaction and error reporting."""

import logging

import requests


class ExportError(Exception):
    """Raised when one or more entities could not be dumped."""


class UnresolvedParent(LookupError):
    """Raised when an entity referenced by id does not exist in the store."""

    def __init__(self, kind, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unresolved {kind} reference: id {entity_id!r} not found")


class MalformedReference(ValueError):
    """Raised when a reference clause has a known head but a bad argument."""

    def __init__(self, form, reason="unexpected argument shape"):
        self.form = form
        super().__init__(f"Malformed reference {form!r}: {reason}")


def configure_logging(debug=False):
    """Configure root logging with a message-only format.

    Args:
        debug: Use DEBUG level when True, INFO otherwise
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        force=True,
    )


def get_api_client(config=None, client=None):
    """Return an API client dict, building one from config when needed.

    Args:
        config: ExportConfig instance with BASE_URL and API_KEY
        client: Existing client dict, returned unchanged when provided

    Returns:
        dict: API client configuration
    """
    if client is not None:
        return client
    if config is None:
        raise ValueError("Either client or config must be provided")

    headers = {"Content-Type": "application/json"}
    if config.API_KEY:
        headers["X-API-KEY"] = config.API_KEY
    return {
        "base_url": (config.BASE_URL or "").rstrip("/"),
        "headers": headers,
    }


def raise_for_api_error(response, name, entity_id=None):
    """Raise a RuntimeError describing a failed API response.

    Args:
        response: requests.Response with a non-success status code
        name: Human-readable name of what was being fetched
        entity_id: Optional id of the requested entity
    """
    status = response.status_code
    if status == 401:
        error_msg = (
            f"Authentication failed for {name}\n"
            "Please check API_KEY in .env file\n"
            f"Response: {response.text}"
        )
    elif status == 403:
        error_msg = (
            f"Access denied for {name} (403)\n"
            "Please verify the API key has permission to read this content\n"
            f"Response: {response.text}"
        )
    elif status == 404:
        hint = (
            f"Entity id: {entity_id}"
            if entity_id is not None
            else "Please verify API access permissions"
        )
        error_msg = f"Failed to fetch {name} (404)\n{hint}\nResponse: {response.text}"
    else:
        error_msg = (
            f"Failed to fetch {name} (HTTP {status})\n"
            f"Response: {response.text[:200]}"
        )
    raise RuntimeError(error_msg)


def raise_for_connection_error(name, error, base_url=None, retry_info=None):
    """Raise a RuntimeError for timeouts and connection failures."""
    attempts = f" {retry_info}" if retry_info else ""
    error_msg = (
        f"Connection error fetching {name}{attempts}\n"
        f"Please verify BASE_URL in .env file: {base_url or 'unknown'}\n"
        f"Error: {error}"
    )
    raise RuntimeError(error_msg)


def raise_for_request_error(name, error, base_url=None, retry_info=None):
    """Dispatch a requests exception to the matching error helper."""
    if isinstance(
        error, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)
    ):
        raise_for_connection_error(
            name, error, base_url=base_url, retry_info=retry_info
        )
    raise RuntimeError(f"Request failed for {name}: {error}")
