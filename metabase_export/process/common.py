"""Common helpers for reading MBQL queries."""

from metabase_export.constants import CARD_SOURCE_TABLE_PREFIX


def normalize_token(token):
    """Normalize an MBQL clause name: lower-case, no leading colon, dashes.

    "Field_ID", ":field-id" and "field-id" all normalize to "field-id".
    Non-string tokens are returned unchanged.
    """
    if not isinstance(token, str):
        return token
    return token.lower().lstrip(":").replace("_", "-")


def is_integer_id(value):
    """True for int ids; bools are not ids."""
    return isinstance(value, int) and not isinstance(value, bool)


def parse_card_source_table(source_table):
    """Return the card id of a "card__<id>" source table, else None."""
    if isinstance(source_table, str) and source_table.startswith(
        CARD_SOURCE_TABLE_PREFIX
    ):
        card_id = source_table[len(CARD_SOURCE_TABLE_PREFIX) :]
        if card_id.isdigit():
            return int(card_id)
    return None


def query_source_card_id(dataset_query):
    """Return the id of the saved question a structured query is built on."""
    if not isinstance(dataset_query, dict):
        return None
    query = dataset_query.get("query")
    if not isinstance(query, dict):
        return None
    return parse_card_source_table(query.get("source-table"))
