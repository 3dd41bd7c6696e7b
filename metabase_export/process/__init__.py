"""Metabase reference processing module.

This module turns ids into path names. It is organized into submodules:
- references: Recognizing entity reference clauses in MBQL
- paths: Fully qualified path names of entities
- humanize: Rewriting ids inside nested queries into path names
- common: Shared MBQL helpers (normalize_token, query_source_card_id, etc.)
"""

# Re-export public API from submodules
from metabase_export.process.common import (
    normalize_token,
    parse_card_source_table,
    query_source_card_id,
)
from metabase_export.process.humanize import humanize, rewrite_reference
from metabase_export.process.paths import (
    collection_ancestor_ids,
    lookup_parent,
    resolve_path,
    resolve_path_by_id,
)
from metabase_export.process.references import (
    is_entity_reference,
    is_field_reference,
    is_tagged_reference,
)

__all__ = [
    # Common
    "normalize_token",
    "parse_card_source_table",
    "query_source_card_id",
    # References
    "is_entity_reference",
    "is_field_reference",
    "is_tagged_reference",
    # Paths
    "collection_ancestor_ids",
    "lookup_parent",
    "resolve_path",
    "resolve_path_by_id",
    # Humanize
    "humanize",
    "rewrite_reference",
]
