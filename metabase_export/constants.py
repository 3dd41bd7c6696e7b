"""Constants used across the metabase_export package."""

# Database id Metabase uses for queries built on top of other saved questions.
# Such queries have no physical database, so the id is written as a fixed
# marker instead of being resolved through a lookup.
VIRTUAL_DATABASE_ID = -1337
VIRTUAL_DATABASE_MARKER = "database/virtual"

# Prefix of "source-table" values that point at a saved question (card)
CARD_SOURCE_TABLE_PREFIX = "card__"

DEFAULT_OUTPUT_DIR = "output/dump"
DEFAULT_FILE_EXTENSION = "yaml"

# Storage-only and administrative columns removed from every written record.
# The path of the written file already encodes the owning entities.
STORAGE_FIELDS = (
    "id",
    "creator_id",
    "created_at",
    "updated_at",
    "db_id",
    "database_id",
    "table_id",
    "card_id",
    "dashboard_id",
    "fields_hash",
    "personal_owner_id",
    "made_public_by_id",
    "collection_id",
    # Objects the API hydrates in place of the columns above
    "creator",
    "collection",
    "last-edit-info",
)

# Extra columns dropped from dashboard card series rows
SERIES_STORAGE_FIELDS = ("dashboardcard_id",)

# Capability probe results attached to databases at sync time
DATABASE_TRANSIENT_FIELDS = ("features",)

# Maximum number of retries for transient API failures
MAX_API_RETRIES = 3

# Hydrated child collections some API responses embed in a parent record.
# Children are dumped as entities of their own, so the copies are dropped.
EMBEDDED_CHILD_FIELDS = {
    "database": ("tables",),
    "table": ("db", "fields", "metrics", "segments"),
    "field": ("table", "target"),
    "dashboard": ("dashcards", "ordered_cards"),
}
