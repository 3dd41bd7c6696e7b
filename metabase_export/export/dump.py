"""Dump a single entity to a YAML file.

Each entity kind has a prepare function that assembles the record to write
and a target style:

- directory-style kinds (databases, tables, collections) own a directory that
  their children are dumped into; their record is ``<path>/<name>.<ext>``
- file-style kinds (fields, metrics, segments, dashboards, cards) are written
  to ``<path>.<ext>``

The record is fully assembled, including every rewritten reference, before
the writer is called, so an entity whose references cannot be resolved
leaves no file behind.
"""

import logging

from metabase_export.constants import (
    DATABASE_TRANSIENT_FIELDS,
    DEFAULT_FILE_EXTENSION,
    EMBEDDED_CHILD_FIELDS,
    SERIES_STORAGE_FIELDS,
    STORAGE_FIELDS,
)
from metabase_export.models import EntityKind, EntityRef
from metabase_export.process.common import is_integer_id
from metabase_export.process.humanize import humanize
from metabase_export.process.paths import resolve_path, resolve_path_by_id

logger = logging.getLogger(__name__)


def strip_storage_fields(record, extra=(), keep=()):
    """Drop ids, timestamps and owner columns from a record.

    Args:
        record: Record dict (not modified)
        extra: Additional keys to drop
        keep: Keys from the common set to keep

    Returns:
        dict: New record without the dropped keys
    """
    dropped = (set(STORAGE_FIELDS) | set(extra)) - set(keep)
    return {key: value for key, value in record.items() if key not in dropped}


def _strip_entity(entity, extra=()):
    embedded = EMBEDDED_CHILD_FIELDS.get(entity.kind.value, ())
    return strip_storage_fields(entity.record, extra=(*embedded, *extra))


def _prepare_plain(root_prefix, entity, store):
    return _strip_entity(entity)


def _prepare_database(root_prefix, entity, store):
    return _strip_entity(entity, extra=DATABASE_TRANSIENT_FIELDS)


def _prepare_field(root_prefix, entity, store):
    record = _strip_entity(entity)
    target_id = record.get("fk_target_field_id")
    if is_integer_id(target_id):
        record["fk_target_field_id"] = resolve_path_by_id(
            root_prefix, EntityKind.FIELD, target_id, store
        )
    return record


def _prepare_query_bearing(root_prefix, entity, store):
    return humanize(root_prefix, _strip_entity(entity), store)


def _prepare_series(root_prefix, series, store):
    record = strip_storage_fields(
        series, extra=SERIES_STORAGE_FIELDS, keep=("card_id",)
    )
    if is_integer_id(record.get("card_id")):
        record["card_id"] = resolve_path_by_id(
            root_prefix, EntityKind.CARD, record["card_id"], store
        )
    return record


def dashboard_cards_for_dashboard(root_prefix, dashboard, store):
    """Assemble the dashboard-card records of a dashboard, with series."""
    dashboard_cards = []
    for dashcard in store.list_dashboard_cards(dashboard.id):
        # card_id is kept and rewritten to the card path, unlike other owner ids
        record = strip_storage_fields(dashcard, keep=("card_id",))
        record["series"] = [
            _prepare_series(root_prefix, series, store)
            for series in store.list_series(dashcard["id"])
        ]
        dashboard_cards.append(humanize(root_prefix, record, store))
    return dashboard_cards


def _prepare_dashboard(root_prefix, entity, store):
    record = _strip_entity(entity)
    record["dashboard_cards"] = dashboard_cards_for_dashboard(
        root_prefix, entity, store
    )
    return record


# kind -> (prepare function, directory-style target)
DUMPERS = {
    EntityKind.DATABASE: (_prepare_database, True),
    EntityKind.TABLE: (_prepare_plain, True),
    EntityKind.FIELD: (_prepare_field, False),
    EntityKind.METRIC: (_prepare_query_bearing, False),
    EntityKind.SEGMENT: (_prepare_query_bearing, False),
    EntityKind.COLLECTION: (_prepare_plain, True),
    EntityKind.DASHBOARD: (_prepare_dashboard, False),
    EntityKind.CARD: (_prepare_query_bearing, False),
}


def target_path(
    root_prefix, entity, store, extension=DEFAULT_FILE_EXTENSION, directory=False
):
    """Return the file an entity's record is written to."""
    path = resolve_path(root_prefix, entity, store)
    if directory:
        return f"{path}/{entity.name}.{extension}"
    return f"{path}.{extension}"


def dump(
    root_prefix,
    entity: EntityRef,
    store,
    writer,
    extension=DEFAULT_FILE_EXTENSION,
):
    """Write one entity under ``root_prefix``.

    Args:
        root_prefix: Root directory of the dumped tree
        entity: Entity to dump
        store: MetadataStore used for parent and reference lookups
        writer: Object with a ``write(path, value)`` method
        extension: File extension without the dot

    Returns:
        str: Path of the written file

    Raises:
        UnresolvedParent: A parent or referenced entity does not exist
        MalformedReference: A query contains a malformed reference clause
    """
    prepare, directory = DUMPERS[entity.kind]
    record = prepare(root_prefix, entity, store)
    path = target_path(
        root_prefix, entity, store, extension=extension, directory=directory
    )
    writer.write(path, record)
    logger.debug("Dumped %s to %s", entity, path)
    return path
