"""Fully qualified path names for entities.

Every entity gets a slash-delimited name built from its containment chain,
e.g. ``<root>/databases/Sample/schemas/PUBLIC/tables/ORDERS/fields/TOTAL``.
These names replace numeric ids in the dump so that the tree stays readable
and independent of the ids of the instance it was taken from.
"""

from metabase_export.common import UnresolvedParent
from metabase_export.models import EntityKind, EntityRef
from metabase_export.process.common import query_source_card_id

ROOT_COLLECTION_LOCATIONS = (None, "", "/")


def lookup_parent(store, kind, entity_id):
    """Fetch a parent entity, raising UnresolvedParent when it is missing."""
    entity = store.entity(kind, entity_id) if entity_id is not None else None
    if entity is None:
        raise UnresolvedParent(kind, entity_id)
    return entity


def resolve_path_by_id(root_prefix, kind, entity_id, store):
    """Look up an entity by id and return its path name."""
    return resolve_path(root_prefix, lookup_parent(store, kind, entity_id), store)


def _database_path(root_prefix, database, store):
    return f"{root_prefix}/databases/{database.name}"


def _table_path(root_prefix, table, store):
    database_path = resolve_path_by_id(
        root_prefix, EntityKind.DATABASE, table.get("db_id"), store
    )
    return f"{database_path}/schemas/{table.get('schema') or ''}/tables/{table.name}"


def _table_child_path(segment):
    def resolve(root_prefix, entity, store):
        table_path = resolve_path_by_id(
            root_prefix, EntityKind.TABLE, entity.get("table_id"), store
        )
        return f"{table_path}/{segment}/{entity.name}"

    return resolve


def collection_ancestor_ids(location):
    """Parse a collection location such as "/3/17/" into [3, 17]."""
    if location in ROOT_COLLECTION_LOCATIONS:
        return []
    return [int(part) for part in location.split("/") if part]


def _collection_path(root_prefix, collection, store):
    parents = "".join(
        f"{lookup_parent(store, EntityKind.COLLECTION, ancestor_id).name}/collections/"
        for ancestor_id in collection_ancestor_ids(collection.get("location"))
    )
    return f"{root_prefix}/collections/{parents}{collection.name}"


def _collection_or_root(root_prefix, entity, store):
    collection_id = entity.get("collection_id")
    if collection_id is None:
        return f"{root_prefix}/collections"
    return resolve_path_by_id(root_prefix, EntityKind.COLLECTION, collection_id, store)


def _dashboard_path(root_prefix, dashboard, store):
    parent_path = _collection_or_root(root_prefix, dashboard, store)
    return f"{parent_path}/dashboards/{dashboard.name}"


def _card_path(root_prefix, card, store):
    # Questions built on another question nest under that question
    source_card_id = query_source_card_id(card.get("dataset_query"))
    if source_card_id is not None:
        parent_path = resolve_path_by_id(
            root_prefix, EntityKind.CARD, source_card_id, store
        )
    else:
        parent_path = _collection_or_root(root_prefix, card, store)
    return f"{parent_path}/cards/{card.name}"


PATH_RESOLVERS = {
    EntityKind.DATABASE: _database_path,
    EntityKind.TABLE: _table_path,
    EntityKind.FIELD: _table_child_path("fields"),
    EntityKind.METRIC: _table_child_path("metrics"),
    EntityKind.SEGMENT: _table_child_path("segments"),
    EntityKind.COLLECTION: _collection_path,
    EntityKind.DASHBOARD: _dashboard_path,
    EntityKind.CARD: _card_path,
}


def resolve_path(root_prefix, entity: EntityRef, store) -> str:
    """Return the fully qualified path name of ``entity`` under ``root_prefix``.

    Args:
        root_prefix: Root of the dumped tree, prepended to every path
        entity: The entity to name
        store: MetadataStore used to look up parents

    Raises:
        UnresolvedParent: A parent referenced by id does not exist
    """
    return PATH_RESOLVERS[entity.kind](root_prefix, entity, store)
