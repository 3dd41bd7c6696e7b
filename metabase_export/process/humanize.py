"""Replace entity ids inside MBQL with fully qualified path names.

Ids in queries are meaningless outside the instance that assigned them, so
every metric, segment, field, table, database and card reference is rewritten
into the same path name the referenced entity is dumped under. The walk is
post-order and builds new containers; the input is never modified.

Path names are strings, and string arguments are never resolved again, so
running the rewrite twice gives the same result as running it once.
"""

from metabase_export.common import MalformedReference
from metabase_export.constants import VIRTUAL_DATABASE_ID, VIRTUAL_DATABASE_MARKER
from metabase_export.models import EntityKind
from metabase_export.process.common import is_integer_id, parse_card_source_table
from metabase_export.process.paths import resolve_path_by_id
from metabase_export.process.references import (
    RESOLVABLE_HEADS,
    TAGGED_REFERENCE_HEADS,
    clause_head,
    is_entity_reference,
)

TAGGED_REFERENCE_KINDS = {
    "metric": EntityKind.METRIC,
    "segment": EntityKind.SEGMENT,
}


def _same_sequence(form, items):
    return tuple(items) if isinstance(form, tuple) else list(items)


def _resolve_single_id(root_prefix, form, head, kind, store):
    entity_id = form[1]
    if isinstance(entity_id, str):
        # Already a path name, or a named (non-numeric) external reference
        return form
    if not is_integer_id(entity_id):
        raise MalformedReference(form, f"{head} id must be an integer or a string")
    path = resolve_path_by_id(root_prefix, kind, entity_id, store)
    return _same_sequence(form, [head, path, *form[2:]])


def _field_id_clause(root_prefix, field_id, store):
    path = resolve_path_by_id(root_prefix, EntityKind.FIELD, field_id, store)
    return ["field-id", path]


def _resolve_fk(root_prefix, form, store):
    args = []
    for arg in form[1:]:
        if is_integer_id(arg):
            args.append(_field_id_clause(root_prefix, arg, store))
        elif clause_head(arg) is not None:
            args.append(rewrite_reference(root_prefix, arg, store))
        else:
            raise MalformedReference(
                form, "fk-> arguments must be field ids or clauses"
            )
    return _same_sequence(form, ["fk->", *args])


def rewrite_reference(root_prefix, form, store):
    """Rewrite a single reference clause, leaving other clauses untouched."""
    head = clause_head(form)
    if head not in RESOLVABLE_HEADS or len(form) < 2:
        return form
    if not is_entity_reference(form):
        raise MalformedReference(form, f"{head} arguments must be ids or names")
    if head in TAGGED_REFERENCE_HEADS:
        return _resolve_single_id(
            root_prefix, form, head, TAGGED_REFERENCE_KINDS[head], store
        )
    if head == "field-id":
        return _resolve_single_id(root_prefix, form, head, EntityKind.FIELD, store)
    return _resolve_fk(root_prefix, form, store)


def _rewrite_database(root_prefix, database, store):
    if is_integer_id(database):
        if database == VIRTUAL_DATABASE_ID:
            return VIRTUAL_DATABASE_MARKER
        return resolve_path_by_id(root_prefix, EntityKind.DATABASE, database, store)
    return database


def _rewrite_card_id(root_prefix, card_id, store):
    if is_integer_id(card_id):
        return resolve_path_by_id(root_prefix, EntityKind.CARD, card_id, store)
    return card_id


def _rewrite_source_table(root_prefix, source_table, store):
    card_id = parse_card_source_table(source_table)
    if card_id is not None:
        return resolve_path_by_id(root_prefix, EntityKind.CARD, card_id, store)
    if is_integer_id(source_table):
        return resolve_path_by_id(root_prefix, EntityKind.TABLE, source_table, store)
    return source_table


MAPPING_REWRITES = {
    "database": _rewrite_database,
    "card_id": _rewrite_card_id,
    "source-table": _rewrite_source_table,
}


def _rewrite_mapping(root_prefix, mapping, store):
    return {
        key: (
            MAPPING_REWRITES[key](root_prefix, value, store)
            if key in MAPPING_REWRITES
            else value
        )
        for key, value in mapping.items()
    }


def humanize(root_prefix, form, store):
    """Return a copy of ``form`` with entity ids replaced by path names.

    Args:
        root_prefix: Root of the dumped tree
        form: Arbitrary nested lists, tuples, dicts and scalars
        store: MetadataStore used to look up referenced entities

    Raises:
        UnresolvedParent: A referenced entity does not exist
        MalformedReference: A reference clause has an argument of the wrong shape
    """
    if isinstance(form, dict):
        children = {
            key: humanize(root_prefix, value, store) for key, value in form.items()
        }
        return _rewrite_mapping(root_prefix, children, store)

    if isinstance(form, (list, tuple)):
        children = _same_sequence(
            form, (humanize(root_prefix, item, store) for item in form)
        )
        return rewrite_reference(root_prefix, children, store)

    return form
