"""Recognize entity references inside MBQL forms."""

from metabase_export.process.common import is_integer_id, normalize_token

FIELD_REFERENCE_HEADS = frozenset({"field-id", "fk->", "field-literal"})
TAGGED_REFERENCE_HEADS = frozenset({"metric", "segment"})

# Heads whose id argument the rewriter resolves
RESOLVABLE_HEADS = frozenset({"field-id", "fk->"}) | TAGGED_REFERENCE_HEADS


def clause_head(form):
    """Return the normalized head of a clause, or None if form is not one."""
    if isinstance(form, (list, tuple)) and form and isinstance(form[0], str):
        return normalize_token(form[0])
    return None


def is_field_reference(form):
    """Is form a field clause: field-id, fk-> or field-literal?"""
    return clause_head(form) in FIELD_REFERENCE_HEADS


def is_tagged_reference(form):
    """Is form a [metric|segment, id-or-name, ...] clause?"""
    if clause_head(form) not in TAGGED_REFERENCE_HEADS or len(form) < 2:
        return False
    return all(is_integer_id(arg) or isinstance(arg, str) for arg in form[1:])


def is_entity_reference(form):
    """Is form an MBQL entity reference?"""
    return is_field_reference(form) or is_tagged_reference(form)
