"""Export module for Metabase content.

This module dumps Metabase entities to a tree of YAML files.

Main entry point:
    dump_all_entities - Dumps every entity of the selected kinds
"""

import concurrent.futures
import logging
from collections import Counter

from metabase_export.common import ExportError
from metabase_export.constants import DEFAULT_FILE_EXTENSION
from metabase_export.export.dump import dump
from metabase_export.export.writers import YamlWriter
from metabase_export.models import EntityKind, EntityRef

logger = logging.getLogger(__name__)


def _dump_one(root_prefix, entity, store, writer, extension):
    try:
        return entity, dump(root_prefix, entity, store, writer, extension), None
    except Exception as e:
        # Log full exception with traceback; other entities keep going
        logger.exception("Error dumping %s", entity)
        return entity, None, str(e).split("\n")[0]


def dump_all_entities(
    store,
    writer=None,
    root_prefix="output/dump",
    kinds=None,
    max_workers=1,
    extension=DEFAULT_FILE_EXTENSION,
):
    """Dump every entity of the selected kinds.

    A failure for one entity does not stop the others. After all entities
    were attempted, ExportError is raised if any of them failed.

    Args:
        store: MetadataStore to read entities from
        writer: Writer with a ``write(path, value)`` method (default: YamlWriter)
        root_prefix: Root directory of the dumped tree
        kinds: Entity kinds to dump (default: all, in EntityKind order)
        max_workers: Number of entities dumped in parallel (1 = sequential)
        extension: File extension of written files

    Returns:
        dict: Summary with "written" paths, "failed" entities and per-kind "counts"
    """
    if writer is None:
        writer = YamlWriter()
    selected = [EntityKind(kind) for kind in kinds] if kinds else list(EntityKind)
    ordered_kinds = [kind for kind in EntityKind if kind in selected]

    written = []
    errors = []
    counts = Counter()

    for kind in ordered_kinds:
        entities = [EntityRef(kind, record) for record in store.list_entities(kind)]
        logger.info("Dumping %d %s entities...", len(entities), kind)

        if max_workers > 1 and len(entities) > 1:
            with concurrent.futures.ThreadPoolExecutor(
                max_workers=max_workers
            ) as executor:
                results = list(
                    executor.map(
                        lambda entity: _dump_one(
                            root_prefix, entity, store, writer, extension
                        ),
                        entities,
                    )
                )
        else:
            results = [
                _dump_one(root_prefix, entity, store, writer, extension)
                for entity in entities
            ]

        for entity, path, error in results:
            if error is None:
                written.append(path)
                counts[kind.value] += 1
            else:
                errors.append(f"{entity}: {error}")

        logger.info("Dumped %d %s entities", counts[kind.value], kind)

    summary = {"written": written, "failed": errors, "counts": dict(counts)}
    if errors:
        error_details = "\n  - ".join(errors)
        error = ExportError(
            f"Dump failed for {len(errors)} of {len(written) + len(errors)} entities\n"
            f"Errors encountered:\n  - {error_details}"
        )
        error.summary = summary
        raise error

    logger.info("Successfully dumped %d entities to %s", len(written), root_prefix)
    return summary


__all__ = ["dump", "dump_all_entities", "YamlWriter"]
