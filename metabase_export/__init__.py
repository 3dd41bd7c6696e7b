"""Metabase Export - Dump Metabase content to a diffable YAML tree.

This library writes databases, tables, fields, metrics, segments,
collections, dashboards and cards to YAML files whose paths are built from
entity names instead of ids, so the tree is meaningful under version control.

Basic usage:
    from metabase_export import dump_instance

    result = dump_instance(
        base_url="https://metabase.example.com",
        api_key="your_api_key",
        output_dir="output/dump",
    )

    print(f"Wrote {len(result['written'])} files")
"""

from metabase_export.config import ExportConfig
from metabase_export.export import dump, dump_all_entities
from metabase_export.export.writers import YamlWriter
from metabase_export.models import EntityKind, EntityRef
from metabase_export.process import humanize, resolve_path
from metabase_export.store import ApiStore, SnapshotStore


def dump_instance(
    base_url: str | None = None,
    api_key: str | None = None,
    snapshot_path: str | None = None,
    output_dir: str = "output/dump",
    entity_kinds=None,
    max_workers: int = 1,
    file_extension: str = "yaml",
    debug: bool = False,
):
    """Dump a Metabase instance (or a local snapshot of one) to YAML.

    Args:
        base_url: Metabase base URL (e.g., "https://metabase.example.com")
        api_key: Metabase API key
        snapshot_path: Path to a local JSON snapshot; used instead of the API
            when given
        output_dir: Root directory of the dumped tree (default: "output/dump")
        entity_kinds: Entity kinds to dump, e.g. ["collection", "card"]
            (default: None - dumps all kinds)
        max_workers: Number of entities dumped in parallel (default: 1)
        file_extension: Extension of written files (default: "yaml")
        debug: Enable debug logging (default: False)

    Returns:
        dict: Dump summary containing:
            - written: Paths of the written files
            - failed: Entities that could not be dumped (empty on success)
            - counts: Number of written files per entity kind

    Raises:
        ExportError: One or more entities could not be dumped
    """
    config = ExportConfig(
        base_url=base_url,
        api_key=api_key,
        output_dir=output_dir,
        file_extension=file_extension,
        max_workers=max_workers,
        entity_kinds=entity_kinds,
        debug=debug,
        load_from_env=False,  # Don't load from .env when using this API
    )

    if snapshot_path:
        store = SnapshotStore.from_file(snapshot_path)
    else:
        store = ApiStore(config=config)

    return dump_all_entities(
        store,
        writer=YamlWriter(),
        root_prefix=config.OUTPUT_DIR,
        kinds=config.ENTITY_KINDS,
        max_workers=config.MAX_WORKERS,
        extension=config.FILE_EXTENSION,
    )


__all__ = [
    "dump_instance",
    "dump",
    "dump_all_entities",
    "humanize",
    "resolve_path",
    "ApiStore",
    "EntityKind",
    "EntityRef",
    "ExportConfig",
    "SnapshotStore",
    "YamlWriter",
]
__version__ = "1.0.0"
