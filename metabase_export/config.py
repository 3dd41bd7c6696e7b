"""Configuration for Metabase Export.

This module handles configuration for the dump functionality.
Explicit constructor arguments take precedence over environment variables.
"""

from os import getenv
from dotenv import load_dotenv
from typing import Optional, List

from metabase_export.constants import DEFAULT_FILE_EXTENSION, DEFAULT_OUTPUT_DIR
from metabase_export.models import EntityKind

TRUE_VALUES = ("true", "1", "yes", "on")


def _env_flag(name, default="False"):
    return getenv(name, default).lower() in TRUE_VALUES


class ExportConfig:
    """Configuration for Metabase content dump."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        output_dir: Optional[str] = None,
        file_extension: Optional[str] = None,
        max_workers: Optional[int] = None,
        entity_kinds: Optional[List[str]] = None,
        debug: Optional[bool] = None,
        load_from_env: bool = True,
    ):
        """Initialize export configuration.

        Args:
            base_url: Metabase base URL
            api_key: Metabase API key sent as X-API-KEY
            output_dir: Root directory of the dumped tree
            file_extension: Extension of written files (without dot)
            max_workers: Number of entities dumped in parallel
            entity_kinds: Entity kinds to dump (default: all)
            debug: Enable debug logging
            load_from_env: Whether to load config from .env files
        """
        if load_from_env:
            load_dotenv(".env", override=True, interpolate=True)
            load_dotenv(".env.metabase", override=True, interpolate=True)

        # Metabase connection - use provided values or fall back to environment
        self.BASE_URL = base_url or getenv("BASE_URL")
        self.API_KEY = api_key or getenv("API_KEY")

        self.OUTPUT_DIR = output_dir or getenv("OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
        self.FILE_EXTENSION = (
            file_extension or getenv("FILE_EXTENSION", DEFAULT_FILE_EXTENSION)
        ).lstrip(".")

        if max_workers is not None:
            self.MAX_WORKERS = max_workers
        else:
            self.MAX_WORKERS = int(getenv("MAX_WORKERS", "1"))

        if entity_kinds is not None:
            self.ENTITY_KINDS = [EntityKind(kind) for kind in entity_kinds]
        else:
            kinds_value = getenv("ENTITY_KINDS")
            if kinds_value:
                self.ENTITY_KINDS = [
                    EntityKind(kind.strip().lower())
                    for kind in kinds_value.split(",")
                    if kind.strip()
                ]
            else:
                self.ENTITY_KINDS = list(EntityKind)

        if debug is not None:
            self.DEBUG = debug
        else:
            self.DEBUG = _env_flag("DEBUG")
