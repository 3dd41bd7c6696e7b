"""YAML writer for dumped entity records."""

import logging
import threading
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


def render_yaml(value):
    """Render a record as block-style YAML, keeping key order."""
    return yaml.safe_dump(
        value,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


class YamlWriter:
    """Write records as YAML files, creating parent directories as needed."""

    def __init__(self, encoding="utf-8"):
        self.encoding = encoding
        self.written = 0
        self._lock = threading.Lock()

    def write(self, path, value):
        """Write ``value`` to ``path``.

        The document is rendered before the file is opened, so a value that
        cannot be serialized never leaves a truncated file behind.
        """
        document = render_yaml(value)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding=self.encoding, newline="\n") as f:
            f.write(document)
        with self._lock:
            self.written += 1
        logger.debug("Wrote %s", path)
        return path
