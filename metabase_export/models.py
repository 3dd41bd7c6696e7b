"""Entity kinds and references handled by the dump."""

from dataclasses import dataclass
from enum import StrEnum


class EntityKind(StrEnum):
    """Closed set of dumpable entity kinds, in dump order."""

    DATABASE = "database"
    TABLE = "table"
    FIELD = "field"
    METRIC = "metric"
    SEGMENT = "segment"
    COLLECTION = "collection"
    CARD = "card"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class EntityRef:
    """A store record tagged with its entity kind."""

    kind: EntityKind
    record: dict

    @property
    def id(self):
        return self.record.get("id")

    @property
    def name(self):
        return self.record.get("name")

    def get(self, key, default=None):
        return self.record.get(key, default)

    def __str__(self):
        return f"{self.kind} {self.id} ({self.name})"
