"""
Findings store ("blackboard") for extracted artifacts.

Extractors never touch storage directly: they ask the store to create an
artifact against a content reference and then attach a batch of typed
attributes to it. Two implementations ship here:

- InMemoryFindingsStore: process-local, used by tests and dry runs
- SQLiteFindingsStore: persistent store under the case folder

Attribute values are restricted to int (epoch seconds, counts), float
(geolocation) and str.
"""

from __future__ import annotations

import sqlite3
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .enums import ArtifactType, AttributeType
from .logging import get_logger

LOGGER = get_logger("core.findings")

AttributeValue = Union[int, float, str]


class FindingsStoreError(Exception):
    """Raised when the findings store cannot create or update an artifact."""
    pass


@dataclass(frozen=True, slots=True)
class Attribute:
    """A single typed key/value finding."""

    attribute_type: AttributeType
    source: str
    value: AttributeValue

    def __post_init__(self) -> None:
        # bool is an int subclass but never a valid attribute value
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float, str)):
            raise ValueError(
                f"Unsupported value type {type(self.value).__name__} for {self.attribute_type}"
            )


@dataclass(slots=True)
class Artifact:
    """A named bundle of attributes attached to one content object."""

    artifact_id: int
    artifact_type: ArtifactType
    content_ref: str
    attributes: List[Attribute] = field(default_factory=list)

    def get(self, attribute_type: AttributeType) -> Optional[AttributeValue]:
        """Return the first value of the given attribute type, or None."""
        for attribute in self.attributes:
            if attribute.attribute_type == attribute_type:
                return attribute.value
        return None


class FindingsStore(ABC):
    """Interface the extractors write findings through."""

    @abstractmethod
    def create_artifact(self, content_ref: str, artifact_type: ArtifactType) -> Artifact:
        """Create an (empty) artifact on the content object."""

    @abstractmethod
    def add_attributes(self, artifact: Artifact, attributes: Iterable[Attribute]) -> None:
        """Attach a batch of attributes to an existing artifact."""

    @abstractmethod
    def get_artifacts(self, artifact_type: ArtifactType) -> List[Artifact]:
        """Return all artifacts of a type in creation order."""


class InMemoryFindingsStore(FindingsStore):
    """Dictionary-backed store."""

    def __init__(self) -> None:
        self._artifacts: Dict[int, Artifact] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create_artifact(self, content_ref: str, artifact_type: ArtifactType) -> Artifact:
        with self._lock:
            artifact = Artifact(
                artifact_id=self._next_id,
                artifact_type=ArtifactType(artifact_type),
                content_ref=content_ref,
            )
            self._artifacts[artifact.artifact_id] = artifact
            self._next_id += 1
        return artifact

    def add_attributes(self, artifact: Artifact, attributes: Iterable[Attribute]) -> None:
        batch = list(attributes)
        with self._lock:
            stored = self._artifacts.get(artifact.artifact_id)
            if stored is None:
                raise FindingsStoreError(f"Unknown artifact id {artifact.artifact_id}")
            stored.attributes.extend(batch)
            if stored is not artifact:
                artifact.attributes.extend(batch)

    def get_artifacts(self, artifact_type: ArtifactType) -> List[Artifact]:
        with self._lock:
            return [a for a in self._artifacts.values() if a.artifact_type == artifact_type]

    def __len__(self) -> int:
        return len(self._artifacts)


SCHEMA = """
CREATE TABLE IF NOT EXISTS artifacts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artifact_type TEXT NOT NULL,
    content_ref TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS attributes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artifact_id INTEGER NOT NULL REFERENCES artifacts(id),
    attribute_type TEXT NOT NULL,
    source TEXT NOT NULL,
    value_int INTEGER,
    value_double REAL,
    value_text TEXT
);
CREATE INDEX IF NOT EXISTS idx_artifacts_type ON artifacts(artifact_type);
CREATE INDEX IF NOT EXISTS idx_attributes_artifact ON attributes(artifact_id);
"""


class SQLiteFindingsStore(FindingsStore):
    """
    SQLite-backed store.

    Each add_attributes() batch is written in a single transaction, so an
    artifact never ends up with a partial attribute set.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        LOGGER.debug("Findings store opened at %s", self.db_path)

    def create_artifact(self, content_ref: str, artifact_type: ArtifactType) -> Artifact:
        artifact_type = ArtifactType(artifact_type)
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    "INSERT INTO artifacts (artifact_type, content_ref) VALUES (?, ?)",
                    (artifact_type.value, content_ref),
                )
        except sqlite3.Error as exc:
            raise FindingsStoreError(f"Failed to create {artifact_type} artifact: {exc}") from exc
        return Artifact(artifact_id=int(cur.lastrowid), artifact_type=artifact_type, content_ref=content_ref)

    def add_attributes(self, artifact: Artifact, attributes: Iterable[Attribute]) -> None:
        batch = list(attributes)
        rows = [
            (artifact.artifact_id, attr.attribute_type.value, attr.source, *_split_value(attr.value))
            for attr in batch
        ]
        try:
            with self._lock, self._conn:
                self._conn.executemany(
                    """
                    INSERT INTO attributes
                        (artifact_id, attribute_type, source, value_int, value_double, value_text)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
        except sqlite3.Error as exc:
            raise FindingsStoreError(
                f"Failed to add attributes to artifact {artifact.artifact_id}: {exc}"
            ) from exc
        artifact.attributes.extend(batch)

    def get_artifacts(self, artifact_type: ArtifactType) -> List[Artifact]:
        artifact_type = ArtifactType(artifact_type)
        with self._lock:
            artifact_rows = self._conn.execute(
                "SELECT id, content_ref FROM artifacts WHERE artifact_type = ? ORDER BY id",
                (artifact_type.value,),
            ).fetchall()
            artifacts: Dict[int, Artifact] = {
                row["id"]: Artifact(row["id"], artifact_type, row["content_ref"])
                for row in artifact_rows
            }
            if not artifacts:
                return []
            attr_rows = self._conn.execute(
                """
                SELECT a.artifact_id, a.attribute_type, a.source,
                       a.value_int, a.value_double, a.value_text
                FROM attributes a
                JOIN artifacts r ON r.id = a.artifact_id
                WHERE r.artifact_type = ?
                ORDER BY a.id
                """,
                (artifact_type.value,),
            ).fetchall()
        for row in attr_rows:
            if row["value_int"] is not None:
                value: AttributeValue = row["value_int"]
            elif row["value_double"] is not None:
                value = row["value_double"]
            else:
                value = row["value_text"]
            artifacts[row["artifact_id"]].attributes.append(
                Attribute(AttributeType(row["attribute_type"]), row["source"], value)
            )
        return list(artifacts.values())

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def _split_value(value: AttributeValue) -> tuple:
    """Map an attribute value onto (value_int, value_double, value_text)."""
    if isinstance(value, int):
        return value, None, None
    if isinstance(value, float):
        return None, value, None
    return None, None, value
