"""
Catalog Reader
==============

Loads the advertisement catalog from a backing store.  The matching engine
depends only on the ``CatalogReader`` protocol, so the JSON file reader
below can be swapped for a database, cache, or test double.

``JsonFileCatalogReader`` keeps a read-through snapshot of the file keyed
on its modification time and size: edits to the file are picked up on the
next read (hot reload), while unchanged files are not re-parsed.  Each call
returns one immutable tuple, so a single matching operation always sees a
consistent snapshot.  Reads may run on worker threads; a lock
serialises refreshes of the snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ridelytics.models import AdvertisementRecord, Coordinate, InvalidCoordinateError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CatalogUnavailableError(Exception):
    """Raised when the catalog store cannot be read or parsed."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class CatalogReader(Protocol):
    """Read access to the advertisement catalog."""

    def load_all(self) -> Sequence[AdvertisementRecord]:
        """Every record in the catalog, active or not."""
        ...

    def load_active(self) -> Sequence[AdvertisementRecord]:
        """Only records whose ``active`` flag is set."""
        ...


# ---------------------------------------------------------------------------
# On-disk schema
# ---------------------------------------------------------------------------


class CatalogEntry(BaseModel):
    """One advertisement as stored in ``ads.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    business_name: str = Field(alias="businessName")
    description: str | None = None
    image_url: str = Field(default="", alias="imageUrl")
    website_url: str = Field(default="", alias="websiteUrl")
    latitude: float
    longitude: float
    radius: float = Field(gt=0, description="Service radius in metres")
    active: bool = True
    priority: int = 0

    def to_record(self, catalog_index: int) -> AdvertisementRecord:
        return AdvertisementRecord(
            id=self.id,
            business_name=self.business_name,
            description=self.description,
            image_url=self.image_url,
            website_url=self.website_url,
            location=Coordinate(self.latitude, self.longitude),
            radius_meters=self.radius,
            active=self.active,
            priority=self.priority,
            catalog_index=catalog_index,
        )


def parse_catalog(raw: Any, source: str | None = None) -> tuple[AdvertisementRecord, ...]:
    """Convert decoded catalog JSON into records.

    A payload that is not a list is unusable and raises
    ``CatalogUnavailableError``.  Individual malformed entries are logged
    and skipped so one bad advertisement does not hide the others.
    """
    if not isinstance(raw, list):
        raise CatalogUnavailableError(
            "Catalog payload must be a JSON array of advertisements", source=source
        )

    records: list[AdvertisementRecord] = []
    seen_ids: set[str] = set()

    for position, item in enumerate(raw):
        try:
            entry = CatalogEntry.model_validate(item)
            record = entry.to_record(catalog_index=position)
        except (ValidationError, InvalidCoordinateError) as exc:
            logger.warning("Skipping malformed catalog entry #%d in %s: %s", position, source, exc)
            continue

        if record.id in seen_ids:
            logger.warning("Skipping duplicate catalog id %r in %s", record.id, source)
            continue

        seen_ids.add(record.id)
        records.append(record)

    return tuple(records)


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


class JsonFileCatalogReader:
    """Catalog reader backed by a JSON file, re-read when the file changes."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._stamp: tuple[int, int] | None = None
        self._snapshot: tuple[AdvertisementRecord, ...] = ()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> tuple[AdvertisementRecord, ...]:
        try:
            stat = self._path.stat()
        except OSError as exc:
            raise CatalogUnavailableError(
                f"Catalog file {self._path} cannot be accessed: {exc}", source=str(self._path)
            ) from exc

        stamp = (stat.st_mtime_ns, stat.st_size)
        if stamp == self._stamp:
            return self._snapshot

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CatalogUnavailableError(
                f"Catalog file {self._path} cannot be parsed: {exc}", source=str(self._path)
            ) from exc

        snapshot = parse_catalog(raw, source=str(self._path))
        self._snapshot = snapshot
        self._stamp = stamp
        logger.info("Loaded %d catalog records from %s", len(snapshot), self._path)
        return snapshot

    def load_all(self) -> tuple[AdvertisementRecord, ...]:
        with self._lock:
            return self._read()

    def load_active(self) -> tuple[AdvertisementRecord, ...]:
        with self._lock:
            snapshot = self._read()
        return tuple(record for record in snapshot if record.active)


class StaticCatalogReader:
    """In-memory catalog, for tests and embedding callers."""

    def __init__(self, records: Sequence[AdvertisementRecord]) -> None:
        self._records = tuple(records)

    def load_all(self) -> tuple[AdvertisementRecord, ...]:
        return self._records

    def load_active(self) -> tuple[AdvertisementRecord, ...]:
        return tuple(record for record in self._records if record.active)
