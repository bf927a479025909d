"""Registry of the services a project can be composed from.

Each service key maps to a human label and a fragment (``<key>.stub``) inside
a stubs directory.  The ``app`` service is part of every catalog but is never
offered for selection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import APP_KEY, ServiceKey


SERVICE_LABELS: dict[ServiceKey, str] = {
    ServiceKey.MYSQL: "MySQL/MariaDB Database",
    ServiceKey.PSQL: "PostgreSQL Database",
    ServiceKey.SMTP: "SMTP Server (Mailpit)",
    ServiceKey.VALKEY: "Redis/Valkey Cache",
    ServiceKey.QUEUE: "Queue Worker",
}

DEFAULT_SELECTION: tuple[ServiceKey, ...] = (ServiceKey.PSQL, ServiceKey.VALKEY)

_APP_LABEL = "Application"


class ServiceEntry(BaseModel):
    """One catalog row."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    fragment: Path


class ServiceCatalog(BaseModel):
    """Immutable service -> fragment registry passed to the assembler."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ServiceEntry, ...] = Field(default=())

    @classmethod
    def from_directory(
        cls,
        stubs_dir: str | Path,
        labels: Optional[dict[ServiceKey, str]] = None,
    ) -> "ServiceCatalog":
        """Build the standard catalog over the fragments in *stubs_dir*.

        Fragment files are not required to exist yet; a missing file is
        detected when the fragment is loaded.
        """
        base = Path(stubs_dir)
        labels = labels if labels is not None else SERVICE_LABELS
        entries = [ServiceEntry(key=APP_KEY, label=_APP_LABEL, fragment=base / f"{APP_KEY}.stub")]
        for key, label in labels.items():
            entries.append(ServiceEntry(key=key.value, label=label, fragment=base / f"{key.value}.stub"))
        return cls(entries=tuple(entries))

    # -- Lookup ------------------------------------------------------------

    @property
    def keys(self) -> list[str]:
        """Every key in the catalog, ``app`` included."""
        return [entry.key for entry in self.entries]

    @property
    def selectable(self) -> list[ServiceEntry]:
        """Entries an operator may choose, in catalog order."""
        return [entry for entry in self.entries if entry.key != APP_KEY]

    def get(self, key: str | ServiceKey) -> Optional[ServiceEntry]:
        name = key.value if isinstance(key, ServiceKey) else key
        for entry in self.entries:
            if entry.key == name:
                return entry
        return None

    def label(self, key: str | ServiceKey) -> str:
        entry = self.get(key)
        if entry is not None:
            return entry.label
        return key.value if isinstance(key, ServiceKey) else key

    def load_fragment(self, key: str | ServiceKey) -> Optional[str]:
        """Return the fragment text for *key*, or ``None`` if it has no file."""
        entry = self.get(key)
        if entry is None or not entry.fragment.is_file():
            return None
        return entry.fragment.read_text(encoding="utf-8")

    def fragment_path(self, key: str | ServiceKey) -> Optional[Path]:
        """Path where the fragment for *key* is expected, if *key* is known."""
        entry = self.get(key)
        return entry.fragment if entry else None
