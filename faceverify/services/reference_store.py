"""
Known identities and the reference payload each one is compared against.

Sources, read in this order (first occurrence of an identity wins):
  - environment entries  USER_<identity>=<payload>  (REACT_APP_USER_ also accepted)
  - image files in REFERENCE_DIR, identity = file stem, payload = data URL

A single-target deployment replaces the whole store with one uploaded image;
that is still an ordinary store holding one entry.
"""
import base64
import mimetypes
import os
from pathlib import Path
from typing import Mapping
from faceverify.orchestrator.contracts import ReferenceEntry
from faceverify.services.config import Settings, LEGACY_REFERENCE_PREFIX

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")
SINGLE_IDENTITY = "uploaded"


def file_to_data_url(path: Path) -> str:
    mime = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    b64 = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{b64}"


class ReferenceStore:
    def __init__(self, settings: Settings, status_store):
        self.settings = settings
        self.status = status_store
        self._entries: dict[str, ReferenceEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: str) -> bool:
        return identity in self._entries

    def load(self, environ: Mapping[str, str] | None = None) -> dict[str, ReferenceEntry]:
        env = os.environ if environ is None else environ
        entries: dict[str, ReferenceEntry] = {}

        for key in sorted(env):
            # longest prefix first: REACT_APP_USER_ also ends with USER_
            if key.startswith(LEGACY_REFERENCE_PREFIX):
                prefix = LEGACY_REFERENCE_PREFIX
            elif key.startswith(self.settings.reference_prefix):
                prefix = self.settings.reference_prefix
            else:
                continue
            self._add(entries, key[len(prefix):], env[key], source=f"env {key}")

        if self.settings.reference_dir:
            self._load_dir(entries, Path(self.settings.reference_dir))

        self._entries = entries
        self.status.log(f"reference_store: loaded {len(entries)} identities")
        return dict(entries)

    def _load_dir(self, entries: dict[str, ReferenceEntry], root: Path):
        if not root.is_dir():
            self.status.log(f"reference_store: REFERENCE_DIR {root} is not a directory, skipped")
            return
        for path in sorted(root.iterdir()):
            if path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            try:
                payload = file_to_data_url(path)
            except OSError as e:
                self.status.log(f"reference_store: cannot read {path.name}: {e}")
                continue
            self._add(entries, path.stem, payload, source=f"file {path.name}")

    def _add(self, entries: dict[str, ReferenceEntry], identity: str, payload: str, source: str):
        identity = identity.strip()
        payload = (payload or "").strip()
        if not identity:
            self.status.log(f"reference_store: {source} has no identity label, skipped")
            return
        if not payload:
            self.status.log(f"reference_store: {source} has an empty payload, skipped")
            return
        if identity in entries:
            self.status.log(f"reference_store: duplicate identity '{identity}' from {source}, skipped")
            return
        entries[identity] = ReferenceEntry(identity=identity, payload=payload)

    def set_single_reference(self, payload: str, identity: str = SINGLE_IDENTITY) -> ReferenceEntry:
        """Make `payload` the only comparison target, dropping every prior entry."""
        entry = ReferenceEntry(identity=identity, payload=payload)
        self._entries = {identity: entry}
        self.status.log(f"reference_store: single reference set (identity={identity})")
        return entry

    def put(self, identity: str, payload: str) -> ReferenceEntry:
        """Add or fully replace one named entry."""
        entry = ReferenceEntry(identity=identity, payload=payload)
        replaced = identity in self._entries
        self._entries[identity] = entry
        self.status.log(f"reference_store: {'replaced' if replaced else 'added'} '{identity}'")
        return entry

    def entries(self) -> tuple[ReferenceEntry, ...]:
        """Fixed snapshot for one verification cycle, in store order."""
        return tuple(self._entries.values())

    def identities(self) -> list[str]:
        return list(self._entries)
