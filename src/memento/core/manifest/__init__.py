"""Project manifest: installed components, their recorded versions and packs."""
from __future__ import annotations

from .model import InstalledRecord, Manifest, PackRecord
from .store import ManifestStore

__all__ = ["InstalledRecord", "Manifest", "ManifestStore", "PackRecord"]
