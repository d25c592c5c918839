"""Core library for memento: components, manifest, resolution, lifecycle and packs."""
from __future__ import annotations

from .exceptions import MementoError

__all__ = ["MementoError"]
