"""Entity store layer — records, providers, and the immutable snapshot."""

from langrank.store.entity import Entity
from langrank.store.loader import DirectoryProvider, EntityProvider
from langrank.store.snapshot import Snapshot

__all__ = ["DirectoryProvider", "Entity", "EntityProvider", "Snapshot"]
