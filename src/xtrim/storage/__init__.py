"""Storage module for Xtrim.

This module provides the local blob database for imported media content
and the key-value backed project store.
"""

from .interface import BinaryStoreInterface, KeyValueStoreInterface, StorageError
from .blob_store import MediaBlobStore, BlobDatabase
from .key_value import FileKeyValueStore, InMemoryKeyValueStore
from .projects import ProjectStore

__all__ = [
    "BinaryStoreInterface",
    "KeyValueStoreInterface",
    "StorageError",
    "MediaBlobStore",
    "BlobDatabase",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "ProjectStore",
]
