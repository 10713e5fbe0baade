"""
NuGet package storage on object storage.

Exposes a flat package directory ("Acme.Widgets.nupkg" files plus
"name|version" composite paths) on top of an object store that only knows
containers and objects, tracking the latest uploaded version of each package
in container metadata.
"""

from .config import StorageSettings, create_file_system
from .errors import (
    BackendUnavailableError,
    MalformedPathError,
    MetadataError,
    PackageNotFoundError,
    StalePointerError,
    StorageError,
    UnsupportedOperationError,
)
from .logging_config import setup_logging
from .path_codec import PackagePath, compose, decompose, is_composite, remove_suffix
from .storage import BlobFileSystem, GCSObjectStore, ObjectStoreClient, VirtualFileSystem

__version__ = "0.1.0"

__all__ = [
    "BackendUnavailableError",
    "BlobFileSystem",
    "GCSObjectStore",
    "MalformedPathError",
    "MetadataError",
    "ObjectStoreClient",
    "PackageNotFoundError",
    "PackagePath",
    "StalePointerError",
    "StorageError",
    "StorageSettings",
    "UnsupportedOperationError",
    "VirtualFileSystem",
    "compose",
    "create_file_system",
    "decompose",
    "is_composite",
    "remove_suffix",
    "setup_logging",
]
