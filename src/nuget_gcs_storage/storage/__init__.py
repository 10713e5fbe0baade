"""
Storage package for the NuGet package adapter.

Architecture:
- ObjectStoreClient: Abstract object-storage backend (containers + objects)
- GCSObjectStore: Google Cloud Storage implementation
- VirtualFileSystem: File-system contract consumed by the package repository
- BlobFileSystem: VirtualFileSystem over any ObjectStoreClient

Usage:
    store = GCSObjectStore(bucket="nuget-packages")
    fs = BlobFileSystem(store)

    fs.write("Acme.Widgets|1.0.0", content)
    latest = fs.open("Acme.Widgets").read()
    packages = fs.list()
"""

from .base_adapter import ContainerProperties, ObjectStoreClient, VirtualFileSystem
from .blob_file_system import BlobFileSystem
from .gcs_adapter import GCSObjectStore

__all__ = [
    "BlobFileSystem",
    "ContainerProperties",
    "GCSObjectStore",
    "ObjectStoreClient",
    "VirtualFileSystem",
]
