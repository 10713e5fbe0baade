"""
Base interfaces for the package storage adapter.

Two contracts meet here:

- ObjectStoreClient: what the adapter needs from an object-storage backend.
  Two flat namespaces (containers, and objects inside them) plus string
  key/value metadata on both, updated by merging keys (no compare-and-swap).
- VirtualFileSystem: the file-system shaped contract the hosting package
  repository consumes (existence, timestamps, streams, listings).

Path Format (VirtualFileSystem):
- Bare path: "Acme.Widgets" or "Acme.Widgets.nupkg" (a package container)
- Composite path: "Acme.Widgets|1.0.0" (one version of a package)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Callable, Dict, Iterable, List, Optional, Union

from ..errors import UnsupportedOperationError

Metadata = Dict[str, str]
Content = Union[bytes, BinaryIO]


@dataclass
class ContainerProperties:
    """Metadata and backend-tracked timestamps of a container."""

    name: str
    metadata: Metadata = field(default_factory=dict)
    created: Optional[datetime] = None
    last_modified: Optional[datetime] = None


class ObjectStoreClient(ABC):
    """
    Abstract object-storage backend.

    Implementations translate these calls into backend round trips. They hold
    no locks and perform no retries; backend failures surface as
    BackendUnavailableError.
    """

    @abstractmethod
    def container_exists(self, container: str) -> bool:
        pass

    @abstractmethod
    def create_container(self, container: str) -> bool:
        """
        Create a container if it does not exist yet.

        Returns:
            True if the container was created by this call
        """
        pass

    @abstractmethod
    def delete_container(self, container: str) -> bool:
        """
        Delete a container together with every object in it.

        Returns:
            True if a container was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    def list_containers(self) -> List[str]:
        pass

    @abstractmethod
    def get_container_properties(self, container: str) -> Optional[ContainerProperties]:
        """Fetch container metadata, or None if the container does not exist."""
        pass

    @abstractmethod
    def update_container_metadata(self, container: str, updates: Metadata) -> None:
        """
        Merge ``updates`` into the container's metadata.

        Keys not named in ``updates`` keep their stored values, so two writers
        touching different keys never overwrite each other.

        Raises:
            PackageNotFoundError: If the container does not exist
        """
        pass

    @abstractmethod
    def object_exists(self, container: str, key: str) -> bool:
        pass

    @abstractmethod
    def upload_object(self, container: str, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any existing object."""
        pass

    @abstractmethod
    def download_object(self, container: str, key: str) -> bytes:
        """
        Download an object's full content.

        Raises:
            PackageNotFoundError: If the object does not exist
        """
        pass

    @abstractmethod
    def delete_object(self, container: str, key: str) -> bool:
        """
        Delete an object.

        Returns:
            True if an object was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    def list_objects(self, container: str) -> List[str]:
        """List object keys inside a container (empty if it does not exist)."""
        pass

    @abstractmethod
    def set_object_metadata(self, container: str, key: str, metadata: Metadata) -> None:
        """Merge ``metadata`` into an object's metadata (a fresh upload starts empty)."""
        pass


class VirtualFileSystem(ABC):
    """
    File-system contract consumed by the package repository.

    Packages are exposed as a single flat directory: every package name is a
    file ("Acme.Widgets.nupkg") whose content is the most recently uploaded
    version. Specific versions are addressed with composite paths.
    """

    @property
    def root(self) -> str:
        return ""

    @abstractmethod
    def write(self, path: str, content: Content) -> None:
        """
        Upload a package version and make it the latest.

        Args:
            path: Composite path "name|version" (suffix optional)
            content: Package bytes or a readable binary stream

        Raises:
            MalformedPathError: If the path has no version segment
        """
        pass

    @abstractmethod
    def add_file(self, path: str, writer: Callable[[BinaryIO], None]) -> None:
        """Upload a package version whose content is written by ``writer``."""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def open(self, path: str) -> BinaryIO:
        """
        Open a package for reading.

        Returns:
            In-memory stream positioned at the start

        Raises:
            PackageNotFoundError: If the package or its latest version is missing
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass

    @abstractmethod
    def delete_files(self, paths: Iterable[str]) -> None:
        pass

    @abstractmethod
    def delete_directory(self, path: str, recursive: bool = False) -> None:
        pass

    @abstractmethod
    def list(self, path: Optional[str] = None, filter: str = "*", recursive: bool = False) -> List[str]:
        pass

    @abstractmethod
    def get_directories(self, path: str) -> List[str]:
        pass

    @abstractmethod
    def get_created(self, path: str) -> datetime:
        pass

    @abstractmethod
    def get_last_modified(self, path: str) -> datetime:
        pass

    @abstractmethod
    def get_last_accessed(self, path: str) -> datetime:
        pass

    @abstractmethod
    def get_full_path(self, path: str) -> str:
        pass

    def make_writable(self, path: str) -> None:
        """Object storage has no write-protection bit, so there is nothing to clear."""
        return None

    def create_file(self, path: str) -> BinaryIO:
        raise UnsupportedOperationError("Stream-based file creation not supported")

    def add_files(self, files: Iterable[str], root_dir: str = "") -> None:
        raise UnsupportedOperationError("Batch add not supported")

    def move_file(self, source: str, destination: str) -> None:
        raise UnsupportedOperationError("Move not supported")
