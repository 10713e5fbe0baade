"""
Virtual file system over an object store.

Every package name maps to one container and every package version to one
object inside it. The container metadata carries the "latest version"
pointer the package repository reads through:

    created        timestamp of the first upload
    last-modified  timestamp of the most recent upload
    last-version   version key of the most recent upload
    last-accessed  timestamp of the most recent open()

"Latest" means most recently uploaded, not highest version. There are no
transactions: container creation, object upload and metadata update are
independent backend calls, and concurrent uploads of one package race on the
pointer (last write wins).
"""

import io
import logging
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Iterable, List, Optional

from ..constants import (
    META_CREATED,
    META_LAST_ACCESSED,
    META_LAST_MODIFIED,
    META_LAST_VERSION,
    MIN_TIMESTAMP,
    PACKAGE_SUFFIX,
)
from ..errors import MetadataError, PackageNotFoundError, StalePointerError
from ..path_codec import PackagePath, decompose, is_composite, remove_suffix
from .base_adapter import Content, ContainerProperties, ObjectStoreClient, VirtualFileSystem

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlobFileSystem(VirtualFileSystem):
    """
    Package file system backed by an ObjectStoreClient.

    The adapter is stateless: everything it knows lives in the backend, so
    one instance can be shared between threads.

    Usage:
        fs = BlobFileSystem(GCSObjectStore(bucket="nuget-packages"))
        fs.write("Acme.Widgets|1.0.0.nupkg", content)
        fs.exists("Acme.Widgets")                 # True
        fs.get_full_path("Acme.Widgets.nupkg")    # "Acme.Widgets|1.0.0"
        data = fs.open("Acme.Widgets").read()
    """

    def __init__(self, store: ObjectStoreClient, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self._clock = clock or _utcnow

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    @staticmethod
    def _package_name(path: str) -> str:
        """Container name for a bare or composite path."""
        path = remove_suffix(path)
        if is_composite(path):
            return decompose(path).name
        return path

    def _locate(self, path: str) -> PackagePath:
        """
        Resolve a path to an existing version object.

        Bare paths follow the container's last-version pointer; composite
        paths address their version directly.

        Raises:
            PackageNotFoundError: If the container, pointer or object is missing
            StalePointerError: If the pointer names a deleted version
        """
        path = remove_suffix(path)

        if is_composite(path):
            address = decompose(path)
            if not self.store.object_exists(address.name, address.version):
                raise PackageNotFoundError(f"Package version not found: {address}")
            return address

        properties = self.store.get_container_properties(path)
        if properties is None:
            raise PackageNotFoundError(f"Package not found: {path}")

        version = properties.metadata.get(META_LAST_VERSION)
        if not version:
            raise PackageNotFoundError(f"Package has no uploaded version: {path}")

        if not self.store.object_exists(path, version):
            logger.warning(f"Latest version pointer of {path} names missing object {version}")
            raise StalePointerError(path, version)

        return PackagePath(path, version)

    def _parse_timestamp(self, properties: ContainerProperties, key: str) -> Optional[datetime]:
        value = properties.metadata.get(key)
        if not value:
            return None
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise MetadataError(
                f"Invalid {key} timestamp on package {properties.name}: {value!r}"
            ) from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _store_version(self, address: PackagePath, data: bytes) -> None:
        name, version = address
        now = self._timestamp()

        created = self.store.create_container(name)

        # Object first, pointer second: last-version never names an object
        # that was not stored yet.
        self.store.upload_object(name, version, data)
        self.store.set_object_metadata(name, version, {META_LAST_MODIFIED: now})

        updates = {META_LAST_MODIFIED: now, META_LAST_VERSION: version}
        if created:
            updates[META_CREATED] = now
        self.store.update_container_metadata(name, updates)

        logger.info(f"Uploaded package {name} version {version} ({len(data)} bytes)")

    def _record_access(self, name: str) -> None:
        # Only last-accessed is sent, so a concurrent upload's pointer survives
        try:
            self.store.update_container_metadata(name, {META_LAST_ACCESSED: self._timestamp()})
        except PackageNotFoundError:
            logger.warning(f"Package deleted while being read: {name}")

    # Writes

    def write(self, path: str, content: Content) -> None:
        address = decompose(remove_suffix(path))
        data = content if isinstance(content, (bytes, bytearray)) else content.read()
        self._store_version(address, bytes(data))

    def add_file(self, path: str, writer: Callable[[BinaryIO], None]) -> None:
        address = decompose(remove_suffix(path))
        buffer = io.BytesIO()
        writer(buffer)
        self._store_version(address, buffer.getvalue())

    # Reads

    def exists(self, path: str) -> bool:
        try:
            self._locate(path)
        except PackageNotFoundError:
            return False
        return True

    def directory_exists(self, path: str) -> bool:
        return self.store.container_exists(self._package_name(path))

    def open(self, path: str) -> BinaryIO:
        address = self._locate(path)
        data = self.store.download_object(address.name, address.version)
        self._record_access(address.name)
        return io.BytesIO(data)

    def get_full_path(self, path: str) -> str:
        return str(self._locate(path))

    def list(self, path: Optional[str] = None, filter: str = "*", recursive: bool = False) -> List[str]:
        """
        List the virtual directory.

        Without a path every package is listed as "<name>.nupkg". With a path
        the container's objects are enumerated, one entry per object, each
        labeled with the package name. ``filter`` and ``recursive`` are
        accepted for contract compatibility and not applied.
        """
        if not path or not path.strip():
            return [name + PACKAGE_SUFFIX for name in self.store.list_containers()]

        name = self._package_name(path)
        return [name for _ in self.store.list_objects(name)]

    def list_versions(self, path: str) -> List[str]:
        """Version keys stored for a package, in backend order."""
        return self.store.list_objects(self._package_name(path))

    def get_directories(self, path: str) -> List[str]:
        return []

    def get_created(self, path: str) -> datetime:
        properties = self.store.get_container_properties(self._package_name(path))
        if properties is None:
            return MIN_TIMESTAMP
        return self._parse_timestamp(properties, META_CREATED) or properties.created or MIN_TIMESTAMP

    def get_last_modified(self, path: str) -> datetime:
        properties = self.store.get_container_properties(self._package_name(path))
        if properties is None:
            return MIN_TIMESTAMP
        return (
            self._parse_timestamp(properties, META_LAST_MODIFIED)
            or properties.last_modified
            or MIN_TIMESTAMP
        )

    def get_last_accessed(self, path: str) -> datetime:
        properties = self.store.get_container_properties(self._package_name(path))
        if properties is None:
            return MIN_TIMESTAMP
        return self._parse_timestamp(properties, META_LAST_ACCESSED) or MIN_TIMESTAMP

    # Deletes

    def delete(self, path: str) -> None:
        """
        Delete one package version.

        The container is removed once it holds no objects. The last-version
        pointer is left alone, so deleting the latest version makes the
        package unreadable until the next upload.
        """
        name, version = decompose(remove_suffix(path))

        if not self.store.container_exists(name):
            logger.warning(f"Package not found for deletion: {name}")
            return

        if self.store.delete_object(name, version):
            logger.info(f"Deleted package {name} version {version}")
        else:
            logger.warning(f"Package version not found for deletion: {name} {version}")

        if not self.store.list_objects(name):
            self.store.delete_container(name)
            logger.info(f"Deleted empty package container: {name}")

    def delete_files(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.delete(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        name = self._package_name(path)
        if self.store.delete_container(name):
            logger.info(f"Deleted package with all versions: {name}")


__all__ = ["BlobFileSystem"]
