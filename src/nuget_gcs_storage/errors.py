"""
Exception hierarchy for the package storage adapter.

Every error raised by this package derives from StorageError so callers can
catch storage failures in one place. Query-style operations (exists, list,
timestamp getters) report absence through their return value instead of
raising.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class MalformedPathError(StorageError, ValueError):
    """Composite path is missing its package name or version segment."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Malformed package path: {path!r}")


class PackageNotFoundError(StorageError):
    """Package container or version object does not exist."""

    pass


class StalePointerError(PackageNotFoundError):
    """
    The container's last-version pointer names an object that no longer exists.

    Raised when a version was deleted after being recorded as latest. Read
    operations treat this exactly like a missing package.
    """

    def __init__(self, package_name: str, version: str):
        self.package_name = package_name
        self.version = version
        super().__init__(
            f"Latest version {version!r} of package {package_name!r} no longer exists"
        )


class UnsupportedOperationError(StorageError, NotImplementedError):
    """Operation intentionally not implemented by the object-storage adapter."""

    pass


class BackendUnavailableError(StorageError):
    """Object-storage backend failed (connectivity, auth, quota)."""

    pass


class MetadataError(StorageError):
    """A metadata field holds a value that cannot be interpreted."""

    pass
