"""
Google Cloud Storage backend for the package storage adapter.

GCS has a single flat namespace per bucket, so containers are emulated with
key prefixes inside one configured bucket:

    gs://nuget-packages/
    └── {namespace}
        ├── Acme.Widgets/          # container marker (holds container metadata)
        ├── Acme.Widgets/1.0.0     # version object
        └── Acme.Widgets/1.1.0

A container exists iff its zero-byte marker object exists. The marker's custom
metadata is the container metadata; its time_created / updated fields are the
backend-tracked container timestamps.

Usage:
    store = GCSObjectStore(bucket="nuget-packages", namespace="feeds/main/")
    store.create_container("Acme.Widgets")
    store.upload_object("Acme.Widgets", "1.0.0", content)

Security:
- Workload Identity (preferred): No credentials in code
- Service Account: Via GOOGLE_APPLICATION_CREDENTIALS env var
"""

import functools
import logging
from typing import Callable, List, Optional

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from ..errors import BackendUnavailableError, PackageNotFoundError
from .base_adapter import ContainerProperties, Metadata, ObjectStoreClient

logger = logging.getLogger(__name__)

PACKAGE_CONTENT_TYPE = "application/octet-stream"


def _backend_errors(operation: str) -> Callable:
    """Log GCS failures and re-raise them as BackendUnavailableError."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except GoogleCloudError as e:
                logger.error(f"GCS {operation} failed for {args}: {e}")
                raise BackendUnavailableError(f"{operation} failed: {e}") from e

        return wrapper

    return decorator


class GCSObjectStore(ObjectStoreClient):
    """
    Object store on a single GCS bucket with prefix-emulated containers.

    The bucket must already exist; it is never created here to avoid
    requiring bucket-admin permissions.
    """

    def __init__(
        self,
        bucket: str,
        namespace: str = "",
        project_id: Optional[str] = None,
    ):
        """
        Initialize the GCS object store.

        Args:
            bucket: GCS bucket name (e.g., "nuget-packages")
            namespace: Key prefix every container lives under (optional)
            project_id: GCP project ID (optional, application default otherwise)

        Raises:
            BackendUnavailableError: If the bucket is not accessible
        """
        self.bucket_name = bucket
        self.namespace = namespace.strip("/") + "/" if namespace.strip("/") else ""

        try:
            if project_id:
                self.client = storage.Client(project=project_id)
            else:
                self.client = storage.Client()
            self.bucket = self.client.bucket(bucket)

            if not self.bucket.exists():
                raise BackendUnavailableError(
                    f"Bucket '{bucket}' does not exist. "
                    f"Create it first with: gsutil mb gs://{bucket}"
                )
        except GoogleCloudError as e:
            logger.error(f"Failed to initialize GCS client: {e}")
            raise BackendUnavailableError(f"GCS initialization failed: {e}") from e

        logger.info(f"Initialized GCS object store: bucket={bucket}, namespace={self.namespace!r}")

    def _container_prefix(self, container: str) -> str:
        return f"{self.namespace}{container}/"

    def _object_name(self, container: str, key: str) -> str:
        return f"{self._container_prefix(container)}{key}"

    @_backend_errors("container exists")
    def container_exists(self, container: str) -> bool:
        return self.bucket.blob(self._container_prefix(container)).exists()

    @_backend_errors("create container")
    def create_container(self, container: str) -> bool:
        marker = self.bucket.blob(self._container_prefix(container))
        if marker.exists():
            return False
        marker.upload_from_string(b"", content_type=PACKAGE_CONTENT_TYPE)
        logger.info(f"Created container: {container}")
        return True

    @_backend_errors("delete container")
    def delete_container(self, container: str) -> bool:
        prefix = self._container_prefix(container)
        blobs = list(self.client.list_blobs(self.bucket_name, prefix=prefix))
        if not blobs:
            return False

        def vanished(blob):
            logger.warning(f"Object vanished during container delete: {blob.name}")

        # Marker goes last so a partial failure leaves the container visible
        objects = [blob for blob in blobs if blob.name != prefix]
        markers = [blob for blob in blobs if blob.name == prefix]
        if objects:
            self.bucket.delete_blobs(objects, on_error=vanished)
        if markers:
            self.bucket.delete_blobs(markers, on_error=vanished)

        logger.info(f"Deleted container: {container} ({len(blobs)} objects)")
        return True

    @_backend_errors("list containers")
    def list_containers(self) -> List[str]:
        iterator = self.client.list_blobs(
            self.bucket_name, prefix=self.namespace, delimiter="/"
        )
        # Prefixes are only populated once the pages have been consumed
        for _ in iterator:
            pass

        names = []
        for prefix in sorted(iterator.prefixes):
            name = prefix[len(self.namespace):].rstrip("/")
            if name:
                names.append(name)
        return names

    @_backend_errors("get container properties")
    def get_container_properties(self, container: str) -> Optional[ContainerProperties]:
        marker = self.bucket.get_blob(self._container_prefix(container))
        if marker is None:
            return None

        return ContainerProperties(
            name=container,
            metadata=dict(marker.metadata or {}),
            created=marker.time_created,
            last_modified=marker.updated,
        )

    @_backend_errors("update container metadata")
    def update_container_metadata(self, container: str, updates: Metadata) -> None:
        # PATCH merges custom metadata keys server-side
        marker = self.bucket.blob(self._container_prefix(container))
        marker.metadata = dict(updates)
        try:
            marker.patch()
        except NotFound:
            raise PackageNotFoundError(f"Container not found: {container}")

    @_backend_errors("object exists")
    def object_exists(self, container: str, key: str) -> bool:
        return self.bucket.blob(self._object_name(container, key)).exists()

    @_backend_errors("upload object")
    def upload_object(self, container: str, key: str, data: bytes) -> None:
        blob = self.bucket.blob(self._object_name(container, key))
        blob.upload_from_string(data, content_type=PACKAGE_CONTENT_TYPE)

    @_backend_errors("download object")
    def download_object(self, container: str, key: str) -> bytes:
        blob = self.bucket.blob(self._object_name(container, key))
        try:
            return blob.download_as_bytes()
        except NotFound:
            raise PackageNotFoundError(f"Object not found: {container}/{key}")

    @_backend_errors("delete object")
    def delete_object(self, container: str, key: str) -> bool:
        blob = self.bucket.blob(self._object_name(container, key))
        try:
            blob.delete()
        except NotFound:
            return False
        return True

    @_backend_errors("list objects")
    def list_objects(self, container: str) -> List[str]:
        prefix = self._container_prefix(container)
        keys = []
        for blob in self.client.list_blobs(self.bucket_name, prefix=prefix):
            key = blob.name[len(prefix):]
            if key:
                keys.append(key)
        return keys

    @_backend_errors("set object metadata")
    def set_object_metadata(self, container: str, key: str, metadata: Metadata) -> None:
        blob = self.bucket.blob(self._object_name(container, key))
        blob.metadata = dict(metadata)
        try:
            blob.patch()
        except NotFound:
            raise PackageNotFoundError(f"Object not found: {container}/{key}")


__all__ = ["GCSObjectStore"]
