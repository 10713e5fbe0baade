"""Storage configuration read from the hosting environment.

The adapter needs one piece of configuration: where the packages live. It is
supplied either as a single connection string or as separate variables.

Environment Variables:
    NUGET_STORAGE_CONNECTION_STRING: "gs://<bucket>[/<namespace>]", takes precedence
    GCS_BUCKET_NAME: Bucket name if no connection string is set
    NUGET_STORAGE_PREFIX: Namespace prefix inside the bucket (optional)
    GCP_PROJECT_ID: GCP project ID (optional, application default otherwise)
    GOOGLE_APPLICATION_CREDENTIALS: Path to service account key (for local testing)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    CONNECTION_SCHEME,
    ENV_BUCKET_NAME,
    ENV_CONNECTION_STRING,
    ENV_PREFIX,
    ENV_PROJECT_ID,
)
from .storage import BlobFileSystem, GCSObjectStore

logger = logging.getLogger(__name__)


@dataclass
class StorageSettings:
    """Location of the package store.

    Attributes:
        bucket: GCS bucket holding every package container
        namespace: Key prefix containers are created under ("" for bucket root)
        project_id: GCP project ID, None to use application default credentials
    """
    bucket: str
    namespace: str = ""
    project_id: Optional[str] = None

    @classmethod
    def from_connection_string(cls, connection_string: str, project_id: Optional[str] = None) -> "StorageSettings":
        """Parse "gs://bucket/optional/namespace".

        Raises:
            ValueError: If the scheme is not gs:// or the bucket is missing
        """
        value = connection_string.strip()
        if not value.startswith(CONNECTION_SCHEME):
            raise ValueError(
                f"Unsupported storage connection string {connection_string!r}: "
                f"expected {CONNECTION_SCHEME}<bucket>[/<namespace>]"
            )

        bucket, _, namespace = value[len(CONNECTION_SCHEME):].partition("/")
        if not bucket:
            raise ValueError(f"Storage connection string has no bucket: {connection_string!r}")

        return cls(bucket=bucket, namespace=namespace.strip("/"), project_id=project_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StorageSettings":
        """Build settings from environment variables.

        Raises:
            ValueError: If neither a connection string nor a bucket name is set
        """
        environ = os.environ if environ is None else environ
        project_id = environ.get(ENV_PROJECT_ID) or None

        connection_string = environ.get(ENV_CONNECTION_STRING)
        if connection_string:
            return cls.from_connection_string(connection_string, project_id=project_id)

        bucket = environ.get(ENV_BUCKET_NAME)
        if not bucket:
            error_msg = (
                f"Storage location not configured: set {ENV_CONNECTION_STRING} "
                f"or {ENV_BUCKET_NAME}"
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

        return cls(
            bucket=bucket,
            namespace=environ.get(ENV_PREFIX, "").strip("/"),
            project_id=project_id,
        )

    @property
    def connection_string(self) -> str:
        if self.namespace:
            return f"{CONNECTION_SCHEME}{self.bucket}/{self.namespace}"
        return f"{CONNECTION_SCHEME}{self.bucket}"


def create_file_system(settings: Optional[StorageSettings] = None) -> BlobFileSystem:
    """Build the package file system for the configured GCS location.

    Args:
        settings: Storage location; read from the environment if omitted

    Returns:
        BlobFileSystem backed by GCSObjectStore
    """
    settings = settings or StorageSettings.from_env()
    logger.info(f"Using package storage at {settings.connection_string}")

    store = GCSObjectStore(
        bucket=settings.bucket,
        namespace=settings.namespace,
        project_id=settings.project_id,
    )
    return BlobFileSystem(store)
