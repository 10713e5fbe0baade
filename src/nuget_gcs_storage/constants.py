"""
Shared constants for the NuGet package storage adapter.
"""

from datetime import datetime, timezone

# Composite path syntax: "<packageName>|<packageVersion>"
SEPARATOR = "|"

# Suffix presented on package file names and stripped before addressing storage
PACKAGE_SUFFIX = ".nupkg"

# Container-level metadata keys
META_CREATED = "created"
META_LAST_MODIFIED = "last-modified"
META_LAST_VERSION = "last-version"
META_LAST_ACCESSED = "last-accessed"

# Returned by timestamp getters when a package was never uploaded
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)

# Environment variables read by config.StorageSettings
ENV_CONNECTION_STRING = "NUGET_STORAGE_CONNECTION_STRING"
ENV_BUCKET_NAME = "GCS_BUCKET_NAME"
ENV_PREFIX = "NUGET_STORAGE_PREFIX"
ENV_PROJECT_ID = "GCP_PROJECT_ID"
ENV_LOG_LEVEL = "NUGET_STORAGE_LOG_LEVEL"

CONNECTION_SCHEME = "gs://"
