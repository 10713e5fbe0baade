"""Shared fixtures: an in-memory object store standing in for GCS."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from nuget_gcs_storage.errors import PackageNotFoundError
from nuget_gcs_storage.storage import BlobFileSystem, ContainerProperties, ObjectStoreClient


class InMemoryObjectStore(ObjectStoreClient):
    """Dict-backed ObjectStoreClient that records every call."""

    def __init__(self):
        self.containers: Dict[str, ContainerProperties] = {}
        self.objects: Dict[str, Dict[str, bytes]] = {}
        self.object_metadata: Dict[str, Dict[str, Dict[str, str]]] = {}
        self.calls: List[str] = []

    def container_exists(self, container: str) -> bool:
        self.calls.append("container_exists")
        return container in self.containers

    def create_container(self, container: str) -> bool:
        self.calls.append("create_container")
        if container in self.containers:
            return False
        now = datetime.now(timezone.utc)
        self.containers[container] = ContainerProperties(
            name=container, created=now, last_modified=now
        )
        self.objects[container] = {}
        self.object_metadata[container] = {}
        return True

    def delete_container(self, container: str) -> bool:
        self.calls.append("delete_container")
        if container not in self.containers:
            return False
        del self.containers[container]
        del self.objects[container]
        del self.object_metadata[container]
        return True

    def list_containers(self) -> List[str]:
        self.calls.append("list_containers")
        return sorted(self.containers)

    def get_container_properties(self, container: str) -> Optional[ContainerProperties]:
        self.calls.append("get_container_properties")
        properties = self.containers.get(container)
        if properties is None:
            return None
        return ContainerProperties(
            name=properties.name,
            metadata=dict(properties.metadata),
            created=properties.created,
            last_modified=properties.last_modified,
        )

    def update_container_metadata(self, container: str, updates: Dict[str, str]) -> None:
        self.calls.append("update_container_metadata")
        if container not in self.containers:
            raise PackageNotFoundError(f"Container not found: {container}")
        properties = self.containers[container]
        properties.metadata.update(updates)
        properties.last_modified = properties.last_modified + timedelta(microseconds=1)

    def object_exists(self, container: str, key: str) -> bool:
        self.calls.append("object_exists")
        return key in self.objects.get(container, {})

    def upload_object(self, container: str, key: str, data: bytes) -> None:
        self.calls.append("upload_object")
        self.objects.setdefault(container, {})[key] = bytes(data)
        self.object_metadata.setdefault(container, {})[key] = {}

    def download_object(self, container: str, key: str) -> bytes:
        self.calls.append("download_object")
        try:
            return self.objects[container][key]
        except KeyError:
            raise PackageNotFoundError(f"Object not found: {container}/{key}")

    def delete_object(self, container: str, key: str) -> bool:
        self.calls.append("delete_object")
        removed = self.objects.get(container, {}).pop(key, None)
        self.object_metadata.get(container, {}).pop(key, None)
        return removed is not None

    def list_objects(self, container: str) -> List[str]:
        self.calls.append("list_objects")
        return list(self.objects.get(container, {}))

    def set_object_metadata(self, container: str, key: str, metadata: Dict[str, str]) -> None:
        self.calls.append("set_object_metadata")
        if key not in self.objects.get(container, {}):
            raise PackageNotFoundError(f"Object not found: {container}/{key}")
        self.object_metadata[container][key].update(metadata)


class FakeClock:
    """Deterministic clock advancing one minute per reading."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


@pytest.fixture
def store():
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def fs(store, clock):
    """BlobFileSystem over the in-memory store with a deterministic clock."""
    return BlobFileSystem(store, clock=clock)
