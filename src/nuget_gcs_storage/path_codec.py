"""
Path codec for package addresses.

Maps the externally visible path string onto the (package name, package
version) pair used to address storage:

    "Acme.Widgets|1.0.0.nupkg"  ->  ("Acme.Widgets", "1.0.0")
    "Acme.Widgets"              ->  bare container reference

The separator is reserved: it must never appear in a package name or version.
Upstream identifier validation is responsible for that.
"""

from typing import NamedTuple

from .constants import PACKAGE_SUFFIX, SEPARATOR
from .errors import MalformedPathError


class PackagePath(NamedTuple):
    """Decomposed composite path."""

    name: str
    version: str

    def __str__(self) -> str:
        return compose(self.name, self.version)


def remove_suffix(path: str) -> str:
    """Strip the package file suffix if present. Idempotent."""
    if path.endswith(PACKAGE_SUFFIX):
        return path[: -len(PACKAGE_SUFFIX)]
    return path


def is_composite(path: str) -> bool:
    """True if the path addresses a specific version rather than a container."""
    return SEPARATOR in path


def compose(name: str, version: str) -> str:
    return f"{name}{SEPARATOR}{version}"


def decompose(path: str) -> PackagePath:
    """
    Split a composite path into package name and version.

    Empty segments are discarded, so "name||1.0" and "|name|1.0" both decode
    to ("name", "1.0"). Segments beyond the second are ignored.

    Raises:
        MalformedPathError: If fewer than two non-empty segments remain
    """
    segments = [segment for segment in path.split(SEPARATOR) if segment]
    if len(segments) < 2:
        raise MalformedPathError(path)
    return PackagePath(segments[0], segments[1])
