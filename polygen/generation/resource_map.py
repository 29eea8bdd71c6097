"""Resource map resolution for cross-project references.

The resource map maps a logical project name to the canonical location URI of
that project. The generation engine uses it to resolve references such as
``platform:/resource/<project>/model/foo.ecore`` against the file system.

Two sources populate it, in this order:

1. Auto-discovery walks a project, its declared modules and its ancestor
   chain. Entries are registered as project, then its modules, then the
   parent and its modules, and so on, so on a name collision the outermost
   ancestor registered last wins.
2. Explicit project mappings, applied afterwards and therefore always winning
   over auto-discovered entries of the same name.

The map itself lives for the whole process and is never cleared by a run:
successive runs accumulate entries, which is how the modules of a multi-module
build see each other.
"""

import os
import threading
from collections.abc import Iterable
from pathlib import Path

from polygen.core.logger.logger import get_logger
from polygen.generation.project import ProjectModel
from polygen.models.build import ProjectMapping

logger = get_logger(__name__)


def to_location_uri(path: Path | str) -> str:
    """Express a location as a canonical ``file:`` URI.

    The path is made absolute and normalized. Existing directories get a
    trailing slash.

    Args:
        path: File system location.

    Returns:
        URI string.
    """
    location = Path(os.path.abspath(path))
    uri = location.as_uri()
    if location.is_dir() and not uri.endswith("/"):
        uri += "/"
    return uri


class ResourceMap:
    """Process-wide store of project name to location URI.

    Writes replace earlier values for the same name. Nothing is ever removed.
    """

    def __init__(self) -> None:
        """Initialize an empty map."""
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, name: str, uri: str) -> str | None:
        """Store a mapping.

        Args:
            name: Logical project name.
            uri: Location URI.

        Returns:
            The value previously stored under the name, or None.
        """
        with self._lock:
            previous = self._entries.get(name)
            self._entries[name] = uri
            return previous

    def get(self, name: str) -> str | None:
        """Return the URI registered for a name, or None."""
        with self._lock:
            return self._entries.get(name)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of all entries in registration order."""
        with self._lock:
            return dict(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_resource_map = ResourceMap()


def get_resource_map() -> ResourceMap:
    """Get the process-wide resource map.

    Created once per process and never reset.

    Returns:
        ResourceMap singleton.
    """
    return _resource_map


class ResourceMapBuilder:
    """Populates a resource map from project structure and explicit mappings."""

    def __init__(self, resource_map: ResourceMap, auto_fill: bool = False) -> None:
        """Initialize the builder.

        Args:
            resource_map: Store to write into.
            auto_fill: Whether auto_register walks the project hierarchy.
        """
        self.resource_map = resource_map
        self.auto_fill = auto_fill
        self.registrations: list[tuple[str, str]] = []

    def register(self, path: Path | str, name: str | None = None) -> str | None:
        """Register one location.

        Args:
            path: Location to register.
            name: Logical name. Defaults to the last segment of the absolute
                location.

        Returns:
            The URI previously registered under the name, or None.
        """
        uri = to_location_uri(path)
        key = name if name is not None else Path(os.path.abspath(path)).name
        logger.info(f"Adding project '{key}' with path '{uri}' to resource map")
        self.registrations.append((key, uri))
        return self.resource_map.put(key, uri)

    def auto_register(self, project: ProjectModel) -> None:
        """Register a project, its modules and its ancestors.

        Does nothing unless auto-fill is enabled.

        Args:
            project: Project to start the walk from.
        """
        if not self.auto_fill:
            return

        for current in self.ancestor_chain(project):
            self.register(current.basedir)
            for module in current.modules:
                self.register(current.basedir / module)

    def apply_overrides(self, mappings: Iterable[ProjectMapping] | None) -> None:
        """Register explicit mappings in declaration order.

        Mappings missing a name or a path are skipped.

        Args:
            mappings: Explicit project mappings.
        """
        if not mappings:
            return

        for mapping in mappings:
            if not mapping.is_complete:
                logger.debug(f"Skipping incomplete project mapping: {mapping!r}")
                continue
            self.register(mapping.path, name=mapping.project_name)

    @staticmethod
    def ancestor_chain(project: ProjectModel) -> list[ProjectModel]:
        """Return the project followed by its parent, grandparent and so on.

        The walk stops at the first project without a parent, or at a base
        directory already seen.

        Args:
            project: Starting project.

        Returns:
            Projects from innermost to outermost.
        """
        chain: list[ProjectModel] = []
        seen: set[str] = set()
        current: ProjectModel | None = project
        while current is not None:
            key = os.path.abspath(current.basedir)
            if key in seen:
                logger.warning(f"Parent cycle detected at {key}, stopping ancestor walk")
                break
            seen.add(key)
            chain.append(current)
            current = current.parent
        return chain
