"""Project model consumed by the orchestrator, and a pom.xml loader for it."""

import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from polygen.core.exceptions.errors import ProjectLoadError
from polygen.core.logger.logger import get_logger
from polygen.generation.engine import load_object

logger = get_logger(__name__)

PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass
class ProjectModel:
    """A project in a (possibly multi-module) build.

    Attributes:
        basedir: Project base directory.
        build_directory: Root of the build output.
        output_directory: Main classes output directory.
        test_output_directory: Test classes output directory.
        compile_source_roots: Absolute compile source roots.
        compile_classpath_elements: Compile classpath of the project.
        modules: Declared child modules, relative to basedir.
        parent: Parent project, if any.
        source_encoding: Project-level source encoding.
        compiler_source_level: Project-level Java compiler source level.
        compiler_target_level: Project-level Java compiler target level.
        properties: Project properties, inherited from the parent.
        loader: Resolves import paths of language setups.
    """

    basedir: Path
    build_directory: Path
    output_directory: Path
    test_output_directory: Path
    compile_source_roots: list[str] = field(default_factory=list)
    compile_classpath_elements: list[str] = field(default_factory=list)
    modules: list[str] = field(default_factory=list)
    parent: "ProjectModel | None" = None
    source_encoding: str | None = None
    compiler_source_level: str | None = None
    compiler_target_level: str | None = None
    properties: dict[str, str] = field(default_factory=dict)
    loader: Callable[[str], Any] = load_object

    @property
    def name(self) -> str:
        """Return the directory name of the project."""
        return Path(os.path.abspath(self.basedir)).name

    @classmethod
    def at(cls, basedir: Path | str, **kwargs: Any) -> "ProjectModel":
        """Create a project with the conventional directory layout.

        Args:
            basedir: Project base directory.
            **kwargs: Field overrides.

        Returns:
            ProjectModel instance.
        """
        base = Path(os.path.abspath(basedir))
        build_directory = kwargs.pop("build_directory", base / "target")
        output_directory = kwargs.pop("output_directory", build_directory / "classes")
        kwargs.setdefault("test_output_directory", build_directory / "test-classes")
        kwargs.setdefault("compile_source_roots", [str(base / "src" / "main" / "java")])
        kwargs.setdefault("compile_classpath_elements", [str(output_directory)])
        return cls(
            basedir=base,
            build_directory=build_directory,
            output_directory=output_directory,
            **kwargs,
        )


class PomProjectLoader:
    """Loads ProjectModel instances from Maven pom.xml files.

    Only the parts the orchestrator needs are read: modules, build
    directories, the source directory, properties and the parent reference.
    """

    def __init__(self, loader: Callable[[str], Any] = load_object) -> None:
        """Initialize the loader.

        Args:
            loader: Setup loader attached to every loaded project.
        """
        self.loader = loader
        self.namespace = ""
        self._loading: set[Path] = set()
        self._cache: dict[Path, ProjectModel] = {}

    def load(self, path: Path | str) -> ProjectModel:
        """Load a project and, recursively, its parents.

        Args:
            path: A pom.xml file or a directory containing one.

        Returns:
            The loaded project.

        Raises:
            ProjectLoadError: If the descriptor is missing or malformed.
        """
        pom_file = Path(os.path.abspath(path))
        if pom_file.is_dir():
            pom_file = pom_file / "pom.xml"

        if pom_file in self._cache:
            return self._cache[pom_file]

        if not pom_file.is_file():
            raise ProjectLoadError(f"Project descriptor not found: {pom_file}", project_path=str(pom_file))

        self._loading.add(pom_file)
        try:
            project = self._load_pom(pom_file)
        finally:
            self._loading.discard(pom_file)

        self._cache[pom_file] = project
        return project

    def _load_pom(self, pom_file: Path) -> ProjectModel:
        try:
            root = ET.parse(pom_file).getroot()
        except (ET.ParseError, OSError) as e:
            raise ProjectLoadError(
                f"Failed to parse {pom_file}",
                project_path=str(pom_file),
                details={"error": str(e)},
            ) from e

        self.namespace = self._extract_namespace(root)
        basedir = pom_file.parent

        parent = self._load_parent(root, basedir)
        # the parent load resets the namespace
        self.namespace = self._extract_namespace(root)

        properties = dict(parent.properties) if parent else {}
        properties.update(self._read_properties(root))
        properties["project.basedir"] = str(basedir)
        properties["basedir"] = str(basedir)

        build = self._get_element(root, "build")
        build_directory = self._resolve(basedir, self._text(build, "directory") or "target", properties)
        properties["project.build.directory"] = str(build_directory)

        output_directory = self._resolve(
            basedir, self._text(build, "outputDirectory") or "${project.build.directory}/classes", properties
        )
        test_output_directory = self._resolve(
            basedir,
            self._text(build, "testOutputDirectory") or "${project.build.directory}/test-classes",
            properties,
        )
        source_directory = self._resolve(basedir, self._text(build, "sourceDirectory") or "src/main/java", properties)

        logger.debug(f"Loaded project {basedir.name} from {pom_file}")
        return ProjectModel(
            basedir=basedir,
            build_directory=build_directory,
            output_directory=output_directory,
            test_output_directory=test_output_directory,
            compile_source_roots=[str(source_directory)],
            compile_classpath_elements=[str(output_directory)],
            modules=self._read_modules(root),
            parent=parent,
            source_encoding=properties.get("project.build.sourceEncoding"),
            compiler_source_level=properties.get("maven.compiler.source"),
            compiler_target_level=properties.get("maven.compiler.target"),
            properties=properties,
            loader=self.loader,
        )

    def _load_parent(self, root: ET.Element, basedir: Path) -> ProjectModel | None:
        """Load the parent project referenced by ``<parent>``, if present locally."""
        parent_elem = self._get_element(root, "parent")
        if parent_elem is None:
            return None

        relative_elem = self._get_element(parent_elem, "relativePath")
        if relative_elem is None:
            relative_path = "../pom.xml"
        else:
            relative_path = (relative_elem.text or "").strip()
            if not relative_path:
                # an empty <relativePath/> disables the local lookup
                return None

        parent_pom = Path(os.path.abspath(basedir / relative_path))
        if parent_pom.is_dir():
            parent_pom = parent_pom / "pom.xml"

        if parent_pom in self._loading:
            logger.warning(f"Parent cycle detected at {parent_pom}, ignoring parent")
            return None
        if not parent_pom.is_file():
            logger.debug(f"Parent descriptor {parent_pom} not found, treating project as root")
            return None

        return self.load(parent_pom)

    def _read_modules(self, root: ET.Element) -> list[str]:
        modules_elem = self._get_element(root, "modules")
        if modules_elem is None:
            return []

        modules: list[str] = []
        for child in modules_elem:
            if self._get_local_tag(child.tag) == "module":
                module_name = (child.text or "").strip()
                if module_name:
                    modules.append(module_name)
        return modules

    def _read_properties(self, root: ET.Element) -> dict[str, str]:
        props_elem = self._get_element(root, "properties")
        if props_elem is None:
            return {}
        return {
            self._get_local_tag(child.tag): (child.text or "").strip()
            for child in props_elem
            if isinstance(child.tag, str)
        }

    def _resolve(self, basedir: Path, value: str, properties: dict[str, str]) -> Path:
        """Interpolate ``${...}`` references and resolve against basedir."""
        interpolated = PROPERTY_PATTERN.sub(lambda m: properties.get(m.group(1), m.group(0)), value)
        return Path(os.path.abspath(basedir / interpolated))

    def _text(self, parent: ET.Element | None, tag: str) -> str | None:
        if parent is None:
            return None
        elem = self._get_element(parent, tag)
        if elem is None or not elem.text:
            return None
        return elem.text.strip() or None

    def _extract_namespace(self, root: ET.Element) -> str:
        """Extract XML namespace from root element.

        Args:
            root: Root XML element.

        Returns:
            Namespace string (with trailing brace) or empty string.
        """
        if "}" in root.tag:
            return root.tag.split("}")[0] + "}"
        return ""

    def _get_element(self, parent: ET.Element, tag: str) -> ET.Element | None:
        """Get child element, handling namespace."""
        elem = parent.find(f"{self.namespace}{tag}")
        if elem is not None:
            return elem
        return parent.find(tag)

    def _get_local_tag(self, tag: str) -> str:
        if not isinstance(tag, str):
            return ""
        return tag.split("}")[-1]
