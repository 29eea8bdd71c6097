"""Interfaces between the orchestrator and the external generation engine.

The engine itself (parsing, validation, generation and Java compilation) is
not part of polygen. This module defines what the orchestrator hands over to
it and how language setups are located.
"""

import importlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from polygen.core.exceptions.errors import ConfigurationError
from polygen.core.logger.logger import get_logger

if TYPE_CHECKING:
    from polygen.models.build import Language

logger = get_logger(__name__)


def load_object(path: str) -> Any:
    """Import an object from a ``module:attribute`` or dotted path.

    Args:
        path: Import path such as ``mylang.setup:MyLangSetup`` or
            ``mylang.setup.MyLangSetup``.

    Returns:
        The imported object.

    Raises:
        ConfigurationError: If the module or attribute cannot be found.
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")

    if not module_name or not attr_path:
        raise ConfigurationError(f"Invalid import path: '{path}'", config_key=path)

    try:
        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot load '{path}'",
            config_key=path,
            details={"error": str(e)},
        ) from e
    return obj


@dataclass
class LanguageAccess:
    """A language resolved for the engine.

    Attributes:
        identifier: Language id the access table is keyed by.
        setup: The loaded language setup object.
        java_support: Whether the language generates Java.
        settings: Engine-specific settings, passed through unchanged.
    """

    identifier: str
    setup: Any
    java_support: bool = False
    settings: dict[str, Any] = field(default_factory=dict)


class LanguageAccessFactory(Protocol):
    """Builds the language access table for a run."""

    def create(
        self,
        languages: Iterable["Language"],
        loader: Callable[[str], Any],
    ) -> dict[str, LanguageAccess]:
        """Resolve languages into a table keyed by language id."""
        ...


class ImportingLanguageAccessFactory:
    """Language access factory resolving setups through a loader."""

    def create(
        self,
        languages: Iterable["Language"],
        loader: Callable[[str], Any] = load_object,
    ) -> dict[str, LanguageAccess]:
        """Resolve each language setup and key it by language id.

        Args:
            languages: Configured languages.
            loader: Resolves a setup import path to an object.

        Returns:
            Mapping of language id to LanguageAccess. A later language
            replaces an earlier one with the same id.
        """
        table: dict[str, LanguageAccess] = {}
        for language in languages:
            identifier = language.identifier
            if identifier in table:
                logger.warning(f"Language '{identifier}' configured twice, using the last definition")
            table[identifier] = LanguageAccess(
                identifier=identifier,
                setup=loader(language.setup),
                java_support=language.java_support,
                settings=dict(language.settings),
            )
        return table


@dataclass
class EngineClusteringConfig:
    """Clustering settings in engine form."""

    enabled: bool = True
    minimum_free_memory: int = 512
    page_size: int = 20


@dataclass
class CompilerConfiguration:
    """Java compiler settings passed through to the engine."""

    source_level: str
    target_level: str
    verbose: bool = False


@dataclass
class EngineSettings:
    """Everything the engine needs for one launch."""

    base_dir: str
    languages: dict[str, LanguageAccess]
    encoding: str | None
    classpath: list[str]
    classpath_lookup_filter: str | None
    source_dirs: list[str]
    java_source_dirs: list[str]
    fail_on_validation_error: bool
    temp_dir: str
    compiler: CompilerConfiguration
    debug_log: bool = False
    clustering: EngineClusteringConfig | None = None


@runtime_checkable
class GenerationEngine(Protocol):
    """External engine performing parsing, validation and generation."""

    def configure(self, settings: EngineSettings) -> None:
        """Apply the settings for the next launch."""
        ...

    def launch(self) -> bool:
        """Run generation once. Returns True when the launch succeeded."""
        ...


EngineFactory = Callable[[], GenerationEngine]


def load_engine_factory(path: str) -> EngineFactory:
    """Load an engine factory from an import path.

    Args:
        path: ``module:attribute`` naming a zero-argument callable, typically
            the engine class.

    Returns:
        The factory.

    Raises:
        ConfigurationError: If the target cannot be loaded or is not callable.
    """
    factory = load_object(path)
    if not callable(factory):
        raise ConfigurationError(f"Engine factory '{path}' is not callable", config_key="engine")
    return factory
