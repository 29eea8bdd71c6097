"""Generation orchestrator.

Coordinates one generation run: applies configuration defaults, fills the
resource map, resolves languages and the classpath, configures the external
engine, launches it once and maps its result to an outcome.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from polygen.core.exceptions.errors import ConfigurationError, GenerationFailedError
from polygen.core.logger.logger import get_logger
from polygen.generation.classpath import ClasspathResolver
from polygen.generation.engine import (
    CompilerConfiguration,
    EngineFactory,
    EngineSettings,
    ImportingLanguageAccessFactory,
    LanguageAccessFactory,
)
from polygen.generation.guard import BuildInvocationGuard, get_default_guard
from polygen.generation.project import ProjectModel
from polygen.generation.resource_map import ResourceMap, ResourceMapBuilder, get_resource_map
from polygen.models.build import BuildConfig

logger = get_logger(__name__)

DEFAULT_TEMP_DIR_NAME = "polygen-temp"
DEFAULT_COMPILER_LEVEL = "1.6"


class RunOutcome(str, Enum):
    """Terminal state of a generation run."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    SOFT_FAILED = "soft_failed"


@dataclass
class RunResult:
    """Result of a generation run.

    Fatal failures are raised, so a RunResult always describes a run that
    the build may continue after.

    Attributes:
        outcome: Terminal state of the run.
        classpath: Resolved classpath handed to the engine.
        languages: Language ids in the access table.
        registrations: Resource map entries written by this run, in order.
        temp_dir: Temp directory handed to the engine.
        duration_seconds: Time spent inside the guarded section.
    """

    outcome: RunOutcome
    classpath: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    registrations: list[tuple[str, str]] = field(default_factory=list)
    temp_dir: str | None = None
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """Return True unless the engine reported a failure."""
        return self.outcome != RunOutcome.SOFT_FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "outcome": self.outcome.value,
            "classpath": self.classpath,
            "languages": self.languages,
            "registrations": [{"name": name, "uri": uri} for name, uri in self.registrations],
            "temp_dir": self.temp_dir,
            "duration_seconds": self.duration_seconds,
        }


class GenerationOrchestrator:
    """Runs the generation step for a project.

    The guard and the resource map default to the process-wide instances so
    that every orchestrator in the process serializes on the same section and
    accumulates into the same map. Tests inject their own.
    """

    def __init__(
        self,
        project: ProjectModel,
        engine_factory: EngineFactory,
        language_access_factory: LanguageAccessFactory | None = None,
        resource_map: ResourceMap | None = None,
        guard: BuildInvocationGuard | None = None,
        classpath_resolver: ClasspathResolver | None = None,
        temp_dir_name: str = DEFAULT_TEMP_DIR_NAME,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            project: Project being built.
            engine_factory: Creates the generation engine for a run.
            language_access_factory: Resolves configured languages.
            resource_map: Store for project locations.
            guard: Critical section shared by concurrent runs.
            classpath_resolver: Classpath normalizer.
            temp_dir_name: Temp directory name under the build directory,
                used when the configuration sets none.
        """
        self.project = project
        self.engine_factory = engine_factory
        self.language_access_factory = language_access_factory or ImportingLanguageAccessFactory()
        self.resource_map = resource_map if resource_map is not None else get_resource_map()
        self.guard = guard or get_default_guard()
        self.classpath_resolver = classpath_resolver or ClasspathResolver()
        self.temp_dir_name = temp_dir_name

    def run(self, config: BuildConfig) -> RunResult:
        """Execute a generation run.

        Args:
            config: Build configuration.

        Returns:
            RunResult describing a skipped, successful or soft-failed run.

        Raises:
            ConfigurationError: If the temp directory cannot be created or a
                language cannot be resolved.
            GenerationFailedError: If the engine fails and the configuration
                asks to fail on validation errors.
        """
        if config.skip:
            logger.info("skipped.")
            return RunResult(outcome=RunOutcome.SKIPPED)

        with self.guard.exclusive():
            return self._run_exclusive(config)

    def _run_exclusive(self, config: BuildConfig) -> RunResult:
        start_time = time.time()

        config = self.configure_defaults(config)

        builder = ResourceMapBuilder(self.resource_map, auto_fill=config.auto_fill_resource_map)
        builder.auto_register(self.project)
        builder.apply_overrides(config.project_mappings)

        languages = self.language_access_factory.create(config.languages, self.project.loader)
        classpath = self.resolve_classpath(config)
        temp_dir = self.create_temp_dir(config.tmp_class_directory)

        debug_enabled = logger.isEnabledFor(logging.DEBUG)
        settings = EngineSettings(
            base_dir=str(self.project.basedir),
            languages=languages,
            encoding=config.encoding,
            classpath=classpath,
            classpath_lookup_filter=config.classpath_lookup_filter,
            source_dirs=list(config.source_roots or []),
            java_source_dirs=list(config.java_source_roots or []),
            fail_on_validation_error=config.fail_on_validation_error,
            temp_dir=str(temp_dir),
            debug_log=debug_enabled,
            clustering=config.clustering_config.to_engine_config() if config.clustering_config else None,
            compiler=CompilerConfiguration(
                source_level=config.compiler_source_level,
                target_level=config.compiler_target_level,
                verbose=debug_enabled,
            ),
        )

        engine = self.engine_factory()
        engine.configure(settings)
        self._log_state(settings)

        launched = engine.launch()

        result = RunResult(
            outcome=RunOutcome.SUCCEEDED if launched else RunOutcome.SOFT_FAILED,
            classpath=classpath,
            languages=list(languages),
            registrations=list(builder.registrations),
            temp_dir=str(temp_dir),
            duration_seconds=time.time() - start_time,
        )

        if launched:
            logger.info(f"Generation completed in {result.duration_seconds:.1f}s")
            return result

        if config.fail_on_validation_error:
            raise GenerationFailedError(
                "Execution failed due to a severe validation error.",
                language_ids=result.languages,
            )

        logger.warning("Generation reported errors. Continuing because fail_on_validation_error is disabled.")
        return result

    def configure_defaults(self, config: BuildConfig) -> BuildConfig:
        """Fill unset configuration fields from the project.

        Source roots and Java source roots default independently to the
        project's compile source roots. A set list replaces the default.
        Compiler levels fall back to the project properties, then to
        DEFAULT_COMPILER_LEVEL.

        Args:
            config: Build configuration.

        Returns:
            A copy of the configuration with defaults applied.
        """
        updates: dict[str, Any] = {}
        if config.source_roots is None:
            updates["source_roots"] = list(self.project.compile_source_roots)
        if config.java_source_roots is None:
            updates["java_source_roots"] = list(self.project.compile_source_roots)
        if config.encoding is None and self.project.source_encoding:
            updates["encoding"] = self.project.source_encoding
        if config.compiler_source_level is None:
            updates["compiler_source_level"] = self.project.compiler_source_level or DEFAULT_COMPILER_LEVEL
        if config.compiler_target_level is None:
            updates["compiler_target_level"] = self.project.compiler_target_level or DEFAULT_COMPILER_LEVEL
        if config.classpath_elements is None:
            updates["classpath_elements"] = list(self.project.compile_classpath_elements)
        if config.tmp_class_directory is None:
            updates["tmp_class_directory"] = self.project.build_directory / self.temp_dir_name
        return config.model_copy(update=updates)

    def resolve_classpath(self, config: BuildConfig) -> list[str]:
        """Resolve the classpath for the engine."""
        return self.classpath_resolver.resolve(
            config.classpath_elements,
            str(self.project.output_directory),
            str(self.project.test_output_directory),
        )

    def create_temp_dir(self, tmp_class_directory: Path | None) -> Path:
        """Create the engine temp directory if it is absent.

        Args:
            tmp_class_directory: Directory to create.

        Returns:
            Absolute path of the directory.

        Raises:
            ConfigurationError: If the directory does not exist after the
                creation attempt.
        """
        if tmp_class_directory is None:
            tmp_class_directory = self.project.build_directory / self.temp_dir_name

        tmp_dir = Path(tmp_class_directory).absolute()
        try:
            tmp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            if not tmp_dir.is_dir():
                raise ConfigurationError(
                    f"Couldn't create directory '{tmp_class_directory}'.",
                    config_key="tmp_class_directory",
                    details={"error": str(e)},
                ) from e
        return tmp_dir

    def _log_state(self, settings: EngineSettings) -> None:
        logger.info(
            "Encoding: "
            + (settings.encoding if settings.encoding is not None else "not set. Encoding provider will be used.")
        )
        logger.info(f"Compiler source level: {settings.compiler.source_level}")
        logger.info(f"Compiler target level: {settings.compiler.target_level}")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Source dirs: {', '.join(settings.source_dirs)}")
            logger.debug(f"Java source dirs: {', '.join(settings.java_source_dirs)}")
            logger.debug(f"Classpath entries: {', '.join(settings.classpath)}")
