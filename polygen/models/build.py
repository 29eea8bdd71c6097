"""Build configuration models for generation runs."""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from polygen.generation.engine import EngineClusteringConfig


class Language(BaseModel):
    """One configured source language.

    Only ``setup`` and the identifier are meaningful here; ``settings`` is
    handed to the engine untouched.
    """

    setup: str = Field(..., min_length=1, description="Import path of the language setup (module:attribute)")
    name: str | None = Field(default=None, description="Language identifier")
    java_support: bool = Field(default=False, description="Whether the language generates Java")
    settings: dict[str, Any] = Field(default_factory=dict, description="Engine-specific settings")

    @property
    def identifier(self) -> str:
        """Return the language id, derived from the setup path when unnamed."""
        if self.name:
            return self.name
        return re.split(r"[.:]", self.setup)[-1]


class ProjectMapping(BaseModel):
    """Explicit project name to location mapping for the resource map."""

    project_name: str | None = Field(default=None, description="Logical project name")
    path: Path | None = Field(default=None, description="Project location")

    @property
    def is_complete(self) -> bool:
        """Return True when both name and path are present."""
        return bool(self.project_name) and self.path is not None


class ClusteringConfig(BaseModel):
    """Clustering configuration to bound engine memory use."""

    use_clustering: bool = Field(default=True, description="Process resources in clusters")
    minimum_free_memory: int = Field(default=512, ge=0, description="Free memory floor in MB")
    page_size: int = Field(default=20, ge=1, description="Resources per cluster")

    def to_engine_config(self) -> "EngineClusteringConfig":
        """Convert to the form the generation engine consumes."""
        from polygen.generation.engine import EngineClusteringConfig

        return EngineClusteringConfig(
            enabled=self.use_clustering,
            minimum_free_memory=self.minimum_free_memory,
            page_size=self.page_size,
        )


class BuildConfig(BaseModel):
    """Configuration of one generation run."""

    encoding: str | None = Field(default=None, description="Source encoding (project encoding when unset)")
    source_roots: list[str] | None = Field(
        default=None,
        description="Model source roots. Replaces the project's compile source roots when set",
    )
    java_source_roots: list[str] | None = Field(
        default=None,
        description="Java source roots. Replaces the project's compile source roots when set",
    )
    languages: list[Language] = Field(default_factory=list, description="Configured languages")
    classpath_elements: list[str] | None = Field(
        default=None,
        description="Raw compile classpath (project compile classpath when unset)",
    )
    classpath_lookup_filter: str | None = Field(
        default=None,
        description="Regex filtering the classpath during model lookup",
    )
    clustering_config: ClusteringConfig | None = Field(default=None, description="Clustering settings")
    project_mappings: list[ProjectMapping] = Field(default_factory=list, description="Explicit resource mappings")
    auto_fill_resource_map: bool = Field(
        default=False,
        description="Register the project, its modules and ancestors automatically",
    )
    skip: bool = Field(default=False, description="Skip generation")
    fail_on_validation_error: bool = Field(default=True, description="Fail on engine validation errors")
    compiler_source_level: str | None = Field(
        default=None,
        description="Java compiler source level (project maven.compiler.source when unset)",
    )
    compiler_target_level: str | None = Field(
        default=None,
        description="Java compiler target level (project maven.compiler.target when unset)",
    )
    tmp_class_directory: Path | None = Field(
        default=None,
        description="Temp directory for the engine (under the build directory when unset)",
    )

    @field_validator("classpath_lookup_filter")
    @classmethod
    def validate_lookup_filter(cls, v: str | None) -> str | None:
        """Validate that the lookup filter compiles."""
        if v is None:
            return None
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid classpath lookup filter: {e}") from e
        return v
