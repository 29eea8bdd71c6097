"""Orchestration of multi-language source generation.

This module provides:
- Classpath normalization
- Resource map resolution (auto-discovery and explicit mappings)
- Serialization of concurrent generation runs
- Engine configuration, launch and failure policy
"""

from polygen.generation.classpath import ClasspathResolver
from polygen.generation.engine import (
    CompilerConfiguration,
    EngineClusteringConfig,
    EngineFactory,
    EngineSettings,
    GenerationEngine,
    ImportingLanguageAccessFactory,
    LanguageAccess,
    LanguageAccessFactory,
    load_engine_factory,
    load_object,
)
from polygen.generation.guard import BuildInvocationGuard, get_default_guard
from polygen.generation.orchestrator import GenerationOrchestrator, RunOutcome, RunResult
from polygen.generation.project import PomProjectLoader, ProjectModel
from polygen.generation.resource_map import (
    ResourceMap,
    ResourceMapBuilder,
    get_resource_map,
    to_location_uri,
)

__all__ = [
    "ClasspathResolver",
    "CompilerConfiguration",
    "EngineClusteringConfig",
    "EngineFactory",
    "EngineSettings",
    "GenerationEngine",
    "ImportingLanguageAccessFactory",
    "LanguageAccess",
    "LanguageAccessFactory",
    "load_engine_factory",
    "load_object",
    "BuildInvocationGuard",
    "get_default_guard",
    "GenerationOrchestrator",
    "RunOutcome",
    "RunResult",
    "PomProjectLoader",
    "ProjectModel",
    "ResourceMap",
    "ResourceMapBuilder",
    "get_resource_map",
    "to_location_uri",
]
