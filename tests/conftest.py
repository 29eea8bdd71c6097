"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from polygen.generation.engine import EngineSettings
from polygen.generation.guard import BuildInvocationGuard
from polygen.generation.project import ProjectModel
from polygen.generation.resource_map import ResourceMap


class RecordingEngine:
    """Generation engine double recording its configuration and launches."""

    def __init__(self, launch_result: bool = True) -> None:
        self.launch_result = launch_result
        self.settings: EngineSettings | None = None
        self.launch_count = 0

    def configure(self, settings: EngineSettings) -> None:
        self.settings = settings

    def launch(self) -> bool:
        self.launch_count += 1
        return self.launch_result


class EngineFactoryStub:
    """Engine factory remembering every engine it created."""

    def __init__(self, launch_result: bool = True) -> None:
        self.launch_result = launch_result
        self.engines: list[RecordingEngine] = []

    def __call__(self) -> RecordingEngine:
        engine = RecordingEngine(self.launch_result)
        self.engines.append(engine)
        return engine

    @property
    def last(self) -> RecordingEngine:
        return self.engines[-1]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def resource_map() -> ResourceMap:
    """Create an isolated resource map."""
    return ResourceMap()


@pytest.fixture
def guard() -> BuildInvocationGuard:
    """Create an isolated invocation guard."""
    return BuildInvocationGuard()


@pytest.fixture
def engine_factory() -> EngineFactoryStub:
    """Create an engine factory whose engines launch successfully."""
    return EngineFactoryStub()


@pytest.fixture
def failing_engine_factory() -> EngineFactoryStub:
    """Create an engine factory whose engines report a failed launch."""
    return EngineFactoryStub(launch_result=False)


@pytest.fixture
def make_project(temp_dir: Path) -> Callable[..., ProjectModel]:
    """Return a helper creating a project directory and its model.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Callable taking a path relative to temp_dir plus ProjectModel fields.
    """

    def _make(relative: str, **kwargs) -> ProjectModel:
        basedir = temp_dir / relative
        basedir.mkdir(parents=True, exist_ok=True)
        for module in kwargs.get("modules", []):
            (basedir / module).mkdir(parents=True, exist_ok=True)
        return ProjectModel.at(basedir, **kwargs)

    return _make


@pytest.fixture
def sample_project(make_project: Callable[..., ProjectModel]) -> ProjectModel:
    """Create a single-module project with an encoding."""
    return make_project("sample", source_encoding="UTF-8")
