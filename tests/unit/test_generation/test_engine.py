"""Tests for the engine interfaces and language resolution."""

import json
import os.path

import pytest

from polygen.core.exceptions.errors import ConfigurationError
from polygen.generation.engine import (
    GenerationEngine,
    ImportingLanguageAccessFactory,
    load_engine_factory,
    load_object,
)
from polygen.models.build import ClusteringConfig, Language


class TestLoadObject:
    """Tests for load_object."""

    def test_colon_path(self) -> None:
        """Test module:attribute paths."""
        assert load_object("json:dumps") is json.dumps

    def test_dotted_path(self) -> None:
        """Test dotted paths."""
        assert load_object("os.path.join") is os.path.join

    def test_nested_attribute(self) -> None:
        """Test attribute chains after the colon."""
        assert load_object("json:JSONDecoder.decode") is json.JSONDecoder.decode

    @pytest.mark.parametrize("path", ["nomodule", ":attr", "json:"])
    def test_invalid_path(self, path: str) -> None:
        """Test malformed import paths."""
        with pytest.raises(ConfigurationError, match="Invalid import path"):
            load_object(path)

    def test_missing_attribute(self) -> None:
        """Test a module without the requested attribute."""
        with pytest.raises(ConfigurationError, match="Cannot load"):
            load_object("json:does_not_exist")


class TestImportingLanguageAccessFactory:
    """Tests for ImportingLanguageAccessFactory."""

    def test_keys_by_identifier(self) -> None:
        """Test the table keys."""
        factory = ImportingLanguageAccessFactory()

        table = factory.create(
            [
                Language(setup="json:JSONDecoder", name="json", settings={"ext": "json"}),
                Language(setup="json:JSONEncoder", java_support=True),
            ]
        )

        assert list(table) == ["json", "JSONEncoder"]
        assert table["json"].setup is json.JSONDecoder
        assert table["json"].settings == {"ext": "json"}
        assert table["JSONEncoder"].java_support is True

    def test_duplicate_identifier_last_wins(self) -> None:
        """Test that a repeated id keeps the later language."""
        factory = ImportingLanguageAccessFactory()

        table = factory.create(
            [
                Language(setup="json:JSONDecoder", name="dsl"),
                Language(setup="json:JSONEncoder", name="dsl"),
            ]
        )

        assert table["dsl"].setup is json.JSONEncoder

    def test_uses_given_loader(self) -> None:
        """Test that resolution goes through the loader."""
        calls: list[str] = []

        def loader(path: str) -> str:
            calls.append(path)
            return f"loaded:{path}"

        table = ImportingLanguageAccessFactory().create([Language(setup="a.b:Setup")], loader)

        assert calls == ["a.b:Setup"]
        assert table["Setup"].setup == "loaded:a.b:Setup"

    def test_settings_are_copied(self) -> None:
        """Test that the engine gets its own settings mapping."""
        language = Language(setup="json:dumps", settings={"k": "v"})

        table = ImportingLanguageAccessFactory().create([language])
        table["dumps"].settings["k"] = "changed"

        assert language.settings == {"k": "v"}


class TestEngineFactory:
    """Tests for engine factory loading."""

    def test_load_engine_factory(self) -> None:
        """Test loading a callable factory."""
        assert load_engine_factory("json:JSONDecoder") is json.JSONDecoder

    def test_non_callable_factory(self) -> None:
        """Test rejection of non-callable targets."""
        with pytest.raises(ConfigurationError, match="not callable"):
            load_engine_factory("os:sep")

    def test_protocol_runtime_check(self) -> None:
        """Test that engine doubles satisfy the protocol."""

        class Engine:
            def configure(self, settings) -> None:
                pass

            def launch(self) -> bool:
                return True

        assert isinstance(Engine(), GenerationEngine)
        assert not isinstance(object(), GenerationEngine)


class TestClusteringConversion:
    """Tests for ClusteringConfig.to_engine_config."""

    def test_fields_carried_over(self) -> None:
        """Test the conversion keeps every value."""
        engine_config = ClusteringConfig(use_clustering=False, minimum_free_memory=64, page_size=7).to_engine_config()

        assert engine_config.enabled is False
        assert engine_config.minimum_free_memory == 64
        assert engine_config.page_size == 7
