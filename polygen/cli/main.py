"""Main CLI entry point for polygen."""

from pathlib import Path
from typing import Any

import click

from polygen.cli.display import (
    show_banner,
    show_error,
    show_run_result,
    show_success,
    show_summary,
    show_warning,
)
from polygen.core.config.loader import load_build_config
from polygen.core.config.settings import LoggingSettings, get_settings
from polygen.core.exceptions.errors import ConfigurationError, PolygenError
from polygen.core.logger.logger import bridge_engine_logging, setup_logging
from polygen.generation.engine import GenerationEngine, load_engine_factory
from polygen.generation.orchestrator import GenerationOrchestrator, RunOutcome
from polygen.generation.project import PomProjectLoader


def _missing_engine() -> GenerationEngine:
    raise ConfigurationError(
        "No generation engine configured. Use --engine or set POLYGEN_ENGINE.",
        config_key="engine",
    )


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """polygen - orchestrates multi-language source generation for a project."""
    if version:
        from polygen import __version__

        click.echo(f"polygen version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option(
    "--project",
    "-p",
    "project_path",
    default=".",
    type=click.Path(exists=True),
    help="Project directory or pom.xml",
)
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="YAML build configuration")
@click.option("--engine", "-e", envvar="POLYGEN_ENGINE", help="Engine factory as module:attribute")
@click.option("--skip/--no-skip", default=None, help="Skip generation")
@click.option(
    "--fail-on-validation-error/--no-fail-on-validation-error",
    default=None,
    help="Fail when the engine reports validation errors",
)
@click.option("--auto-fill/--no-auto-fill", default=None, help="Register project, modules and ancestors")
@click.option("--encoding", help="Source encoding")
@click.option("--classpath", "classpath", multiple=True, help="Classpath entry (repeatable)")
@click.option("--verbose", "-V", is_flag=True, help="Enable debug logging")
def generate(
    project_path: str,
    config_path: str | None,
    engine: str | None,
    skip: bool | None,
    fail_on_validation_error: bool | None,
    auto_fill: bool | None,
    encoding: str | None,
    classpath: tuple[str, ...],
    verbose: bool,
) -> None:
    """Run source generation for a project.

    Examples:
        polygen generate --project . --config polygen.yaml --engine mylang.engine:Engine
        polygen generate -p module-a --auto-fill --no-fail-on-validation-error
    """
    settings = get_settings()
    if verbose:
        setup_logging(LoggingSettings(level="DEBUG"))
    if settings.generator.engine_logger:
        bridge_engine_logging(settings.generator.engine_logger)

    show_banner()

    try:
        project = PomProjectLoader().load(Path(project_path))

        generator = settings.generator
        defaults: dict[str, Any] = {
            "skip": generator.skip,
            "fail_on_validation_error": generator.fail_on_validation_error,
            "auto_fill_resource_map": generator.auto_fill_resource_map,
        }
        if generator.encoding:
            defaults["encoding"] = generator.encoding
        if generator.compiler_source_level:
            defaults["compiler_source_level"] = generator.compiler_source_level
        if generator.compiler_target_level:
            defaults["compiler_target_level"] = generator.compiler_target_level

        config = load_build_config(
            Path(config_path) if config_path else None,
            defaults=defaults,
            skip=skip,
            fail_on_validation_error=fail_on_validation_error,
            auto_fill_resource_map=auto_fill,
            encoding=encoding,
            classpath_elements=list(classpath) or None,
        )

        show_summary(project, config)

        if not engine:
            if not config.skip:
                _missing_engine()
            engine_factory = _missing_engine
        else:
            engine_factory = load_engine_factory(engine)
        orchestrator = GenerationOrchestrator(
            project,
            engine_factory,
            temp_dir_name=generator.temp_dir_name,
        )
        result = orchestrator.run(config)
    except PolygenError as e:
        show_error("Generation Failed", str(e))
        raise SystemExit(1) from e

    show_run_result(result)

    if result.outcome == RunOutcome.SOFT_FAILED:
        show_warning("Generation Errors", "The engine reported errors. The build continues.")
    elif result.outcome == RunOutcome.SUCCEEDED:
        show_success("Success", "Sources generated successfully!")


if __name__ == "__main__":
    main()
