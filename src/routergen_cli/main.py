"""routergen CLI entry point."""

import logging
from pathlib import Path
from typing import Any

import typer

from routergen import __version__
from routergen.artifacts import load_artifacts
from routergen.config import (
    apply_overrides,
    get_generation_settings,
    get_log_level,
    get_paths,
    load_config,
    load_router_definitions,
)
from routergen.errors import RouterGenerationError
from routergen.generator import RouterDocument, generate_router, generate_routers
from routergen.variant import create_variant, get_available_variants
from routergen.writer import write_router

from .console import console, create_table, print_error, print_success, print_warning

app = typer.Typer(
    name="routergen",
    help="routergen - generate selector dispatch routers for modular contracts",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"routergen version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """routergen - generate selector dispatch routers for modular contracts."""
    ctx.obj = {"verbose": verbose}


def _load_settings(
    ctx: typer.Context,
    config_path: Path | None,
    overrides: dict[str, Any],
) -> dict[str, Any]:
    """Load configuration, apply CLI overrides and configure logging."""
    config = load_config(str(config_path) if config_path else None)
    config = apply_overrides(config, overrides)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_log_level(config),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return config


def _emit(document: RouterDocument, output_dir: Path, stdout: bool) -> None:
    if stdout:
        typer.echo(document.text)
        return
    path = write_router(document, output_dir)
    print_success(f"Generated router file: {path}")


@app.command(name="generate")
def generate_command(
    ctx: typer.Context,
    modules: list[str] = typer.Argument(
        ...,
        help="Module names (Contract or path/File.sol:Contract)",
    ),
    name: str = typer.Option(..., "--name", "-n", help="Router name"),
    variant: str | None = typer.Option(
        None,
        "--variant",
        help="Router variant: deterministic, immutable or dynamic",
    ),
    artifacts: Path | None = typer.Option(
        None, "--artifacts", "-a", help="Compiler output directory"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Directory for the generated router"
    ),
    deployer: str | None = typer.Option(None, "--deployer", help="CREATE2 deployer address"),
    salt: str | None = typer.Option(None, "--salt", help="CREATE2 salt (32 bytes hex)"),
    max_leaf_width: int | None = typer.Option(
        None, "--max-leaf-width", min=1, help="Maximum selectors per switch statement"
    ),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the router instead of writing it"),
) -> None:
    """Generate one router from already compiled modules."""
    generation = {
        "variant": variant,
        "deployer": deployer,
        "salt": salt,
        "max_leaf_width": max_leaf_width,
    }
    paths = {"artifacts": artifacts, "output": output}
    overrides = {
        "generation": {k: v for k, v in generation.items() if v is not None},
        "paths": {k: str(v) for k, v in paths.items() if v is not None},
    }

    try:
        config = _load_settings(ctx, config_path, overrides)
        settings = get_generation_settings(config)
        artifacts_dir, output_dir = get_paths(config)

        compiled = load_artifacts(artifacts_dir, modules)
        document = generate_router(name, modules, compiled, settings=settings)
        _emit(document, output_dir, stdout)
    except RouterGenerationError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command(name="batch")
def batch_command(
    ctx: typer.Context,
    definitions: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Router definitions file (.toml, .yaml or .yml)",
    ),
    artifacts: Path | None = typer.Option(
        None, "--artifacts", "-a", help="Compiler output directory"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Directory for the generated routers"
    ),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Generate every router listed in a definitions file."""
    paths = {"artifacts": artifacts, "output": output}
    overrides = {"paths": {k: str(v) for k, v in paths.items() if v is not None}}

    try:
        config = _load_settings(ctx, config_path, overrides)
        settings = get_generation_settings(config)
        artifacts_dir, output_dir = get_paths(config)

        router_definitions = load_router_definitions(definitions)
        module_names = [m for d in router_definitions for m in d.modules]
        compiled = load_artifacts(artifacts_dir, module_names)
        result = generate_routers(router_definitions, compiled, settings=settings)
    except RouterGenerationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    for document in result.documents:
        _emit(document, output_dir, stdout=False)

    for router_name, error in result.failures.items():
        print_error(f"{router_name}: {error}")

    if not result.ok:
        print_warning(
            f"{len(result.failures)} of {len(router_definitions)} routers failed to generate"
        )
        raise typer.Exit(1)


@app.command(name="variants")
def variants_command() -> None:
    """List the available router variants."""
    table = create_table("Router variants")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Needs deployer/salt")

    for variant_name in get_available_variants():
        variant = create_variant(variant_name)
        table.add_row(
            variant.name,
            variant.description,
            "yes" if variant.requires_deployment else "no",
        )

    console.print(table)


if __name__ == "__main__":
    app()
