# cli.py
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click

from irpublish.config import DEFAULT_CONFIG, ReleaseConfig, load_config
from irpublish.dsl import targets as parse_targets
from irpublish.orchestrator import run_release
from irpublish.runner import ReleaseError
from irpublish.ui.console import Console, set_console, get_console


def resolve_config(config_arg: str | None) -> ReleaseConfig:
    """
    Load the release config from a file, or fall back to the defaults.

    Raises:
        SystemExit: If the config file is missing or invalid
    """
    console = get_console()

    if not config_arg:
        return DEFAULT_CONFIG

    config_path = Path(config_arg)
    if not config_path.exists():
        console.print_error(
            "Config file not found",
            f"Could not find config file: {config_arg}",
            suggestion="Create a config file or run with the built-in defaults:\n  irpublish run",
        )
        sys.exit(1)

    try:
        return load_config(config_path)
    except Exception as e:
        console.print_error(
            "Failed to load config",
            f"Could not load config from {config_path}",
            details=[str(e)],
        )
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """irpublish — generate IR for every target and publish it."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--config", "config_file", default=None, help="Python config file defining config() or CONFIG")
@click.option("--compiler", default=None, help="Compiler executable (default: julec)")
@click.option("--package", default=None, help="Package to compile (default: src/julec)")
@click.option("--dest-url", default=None, help="Destination repository URL")
@click.option("--target", "target_labels", multiple=True, help="Restrict to these os-arch targets (repeatable)")
@click.option("--dry-run/--no-dry-run", default=False, show_default=True, help="Only generate artifacts into the staging directory")
@click.pass_context
def run(ctx, config_file, compiler, package, dest_url, target_labels, dry_run):
    """Generate, rewrite and publish the IR."""
    console = get_console()
    config = resolve_config(config_file)

    overrides = {}
    if compiler:
        overrides["compiler"] = compiler
    if package:
        overrides["package"] = package
    if dest_url:
        overrides["dest_url"] = dest_url
    if target_labels:
        try:
            overrides["targets"] = parse_targets(*target_labels)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--target")
    if overrides:
        config = replace(config, **overrides)

    try:
        report = run_release(config, dry_run=dry_run)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    console.print_results(report.results)

    if not report.ok:
        err = report.error
        if isinstance(err, ReleaseError):
            console.print_error(
                f"{err.stage or 'release'} failed",
                f"{err.kind}: {err.message}",
                details=[f"{k}={v}" for k, v in err.details.items()] or None,
                suggestion=err.details.get("hint"),
            )
        elif err is not None:
            console.print_exception(err)
        sys.exit(1)

    if dry_run:
        for path in report.artifacts:
            console.print_info(f"  {path}")


@cli.command("targets")
@click.option("--config", "config_file", default=None, help="Python config file defining config() or CONFIG")
def list_targets(config_file):
    """List the target matrix in build order."""
    config = resolve_config(config_file)
    for t in config.targets:
        click.echo(f"{t.label}\t{t.artifact_name(config.extension)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
