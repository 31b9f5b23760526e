"""Command-line entry point: ``wadeploy [OPTIONS] COMMAND``."""

import sys

import click

from wadeploy import __version__
from wadeploy.commands.deploy import deploy, identities
from wadeploy.config import load_config
from wadeploy.core.context import WaDeployContext, pass_context
from wadeploy.core.exceptions import ConfigError, WaDeployError
from wadeploy.core.output import OutputFormat, error_console


@click.group(context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120})
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    help="Report format (default from config: table)",
)
@click.option("-v", "--verbose", count=True, help="-v shows gate progress, -vv debug logs")
@click.option("-q", "--quiet", is_flag=True, help="Only print the status line and errors")
@click.option("--dry-run", is_flag=True, help="Run the checks but do not copy")
@click.option("--no-color", is_flag=True, help="Plain output without ANSI colors")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="WADEPLOY_CONFIG",
    help="Extra YAML config file, applied last",
)
@click.version_option(__version__, prog_name="wadeploy", message="%(prog)s version %(version)s")
@click.pass_context
def cli(
    ctx: click.Context,
    output_format: str | None,
    verbose: int,
    quiet: bool,
    dry_run: bool,
    no_color: bool,
    config_file: str | None,
) -> None:
    """WaDeploy - deploy PowerStruxWAConfig.txt to local or remote hosts.

    Checks the file name, administrator rights, remote reachability and
    the install path before copying, then verifies the file arrived.

    \b
    Configuration, lowest to highest priority:
        ~/.wadeploy/config.yaml
        ./wadeploy.yaml (or the nearest parent directory's)
        --config FILE
        WADEPLOY_* environment variables (install section)
    """
    try:
        config = load_config(config_file)
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}", highlight=False)
        sys.exit(e.exit_code)

    state = WaDeployContext(
        config=config,
        output_format=OutputFormat(output_format.lower()) if output_format else None,
        verbose=verbose,
        quiet=quiet,
        dry_run=dry_run,
        color=not no_color and config.global_settings.color != "never",
    )
    ctx.obj = state
    if state.dry_run and not state.output_format.structured:
        state.output.print_warning("Dry run: nothing will be copied")


@cli.command("config")
@pass_context
def show_config(ctx: WaDeployContext) -> None:
    """Show the effective settings, environment overrides included."""
    try:
        install = ctx.install
    except ConfigError as e:
        ctx.output.print_error(str(e))
        sys.exit(e.exit_code)
    data = {
        "output_format": ctx.output_format.value,
        "dry_run": ctx.dry_run,
        "default_target": ctx.config.global_settings.default_target,
        **install.model_dump(),
    }
    ctx.output.print_data(data, title="Effective Configuration")


cli.add_command(deploy)
cli.add_command(identities)


def main() -> None:
    try:
        cli()
    except WaDeployError as e:
        error_console.print(f"[red]Error:[/red] {e}", highlight=False)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
