"""Deploy and diagnostic commands."""

import socket
import sys

import click

from wadeploy.core.context import pass_context, WaDeployContext
from wadeploy.core.exceptions import ConfigError
from wadeploy.core.output import OutputFormat, format_duration
from wadeploy.deploy import DeploymentRequest
from wadeploy.deploy.models import GateRecord


@click.command()
@click.argument("source", metavar="SOURCE_FILE")
@click.option(
    "-t",
    "--target",
    "--computer-name",
    "target",
    metavar="HOST",
    help="Destination host (default: localhost)",
)
@pass_context
def deploy(ctx: WaDeployContext, source: str, target: str | None) -> None:
    """Deploy the configuration file to a local or remote host.

    SOURCE_FILE must be named PowerStruxWAConfig.txt. Remote hosts are
    reached through their administrative share and must accept TCP 445.

    \b
    Exit codes:
        0   deployed and verified
        10  invalid file name
        11  not running elevated
        12  remote host unreachable
        13  install path inaccessible
        14  copy failed
        15  verification failed

    \b
    Examples:
        wadeploy deploy ./PowerStruxWAConfig.txt
        wadeploy deploy ./PowerStruxWAConfig.txt --target Host01
        wadeploy --dry-run deploy ./PowerStruxWAConfig.txt -t 10.0.0.12
    """
    if target is None:
        target = ctx.config.global_settings.default_target
    elif not target.strip():
        raise click.BadParameter("must not be empty", param_hint="'--target'")
    structured = ctx.output_format.structured

    def show_gate(record: GateRecord) -> None:
        if structured or ctx.verbose < 1:
            return
        result = record.result
        state = "skipped" if result.skipped else ("passed" if result.passed else "failed")
        ctx.output.print(
            f"[dim][{record.number}/{len(engine.gate_names)}] {record.name}: {state}"
            f" ({result.detail}, {format_duration(record.duration)})[/dim]"
        )

    try:
        engine = ctx.create_engine(notify_callback=show_gate)
    except ConfigError as e:
        ctx.output.print_error(str(e))
        sys.exit(1)

    report = engine.run(DeploymentRequest(source=source, target=target, dry_run=ctx.dry_run))

    if structured:
        ctx.output.print_data(report.to_dict())
    else:
        ctx.output.print_status(report.status_fields())
        if report.failed_gate:
            ctx.output.print_error(f"{report.failure_kind.value}: {report.message}")
        elif ctx.dry_run:
            ctx.output.print_info(report.message)
        else:
            ctx.output.print_success(report.message)

    sys.exit(report.exit_code)


@click.command()
@pass_context
def identities(ctx: WaDeployContext) -> None:
    """Show the names and addresses treated as this machine.

    A target that matches one of these exactly is deployed to the local
    install directory without a network check.
    """
    environment = ctx.environment
    names = sorted(environment.local_identities())
    data = {
        "hostname": socket.gethostname(),
        "elevated": environment.is_elevated(),
        "identities": names if ctx.output_format != OutputFormat.TABLE else ", ".join(names),
    }
    ctx.output.print_data(data, title="Local Identities")
