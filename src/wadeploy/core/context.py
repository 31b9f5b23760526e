"""Per-invocation state handed from the root command to subcommands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wadeploy.config import InstallConfig, WaDeployConfig, get_default_config
from wadeploy.core.logging import LogLevel, setup_logging
from wadeploy.core.output import OutputFormat, OutputFormatter

if TYPE_CHECKING:
    from wadeploy.deploy.engine import DeploymentEngine, GateCallback
    from wadeploy.deploy.probes import EnvironmentProbe


class WaDeployContext:
    """Settings resolved from flags and config, plus lazily built collaborators.

    Command-line flags win over the ``global`` config section. Logging is
    configured as a side effect of construction.
    """

    def __init__(
        self,
        config: WaDeployConfig | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        dry_run: bool = False,
        color: bool = True,
    ):
        self.config = config or get_default_config()
        settings = self.config.global_settings
        self.output_format = output_format or settings.output_format
        self.verbose = verbose
        self.dry_run = dry_run or settings.dry_run
        self.output = OutputFormatter(format=self.output_format, color=color, quiet=quiet)

        setup_logging(LogLevel.for_flags(verbose, quiet, settings.verbosity), rich_output=color)

        self._install: InstallConfig | None = None
        self._environment: EnvironmentProbe | None = None

    @property
    def install(self) -> InstallConfig:
        """Install settings with WADEPLOY_* overrides. Raises ConfigError."""
        if self._install is None:
            self._install = self.config.install.resolve()
        return self._install

    @property
    def environment(self) -> EnvironmentProbe:
        if self._environment is None:
            from wadeploy.deploy.probes import SystemEnvironmentProbe

            self._environment = SystemEnvironmentProbe()
        return self._environment

    def create_engine(self, notify_callback: GateCallback | None = None) -> DeploymentEngine:
        from wadeploy.deploy.engine import DeploymentEngine

        return DeploymentEngine.from_config(
            self.install,
            environment=self.environment,
            notify_callback=notify_callback,
        )


pass_context = click.make_pass_decorator(WaDeployContext, ensure=True)
