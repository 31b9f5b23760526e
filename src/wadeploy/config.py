"""Configuration management for wadeploy using Pydantic."""

import ntpath
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from wadeploy.core.exceptions import ConfigError
from wadeploy.core.output import OutputFormat
from wadeploy.core.logging import LogLevel

CONFIG_FILENAME = "PowerStruxWAConfig.txt"
LOCAL_INSTALL_DIR = r"C:\Program Files\WindowsPowerShell\Modules\ReportHTML"
REMOTE_PATH_TEMPLATE = r"\\{host}\c$\Program Files\WindowsPowerShell\Modules\ReportHTML"
REMOTE_PORT = 445
LOOPBACK_ALIAS = "localhost"


def _check_template(v: str) -> str:
    if "{host}" not in v:
        raise ValueError("remote_path_template must contain '{host}'")
    return v


def _check_port(v: int) -> int:
    if not 1 <= v <= 65535:
        raise ValueError("remote_port must be between 1 and 65535")
    return v


def _check_timeout(v: float) -> float:
    if v <= 0:
        raise ValueError("probe_timeout must be positive")
    return v


class InstallConfig(BaseModel):
    """Where and how the configuration file is installed."""

    filename: str = CONFIG_FILENAME
    local_dir: str = LOCAL_INSTALL_DIR
    remote_path_template: str = REMOTE_PATH_TEMPLATE
    remote_port: int = REMOTE_PORT
    probe_timeout: float = 10.0

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v or os.path.basename(v) != v or ntpath.basename(v) != v:
            raise ValueError("filename must be a bare file name")
        return v

    @field_validator("remote_path_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        return _check_template(v)

    @field_validator("remote_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        return _check_port(v)

    @field_validator("probe_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        return _check_timeout(v)

    def get_local_dir(self) -> str:
        """Get local install directory from environment or config."""
        return os.environ.get("WADEPLOY_LOCAL_INSTALL_DIR") or self.local_dir

    def get_remote_path_template(self) -> str:
        """Get remote path template from environment or config."""
        template = os.environ.get("WADEPLOY_REMOTE_PATH_TEMPLATE")
        if template:
            try:
                return _check_template(template)
            except ValueError as e:
                raise ConfigError(f"Invalid WADEPLOY_REMOTE_PATH_TEMPLATE: {e}")
        return self.remote_path_template

    def get_remote_port(self) -> int:
        """Get remote port from environment or config."""
        value = os.environ.get("WADEPLOY_REMOTE_PORT")
        if value:
            try:
                return _check_port(int(value))
            except ValueError as e:
                raise ConfigError(f"Invalid WADEPLOY_REMOTE_PORT '{value}': {e}")
        return self.remote_port

    def get_probe_timeout(self) -> float:
        """Get connectivity probe timeout from environment or config."""
        value = os.environ.get("WADEPLOY_PROBE_TIMEOUT")
        if value:
            try:
                return _check_timeout(float(value))
            except ValueError as e:
                raise ConfigError(f"Invalid WADEPLOY_PROBE_TIMEOUT '{value}': {e}")
        return self.probe_timeout

    def resolve(self) -> "InstallConfig":
        """Return a copy with environment overrides applied."""
        return self.model_copy(
            update={
                "local_dir": self.get_local_dir(),
                "remote_path_template": self.get_remote_path_template(),
                "remote_port": self.get_remote_port(),
                "probe_timeout": self.get_probe_timeout(),
            }
        )

    def remote_dir(self, host: str) -> str:
        """Build the administrative-share path for a remote host."""
        return self.remote_path_template.replace("{host}", host)


class GlobalConfig(BaseModel):
    """The ``global`` section: presentation and defaults for every command."""

    output_format: OutputFormat = OutputFormat.TABLE
    color: Literal["auto", "always", "never"] = "auto"
    verbosity: LogLevel = LogLevel.WARNING
    dry_run: bool = False
    default_target: str = LOOPBACK_ALIAS


class WaDeployConfig(BaseModel):
    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    install: InstallConfig = Field(default_factory=InstallConfig)


PROJECT_CONFIG_NAMES = ("wadeploy.yaml", "wadeploy.yml", ".wadeploy.yaml", ".wadeploy.yml")


def user_config_path() -> Path:
    return Path.home() / ".wadeploy" / "config.yaml"


def find_project_config(start: Path | None = None) -> Path | None:
    """Nearest project config in ``start`` (default cwd) or one of its parents."""
    directory = (start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        for name in PROJECT_CONFIG_NAMES:
            if (candidate / name).is_file():
                return candidate / name
    return None


def config_sources(config_file: str | Path | None = None) -> list[Path]:
    """Config files to apply, lowest priority first.

    User file, then project file, then the explicit file. Missing user and
    project files are skipped; a missing explicit file is an error.
    """
    sources = [
        path
        for path in (user_config_path(), find_project_config())
        if path is not None and path.is_file()
    ]
    if config_file:
        explicit = Path(config_file)
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {config_file}")
        sources.append(explicit)
    return sources


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        content = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")
    if not isinstance(content, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")
    return content


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def load_config(config_file: str | Path | None = None) -> WaDeployConfig:
    """Load and validate the layered YAML configuration.

    WADEPLOY_* overrides for the install section are applied later, by
    InstallConfig.resolve().
    """
    data: dict[str, Any] = {}
    for path in config_sources(config_file):
        data = deep_merge(data, read_config_file(path))
    try:
        return WaDeployConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def get_default_config() -> WaDeployConfig:
    return WaDeployConfig()
