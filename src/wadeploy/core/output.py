"""Rendering of command results on stdout and of errors on stderr."""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

error_console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    RAW = "raw"

    @property
    def structured(self) -> bool:
        """JSON and YAML replace the human messages with one document."""
        return self in (OutputFormat.JSON, OutputFormat.YAML)


def format_status_line(fields: dict[str, Any]) -> str:
    """Join fields as ``key=value``.

    None values are dropped. Empty values and values with whitespace or
    double quotes are JSON-quoted so the line splits cleanly on spaces.
    """
    parts = []
    for key, value in fields.items():
        if value is None:
            continue
        text = str(value)
        if not text or '"' in text or any(c.isspace() for c in text):
            text = json.dumps(text)
        parts.append(f"{key}={text}")
    return " ".join(parts)


class OutputFormatter:
    """Writes messages, status lines and mappings in the selected format."""

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        color: bool = True,
        quiet: bool = False,
    ):
        self.format = format
        self.color = color
        self.quiet = quiet
        self._console = Console(force_terminal=color, no_color=not color)

    def _note(self, prefix: str, message: str) -> None:
        if not self.quiet:
            self._console.print(f"{prefix} {message}" if prefix else message)

    def print(self, message: str) -> None:
        self._note("", message)

    def print_info(self, message: str) -> None:
        self._note("[blue]ℹ[/blue]", message)

    def print_success(self, message: str) -> None:
        self._note("[green]✓[/green]", message)

    def print_warning(self, message: str) -> None:
        self._note("[yellow]Warning:[/yellow]", message)

    def print_error(self, message: str) -> None:
        """Errors go to stderr and ignore quiet mode."""
        error_console.print(f"[red]Error:[/red] {message}", highlight=False)

    def print_status(self, fields: dict[str, Any]) -> None:
        """Print the machine-readable status line. Never suppressed."""
        self._console.print(
            format_status_line(fields), markup=False, highlight=False, soft_wrap=True
        )

    def print_data(self, data: dict[str, Any], title: str | None = None) -> None:
        """Print a mapping as a JSON/YAML document, raw lines or a two-column table."""
        if self.format == OutputFormat.JSON:
            self._print_document(json.dumps(data, indent=2, default=str), "json")
        elif self.format == OutputFormat.YAML:
            self._print_document(
                yaml.safe_dump(data, default_flow_style=False, allow_unicode=True), "yaml"
            )
        elif self.format == OutputFormat.RAW:
            for key, value in data.items():
                print(f"{key}: {value}")
        else:
            table = Table(title=title, header_style="bold cyan")
            table.add_column("Field", style="dim")
            table.add_column("Value")
            for key, value in data.items():
                table.add_row(str(key), str(value))
            self._console.print(table)

    def _print_document(self, text: str, lexer: str) -> None:
        if self.color:
            self._console.print(Syntax(text, lexer, theme="monokai"))
        else:
            print(text.rstrip("\n"))


def format_duration(seconds: float) -> str:
    """Short human duration: 12ms, 3.4s, 1.5m, 2.0h."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    for unit, size in (("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds / size:.1f}{unit}"
    return f"{seconds:.1f}s"
