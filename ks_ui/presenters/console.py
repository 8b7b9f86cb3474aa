"""Rich-backed presenter for CLI status lines."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

_LEVEL_TEMPLATES = {
    "info": "[blue]ℹ[/blue] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}


class RichPresenter:
    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def _emit(self, level: str, message: str) -> None:
        template = _LEVEL_TEMPLATES.get(level, "{message}")
        self._console.print(template.format(message=escape(message)))

    def info(self, message: str) -> None:
        self._emit("info", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def hint(self, message: str) -> None:
        """Print a copy-pasteable line without wrapping or markup."""
        self._console.print(message, markup=False, highlight=False, soft_wrap=True)

    def table(self, table: Table) -> None:
        self._console.print(table)
