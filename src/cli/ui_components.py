"""CLI UI components (Rich).

Keeps visual details out of the command functions so tables, panels and
the per-level line styles are shared between commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.brfc import capability_name
from core.domain.models import CapabilitySet, LogLevel

_LEVEL_PREFIX: dict[LogLevel, tuple[str, str]] = {
    LogLevel.DEFAULT: ("", "white"),
    LogLevel.INFO: ("info: ", "blue"),
    LogLevel.WARN: ("warning: ", "yellow"),
    LogLevel.ERROR: ("error: ", "bold red"),
    LogLevel.SUCCESS: ("success: ", "green"),
}


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped with `--no-banner`)."""

    title = Text("PAYMAIL INSPECTOR", style="bold cyan")
    subtitle = Text("bsvalias discovery • PKI • address resolution", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_event(level: LogLevel, message: str) -> Text:
    """One styled output line; the value after `: ` is highlighted."""

    prefix, style = _LEVEL_PREFIX[level]
    text = Text(prefix, style=style)
    if level is LogLevel.DEFAULT:
        label, sep, value = message.partition(": ")
        if sep:
            text.append(label + sep)
            text.append(value, style="cyan")
            return text
    # Avoid "error: error: ..." when the message already carries the prefix
    if prefix and message.startswith(prefix):
        text = Text("", style=style)
    text.append(message, style=style if level is not LogLevel.DEFAULT else None)
    return text


class ConsoleReporter:
    """`ResolverHooks.log` implementation that prints to a Rich console."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def __call__(self, level: LogLevel, message: str) -> None:
        # Scripts, keys and signatures must stay on one line
        self._console.print(format_event(level, message), highlight=False, soft_wrap=True)


def build_capabilities_table(domain: str, capabilities: CapabilitySet) -> Table:
    table = Table(title=f"Capabilities for {domain} (bsvalias {capabilities.bsvalias})")
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Value", style="magenta")
    for brfc_id in sorted(capabilities.capabilities):
        value = capabilities.capabilities[brfc_id]
        table.add_row(brfc_id, capability_name(brfc_id) or "-", str(value))
    return table
