"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.dns_srv import DEFAULT_PORT, capabilities_url, resolve_srv
from adapters.paymail_client import HttpPaymailTransport
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import DiscoveryError, PaymailValidationError
from core.domain.handles import extract_parts, validate_paymail_and_domain

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_srv(domain: str, settings: AppSettings) -> tuple[str, str]:
    target = await resolve_srv(domain, settings)
    if target.host == domain and target.port == DEFAULT_PORT:
        return "DEFAULT", f"no SRV record -> {capabilities_url(target)}"
    return "OK", capabilities_url(target)


async def _check_discovery(domain: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with HttpPaymailTransport(settings) as transport:
            document = await transport.discover_capabilities(domain)
    except DiscoveryError as exc:
        return False, str(exc)
    return True, f"bsvalias {document.bsvalias}, {len(document.capabilities)} capabilities"


@app.command()
def run(
    domain: str = typer.Option("handcash.io", "--domain", "-d", help="Paymail domain used for the checks."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Paymail Inspector Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Config file", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds}s")
    if settings.sender_handle:
        table.add_row("Sender handle", "OK", settings.sender_handle)
    else:
        table.add_row("Sender handle", "OPTIONAL", "Not set -> receiver paymail used as sender")

    # Connectivity (best-effort)
    status_srv, detail_srv = asyncio.run(_check_srv(domain, settings))
    table.add_row("SRV lookup", status_srv, detail_srv)

    ok_discovery, detail_discovery = asyncio.run(_check_discovery(domain, settings))
    table.add_row("Capability discovery", "OK" if ok_discovery else "FAIL", detail_discovery)

    _console.print(table)

    if not ok_discovery:
        _console.print(
            "\n[yellow]Note:[/yellow] Check network access or raise PAYMAIL_INSPECTOR_HTTP_TIMEOUT_SECONDS."
        )


@app.command(name="set-sender")
def set_sender() -> None:
    """Interactive sender setup (stored in the user config .env)."""

    raw_handle = typer.prompt("Sender paymail handle").strip()
    sender_domain, sender_handle = extract_parts(raw_handle)
    try:
        validate_paymail_and_domain(sender_handle, sender_domain)
    except PaymailValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    sender_name = typer.prompt("Sender name", default="", show_default=False).strip()

    env_path = write_user_env_vars(
        {
            "PAYMAIL_INSPECTOR_SENDER_HANDLE": sender_handle,
            "PAYMAIL_INSPECTOR_SENDER_NAME": sender_name or None,
        }
    )

    _console.print(f"[green]Saved sender config to:[/green] {env_path}")
