"""Paymail Inspector CLI (Typer).

Commands only parse flags and render output; the resolution flow lives in
`core.services.resolution_pipeline`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_report_json
from adapters.paymail_client import HttpPaymailTransport
from cli.doctor import app as doctor_app
from cli.ui_components import ConsoleReporter, build_capabilities_table, format_event, print_banner
from core.config import AppSettings
from core.domain.errors import DiscoveryError, DiscoveryTimeout
from core.domain.handles import extract_parts, validate_domain
from core.domain.models import CapabilitySet, LogLevel
from core.services.resolution_pipeline import (
    ResolutionResult,
    ResolveOptions,
    Resolver,
    ResolverHooks,
)

app = typer.Typer(
    no_args_is_help=True,
    help="Inspect paymail (bsvalias) addresses: discovery, PKI and address resolution.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()

_RESOLVE_HELP = (
    "Resolve a paymail address into a hex-encoded Bitcoin script, address and public profile (if found).\n\n"
    "The sender performs service discovery against the receiver's domain and requests a payment "
    "destination from the receiver's paymail service. "
    "See http://bsvalias.org/04-01-basic-address-resolution.html"
)


def build_transport(settings: AppSettings) -> HttpPaymailTransport:
    return HttpPaymailTransport(settings)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show transport and DNS diagnostics."),
) -> None:
    """Paymail Inspector."""

    _configure_logging(verbose)


async def _run_resolution(address: str, options: ResolveOptions, settings: AppSettings) -> ResolutionResult:
    async with build_transport(settings) as transport:
        resolver = Resolver(transport, hooks=ResolverHooks(log=ConsoleReporter(_console)))
        return await resolver.resolve(address, options)


@app.command("resolve", help=_RESOLVE_HELP)
def resolve(
    address: str = typer.Argument(..., help="Receiver paymail address (alias@domain.tld, $handle or 1handle)."),
    amount: int = typer.Option(0, "--amount", "-a", min=0, help="Amount in satoshis for the payment request."),
    purpose: str = typer.Option("", "--purpose", "-p", help="Purpose for the transaction."),
    sender_handle: str | None = typer.Option(
        None,
        "--sender-handle",
        help="Sender's paymail handle. Required by the bsvalias protocol. Receiver paymail used if not specified.",
    ),
    sender_name: str | None = typer.Option(None, "--sender-name", help="The sender's name."),
    signature: str = typer.Option("", "--signature", "-s", help="The signature of the entire request."),
    skip_pki: bool = typer.Option(False, "--skip-pki", help="Skip firing pki request and getting the pubkey."),
    skip_public_profile: bool = typer.Option(
        False,
        "--skip-public-profile",
        help="Skip firing public profile request and getting the avatar.",
    ),
    export_json: Path | None = typer.Option(None, "--export-json", help="Write the resolution report to a JSON file."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    settings = AppSettings()
    if not no_banner:
        print_banner(_console)

    options = ResolveOptions(
        amount=amount,
        purpose=purpose,
        sender_handle=sender_handle if sender_handle is not None else (settings.sender_handle or ""),
        sender_name=sender_name if sender_name is not None else (settings.sender_name or ""),
        signature=signature,
        skip_pki=skip_pki,
        skip_public_profile=skip_public_profile,
    )

    result = asyncio.run(_run_resolution(address, options, settings))
    if not result.ok or result.report is None:
        raise typer.Exit(code=1)

    if export_json is not None:
        path = export_report_json(report=result.report, output_path=export_json)
        _console.print(format_event(LogLevel.SUCCESS, f"report saved to: {path}"), soft_wrap=True)


app.command("r", hidden=True, help=_RESOLVE_HELP)(resolve)


async def _discover(domain: str, settings: AppSettings) -> CapabilitySet:
    async with build_transport(settings) as transport:
        return await transport.discover_capabilities(domain)


@app.command("capabilities")
def capabilities(
    target: str = typer.Argument(..., help="Domain (or paymail address) to run service discovery against."),
) -> None:
    """List the capabilities a paymail provider advertises."""

    settings = AppSettings()
    reporter = ConsoleReporter(_console)

    domain, _ = extract_parts(target)
    if not domain:
        domain = target.strip().lower()
    if not validate_domain(domain):
        reporter(LogLevel.ERROR, f"domain name is invalid: {domain}")
        raise typer.Exit(code=1)

    try:
        document = asyncio.run(_discover(domain, settings))
    except DiscoveryTimeout:
        reporter(LogLevel.WARN, f"no capabilities found for: {domain}")
        raise typer.Exit(code=1)
    except DiscoveryError as exc:
        reporter(LogLevel.ERROR, f"error: {exc}")
        raise typer.Exit(code=1)

    _console.print(build_capabilities_table(domain, document))


app.command("c", hidden=True)(capabilities)


def run() -> None:
    app()
