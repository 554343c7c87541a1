"""SRV record lookup for paymail domains.

A provider may delegate its bsvalias service with an SRV record at
`_bsvalias._tcp.<domain>`. Without one, the domain itself on port 443 is
used.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import dns.exception
import dns.resolver

from core.config import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_PORT = 443
SRV_SERVICE = "_bsvalias._tcp"


@dataclass(frozen=True)
class SrvTarget:
    host: str
    port: int = DEFAULT_PORT


def _build_resolver(settings: AppSettings) -> dns.resolver.Resolver:
    resolver = dns.resolver.Resolver(configure=True)
    if settings.dns_nameservers:
        resolver.nameservers = list(settings.dns_nameservers)
    resolver.lifetime = settings.dns_timeout_seconds
    resolver.timeout = settings.dns_timeout_seconds
    return resolver


def lookup_srv(domain: str, settings: AppSettings | None = None) -> SrvTarget:
    """Blocking SRV lookup; falls back to `domain:443` on any DNS failure.

    Resolver setup counts as a DNS failure too: a host without a usable
    resolv.conf or a malformed nameserver setting still yields the default.
    """

    settings = settings or AppSettings()
    try:
        resolver = _build_resolver(settings)
        answers = resolver.resolve(f"{SRV_SERVICE}.{domain}", "SRV")
    except (dns.exception.DNSException, ValueError) as exc:
        logger.debug("SRV lookup failed for %s (%s), using default", domain, exc)
        return SrvTarget(host=domain)

    records = list(answers)
    if not records:
        return SrvTarget(host=domain)

    # Lowest priority wins, then highest weight
    best = min(records, key=lambda r: (r.priority, -r.weight))
    host = str(best.target).rstrip(".")
    if not host:
        return SrvTarget(host=domain)
    logger.debug("SRV record for %s: %s:%s", domain, host, best.port)
    return SrvTarget(host=host, port=int(best.port))


async def resolve_srv(domain: str, settings: AppSettings | None = None) -> SrvTarget:
    """Async wrapper around `lookup_srv` (dnspython is blocking)."""

    return await asyncio.to_thread(lookup_srv, domain, settings)


def capabilities_url(target: SrvTarget) -> str:
    port_suffix = "" if target.port == DEFAULT_PORT else f":{target.port}"
    return f"https://{target.host}{port_suffix}/.well-known/bsvalias"
