"""SPF chain check CLI. Three subcommands: serve, check, probe."""

import sys
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import click
import requests

from . import __version__
from .config import load_settings
from .dns_fetcher import create_fetcher
from .exceptions import ConfigError, SpfCheckError
from .logging_setup import configure_logging, print_banner
from .report_json import JsonReporter
from .report_text import TextReporter
from .spf_resolver import SpfChainResolver, normalize_domain

DEFAULT_PROBE_URL = "http://localhost:8080/api/v1/check-spf"


def _domain_arg(ctx, param, value: str) -> str:
    if not normalize_domain(value):
        raise click.BadParameter("must not be empty")
    return value


@click.group()
@click.version_option(version=__version__, prog_name="spf-check")
def cli():
    """SPF chain checker.

    Answers whether a target domain is reachable from a domain's SPF record
    through include: and redirect= delegation.
    """


@cli.command("serve")
@click.option("--host", default=None, help="Bind address. Defaults to SPF_CHECK_HOST or 0.0.0.0.")
@click.option("--port", default=None, type=int, help="Listen port. Defaults to SPF_CHECK_PORT or 8080.")
@click.option("--log-level", default=None, help="Root log level. Defaults to SPF_CHECK_LOG_LEVEL or INFO.")
def serve(host: Optional[str], port: Optional[int], log_level: Optional[str]):
    """Start the HTTP API server."""
    import uvicorn  # noqa: PLC0415

    settings = _load_settings_or_exit()
    host = host or settings.host
    port = port or settings.port

    configure_logging((log_level or settings.log_level).upper())
    print_banner()
    click.echo(f"Listening on {host}:{port}", err=True)
    uvicorn.run(
        "spf_check.api_server:app",
        host=host,
        port=port,
        log_config=None,
    )


@cli.command("check")
@click.argument("domain", callback=_domain_arg)
@click.argument("target", callback=_domain_arg)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
def check(domain: str, target: str, output_format: str):
    """Check whether TARGET is included anywhere in DOMAIN's SPF chain."""
    settings = _load_settings_or_exit()
    start = time.monotonic()
    try:
        result = SpfChainResolver(create_fetcher(settings)).resolve(domain, target)
    except SpfCheckError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    elapsed_ms = int((time.monotonic() - start) * 1000)

    if output_format == "json":
        click.echo(JsonReporter().render(result, domain, target, elapsed_ms))
    else:
        TextReporter().render(result, domain, target, elapsed_ms)


@cli.command("probe")
@click.argument("domains", nargs=-1, required=True)
@click.option("--target", required=True, help="Target domain passed to every check.")
@click.option("--url", default=DEFAULT_PROBE_URL, show_default=True, help="check-spf endpoint URL.")
@click.option("--workers", default=8, show_default=True, type=int, help="Concurrent requests.")
@click.option("--timeout", default=30.0, show_default=True, type=float, help="Per-request timeout in seconds.")
def probe(domains: tuple, target: str, url: str, workers: int, timeout: float):
    """Fire concurrent checks for DOMAINS at a running server and report latencies."""
    click.echo(f"Testing parallel SPF checks for target: {target}\n")

    def _one(domain: str) -> str:
        return _probe_domain(url, domain, target, timeout)

    with ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="spf-probe") as pool:
        for line in pool.map(_one, domains):
            click.echo(line)

    click.echo("\nAll checks completed")


# ── Helpers ────────────────────────────────────────────────────────────────────

def _probe_domain(url: str, domain: str, target: str, timeout: float) -> str:
    start = time.monotonic()
    try:
        resp = requests.get(url, params={"domain": domain, "target": target}, timeout=timeout)
        duration = (time.monotonic() - start) * 1000
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        return f"Error checking {domain}: {e}"

    if resp.status_code > 299:
        return f"{domain}: {duration:.2f}ms (error: {data.get('error')})"
    return (
        f"{domain}: {duration:.2f}ms (reported: {data.get('elapsed_ms', '-')}) - "
        f"Found: {data.get('found', '-')} (checked {data.get('checked_domains', 'no')} domains)"
    )


def _load_settings_or_exit():
    try:
        return load_settings()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
