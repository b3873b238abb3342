"""CLI entry point: devfile-scout.

Subcommands:
    devfile-scout scan ./repo --repo-url https://github.com/org/repo          # per-context summary
    devfile-scout scan ./repo --repo-url https://github.com/org/repo --json   # machine-readable
"""

from __future__ import annotations

import asyncio
import json
import sys

import click

from devfile_scout.config import Settings
from devfile_scout.core.logging import setup_logging
from devfile_scout.engines.discovery.models import ScanRequest, ScanResult
from devfile_scout.engines.discovery.scanner import scan_repository
from devfile_scout.exceptions import ConfigError, ScanError


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """devfile-scout: find or match devfiles and Dockerfiles per component."""
    setup_logging("DEBUG" if verbose else None)


@main.command("scan")
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.option("--repo-url", required=True, help="Hosted URL of the scanned repository")
@click.option("--revision", default=None, help="Branch, tag or commit of the checkout")
@click.option("--context", "context_prefix", default="./", help="Context prefix of ROOT")
@click.option("--registry", default=None, help="Devfile registry URL")
@click.option("--token", default=None, help="Token for private devfiles (default: $GITHUB_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def scan_command(
    root: str,
    repo_url: str,
    revision: str | None,
    context_prefix: str,
    registry: str | None,
    token: str | None,
    as_json: bool,
) -> None:
    """Scan the component directories under ROOT."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    request = ScanRequest(
        root_path=root,
        repo_url=repo_url,
        registry_url=registry or settings.registry_url,
        context_prefix=context_prefix,
        revision=revision,
        token=token or settings.github_token,
    )

    try:
        result = asyncio.run(
            asyncio.wait_for(
                scan_repository(request, http_timeout=settings.http_timeout),
                timeout=settings.scan_timeout,
            )
        )
    except ScanError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except asyncio.TimeoutError:
        click.echo(f"Error: scan timed out after {settings.scan_timeout}s", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    _print_summary(result)


def _print_summary(result: ScanResult) -> None:
    contexts = result.contexts()
    if not contexts:
        click.echo("No devfile or Dockerfile found.")
        return

    click.echo(f"Found {len(contexts)} component(s)\n")
    for context in contexts:
        click.echo(f"  {context}")
        if context in result.devfile_urls:
            click.echo(f"    devfile:    {result.devfile_urls[context]}")
        if context in result.dockerfiles:
            click.echo(f"    dockerfile: {result.dockerfiles[context]}")
        if context in result.ports:
            click.echo(f"    ports:      {', '.join(str(p) for p in result.ports[context])}")


if __name__ == "__main__":
    main()
