"""toolindex CLI — validate manifests, verify origins, and query the registry."""

import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from toolindex import __version__

console = Console()

STATUS_STYLES = {"verified": "green", "invalid": "red", "stale": "yellow", "unknown": "dim"}


def _styled(status: str) -> str:
    style = STATUS_STYLES.get(status, "yellow")
    return f"[{style}]{status}[/]"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """toolindex — registry for web tool manifests.

    Validate manifests locally, verify published origins, and discover
    tools ranked by relevance and origin trust.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── Validate ─────────────────────────────────────────────────────────


def _load_manifest_yaml(stream):
    """Parse YAML (or JSON), leaving timestamps as the strings they were written as."""
    import yaml

    class _ManifestLoader(yaml.SafeLoader):
        pass

    _ManifestLoader.add_constructor("tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_yaml_str)
    return yaml.load(stream, Loader=_ManifestLoader)


def _fetch_manifest_json(url: str):
    from toolindex.verify.verifier import fetch_manifest

    outcome = fetch_manifest(url)
    if outcome.error is not None:
        console.print(f"[red]x[/] {escape(outcome.error)}")
        sys.exit(1)
    if not outcome.ok:
        console.print(f"[red]x[/] HTTP {outcome.status_code} from {url}")
        sys.exit(1)
    try:
        return json.loads(outcome.body)
    except (json.JSONDecodeError, RecursionError):
        console.print("[red]x[/] Response is not valid JSON")
        sys.exit(1)


@main.command()
@click.argument("manifest_path", default=".well-known/webmcp.json")
def validate(manifest_path: str):
    """Validate a manifest against the schema.

    MANIFEST_PATH is a local JSON or YAML file, or an http(s) URL to fetch.
    Checks structure only; use 'toolindex verify' to check a live origin.
    """
    import yaml

    from toolindex.spec import MANIFEST_VERSION
    from toolindex.spec.schema_validator import validate_manifest

    if manifest_path.startswith(("http://", "https://")):
        data = _fetch_manifest_json(manifest_path)
    else:
        try:
            with open(manifest_path) as f:
                data = _load_manifest_yaml(f)
        except OSError as e:
            console.print(f"[red]x[/] File not found: {manifest_path} ({e.strerror})")
            sys.exit(1)
        except yaml.YAMLError as e:
            console.print(f"[red]x[/] Failed to parse: {escape(str(e))}")
            sys.exit(1)

    result = validate_manifest(data)
    if not result.valid:
        console.print("[red]x Invalid manifest:[/]")
        for error in result.errors:
            console.print(f"  [red]-[/] {escape(str(error))}")
        sys.exit(1)

    count = result.manifest.tool_count
    console.print(f"[green]v[/] Valid manifest ({count} tool{'s' if count != 1 else ''})")
    if result.manifest.manifest_version != MANIFEST_VERSION:
        console.print(
            f"  [yellow]![/] manifest_version {result.manifest.manifest_version!r} "
            f"is not the supported {MANIFEST_VERSION!r}; registries will mark it stale"
        )


# ── Verify ───────────────────────────────────────────────────────────


@main.command()
@click.argument("origin")
@click.option("--timeout", default=None, type=float, help="Fetch timeout in seconds")
def verify(origin: str, timeout: float | None):
    """Fetch and classify an origin's manifest without recording it."""
    from toolindex.verify.origin import InvalidOriginError, normalize_origin
    from toolindex.verify.verifier import DEFAULT_TIMEOUT, verify as verify_origin

    try:
        normalized = normalize_origin(origin)
    except InvalidOriginError as e:
        console.print(f"[red]x[/] {e}")
        sys.exit(1)

    console.print(f"[dim]Checking {normalized}...[/]")
    result = verify_origin(normalized, timeout=timeout or DEFAULT_TIMEOUT)

    console.print(f"  Status:  {_styled(result.status.value)}")
    console.print(f"  Latency: {result.latency_ms}ms")
    if result.manifest is not None:
        console.print(f"  Tools:   {result.manifest.tool_count}")
    for message in result.error_messages():
        console.print(f"  [red]-[/] {escape(message)}")

    sys.exit(0 if result.is_verified else 1)


# ── Registry ─────────────────────────────────────────────────────────


registry_dir_option = click.option(
    "--registry-dir", "-r", default=None, help="Registry directory (default: $TOOLINDEX_REGISTRY_DIR)"
)


def _open_registry(registry_dir: str | None):
    from toolindex.registry.local_registry import DEFAULT_REGISTRY_DIR, LocalRegistry

    return LocalRegistry(registry_dir or DEFAULT_REGISTRY_DIR)


def _checked_origin(origin: str) -> str:
    from toolindex.verify.origin import InvalidOriginError, normalize_origin

    try:
        return normalize_origin(origin)
    except InvalidOriginError as e:
        console.print(f"[red]x[/] {e}")
        sys.exit(1)


@main.group()
def registry():
    """Manage the local origin registry."""


@registry.command()
@click.argument("origin")
@registry_dir_option
def submit(origin: str, registry_dir: str | None):
    """Verify an origin and record it in the registry."""
    from toolindex.verify.origin import InvalidOriginError

    reg = _open_registry(registry_dir)
    try:
        submission = reg.submit(origin)
    except InvalidOriginError as e:
        console.print(f"[red]x[/] {e}")
        sys.exit(1)

    status = submission.status.value
    if status == "verified":
        count = submission.tool_count
        console.print(f"[green]v[/] Verified — {count} tool{'s' if count != 1 else ''} registered")
        return

    console.print(f"  {submission.origin}: {_styled(status)}")
    for message in submission.errors:
        console.print(f"  [red]-[/] {escape(message)}")
    sys.exit(1)


@registry.command()
@click.argument("origin")
@registry_dir_option
def status(origin: str, registry_dir: str | None):
    """Show the recorded status and trust score of an origin."""
    reg = _open_registry(registry_dir)
    detail = reg.origin_detail(_checked_origin(origin))
    if detail is None:
        console.print(f"  Status: {_styled('unknown')}")
        sys.exit(1)

    record = detail.record
    console.print(f"  Status:       {_styled(record.status.value)}")
    console.print(f"  Last checked: [dim]{record.last_checked}[/]")
    console.print(f"  Tools:        {record.tool_count}")
    console.print(f"  Attested:     {'[green]yes[/]' if record.attested else '[dim]no[/]'}")
    console.print(f"  Trust score:  {detail.trust.total}")

    table = Table(title="Trust breakdown")
    table.add_column("Component", style="cyan")
    table.add_column("Points", justify="right")
    for name, points in detail.trust.breakdown.to_dict().items():
        table.add_row(name, str(points))
    console.print(table)

    sys.exit(0 if record.status.value == "verified" else 1)


@registry.command()
@click.argument("origin")
@registry_dir_option
def show(origin: str, registry_dir: str | None):
    """List the tools recorded for an origin."""
    from toolindex.scoring.relevance import parse_tags

    reg = _open_registry(registry_dir)
    record = reg.get_origin(_checked_origin(origin))
    if record is None:
        console.print(f"[red]x[/] Origin not in registry: {origin}")
        sys.exit(1)

    table = Table(title=f"{record.origin} ({_styled(record.status.value)})")
    table.add_column("Tool", style="cyan")
    table.add_column("Version")
    table.add_column("Risk")
    table.add_column("Pricing")
    table.add_column("Tags", style="dim")

    for tool in record.tools:
        table.add_row(
            tool.name,
            tool.version,
            tool.risk_level,
            tool.pricing_model or "-",
            ", ".join(parse_tags(tool.tags)),
        )

    console.print(table)
    if record.last_error:
        console.print(f"  [red]-[/] {escape(record.last_error)}")


@registry.command()
@click.argument("query", default="")
@registry_dir_option
@click.option("--risk", default=None, help="Preferred risk level")
@click.option("--pricing", default=None, help="Preferred pricing model")
@click.option("--limit", "-n", default=20, help="Maximum results")
def search(query: str, registry_dir: str | None, risk: str | None, pricing: str | None, limit: int):
    """Search tools, ranked by relevance and origin trust."""
    reg = _open_registry(registry_dir)
    ranked = reg.search_tools(query, risk=risk, pricing=pricing, limit=limit)

    if not ranked:
        console.print("[yellow]No matching tools found.[/]")
        return

    table = Table(title=f"Tools ({len(ranked)} shown)")
    table.add_column("Rank", style="dim", width=4)
    table.add_column("Tool", style="cyan")
    table.add_column("Origin")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Relevance", justify="right")
    table.add_column("Trust", justify="right")

    for i, entry in enumerate(ranked):
        record, tool = entry.candidate.payload
        table.add_row(
            str(i + 1),
            tool.name,
            record.origin,
            str(entry.score),
            str(entry.relevance.total),
            str(entry.trust.total),
        )

    console.print(table)


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="schema")
def dump_schema():
    """Print the manifest JSON Schema."""
    from toolindex.spec.schema import get_schema

    click.echo(json.dumps(get_schema(), indent=2))


if __name__ == "__main__":
    main()
