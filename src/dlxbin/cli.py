from __future__ import annotations

import json

import click
import requests

from .config import load_settings
from .errors import DlxError
from .runner import DlxRunner
from .util.logging import setup_logging
from .util.time import format_age


def _runner(ctx: click.Context) -> DlxRunner:
    return ctx.obj["runner_factory"]()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--cache-dir", type=click.Path(path_type=str), help="Cache root override")
@click.option("--logs-dir", type=click.Path(path_type=str), help="Log directory")
@click.option("--log-level", type=str, help="Console log level (DEBUG, INFO, WARNING, ...)")
@click.pass_context
def main(ctx: click.Context, **kwargs):
    """Download, cache and run binaries by URL."""
    try:
        settings = load_settings(kwargs)
    except DlxError as exc:
        raise click.ClickException(str(exc))
    setup_logging(settings.logs_dir, settings.log_level_value)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", settings)
    ctx.obj.setdefault("runner_factory", lambda: DlxRunner(settings))


@main.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.argument("url")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--name", type=str, help="Override the cached binary file name")
@click.option("--checksum", type=str, help="Expected sha256 of the download")
@click.option("--ttl", "cache_ttl", type=int, help="Cache TTL in milliseconds")
@click.option("--force", is_flag=True, help="Re-download even if the cache is valid")
@click.option("--platform", type=str, help="Platform override")
@click.option("--arch", type=str, help="Architecture override")
@click.option("--verbose", is_flag=True, help="Print a JSON summary to stderr")
@click.pass_context
def run(ctx: click.Context, url: str, args: tuple[str, ...], verbose: bool, **options):
    """Fetch URL (if needed) and execute it with ARGS."""
    runner = _runner(ctx)
    try:
        result = runner.run(url, args, **options)
    except (DlxError, requests.RequestException) as exc:
        raise click.ClickException(str(exc))
    if verbose:
        click.echo(
            json.dumps({"binary_path": str(result.binary_path), "downloaded": result.downloaded}, indent=2),
            err=True,
        )
    ctx.exit(result.process.wait())


@main.command()
@click.option("--max-age", type=int, help="Maximum entry age in milliseconds")
@click.pass_context
def clean(ctx: click.Context, max_age: int | None):
    """Remove expired cache entries."""
    maintenance = _runner(ctx).maintenance
    removed = maintenance.clean() if max_age is None else maintenance.clean(max_age)
    click.echo(str(removed))


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool):
    """Show cached binaries."""
    entries = _runner(ctx).maintenance.list_entries()
    if as_json:
        payload = [
            {
                "name": e.name,
                "url": e.url,
                "checksum": e.checksum,
                "platform": e.platform,
                "arch": e.arch,
                "age": e.age,
                "size": e.size,
                "path": str(e.path),
            }
            for e in entries
        ]
        click.echo(json.dumps(payload, indent=2))
        return
    for e in entries:
        click.echo(f"{e.name}\t{e.platform}-{e.arch}\t{e.size}B\t{format_age(e.age)}\t{e.url}")


@main.command()
@click.argument("target")
@click.pass_context
def remove(ctx: click.Context, target: str):
    """Remove the entry for a URL or cache key."""
    try:
        removed = _runner(ctx).maintenance.remove(target)
    except (DlxError, ValueError) as exc:
        raise click.ClickException(str(exc))
    if not removed:
        click.echo(f"No cache entry for {target}", err=True)
        ctx.exit(1)


@main.command()
@click.pass_context
def clear(ctx: click.Context):
    """Remove every cache entry."""
    try:
        removed = _runner(ctx).maintenance.clear()
    except DlxError as exc:
        raise click.ClickException(str(exc))
    click.echo(str(removed))


@main.command()
@click.pass_context
def path(ctx: click.Context):
    """Print the cache root."""
    click.echo(str(ctx.obj["settings"].cache_dir))


if __name__ == "__main__":  # pragma: no cover
    main()
