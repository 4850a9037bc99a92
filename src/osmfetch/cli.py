from __future__ import annotations

import json

import click

from .config import load_settings
from .geo import BoundingBox
from .pipeline import run_pipeline
from .util.logging import LOG_LEVELS


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--south", type=float, required=True, help="Southern latitude")
@click.option("--west", type=float, required=True, help="Western longitude")
@click.option("--north", type=float, required=True, help="Northern latitude")
@click.option("--east", type=float, required=True, help="Eastern longitude")
@click.option("--endpoint", "endpoints", multiple=True, help="Overpass endpoint, tried in the given order")
@click.option("--cache-dir", type=click.Path(path_type=str), help="Cache directory")
@click.option("--cache-ext", type=str, help="Cache file extension")
@click.option("--valid-days", type=float, help="Days a cached download stays fresh")
@click.option("--timeout", type=float, help="Per-request network timeout in seconds")
@click.option("--logs-dir", type=click.Path(path_type=str), help="Log directory")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), help="Logging verbosity")
@click.option("--user-agent", type=str, help="Custom user agent")
@click.option("--no-cache", is_flag=True, help="Force re-download of data")
def main(south, west, north, east, **kwargs):
    """Fetch OSM data for a bounding box, using the local cache when fresh."""
    try:
        bbox = BoundingBox(south=south, west=west, north=north, east=east)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    settings = load_settings(kwargs)
    summary = run_pipeline(settings, bbox)
    click.echo(
        json.dumps(
            {
                "found": summary.found,
                "path": summary.path,
                "timestamp": summary.timestamp,
                "fetched_at": summary.fetched_at,
                "element_counts": summary.element_counts,
            },
            indent=2,
        )
    )
    if not summary.found:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
