"""Command-line entry point for the gallery catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

import typer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gallery_catalog.catalog.accessor import QueryResult, get_catalog, run_query
from gallery_catalog.catalog.config import get_config
from gallery_catalog.catalog.database import create_catalog_engine, create_schema, seed_from_fixture
from gallery_catalog.catalog.fixture import FixtureLoadError, load_raw_artworks
from gallery_catalog.catalog.formatting import format_dimensions, format_pricing
from gallery_catalog.catalog.images import compress_category_tree
from gallery_catalog.catalog.models import ArtworkRecord
from gallery_catalog.catalog.normalize import record_to_mapping
from gallery_catalog.catalog.spreadsheet import export_inventory

T = TypeVar("T")

app = typer.Typer(help="Utility commands for querying and maintaining the gallery catalog.")


@app.callback()
def cli_root(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log catalog activity to stderr.",
        is_flag=True,
    ),
) -> None:
    """Root command group for catalog utilities."""

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _unwrap(result: QueryResult[T]) -> T:
    if not result.ok:
        typer.echo(f"Catalog query failed: {result.error}", err=True)
        raise typer.Exit(code=1)
    return result.data  # type: ignore[return-value]


def _query(operation: Callable[[], T]) -> T:
    return _unwrap(run_query(operation))


def _print_records(records: Sequence[ArtworkRecord], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([record_to_mapping(record) for record in records], ensure_ascii=False, indent=2))
        return
    if not records:
        typer.echo("No artworks found.")
        return
    for record in records:
        typer.echo(
            f"{record.gallery_order:>3}. {record.title} [{record.category.value}] "
            f"{format_pricing(record.pricing)} ({record.slug})"
        )


@app.command("list")
def list_artworks(
    as_json: bool = typer.Option(False, "--json", help="Emit records as JSON.", is_flag=True),
) -> None:
    """List every available artwork."""

    catalog = _query(get_catalog)
    _print_records(_query(catalog.get_available_artworks), as_json)


@app.command("category")
def list_category(
    name: str = typer.Argument(..., help="Category to filter by (birds, flowers/floral, towns)."),
    as_json: bool = typer.Option(False, "--json", help="Emit records as JSON.", is_flag=True),
) -> None:
    """List available artworks in a single category."""

    catalog = _query(get_catalog)
    _print_records(_query(lambda: catalog.get_artworks_by_category(name)), as_json)


@app.command("featured")
def list_featured(
    as_json: bool = typer.Option(False, "--json", help="Emit records as JSON.", is_flag=True),
) -> None:
    """List artworks flagged for promotional placement."""

    catalog = _query(get_catalog)
    _print_records(_query(catalog.get_featured_artworks), as_json)


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Text matched against each artwork's search tags."),
    as_json: bool = typer.Option(False, "--json", help="Emit records as JSON.", is_flag=True),
) -> None:
    """Search available artworks by tag."""

    catalog = _query(get_catalog)
    _print_records(_query(lambda: catalog.search_artworks(term)), as_json)


@app.command("show")
def show(
    identifier: str = typer.Argument(..., help="Artwork id or slug."),
) -> None:
    """Print the full record for one artwork."""

    catalog = _query(get_catalog)
    record = _query(lambda: catalog.get_artwork_by_id(identifier) or catalog.get_artwork_by_slug(identifier))
    if record is None:
        typer.echo(f"Artwork not found: {identifier}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{record.title} ({record.category.value})")
    typer.echo(f"  Size:   {format_dimensions(record.dimensions)}")
    typer.echo(f"  Medium: {record.medium}")
    typer.echo(f"  Price:  {format_pricing(record.pricing)}")
    typer.echo(f"  Image:  {record.primary_image.url}")
    typer.echo(f"  Tags:   {', '.join(record.emotional_tags)}")
    typer.echo(f"  Story:  {record.story_behind_brushstroke}")


@app.command("stats")
def stats() -> None:
    """Summarize the catalog by category."""

    catalog = _query(get_catalog)
    summary = _query(catalog.get_catalog_stats)
    typer.echo(f"Mode: {catalog.mode.value}")
    typer.echo(f"Total artworks: {summary.total}")
    for category, count in summary.by_category.items():
        typer.echo(f"  {category}: {count}")
    typer.echo(f"Featured: {summary.featured}")


@app.command("seed")
def seed(
    fixture: Optional[Path] = typer.Option(
        None,
        "--fixture",
        help="Fixture JSON to load. Defaults to the configured fixture.",
    ),
) -> None:
    """Create the schema and upsert the fixture into the configured database."""

    config = get_config()
    if config.database_url is None:
        typer.echo("DATABASE_URL is not set; nothing to seed.", err=True)
        raise typer.Exit(code=1)

    try:
        raw_artworks = load_raw_artworks(fixture or config.fixture_path)
    except FixtureLoadError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error

    engine = create_catalog_engine(
        config.database_url,
        query_timeout_seconds=config.query_timeout_seconds,
        echo=config.database_echo,
    )
    try:
        create_schema(engine)
        with Session(engine) as session, session.begin():
            written = seed_from_fixture(session, raw_artworks)
    except SQLAlchemyError as error:
        typer.echo(f"Seeding failed: {error}", err=True)
        raise typer.Exit(code=1) from error
    finally:
        engine.dispose()
    typer.echo(f"Seeded {written} artwork(s)")


@app.command("compress-images")
def compress_images(
    input_root: Path = typer.Argument(..., help="Directory holding one folder per category."),
    output_root: Path = typer.Argument(..., help="Directory that receives the compressed variants."),
    max_dimension: int = typer.Option(1200, "--max-dimension", help="Longest edge in pixels."),
) -> None:
    """Compress artwork images into JPEG and WebP variants."""

    reports = compress_category_tree(input_root, output_root, max_dimension=max_dimension)
    failed = False
    for report in reports:
        typer.echo(
            f"{report.category}: {len(report.reports)} image(s), "
            f"{report.reduction_percent}% reduction"
        )
        for path, message in report.errors:
            failed = True
            typer.echo(f"- {path}: {message}", err=True)
    if failed:
        raise typer.Exit(code=1)


@app.command("export-inventory")
def export_inventory_command(
    output: Path = typer.Argument(..., help="Workbook to create or append to."),
    asset_root: Optional[Path] = typer.Option(
        None,
        "--asset-root",
        help="Public asset directory used to embed artwork thumbnails.",
    ),
) -> None:
    """Write every available artwork into the admin inventory workbook."""

    catalog = _query(get_catalog)
    records = _query(catalog.get_available_artworks)
    added = export_inventory(records, output, asset_root=asset_root)
    typer.echo(f"Added {added} artwork(s) to {output}")


def main() -> None:
    """Run the Typer CLI application."""

    app()


if __name__ == "__main__":
    main()
