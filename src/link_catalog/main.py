"""CLI entry point for managing the links catalog."""

import logging

import click

from .config import Config
from .errors import LinkCatalogError
from .storage.database import Database, DriverError
from .storage.models import Language, Link, NewLink
from .storage.repository import LinkRepository
from .storage.schema import load_ddl

logger = logging.getLogger(__name__)


def _open(config: str) -> tuple[Database, LinkRepository]:
    cfg = Config.from_yaml(config)
    logging.basicConfig(
        level=cfg.log_level, format="%(asctime)s - %(levelname)s - %(message)s"
    )
    db = Database.from_config(cfg)
    return db, LinkRepository(db)


def _echo_link(link: Link) -> None:
    click.echo(f"[{link.id}] ({link.language}) {link.title}")
    click.echo(f"  {link.url}")
    if link.description:
        click.echo(f"  {link.description[:100]}")


@click.group()
def cli() -> None:
    """Links catalog - store, browse and search links."""
    pass


@cli.command("init-db")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option(
    "--ddl",
    type=click.Path(exists=True),
    default=None,
    help="DDL file or directory of .sql files (defaults to the bundled schema)",
)
def init_db(config: str, ddl: str | None) -> None:
    """Create the links schema."""
    db, _ = _open(config)
    with db:
        try:
            if ddl:
                db.create_schema(load_ddl(ddl))
            else:
                db.create_schema()
        except DriverError as e:
            raise click.ClickException(str(e))
    click.echo(f"Schema created in {db.db_path}")


@cli.command("drop-db")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.confirmation_option(prompt="Drop the links schema and every stored link?")
def drop_db(config: str) -> None:
    """Drop the links schema."""
    db, _ = _open(config)
    with db:
        try:
            db.destroy_schema()
        except DriverError as e:
            raise click.ClickException(str(e))
    click.echo(f"Schema dropped from {db.db_path}")


@cli.command()
@click.argument("url")
@click.argument("title")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option(
    "--language", "-l", type=click.Choice(Language.codes()), default="en", help="Link language"
)
@click.option("--description", "-d", default=None, help="Short description")
@click.option("--image-link", default=None, help="Preview image URL")
def add(
    url: str,
    title: str,
    config: str,
    language: str,
    description: str | None,
    image_link: str | None,
) -> None:
    """Add a link."""
    db, repo = _open(config)
    with db:
        try:
            link_id = repo.create(
                NewLink(
                    url=url,
                    title=title,
                    language=language,
                    description=description,
                    image_link=image_link,
                )
            )
        except LinkCatalogError as e:
            raise click.ClickException(e.message)
    click.echo(f"Created link {link_id}")


@cli.command("list")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option("--order", default="asc", help="Creation order: asc or desc")
@click.option("--limit", "-n", default=None, type=int, help="Max results")
@click.option("--offset", default=None, type=int, help="Results to skip")
def list_links(config: str, order: str, limit: int | None, offset: int | None) -> None:
    """List links by creation time."""
    db, repo = _open(config)
    with db:
        try:
            results = repo.read_links(order=order, limit=limit, offset=offset)
        except LinkCatalogError as e:
            raise click.ClickException(e.message)

    if not results:
        click.echo("No links found.")
        return

    for link in results:
        _echo_link(link)


@cli.command()
@click.argument("link_id", type=int)
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def show(link_id: int, config: str) -> None:
    """Show one link."""
    db, repo = _open(config)
    with db:
        try:
            link = repo.read_by_id(link_id)
        except LinkCatalogError as e:
            raise click.ClickException(e.message)

    for key, value in link.to_dict().items():
        click.echo(f"{key:>12}: {value if value is not None else '-'}")


@cli.command()
@click.argument("query")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option("--language", "-l", default="en", help="Search language (en or fr)")
@click.option("--limit", "-n", default=20, help="Max results")
def search(query: str, config: str, language: str, limit: int) -> None:
    """Full-text search links."""
    db, repo = _open(config)
    with db:
        try:
            results = repo.search(query, language, limit=limit)
        except LinkCatalogError as e:
            raise click.ClickException(e.message)

    if not results:
        click.echo("No results found.")
        return

    click.echo(f"Found {len(results)} results:\n")
    for link in results:
        _echo_link(link)
        click.echo()


@cli.command()
@click.argument("link_id", type=int)
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def delete(link_id: int, config: str) -> None:
    """Delete a link."""
    db, repo = _open(config)
    with db:
        try:
            repo.delete_by_id(link_id)
        except LinkCatalogError as e:
            raise click.ClickException(e.message)
    click.echo(f"Deleted link {link_id}")


if __name__ == "__main__":
    cli()
