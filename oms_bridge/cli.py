import click
from bson import json_util
from flask.cli import AppGroup

from . import store
from .document_store import COLLECTIONS

store_cli = AppGroup("store", help="Inspect and maintain the document store.")


@store_cli.command("check")
def check():
    """Print document counts per collection."""
    click.echo("=== Document Counts ===")
    for name, count in store.counts().items():
        click.echo(f"{name}: {count}")


@store_cli.command("export")
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
def export_data(path):
    """Dump every collection to PATH as extended JSON."""
    data = {name: list(store.collection(name).find({})) for name in COLLECTIONS}
    with open(path, "w", encoding="utf-8") as f:
        f.write(json_util.dumps(data, indent=4))
    click.echo(f"Exported {sum(len(rows) for rows in data.values())} documents to {path}")


@store_cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def import_data(path):
    """Load documents from an export file; existing _ids are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        data = json_util.loads(f.read())

    inserted = 0
    for name, rows in data.items():
        if name not in COLLECTIONS:
            click.echo(f"Skipping unknown collection {name}")
            continue
        collection = store.collection(name)
        for row in rows:
            if "_id" in row and collection.find_one({"_id": row["_id"]}):
                continue
            collection.insert_one(row)
            inserted += 1
    click.echo(f"Imported {inserted} documents")


@store_cli.command("drop")
@click.confirmation_option(prompt="Drop every collection?")
def drop():
    """Delete all collections."""
    for name in COLLECTIONS:
        store.collection(name).drop()
    click.echo("Database collections dropped.")
