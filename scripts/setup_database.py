#!/usr/bin/env python3
"""Initialize the address statistics tables in Supabase."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import click

from cat_dashboard.config.settings import get_settings
from cat_dashboard.database.supabase import STATS_TABLE, ROUNDS_TABLE, get_supabase_client


def get_sql_content() -> str:
    """Read SQL schema file."""
    sql_path = Path(__file__).parent / "setup_database.sql"
    with open(sql_path) as f:
        return f.read()


@click.command()
@click.option("--dry-run", is_flag=True, help="Print SQL without checking the database")
def setup(dry_run: bool):
    """Print the schema and check that the output tables exist."""
    sql_content = get_sql_content()

    if dry_run:
        click.echo("SQL to be executed:")
        click.echo("-" * 50)
        click.echo(sql_content)
        return

    settings = get_settings()
    if not settings.supabase.url or not settings.supabase.key:
        click.echo("Error: SUPABASE_URL and SUPABASE_KEY must be set in .env file")
        return

    click.echo("Connecting to Supabase...")
    db = get_supabase_client()

    missing = []
    for table in [STATS_TABLE, ROUNDS_TABLE]:
        try:
            db.client.table(table).select("address").limit(1).execute()
            click.echo(f"[OK] {table}")
        except Exception as e:
            click.echo(f"[MISSING] {table}: {e}")
            missing.append(table)

    if missing:
        # The Python client cannot run DDL
        click.echo("\nRun scripts/setup_database.sql in the Supabase SQL Editor to create:")
        for table in missing:
            click.echo(f"  - {table}")


if __name__ == "__main__":
    setup()
