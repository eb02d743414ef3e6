#!/usr/bin/env python3
"""
Database migration runner for the Postly Supabase project.

Applies the SQL files in migrations/ to the Supabase PostgreSQL database
in filename order, recording each one with a checksum.

Usage:
    python run_migrations.py                    # Apply pending migrations
    python run_migrations.py --status           # Show migration status
    python run_migrations.py --dry-run          # Show what would run
    python run_migrations.py --force 001        # Re-apply a migration

Configuration:
    Set SUPABASE_DB_URL in your .env file to the database URI from
    Supabase Dashboard → Settings → Database → Connection string.
"""

import argparse
import hashlib
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import psycopg2
from psycopg2 import sql
from rich.console import Console
from rich.table import Table

from shared.config import get_settings

console = Console()

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATIONS_TABLE = "_migrations"


@dataclass
class Migration:
    name: str
    path: Path
    checksum: str

    def read(self) -> str:
        return self.path.read_text()


def checksum_of(content: str) -> str:
    return hashlib.sha256(content.encode()).hexdigest()[:16]


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """All migration files in directory, sorted by name."""
    if not directory.exists():
        return []
    return [
        Migration(name=path.name, path=path, checksum=checksum_of(path.read_text()))
        for path in sorted(directory.glob("*.sql"))
    ]


def split_pending(
    migrations: list[Migration],
    applied: dict[str, str],
) -> tuple[list[Migration], list[Migration]]:
    """
    Partition migrations against the recorded checksums.

    Returns:
        (pending, changed): never-applied migrations, and applied ones
        whose file no longer matches the recorded checksum.
    """
    pending, changed = [], []
    for migration in migrations:
        recorded = applied.get(migration.name)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            changed.append(migration)
    return pending, changed


# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------


def connect():
    db_url = get_settings().supabase_db_url
    if not db_url:
        console.print("[red]Error:[/red] SUPABASE_DB_URL is not set.")
        console.print("Add the connection URI from the Supabase dashboard to your .env file.")
        sys.exit(1)

    try:
        return psycopg2.connect(db_url)
    except psycopg2.Error as e:
        console.print(f"[red]Database connection failed:[/red] {e}")
        sys.exit(1)


def ensure_migrations_table(conn) -> None:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {} (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL UNIQUE,
                    checksum VARCHAR(64) NOT NULL,
                    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            ).format(sql.Identifier(MIGRATIONS_TABLE))
        )
    conn.commit()


def fetch_applied(conn) -> dict[str, tuple[str, Optional[datetime]]]:
    """Recorded migrations: name -> (checksum, applied_at)."""
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                sql.Identifier(MIGRATIONS_TABLE)
            )
        )
        return {name: (checksum, applied_at) for name, checksum, applied_at in cur.fetchall()}


def apply(conn, migration: Migration) -> None:
    """Run one migration and record it, in a single transaction."""
    console.print(f"[blue]Applying:[/blue] {migration.name}")
    try:
        with conn.cursor() as cur:
            cur.execute(migration.read())
            cur.execute(
                sql.SQL("INSERT INTO {} (name, checksum) VALUES (%s, %s)").format(
                    sql.Identifier(MIGRATIONS_TABLE)
                ),
                (migration.name, migration.checksum),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        console.print(f"[red]✗[/red] {migration.name} failed: {e}")
        raise
    console.print(f"[green]✓[/green] {migration.name}")


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


def show_status(conn) -> None:
    applied = fetch_applied(conn)
    migrations = discover_migrations()
    pending, changed = split_pending(
        migrations, {name: checksum for name, (checksum, _) in applied.items()}
    )

    if not applied and not pending:
        console.print("[dim]No migrations found.[/dim]")
        return

    table = Table(title="Migration Status")
    table.add_column("Migration", style="cyan")
    table.add_column("Status")
    table.add_column("Applied At")
    table.add_column("Checksum")

    changed_names = {m.name for m in changed}
    for name, (checksum, applied_at) in applied.items():
        status = "[yellow]Changed[/yellow]" if name in changed_names else "[green]Applied[/green]"
        stamp = applied_at.strftime("%Y-%m-%d %H:%M:%S") if applied_at else ""
        table.add_row(name, status, stamp, checksum)
    for migration in pending:
        table.add_row(migration.name, "[yellow]Pending[/yellow]", "", migration.checksum)

    console.print(table)


def run_pending(conn, dry_run: bool = False) -> None:
    applied = {name: checksum for name, (checksum, _) in fetch_applied(conn).items()}
    pending, changed = split_pending(discover_migrations(), applied)

    for migration in changed:
        console.print(f"[yellow]Warning:[/yellow] {migration.name} has changed since it was applied")

    if not pending:
        console.print("[green]Database is up to date.[/green]")
        return

    console.print(f"{len(pending)} pending migration(s):")
    for migration in pending:
        console.print(f"  - {migration.name}")

    if dry_run:
        return

    for migration in pending:
        apply(conn, migration)
    console.print("[green]Done.[/green]")


def force(conn, prefix: str) -> None:
    matches = [m for m in discover_migrations() if m.name.startswith(prefix)]
    if len(matches) != 1:
        names = ", ".join(m.name for m in matches) or "none"
        console.print(f"[red]Error:[/red] '{prefix}' must match exactly one migration (matched: {names})")
        sys.exit(1)

    migration = matches[0]
    console.print(f"[yellow]Re-applying {migration.name}.[/yellow] Statements that are not idempotent may fail.")
    if input("Continue? [y/N] ").lower() != "y":
        console.print("Aborted.")
        return

    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("DELETE FROM {} WHERE name = %s").format(sql.Identifier(MIGRATIONS_TABLE)),
            (migration.name,),
        )
    conn.commit()
    apply(conn, migration)


def main():
    parser = argparse.ArgumentParser(description="Apply Postly database migrations")
    parser.add_argument("--status", action="store_true", help="Show migration status only")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations without applying")
    parser.add_argument("--force", metavar="PREFIX", help="Re-apply the migration whose name starts with PREFIX")
    args = parser.parse_args()

    console.print("[bold]Postly Database Migrations[/bold]\n")

    conn = connect()
    try:
        ensure_migrations_table(conn)
        if args.status:
            show_status(conn)
        elif args.force:
            force(conn, args.force)
        else:
            run_pending(conn, dry_run=args.dry_run)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
