import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sortable_ids.ids import Generator, GeneratorConfig
from sortable_ids.state import SqliteDatabase, SqliteError
from sortable_ids.utils.logging_config import setup_logging

logger = logging.getLogger("sortable_ids.cli")
console = Console()

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS identifiers (
    id TEXT PRIMARY KEY,
    minted_at_ms INTEGER NOT NULL
);
"""
INSERT_SQL = "INSERT INTO identifiers (id, minted_at_ms) VALUES (?, ?)"
LIST_SQL = "SELECT id, minted_at_ms, rowid FROM identifiers ORDER BY id LIMIT ?"


def store_identifiers(db: SqliteDatabase, minted: List[tuple[str, int]]) -> List[int]:
    db.exec(CREATE_TABLE_SQL)
    stmt = db.prepare(INSERT_SQL)
    rowids = []
    try:
        with db.transaction():
            for identifier, minted_at_ms in minted:
                stmt.bind_text(1, identifier)
                stmt.bind_int64(2, minted_at_ms)
                stmt.step()
                stmt.reset()
                rowids.append(db.last_insert_rowid())
    finally:
        stmt.finalize()
    return rowids


def cmd_mint(args: argparse.Namespace) -> int:
    config = GeneratorConfig(seed=args.seed)
    generator = Generator.from_config(config)

    minted = []
    for _ in range(args.count):
        if args.timestamp is None:
            identifier = generator.next_now()
        else:
            identifier = generator.next(args.timestamp)
        minted.append((identifier, generator.state.last_timestamp))

    rowids: List[Optional[int]] = [None] * len(minted)
    if args.db:
        with SqliteDatabase(args.db) as db:
            rowids = store_identifiers(db, minted)
        logger.info(f"Stored {len(minted)} identifiers in {args.db}")

    table = Table(title=f"Minted identifiers (seed {config.seed})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Identifier", style="bold cyan")
    table.add_column("Timestamp (ms)", justify="right")
    if args.db:
        table.add_column("Row ID", justify="right", style="green")

    for i, ((identifier, minted_at_ms), rowid) in enumerate(zip(minted, rowids), 1):
        row = [str(i), identifier, str(minted_at_ms)]
        if args.db:
            row.append(str(rowid))
        table.add_row(*row)

    console.print(table)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    with SqliteDatabase(args.db) as db:
        db.exec(CREATE_TABLE_SQL)
        stmt = db.prepare(LIST_SQL)
        stmt.bind_int64(1, args.limit)
        table = Table(title=f"Identifiers in {args.db}")
        table.add_column("Identifier", style="bold cyan")
        table.add_column("Timestamp (ms)", justify="right")
        table.add_column("Row ID", justify="right", style="green")
        try:
            while stmt.step():
                table.add_row(
                    stmt.column_text(0),
                    str(stmt.column_int64(1)),
                    str(stmt.column_int64(2)),
                )
        finally:
            stmt.finalize()

    if table.row_count == 0:
        console.print("[yellow]No identifiers stored.[/yellow]")
    else:
        console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sortable-ids", description="Mint and store sortable identifiers."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    mint = subparsers.add_parser("mint", help="Mint new identifiers")
    mint.add_argument("-n", "--count", type=int, default=1)
    mint.add_argument("--seed", type=int, default=None, help="PRNG seed")
    mint.add_argument(
        "--timestamp",
        type=int,
        default=None,
        help="Milliseconds since the epoch (defaults to now)",
    )
    mint.add_argument("--db", default=None, help="SQLite file to store ids in")
    mint.set_defaults(func=cmd_mint)

    list_cmd = subparsers.add_parser("list", help="List stored identifiers")
    list_cmd.add_argument("--db", required=True)
    list_cmd.add_argument("--limit", type=int, default=50)
    list_cmd.set_defaults(func=cmd_list)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging(stream=sys.stderr)
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except SqliteError as e:
        console.print(f"[bold red]Database error ({e.kind.value}):[/bold red] {escape(e.message)}")
        return 1
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
