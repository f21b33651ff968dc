from unittest.mock import patch

import pytest

from sortable_ids import cli
from sortable_ids.ids import Generator
from sortable_ids.state import SqliteDatabase


def read_ids(db_path):
    with SqliteDatabase(db_path) as db:
        stmt = db.prepare("SELECT id, minted_at_ms FROM identifiers ORDER BY rowid")
        rows = []
        while stmt.step():
            rows.append((stmt.column_text(0), stmt.column_int64(1)))
        stmt.finalize()
    return rows


class TestParser:
    def test_mint_defaults(self):
        args = cli.build_parser().parse_args(["mint"])
        assert args.count == 1
        assert args.seed is None
        assert args.timestamp is None
        assert args.db is None

    def test_list_requires_db(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["list"])


class TestMint:
    def test_prints_deterministic_ids(self, capsys):
        expected = Generator(7).next(1000)

        code = cli.main(["mint", "--seed", "7", "--timestamp", "1000"])

        assert code == 0
        assert expected in capsys.readouterr().out

    def test_stores_ids_in_mint_order(self, db_path):
        code = cli.main(
            ["mint", "--seed", "3", "--timestamp", "5000", "-n", "4", "--db", str(db_path)]
        )

        generator = Generator(3)
        expected = [(generator.next(5000), 5000) for _ in range(4)]
        assert code == 0
        assert read_ids(db_path) == expected

    def test_duplicate_ids_report_database_error(self, db_path, capsys):
        argv = ["mint", "--seed", "3", "--timestamp", "5000", "--db", str(db_path)]
        assert cli.main(argv) == 0

        assert cli.main(argv) == 1
        assert "step_error" in capsys.readouterr().out

    def test_invalid_seed(self, capsys):
        assert cli.main(["mint", "--seed", "-1"]) == 1
        assert "Error" in capsys.readouterr().out


class TestList:
    def test_lists_sorted_ids(self, db_path, capsys):
        cli.main(["mint", "--seed", "9", "--timestamp", "20", "-n", "2", "--db", str(db_path)])
        capsys.readouterr()

        assert cli.main(["list", "--db", str(db_path)]) == 0

        out = capsys.readouterr().out
        generator = Generator(9)
        first, second = generator.next(20), generator.next(20)
        assert first in out and second in out
        assert out.index(first) < out.index(second)

    def test_empty_database(self, db_path, capsys):
        assert cli.main(["list", "--db", str(db_path)]) == 0
        assert "No identifiers stored" in capsys.readouterr().out


class TestMintAtomicity:
    def test_failed_batch_leaves_table_unchanged(self, db_path, capsys):
        generator = Generator(3)
        batch = [generator.next(5000) for _ in range(3)]
        with SqliteDatabase(db_path) as db:
            db.exec(cli.CREATE_TABLE_SQL)
            cli.store_identifiers(db, [(batch[1], 5000)])

        argv = ["mint", "--seed", "3", "--timestamp", "5000", "-n", "3", "--db", str(db_path)]
        assert cli.main(argv) == 1

        assert read_ids(db_path) == [(batch[1], 5000)]
        assert "step_error" in capsys.readouterr().out


class TestOutputStreams:
    def test_logs_stay_off_stdout(self, db_path, capsys):
        with patch.dict("os.environ", {"USE_JSON_LOGS": "true"}):
            code = cli.main(
                ["mint", "--seed", "5", "--timestamp", "10", "--db", str(db_path)]
            )

        captured = capsys.readouterr()
        assert code == 0
        assert Generator(5).next(10) in captured.out
        assert "Stored 1 identifiers" not in captured.out
        assert "Stored 1 identifiers" in captured.err
