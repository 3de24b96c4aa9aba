"""Tests for the ginkou command-line interface."""

import io
import sys

import pytest

from conftest import FakeExtractor
from ginkou import SentenceBank, cli


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the CLI away from the real home directory and MeCab."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(cli, "MecabExtractor", lambda args=None: FakeExtractor())
    return home


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "bank.db"


class TestAdd:

    def test_add_from_file(self, tmp_path, db_path, capsys):
        source = tmp_path / "in.txt"
        source.write_text("A B。\nB C。", encoding="utf-8")
        assert cli.main(["add", "-f", str(source), "-d", str(db_path)]) == 0
        out = capsys.readouterr().out
        assert "#1: AB。" in out
        assert "#2: BC。" in out
        with SentenceBank(db_path) as bank:
            assert bank.matching_sentences("AB") == ["AB。"]

    def test_add_from_stdin(self, db_path, monkeypatch):
        stdin = io.TextIOWrapper(io.BytesIO("A。".encode("utf-8")), encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", stdin)
        assert cli.main(["add", "--database", str(db_path)]) == 0
        with SentenceBank(db_path) as bank:
            assert bank.matching_sentences("A") == ["A。"]

    def test_missing_file_is_not_fatal(self, tmp_path, db_path, capsys):
        missing = tmp_path / "missing.txt"
        assert cli.main(["add", "-f", str(missing), "-d", str(db_path)]) == 0
        assert "Couldn't open" in capsys.readouterr().out
        assert not db_path.exists()

    def test_decode_error_reported(self, tmp_path, db_path, capsys):
        source = tmp_path / "in.txt"
        source.write_bytes("A。".encode("utf-8") + b"\xff\xe3\x80\x82")
        assert cli.main(["add", "-f", str(source), "-d", str(db_path)]) == 0
        assert "Err on #2" in capsys.readouterr().out

    def test_extraction_failure(self, tmp_path, db_path, monkeypatch, capsys):
        monkeypatch.setattr(
            cli, "MecabExtractor",
            lambda args=None: FakeExtractor(fail_on={"B。"}),
        )
        source = tmp_path / "in.txt"
        source.write_text("A。B。", encoding="utf-8")
        assert cli.main(["add", "-f", str(source), "-d", str(db_path)]) == 1
        assert "Error:" in capsys.readouterr().err
        with SentenceBank(db_path) as bank:
            assert bank.count_sentences() == 0

    def test_database_from_config(self, tmp_path, capsys):
        db_path = tmp_path / "configured.db"
        config = tmp_path / "ginkou.yaml"
        config.write_text(f"database: {db_path}\n")
        source = tmp_path / "in.txt"
        source.write_text("A。", encoding="utf-8")
        assert cli.main(["add", "-f", str(source), "--config", str(config)]) == 0
        assert db_path.exists()

    def test_default_database(self, tmp_path, isolated_home):
        source = tmp_path / "in.txt"
        source.write_text("A。", encoding="utf-8")
        assert cli.main(["add", "-f", str(source)]) == 0
        assert (isolated_home / ".ginkoudb").exists()


class TestGet:

    @pytest.fixture
    def filled(self, db_path):
        with SentenceBank(db_path) as bank:
            with bank.batch():
                for i in range(205):
                    bank.add_word("w", bank.add_sentence("x" * (i + 1)))
        return db_path

    def test_best(self, filled, capsys):
        assert cli.main(["get", "w", "-d", str(filled)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 200
        assert lines[0] == "x"

    def test_all(self, filled, capsys):
        assert cli.main(["get", "w", "--allwords", "-d", str(filled)]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 205

    def test_limit_from_config(self, filled, tmp_path, capsys):
        config = tmp_path / "ginkou.yaml"
        config.write_text("limit: 3\n")
        assert cli.main(["get", "w", "-d", str(filled), "--config", str(config)]) == 0
        assert capsys.readouterr().out.splitlines() == ["x", "xx", "xxx"]

    def test_unknown_word(self, filled, capsys):
        assert cli.main(["get", "nothing", "-d", str(filled)]) == 0
        assert capsys.readouterr().out == ""

    def test_broken_pipe_swallowed(self, filled, monkeypatch):
        class ClosedPipe:
            def write(self, s):
                raise BrokenPipeError()

            def flush(self):
                raise BrokenPipeError()

        monkeypatch.setattr(sys, "stdout", ClosedPipe())
        assert cli.main(["get", "w", "-d", str(filled)]) == 0

    def test_schema_error(self, tmp_path, capsys):
        bogus = tmp_path / "bogus.db"
        bogus.write_bytes(b"not a database at all " * 100)
        assert cli.main(["get", "w", "-d", str(bogus)]) == 1
        assert "Error:" in capsys.readouterr().err


class TestMisc:

    def test_stats(self, db_path, capsys):
        with SentenceBank(db_path) as bank:
            sid = bank.add_sentence("A B")
            bank.add_words(["A", "B"], sid)
        assert cli.main(["stats", "-d", str(db_path)]) == 0
        out = capsys.readouterr().out
        assert "Sentences:   1" in out
        assert "Words:       2" in out
        assert "Memberships: 2" in out

    def test_no_command(self, capsys):
        assert cli.main([]) == 1
