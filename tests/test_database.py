import os

import pytest

from database import Database, ParameterCountError, StoreOpenError


def _make_people(db):
    db.execute("CREATE TABLE people (name TEXT, age INTEGER, note TEXT)")
    db.execute("INSERT INTO people (name, age, note) VALUES (?, ?, ?)", ("Ada", 36, None))
    db.execute("INSERT INTO people (name, age, note) VALUES (?, ?, ?)", ("Alan", 41, "enigma"))


def test_open_creates_file(tmp_path):
    db_file = str(tmp_path / "new.db")
    with Database.open(db_file) as db:
        assert db.filename() == db_file
        db.execute("CREATE TABLE t (x TEXT)")
    assert os.path.exists(db_file)


def test_open_missing_directory_raises(tmp_path):
    db_file = str(tmp_path / "missing" / "diary.db")
    with pytest.raises(StoreOpenError) as excinfo:
        Database.open(db_file)
    assert excinfo.value.filename == db_file
    assert excinfo.value.message


def test_open_non_database_file_raises(tmp_path):
    db_file = tmp_path / "notes.db"
    db_file.write_text("these are not the pages you are looking for\n" * 64)
    with pytest.raises(StoreOpenError):
        Database.open(str(db_file))


def test_select_and_fetch_rows(db):
    _make_people(db)
    assert db.select("SELECT name, age, note FROM people ORDER BY name") == 3
    assert db.column_count() == 3
    assert db.column_names() == ("name", "age", "note")

    assert db.fetch_row() == ("Ada", "36", None)
    assert db.fetch_row() == ("Alan", "41", "enigma")
    assert db.fetch_row() is None
    # Exhaustion finalizes the statement
    assert db.column_count() == 0
    assert db.column_names() is None
    assert db.fetch_row() is None


def test_fetch_row_without_statement(db):
    assert db.fetch_row() is None
    assert db.column_count() == 0


def test_rows_are_independent_copies(db):
    _make_people(db)
    db.select("SELECT name FROM people ORDER BY name")
    first = db.fetch_row()
    second = db.fetch_row()
    assert first == ("Ada",)
    assert second == ("Alan",)


def test_new_statement_replaces_open_one(db):
    _make_people(db)
    db.select("SELECT name FROM people ORDER BY name")
    assert db.fetch_row() == ("Ada",)
    db.select("SELECT age FROM people WHERE name = ?", ("Alan",))
    assert db.fetch_row() == ("41",)
    assert db.fetch_row() is None


def test_execute_returns_affected_rows(db):
    assert db.execute("CREATE TABLE t (x TEXT)") == 0
    assert db.execute("INSERT INTO t (x) VALUES (?)", ("a",)) == 1
    assert db.execute("INSERT INTO t (x) VALUES (?)", ("b",)) == 1
    assert db.execute("UPDATE t SET x = ?", ("c",)) == 2
    assert db.execute("DELETE FROM t WHERE x = ?", ("nope",)) == 0
    assert db.execute("DELETE FROM t") == 2


def test_execute_failure_is_soft(db, capsys):
    assert db.execute("INSERT INTO missing (x) VALUES (?)", ("a",)) == 0
    # execute leaves reporting to the caller
    assert capsys.readouterr().out == ""
    assert "no such table" in db.last_error

    db.report_error("Could not add row")
    assert capsys.readouterr().out.startswith("Could not add row: no such table")


def test_select_failure_reports_and_returns_zero(db, capsys):
    assert db.select("SELEKT * FROM nowhere") == 0
    assert db.fetch_row() is None
    out = capsys.readouterr().out
    assert out.startswith("Query failed: ")
    assert "syntax error" in out


def test_successful_statement_clears_last_error(db, capsys):
    db.select("SELECT * FROM nowhere")
    assert db.last_error is not None
    db.select("SELECT 1")
    assert db.last_error is None
    capsys.readouterr()
    db.report_error("Could not delete row")
    assert capsys.readouterr().out == "Could not delete row: not an error\n"


def test_scalar_value(db):
    _make_people(db)
    assert db.scalar_value("SELECT age FROM people WHERE name = ?", ("Ada",)) == "36"
    assert db.scalar_value("SELECT age FROM people WHERE name = ?", ("Nobody",)) is None
    # The statement is finalized after reading the value
    assert db.fetch_row() is None


def test_scalar_value_on_failed_query(db, capsys):
    assert db.scalar_value("SELECT name FROM nowhere") is None
    assert "no such table" in capsys.readouterr().out


def test_parameter_count_mismatch_raises(db):
    _make_people(db)
    with pytest.raises(ParameterCountError):
        db.select("SELECT * FROM people WHERE name = ?", ("Ada", "Alan"))
    with pytest.raises(ParameterCountError):
        db.execute("INSERT INTO people (name, age) VALUES (?, ?)", ("Grace",))
    with pytest.raises(ParameterCountError):
        db.scalar_value("SELECT count(*) FROM people", ("extra",))


def test_string_params_rejected(db):
    _make_people(db)
    with pytest.raises(TypeError):
        db.select("SELECT * FROM people WHERE name = ?", "A")


def test_report_error_after_close(db, capsys):
    db.close()
    db.report_error()
    assert capsys.readouterr().out == "Unknown error\n"
    assert db.select("SELECT 1") == 0
    assert db.execute("SELECT 1") == 0
