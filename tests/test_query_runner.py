"""
Tests for the stored-query runner.

All tests run against a small title_basics table built in a temporary
database, and write their query/result files under tmp_path.
"""

import pytest

from moviedb_loader.consts.QueryErrorKind import QueryErrorKind
from moviedb_loader.service.errors import QueryError
from moviedb_loader.service.query.query_runner import QueryRunner, format_value


@pytest.fixture
def movies(database):
    database.execute(
        "CREATE TABLE title_basics (tconst TEXT, titleType TEXT, primaryTitle TEXT, originalTitle TEXT, "
        "isAdult INTEGER, startYear TEXT, endYear TEXT, runtimeMinutes TEXT, genres TEXT);"
    )
    rows = [
        ("tt0111161", "movie", "The Shawshank Redemption", "The Shawshank Redemption", "0", "1994", "\\N", "142", "Drama"),
        ("tt0110912", "movie", None, "Pulp Fiction", "0", "1994", "\\N", "154", "Crime,Drama"),
        ("tt0068646", "movie", "The Godfather", "The Godfather", "0", "1972", "\\N", "175", "Crime,Drama"),
    ]
    database.connection.executemany("INSERT INTO title_basics VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)", rows)
    return database


def write_query(tmp_path, text, name="query.txt"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ============================================================================
# Result format
# ============================================================================

def test_query_writes_tab_separated_rows_with_null_literal(movies, tmp_path):
    query = write_query(tmp_path, "SELECT tconst, primaryTitle FROM title_basics WHERE startYear = '1994';")
    result = tmp_path / "result.txt"

    run = QueryRunner(movies).run(query, result)

    assert result.read_bytes() == b"tt0111161\tThe Shawshank Redemption\ntt0110912\tNULL\n"
    assert run.rows_written == 2
    assert run.column_count == 2


def test_repeated_runs_produce_identical_files(movies, tmp_path):
    query = write_query(tmp_path, "SELECT * FROM title_basics ORDER BY tconst;")
    result = tmp_path / "result.txt"
    runner = QueryRunner(movies)

    runner.run(query, result)
    first = result.read_bytes()
    runner.run(query, result)

    assert result.read_bytes() == first


def test_result_file_is_overwritten(movies, tmp_path):
    result = tmp_path / "result.txt"
    result.write_text("stale line 1\nstale line 2\nstale line 3\n", encoding="utf-8")
    query = write_query(tmp_path, "SELECT tconst FROM title_basics WHERE startYear = '1972';")

    QueryRunner(movies).run(query, result)

    assert result.read_text(encoding="utf-8") == "tt0068646\n"


def test_multi_line_query(movies, tmp_path):
    query = write_query(tmp_path, "SELECT tconst,\n       runtimeMinutes\n  FROM title_basics\n WHERE tconst = 'tt0068646'\n;\n")
    result = tmp_path / "result.txt"

    QueryRunner(movies).run(query, result)

    assert result.read_text(encoding="utf-8") == "tt0068646\t175\n"


def test_empty_result_gives_empty_file(movies, tmp_path):
    query = write_query(tmp_path, "SELECT tconst FROM title_basics WHERE startYear = '2050';")
    result = tmp_path / "result.txt"

    run = QueryRunner(movies).run(query, result)

    assert result.read_bytes() == b""
    assert run.rows_written == 0


def test_numeric_values_use_engine_text(database, tmp_path):
    query = write_query(tmp_path, "SELECT 5, 7.5, 8.0, -2, 1e20;")
    result = tmp_path / "result.txt"

    QueryRunner(database).run(query, result)

    assert result.read_text(encoding="utf-8") == "5\t7.5\t8.0\t-2\t1.0e+20\n"


def test_only_first_statement_is_executed(movies, tmp_path):
    query = write_query(tmp_path, "SELECT 'first';\nDROP TABLE title_basics;\n")
    result = tmp_path / "result.txt"

    QueryRunner(movies).run(query, result)

    assert result.read_text(encoding="utf-8") == "first\n"
    assert "title_basics" in movies.list_tables()


def test_statement_without_rows_succeeds(movies, tmp_path):
    query = write_query(tmp_path, "CREATE INDEX idx_year ON title_basics (startYear);")
    result = tmp_path / "result.txt"

    run = QueryRunner(movies).run(query, result)

    assert run.column_count == 0
    assert result.read_bytes() == b""


def test_run_reports_resource_usage(movies, tmp_path):
    query = write_query(tmp_path, "SELECT COUNT(*) FROM title_basics;")

    run = QueryRunner(movies).run(query, tmp_path / "result.txt")

    assert run.elapsed_seconds >= 0
    assert run.cpu_seconds is None or run.cpu_seconds >= 0
    assert run.to_dict()["result_file"] == str(tmp_path / "result.txt")


# ============================================================================
# Errors
# ============================================================================

def test_missing_query_file(movies, tmp_path):
    with pytest.raises(QueryError) as excinfo:
        QueryRunner(movies).run(tmp_path / "absent.txt", tmp_path / "result.txt")

    assert excinfo.value.kind == QueryErrorKind.FILE_OPEN


def test_query_over_limit_is_rejected_not_truncated(movies, tmp_path):
    query = write_query(tmp_path, "SELECT tconst FROM title_basics WHERE primaryTitle LIKE '%The%';")
    result = tmp_path / "result.txt"

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(movies, max_query_bytes=16).run(query, result)

    assert excinfo.value.kind == QueryErrorKind.TOO_LARGE
    assert not result.exists()


def test_query_at_limit_is_accepted(database, tmp_path):
    text = "SELECT 1;"
    query = write_query(tmp_path, text)

    QueryRunner(database, max_query_bytes=len(text)).run(query, tmp_path / "result.txt")

    assert (tmp_path / "result.txt").read_text(encoding="utf-8") == "1\n"


def test_invalid_sql_fails_prepare_with_engine_text(movies, tmp_path):
    query = write_query(tmp_path, "SELEC tconst FROM title_basics;")
    result = tmp_path / "result.txt"

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(movies).run(query, result)

    assert excinfo.value.kind == QueryErrorKind.PREPARE
    assert "syntax error" in excinfo.value.detail
    assert not result.exists()


def test_unknown_table_fails_prepare(database, tmp_path):
    query = write_query(tmp_path, "SELECT tconst, primaryTitle FROM title_basics;")

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(database).run(query, tmp_path / "result.txt")

    assert excinfo.value.kind == QueryErrorKind.PREPARE
    assert "no such table" in excinfo.value.detail


def test_comment_only_query_fails_prepare(database, tmp_path):
    query = write_query(tmp_path, "-- nothing to run\n")

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(database).run(query, tmp_path / "result.txt")

    assert excinfo.value.kind == QueryErrorKind.PREPARE


def test_unwritable_result_file(movies, tmp_path):
    query = write_query(tmp_path, "SELECT tconst FROM title_basics;")
    result_dir = tmp_path / "out"
    result_dir.mkdir()

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(movies).run(query, result_dir)

    assert excinfo.value.kind == QueryErrorKind.FILE_OPEN


def test_error_while_stepping_rows_is_execution_error(database, tmp_path):
    database.execute("CREATE TABLE n (x INTEGER);")
    database.connection.executemany("INSERT INTO n VALUES (?)", [(1,), (2,), (-9223372036854775808,)])
    query = write_query(tmp_path, "SELECT abs(x) FROM n;")

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(database).run(query, tmp_path / "result.txt")

    assert excinfo.value.kind == QueryErrorKind.EXECUTION
    assert "integer overflow" in excinfo.value.detail


def test_error_on_first_row_is_execution_error(database, tmp_path):
    database.execute("CREATE TABLE n (x INTEGER);")
    database.execute("INSERT INTO n VALUES (-9223372036854775808);")
    query = write_query(tmp_path, "SELECT abs(x) FROM n;")
    result = tmp_path / "result.txt"

    with pytest.raises(QueryError) as excinfo:
        QueryRunner(database).run(query, result)

    assert excinfo.value.kind == QueryErrorKind.EXECUTION
    assert "integer overflow" in excinfo.value.detail
    assert not result.exists()


def test_explain_query_runs(movies, tmp_path):
    query = write_query(tmp_path, "EXPLAIN QUERY PLAN SELECT tconst FROM title_basics;")
    result = tmp_path / "result.txt"

    run = QueryRunner(movies).run(query, result)

    assert run.rows_written >= 1


# ============================================================================
# format_value
# ============================================================================

@pytest.mark.parametrize("value, expected", [
    (None, "NULL"),
    ("text", "text"),
    (42, "42"),
    (0.1, "0.1"),
    (3.0, "3.0"),
    (b"raw", "raw"),
    (float("inf"), "Inf"),
])
def test_format_value(value, expected):
    assert format_value(value) == expected
