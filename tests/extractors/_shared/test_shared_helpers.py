"""Tests for the small shared helpers (attributes, URLs, SQLite)."""

import sqlite3

import pytest

from core.enums import AttributeType
from extractors._shared.attributes import collect_attributes
from extractors._shared.sqlite_helpers import SQLiteReadError, safe_execute, safe_sqlite_connect, table_exists
from extractors._shared.url_utils import extract_domain


def test_collect_attributes_drops_missing():
    attributes = collect_attributes("Chrome", [
        (AttributeType.URL, " http://a/ "),
        (AttributeType.TITLE, ""),
        (AttributeType.DATETIME, None),
        (AttributeType.VALUE, 0),
    ])

    assert [(a.attribute_type, a.value) for a in attributes] == [
        (AttributeType.URL, "http://a/"),
        (AttributeType.VALUE, 0),
    ]
    assert {a.source for a in attributes} == {"Chrome"}


@pytest.mark.parametrize("url,domain", [
    ("https://User@WWW.Example.com:8080/path", "www.example.com"),
    ("file:///C:/x.html", None),
    ("not a url", None),
    ("", None),
    (None, None),
])
def test_extract_domain(url, domain):
    assert extract_domain(url) == domain


def test_safe_sqlite_connect_read_only(tmp_path):
    db = tmp_path / "t.db"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE t (x INTEGER)")
    conn.execute("INSERT INTO t VALUES (1)")
    conn.commit()
    conn.close()

    with safe_sqlite_connect(db) as ro:
        assert table_exists(ro, "t")
        assert not table_exists(ro, "missing")
        assert safe_execute(ro, "SELECT x FROM t")[0]["x"] == 1
        with pytest.raises(SQLiteReadError):
            safe_execute(ro, "INSERT INTO t VALUES (2)")


def test_safe_sqlite_connect_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        with safe_sqlite_connect(tmp_path / "nope.db"):
            pass


def test_garbage_file_raises_read_error(tmp_path):
    db = tmp_path / "garbage"
    db.write_bytes(b"this is not a database" * 100)

    with safe_sqlite_connect(db) as conn:
        with pytest.raises(SQLiteReadError):
            table_exists(conn, "urls")
