import mysql.connector
from mysql.connector.constants import ClientFlag

from src.lazyhr.lazyhr.database.connection import DatabaseConnection, DBConfig


def test_connect_counts_matched_rows(monkeypatch):
    seen = {}
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: seen.update(kwargs) or "conn")
    db = DatabaseConnection(DBConfig(host="db", port="3307", user="hr", password="pw", database="lazyhr"))

    assert db.connect() == "conn"
    assert seen["port"] == 3307
    assert seen["database"] == "lazyhr"
    assert seen["client_flags"] == [ClientFlag.FOUND_ROWS]
    assert not hasattr(db, "config")
