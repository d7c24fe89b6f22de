from __future__ import annotations

from decimal import Decimal

import mysql.connector
from mysql.connector.constants import ClientFlag

from src.school_results.school_results.database.connection import DatabaseConnection, DBConfig
from src.school_results.school_results.database.mysql_base import placeholders, to_float


def test_connect_reports_matched_rows(monkeypatch):
    captured = {}

    def fake_connect(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)

    DatabaseConnection(DBConfig.from_dict({"database": "school_results_test"})).connect()

    assert ClientFlag.FOUND_ROWS in captured["client_flags"]
    assert captured["database"] == "school_results_test"
    assert captured["port"] == 3306


def test_to_float():
    assert to_float(None) is None
    assert to_float(Decimal("85.50")) == 85.5
    assert to_float(60) == 60.0


def test_placeholders():
    assert placeholders(3) == "%s,%s,%s"
