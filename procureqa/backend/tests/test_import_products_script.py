"""
Command-line spreadsheet import (scripts/import_products.py)
"""
import json

import pytest
import sqlalchemy
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import init_db
from app.models import Product, Supplier
from scripts.import_products import check_rows, main


def test_check_rows_reports_missing_and_repeated(row):
    result = check_rows([row("Bolt A", "IC1"), row("Bolt B", "IC1"), row("Nut", "IC2", unit="")])

    assert result.errors == [
        {"row": 2, "error": "Duplicate Item Code* found in Excel file: IC1"},
        {"row": 3, "error": "Missing fields: Unit*"},
    ]
    assert result.missing_fields == [{"row": 3, "fields": ["Unit*"]}]
    assert result.success_count == 0


def test_dry_run_does_not_need_a_database(tmp_path, make_xlsx, row, capsys):
    sheet = tmp_path / "products.xlsx"
    sheet.write_bytes(make_xlsx([row("Bolt A", "IC1")]))

    assert main(["--file", str(sheet), "--dry-run"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["errors"] == []
    assert report["rejectCount"] == "Total Failed : 0"


def test_dry_run_fails_on_repeated_item_code(tmp_path, make_xlsx, row, capsys):
    sheet = tmp_path / "products.xlsx"
    sheet.write_bytes(make_xlsx([row("Bolt A", "IC1"), row("Bolt B", "IC1")]))

    assert main(["--file", str(sheet), "--dry-run"]) == 1
    assert json.loads(capsys.readouterr().out)["duplicateItemCount"] == 1


def test_postgres_db_url_gets_psycopg_driver(tmp_path, make_xlsx, row, monkeypatch):
    sheet = tmp_path / "products.xlsx"
    sheet.write_bytes(make_xlsx([row("Bolt A", "IC1")]))
    seen = []

    def fake_create_engine(url, *args, **kwargs):
        seen.append(url)
        raise RuntimeError("stop before connecting")

    monkeypatch.setattr(sqlalchemy, "create_engine", fake_create_engine)

    with pytest.raises(RuntimeError):
        main([
            "--file", str(sheet),
            "--supplier-id", "00000000-0000-0000-0000-000000000001",
            "--db-url", "postgresql://u:p@db/procureqa",
        ])

    assert seen == ["postgresql+psycopg://u:p@db/procureqa"]


def test_missing_file_fails(tmp_path):
    assert main(["--file", str(tmp_path / "nope.xlsx"), "--dry-run"]) == 1


def test_import_into_database(tmp_path, make_xlsx, row, capsys):
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"
    engine = create_engine(db_url)
    init_db(bind=engine)
    session = sessionmaker(bind=engine)()
    supplier = Supplier(first_name="Omar", email="omar@example.com", company_name="Doha Steel", contact_number="974 44556677")
    session.add(supplier)
    session.commit()
    supplier_id = str(supplier.id)
    sheet = tmp_path / "products.xlsx"
    sheet.write_bytes(make_xlsx([row("Bolt A", "IC1"), row("Nut A", "IC2")]))

    exit_code = main(["--file", str(sheet), "--supplier-id", supplier_id, "--db-url", db_url])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["successCount"] == 2
    assert session.query(Product).count() == 2
    session.close()
    engine.dispose()
