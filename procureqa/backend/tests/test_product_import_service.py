"""
Import pipeline tests run against the service directly (no HTTP).
"""
from io import BytesIO

import pytest
from sqlalchemy.exc import OperationalError

from app.models import Category, Product, SubCategory
from app.services.product_import_service import (
    ImportResult,
    ProductImportService,
    RowOutcome,
    SpreadsheetParseError,
    missing_required_fields,
    parse_spreadsheet,
)


def _import(db_session, supplier, rows):
    return ProductImportService.import_rows(db_session, supplier.id, rows)


# Parser

def test_parse_trims_headers_and_values(make_xlsx):
    content = make_xlsx(
        [["  Bolt A ", " IC1", "pcs ", "Hardware", " Acme", "d"]],
        headers=[" Product Name", "Item Code* ", "Unit*", "Group", "Brand", "Description"],
    )

    rows = parse_spreadsheet(BytesIO(content))

    assert rows == [{
        "Product Name": "Bolt A",
        "Item Code*": "IC1",
        "Unit*": "pcs",
        "Group": "Hardware",
        "Brand": "Acme",
        "Description": "d",
    }]


def test_parse_empty_cells_become_empty_strings(make_xlsx, row):
    rows = parse_spreadsheet(make_xlsx([row("Bolt A", "IC1", unit="")]))

    assert rows[0]["Unit*"] == ""


def test_parse_skips_blank_lines(make_xlsx, row):
    content = make_xlsx([row("Bolt A", "IC1"), [None] * 6, row("Bolt B", "IC2")])

    rows = parse_spreadsheet(content)

    assert [r["Item Code*"] for r in rows] == ["IC1", "IC2"]


def test_parse_numeric_cells_as_text(make_xlsx, row):
    rows = parse_spreadsheet(make_xlsx([row("Bolt A", 1001)]))

    assert rows[0]["Item Code*"] == "1001"


def test_parse_header_only_workbook(make_xlsx):
    assert parse_spreadsheet(make_xlsx([])) == []


def test_parse_rejects_non_spreadsheet_bytes():
    with pytest.raises(SpreadsheetParseError):
        parse_spreadsheet(b"this is not a workbook")


# Validation

def test_missing_required_fields_keeps_required_order():
    assert missing_required_fields({"Product Name": "Bolt A", "Group": ""}) == [
        "Item Code*", "Unit*", "Group", "Brand", "Description",
    ]


# Pipeline

def test_two_row_duplicate_fixture(db_session, supplier, row):
    result = _import(db_session, supplier, [row("Bolt A", "IC1"), row("Bolt A", "IC1")])

    assert result.success_count == 1
    assert result.duplicate_item_count == 1
    assert result.successful_uploads == [{"row": 1, "product_name": "Bolt A"}]
    assert result.errors == [{"row": 2, "error": "Duplicate Item Code* found in Excel file: IC1"}]
    assert db_session.query(Product).count() == 1


def test_first_occurrence_wins_within_file(db_session, supplier, row):
    rows = [
        row("Bolt A", "IC1"),
        row("Bolt B", "IC2"),
        row("Bolt A v2", "IC1"),
        row("Bolt A v3", "IC1"),
    ]

    result = _import(db_session, supplier, rows)

    assert [s["row"] for s in result.successful_uploads] == [1, 2]
    assert [e["row"] for e in result.errors] == [3, 4]
    product = db_session.query(Product).filter(Product.item_code == "IC1").one()
    assert product.product_name == "Bolt A"


def test_missing_unit_is_reported_per_field(db_session, supplier, row):
    result = _import(db_session, supplier, [row("Bolt A", "IC1", unit="")])

    assert result.missing_fields == [{"row": 1, "fields": ["Unit*"]}]
    assert result.errors == [{"row": 1, "error": "Missing fields: Unit*"}]
    assert result.successful_uploads == []
    assert result.reject_count == 1


def test_zero_valid_rows(db_session, supplier, row):
    rows = [
        row("Bolt A", ""),
        row("", "IC2", group=""),
        {"Product Name": "Only a name"},
    ]

    result = _import(db_session, supplier, rows)

    assert result.success_count == 0
    reported = {m["row"] for m in result.missing_fields} | {e["row"] for e in result.errors}
    assert reported == {1, 2, 3}
    assert db_session.query(Product).count() == 0
    assert db_session.query(Category).count() == 0


def test_store_duplicate_leaves_existing_product_untouched(db_session, supplier, row):
    _import(db_session, supplier, [row("Original bolt", "IC1", unit="box", description="first")])

    result = _import(db_session, supplier, [row("Renamed bolt", "IC1", unit="pcs", description="second")])

    assert result.success_count == 0
    assert result.duplicate_item_count == 1
    assert result.errors == [{"row": 1, "error": "Duplicate Item Code* found in database: IC1"}]
    db_session.expire_all()
    product = db_session.query(Product).filter(Product.item_code == "IC1").one()
    assert (product.product_name, product.unit, product.description) == ("Original bolt", "box", "first")


def test_category_count_only_counts_new_groups(db_session, supplier, row):
    db_session.add(Category(name="Hardware"))
    db_session.commit()
    rows = [
        row("Bolt A", "IC1", group="hardware"),
        row("Paint A", "IC2", group="Paint"),
        row("Paint B", "IC3", group="PAINT"),
        row("Cable A", "IC4", group="Electrical"),
    ]

    result = _import(db_session, supplier, rows)

    assert result.category_count == 2
    assert sorted(c.name for c in db_session.query(Category).all()) == ["Electrical", "Hardware", "Paint"]


def test_subcategories_are_scoped_to_their_category(db_session, supplier, row):
    rows = [
        row("Bolt A", "IC1", group="Hardware", brand="Acme"),
        row("Paint A", "IC2", group="Paint", brand="Acme"),
        row("Bolt B", "IC3", group="Hardware", brand="ACME"),
    ]

    result = _import(db_session, supplier, rows)

    assert result.sub_category_count == 2
    assert db_session.query(SubCategory).count() == 2
    bolt_b = db_session.query(Product).filter(Product.item_code == "IC3").one()
    bolt_a = db_session.query(Product).filter(Product.item_code == "IC1").one()
    assert bolt_b.sub_category_id == bolt_a.sub_category_id
    # Names are kept as written in the row
    assert bolt_b.sub_category_name == "ACME"


def test_product_links_references_and_supplier(db_session, supplier, row):
    _import(db_session, supplier, [row("Bolt A", "IC1")])

    product = db_session.query(Product).one()
    category = db_session.query(Category).one()
    sub_category = db_session.query(SubCategory).one()
    assert product.category_id == category.id
    assert product.category_name == "Hardware"
    assert product.sub_category_id == sub_category.id
    assert product.sub_category_category_id == category.id
    assert product.supplier_id == supplier.id


def test_round_trip_second_import_is_all_duplicates(db_session, supplier, row):
    rows = [row("Bolt A", "IC1"), row("Nut A", "IC2", brand="Zenith"), row("Paint A", "IC3", group="Paint")]

    first = _import(db_session, supplier, rows)
    second = _import(db_session, supplier, rows)

    assert first.success_count == 3
    assert second.success_count == 0
    assert second.duplicate_item_count == 3
    assert (second.category_count, second.sub_category_count) == (0, 0)
    assert db_session.query(Product).count() == 3


def test_subcategory_created_concurrently_is_reused(db_session, supplier, row, monkeypatch):
    category = Category(name="Hardware")
    db_session.add(category)
    db_session.flush()
    db_session.add(SubCategory(name="Acme", category_id=category.id))
    db_session.commit()

    real_find = ProductImportService.find_sub_category
    calls = {"n": 0}

    def stale_find(db, name, category_id):
        # First lookup misses, as if another import inserted it right after
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(db, name, category_id)

    monkeypatch.setattr(ProductImportService, "find_sub_category", staticmethod(stale_find))

    result = _import(db_session, supplier, [row("Bolt A", "IC1")])

    assert result.success_count == 1
    assert result.errors == []
    assert result.sub_category_count == 0
    assert db_session.query(SubCategory).count() == 1


def test_other_store_errors_are_row_local_and_not_rejects(db_session, supplier, row, monkeypatch):
    real_resolve = ProductImportService.resolve_sub_category

    def flaky_resolve(db, name, category, result):
        if name == "Broken":
            raise OperationalError("INSERT INTO sub_categories", {}, Exception("disk I/O error"))
        return real_resolve(db, name, category, result)

    monkeypatch.setattr(ProductImportService, "resolve_sub_category", staticmethod(flaky_resolve))

    result = _import(db_session, supplier, [row("Bolt A", "IC1", brand="Broken"), row("Bolt B", "IC2")])

    assert result.errors == [{"row": 1, "error": "disk I/O error"}]
    assert result.success_count == 1
    assert result.reject_count == 0
    # The category created for row 1 stays
    assert db_session.query(Category).filter(Category.name == "Hardware").count() == 1


def test_unknown_supplier_fails_rows_at_insert(db_session, row):
    import uuid

    result = ProductImportService.import_rows(db_session, uuid.uuid4(), [row("Bolt A", "IC1")])

    assert result.success_count == 0
    assert len(result.errors) == 1
    assert "FOREIGN KEY" in result.errors[0]["error"].upper()
    assert result.to_response()["rejectCount"] == "Total Failed : 0"
    assert db_session.query(Product).count() == 0


def test_process_row_outcomes(db_session, supplier, row):
    result = ImportResult()

    outcomes = [
        ProductImportService.process_row(db_session, supplier.id, 1, row("Bolt A", "IC1"), result),
        ProductImportService.process_row(db_session, supplier.id, 2, row("Bolt A", "IC1"), result),
        ProductImportService.process_row(db_session, supplier.id, 3, row("Bolt A", ""), result),
    ]

    assert outcomes == [RowOutcome.SUCCESS, RowOutcome.DUPLICATE_IN_FILE, RowOutcome.MISSING_FIELDS]


def test_response_shape(db_session, supplier, row):
    result = _import(db_session, supplier, [row("Bolt A", "IC1"), row("Bolt B", "IC2", unit="", brand="")])

    assert result.to_response() == {
        "message": "Excel file processed",
        "successfulUploads": [{"row": 1, "productName": "Bolt A"}],
        "errors": [{"row": 2, "error": "Missing fields: Unit*, Brand"}],
        "successCount": 1,
        "rejectCount": "Total Failed : 1",
        "duplicateItemCount": 0,
        "categoryCount": 1,
        "subCategoryCount": 1,
        "missingFields": [{"row": 2, "missingFields": ["Unit*", "Brand"]}],
    }


def test_existing_non_ascii_group_is_reused(db_session, supplier, row):
    db_session.add(Category(name="Électrique"))
    db_session.commit()

    result = _import(db_session, supplier, [row("Câble 2.5mm", "EL-1", group="Électrique", brand="Nexans")])

    assert result.errors == []
    assert result.success_count == 1
    assert result.category_count == 0
    assert db_session.query(Category).count() == 1


def test_non_ascii_names_match_case_insensitively(db_session, supplier, row):
    rows = [
        row("Câble 2.5mm", "EL-1", group="Électrique", brand="Ömer Kablo"),
        row("Câble 4mm", "EL-2", group="électrique", brand="ÖMER KABLO"),
        row("Câble 6mm", "EL-3", group="ÉLECTRIQUE", brand="ömer kablo"),
    ]

    result = _import(db_session, supplier, rows)

    assert result.success_count == 3
    assert (result.category_count, result.sub_category_count) == (1, 1)
    assert [c.name for c in db_session.query(Category).all()] == ["Électrique"]
    assert [s.name for s in db_session.query(SubCategory).all()] == ["Ömer Kablo"]


def test_mixed_case_brand_reuses_existing_subcategory(db_session, supplier, row):
    category = Category(name="Hardware")
    db_session.add(category)
    db_session.flush()
    existing = SubCategory(name="Acme", category_id=category.id)
    db_session.add(existing)
    db_session.commit()

    result = _import(db_session, supplier, [row("Bolt A", "IC1", group="HARDWARE", brand="aCmE")])

    assert result.sub_category_count == 0
    product = db_session.query(Product).one()
    assert product.sub_category_id == existing.id
    assert product.category_id == category.id


def test_check_row_needs_no_database(row):
    result = ImportResult()

    outcomes = [
        ProductImportService.check_row(1, row("Bolt A", "IC1"), result),
        ProductImportService.check_row(2, row("Bolt B", "IC1"), result),
        ProductImportService.check_row(3, row("Bolt C", "IC3", brand=""), result),
    ]

    assert outcomes == [None, RowOutcome.DUPLICATE_IN_FILE, RowOutcome.MISSING_FIELDS]
    assert result.seen_item_codes == {"IC1"}
    assert result.reject_count == 2
