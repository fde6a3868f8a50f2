"""
Bulk product import from a supplier spreadsheet.

Rows are processed one at a time in file order:
  parse -> required fields -> in-file duplicate -> resolve Group/Brand
  -> store duplicate -> insert product
Every row ends in exactly one RowOutcome. A failing row never aborts the
batch, and there is no transaction spanning the steps: a category or
subcategory created for a row stays even if that row's product is rejected.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Set, Union
from uuid import UUID

import pandas as pd
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Category, SubCategory, Product

logger = logging.getLogger(__name__)

# Spreadsheet headers, matched exactly after trimming
COL_PRODUCT_NAME = "Product Name"
COL_ITEM_CODE = "Item Code*"
COL_UNIT = "Unit*"
COL_GROUP = "Group"
COL_BRAND = "Brand"
COL_DESCRIPTION = "Description"

# Order matters: missing fields are reported in this order
REQUIRED_FIELDS: List[str] = [
    COL_PRODUCT_NAME,
    COL_ITEM_CODE,
    COL_UNIT,
    COL_GROUP,
    COL_BRAND,
    COL_DESCRIPTION,
]

RowRecord = Dict[str, str]


class SpreadsheetParseError(Exception):
    """The upload could not be read as a spreadsheet. Fatal for the whole batch."""


class RowOutcome(str, Enum):
    SUCCESS = "success"
    MISSING_FIELDS = "missing_fields"
    DUPLICATE_IN_FILE = "duplicate_in_file"
    DUPLICATE_IN_STORE = "duplicate_in_store"
    STORE_ERROR = "store_error"


def _cell_text(value: Any) -> str:
    """Trimmed cell text; empty and NaN cells become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:  # NaN check
        return ""
    return str(value).strip()


def parse_spreadsheet(source: Union[str, Path, BinaryIO, bytes]) -> List[RowRecord]:
    """
    Read the first sheet into Row Records (header -> trimmed string).

    The header row is excluded, so list position + 1 is the row number used
    in the import report. Fully blank lines are skipped.
    Raises SpreadsheetParseError when the input is not a readable workbook.
    """
    if isinstance(source, bytes):
        source = BytesIO(source)
    try:
        frame = pd.read_excel(source, sheet_name=0, dtype=str, keep_default_na=False)
    except Exception as e:
        raise SpreadsheetParseError(str(e)) from e

    headers = [_cell_text(col) for col in frame.columns]
    rows: List[RowRecord] = []
    for values in frame.itertuples(index=False, name=None):
        record = {header: _cell_text(value) for header, value in zip(headers, values)}
        if not any(record.values()):
            continue
        rows.append(record)
    logger.info("Parsed %d spreadsheet rows (columns: %s)", len(rows), headers)
    return rows


def missing_required_fields(row: RowRecord) -> List[str]:
    """Required fields that are absent or empty, in REQUIRED_FIELDS order."""
    return [name for name in REQUIRED_FIELDS if not row.get(name)]


@dataclass
class ImportResult:
    """Per-import report. Owned by a single import run, never persisted."""
    success_count: int = 0
    reject_count: int = 0
    duplicate_item_count: int = 0
    category_count: int = 0
    sub_category_count: int = 0
    missing_fields: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    successful_uploads: List[Dict[str, Any]] = field(default_factory=list)
    # Item codes already seen earlier in this file
    seen_item_codes: Set[str] = field(default_factory=set, repr=False)

    def record_success(self, row: int, product_name: str) -> None:
        self.success_count += 1
        self.successful_uploads.append({"row": row, "product_name": product_name})

    def record_missing_fields(self, row: int, fields: List[str]) -> None:
        self.reject_count += 1
        self.missing_fields.append({"row": row, "fields": fields})
        self.errors.append({"row": row, "error": f"Missing fields: {', '.join(fields)}"})

    def record_duplicate_in_file(self, row: int, item_code: str) -> None:
        self.reject_count += 1
        self.duplicate_item_count += 1
        self.errors.append({"row": row, "error": f"Duplicate {COL_ITEM_CODE} found in Excel file: {item_code}"})

    def record_duplicate_in_store(self, row: int, item_code: str) -> None:
        self.reject_count += 1
        self.duplicate_item_count += 1
        self.errors.append({"row": row, "error": f"Duplicate {COL_ITEM_CODE} found in database: {item_code}"})

    def record_store_error(self, row: int, message: str) -> None:
        # Not part of reject_count; see DESIGN.md
        self.errors.append({"row": row, "error": message})

    def to_response(self, message: str = "Excel file processed") -> Dict[str, Any]:
        return {
            "message": message,
            "successfulUploads": [
                {"row": s["row"], "productName": s["product_name"]} for s in self.successful_uploads
            ],
            "errors": list(self.errors),
            "successCount": self.success_count,
            "rejectCount": f"Total Failed : {self.reject_count}",
            "duplicateItemCount": self.duplicate_item_count,
            "categoryCount": self.category_count,
            "subCategoryCount": self.sub_category_count,
            "missingFields": [
                {"row": m["row"], "missingFields": m["fields"]} for m in self.missing_fields
            ],
        }


def _store_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class ProductImportService:
    """Reconciles spreadsheet rows against categories, subcategories and products."""

    @staticmethod
    def import_rows(db: Session, supplier_id: UUID, rows: List[RowRecord]) -> ImportResult:
        result = ImportResult()
        logger.info("Importing %d rows for supplier %s", len(rows), supplier_id)
        for row_number, row in enumerate(rows, start=1):
            ProductImportService.process_row(db, supplier_id, row_number, row, result)
        logger.info(
            "Import finished for supplier %s: %d created, %d rejected, %d errors, %d new categories, %d new subcategories",
            supplier_id, result.success_count, result.reject_count, len(result.errors),
            result.category_count, result.sub_category_count,
        )
        return result

    @staticmethod
    def check_row(row_number: int, row: RowRecord, result: ImportResult) -> Optional[RowOutcome]:
        """
        Checks that need no database: required fields, then item codes repeated
        earlier in the same file. Records the rejection on result and returns its
        outcome, or None when the row may go on to the store.
        """
        missing = missing_required_fields(row)
        if missing:
            result.record_missing_fields(row_number, missing)
            return RowOutcome.MISSING_FIELDS

        item_code = row[COL_ITEM_CODE]
        if item_code in result.seen_item_codes:
            logger.warning("Row %d: item code %s repeated in file", row_number, item_code)
            result.record_duplicate_in_file(row_number, item_code)
            return RowOutcome.DUPLICATE_IN_FILE
        result.seen_item_codes.add(item_code)
        return None

    @staticmethod
    def process_row(
        db: Session,
        supplier_id: UUID,
        row_number: int,
        row: RowRecord,
        result: ImportResult,
    ) -> RowOutcome:
        rejected = ProductImportService.check_row(row_number, row, result)
        if rejected is not None:
            return rejected

        item_code = row[COL_ITEM_CODE]
        try:
            category = ProductImportService.resolve_category(db, row[COL_GROUP], result)
            sub_category = ProductImportService.resolve_sub_category(db, row[COL_BRAND], category, result)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Row %d: could not resolve Group/Brand: %s", row_number, e)
            result.record_store_error(row_number, _store_message(e))
            return RowOutcome.STORE_ERROR

        if db.query(Product.id).filter(Product.item_code == item_code).first():
            logger.info("Row %d: item code %s already exists, skipped", row_number, item_code)
            result.record_duplicate_in_store(row_number, item_code)
            return RowOutcome.DUPLICATE_IN_STORE

        product = Product(
            product_name=row[COL_PRODUCT_NAME],
            item_code=item_code,
            unit=row[COL_UNIT],
            description=row[COL_DESCRIPTION],
            category_id=category.id,
            category_name=row[COL_GROUP],
            sub_category_id=sub_category.id,
            sub_category_name=row[COL_BRAND],
            sub_category_category_id=category.id,
            supplier_id=supplier_id,
        )
        db.add(product)
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Row %d: product %s not saved: %s", row_number, item_code, e)
            result.record_store_error(row_number, _store_message(e))
            return RowOutcome.STORE_ERROR

        result.record_success(row_number, row[COL_PRODUCT_NAME])
        return RowOutcome.SUCCESS

    @staticmethod
    def find_category(db: Session, name: str) -> Optional[Category]:
        return db.query(Category).filter(func.lower(Category.name) == func.lower(name)).first()

    @staticmethod
    def find_sub_category(db: Session, name: str, category_id: UUID) -> Optional[SubCategory]:
        return (
            db.query(SubCategory)
            .filter(
                func.lower(SubCategory.name) == func.lower(name),
                SubCategory.category_id == category_id,
            )
            .first()
        )

    @staticmethod
    def resolve_category(db: Session, name: str, result: ImportResult) -> Category:
        """Case-insensitive lookup by name; created without an image when absent."""
        category = ProductImportService.find_category(db, name)
        if category:
            return category
        category = Category(name=name)
        db.add(category)
        try:
            db.commit()
        except IntegrityError:
            # Created by a concurrent import between lookup and insert
            db.rollback()
            category = ProductImportService.find_category(db, name)
            if category is None:
                raise
            return category
        result.category_count += 1
        logger.info("Created category %s", name)
        return category

    @staticmethod
    def resolve_sub_category(
        db: Session,
        name: str,
        category: Category,
        result: ImportResult,
    ) -> SubCategory:
        """
        Case-insensitive lookup by (name, category); created when absent.
        A unique-constraint violation on insert means another writer got there
        first: the existing row is re-read and used, no error is recorded.
        """
        category_id = category.id
        sub_category = ProductImportService.find_sub_category(db, name, category_id)
        if sub_category:
            return sub_category
        sub_category = SubCategory(name=name, category_id=category_id)
        db.add(sub_category)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            sub_category = ProductImportService.find_sub_category(db, name, category_id)
            if sub_category is None:
                raise
            logger.info("Subcategory %s already existed under %s", name, category_id)
            return sub_category
        result.sub_category_count += 1
        logger.info("Created subcategory %s under %s", name, category_id)
        return sub_category
