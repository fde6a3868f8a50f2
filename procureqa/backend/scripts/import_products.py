"""
Import a supplier's product spreadsheet directly into the database (development only).

Bypasses the app (no HTTP). Runs the same pipeline as
POST /api/admin/products/bulk-upload/{supplier_id} and prints the report.

Usage (from backend/):
  python -m scripts.import_products --file path/to.xlsx --supplier-id UUID

Optional:
  --db-url URL   Override database URL (default: from DATABASE_URL)
  --dry-run      Parse and check required fields / repeated item codes only; do not touch the DB
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID

# Add backend to path when run as script
_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from app.config import with_psycopg_driver  # noqa: E402
from app.database import SessionLocal, init_db  # noqa: E402
from app.services.product_import_service import (  # noqa: E402
    ImportResult,
    ProductImportService,
    SpreadsheetParseError,
    parse_spreadsheet,
)

logger = logging.getLogger(__name__)


def _valid_uuid(s: str) -> UUID:
    try:
        return UUID(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid UUID: {s}")


def check_rows(rows: List[Dict[str, str]]) -> ImportResult:
    """Offline pass over the rows: the same required-field and in-file duplicate checks as an import."""
    result = ImportResult()
    for row_number, row in enumerate(rows, start=1):
        ProductImportService.check_row(row_number, row, result)
    return result


def dry_run_report(result: ImportResult) -> Dict[str, Any]:
    response = result.to_response(message="Excel file checked")
    return {key: response[key] for key in ("message", "errors", "rejectCount", "duplicateItemCount", "missingFields")}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Import products from a spreadsheet into the DB (development only). Same rules as the app.",
    )
    parser.add_argument("--file", "-f", type=Path, required=True, help="Path to spreadsheet (.xlsx)")
    parser.add_argument("--supplier-id", type=_valid_uuid, help="Supplier UUID (required unless --dry-run)")
    parser.add_argument("--db-url", default=None, help="Database URL (default: from DATABASE_URL)")
    parser.add_argument("--dry-run", action="store_true", help="Only parse and check the file")
    args = parser.parse_args(argv)

    path = args.file
    if not path.is_file():
        logger.error("File not found: %s", path)
        return 1

    try:
        rows = parse_spreadsheet(path)
    except SpreadsheetParseError as e:
        logger.error("Failed to read spreadsheet: %s", e)
        return 1
    logger.info("Parsed %d rows from %s", len(rows), path.name)

    if args.dry_run:
        checked = check_rows(rows)
        print(json.dumps(dry_run_report(checked), indent=2))
        return 1 if checked.errors else 0

    if args.supplier_id is None:
        parser.error("--supplier-id is required unless --dry-run is given")

    if args.db_url:
        from sqlalchemy import create_engine
        from sqlalchemy.orm import sessionmaker
        engine = create_engine(with_psycopg_driver(args.db_url))
        init_db(bind=engine)
        db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    else:
        init_db()
        db = SessionLocal()

    try:
        result = ProductImportService.import_rows(db, args.supplier_id, rows)
    finally:
        db.close()
    print(json.dumps(result.to_response(), indent=2))
    return 0 if not result.errors else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
