"""
Business logic services for ProcureQA
"""
from .product_import_service import ProductImportService, ImportResult, SpreadsheetParseError

__all__ = [
    "ProductImportService",
    "ImportResult",
    "SpreadsheetParseError",
]
