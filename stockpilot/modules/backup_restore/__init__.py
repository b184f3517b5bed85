"""Bulk JSON export/import of every collection."""

from .service import export_all, export_to_file, import_document, import_from_file

__all__ = ["export_all", "export_to_file", "import_document", "import_from_file"]
