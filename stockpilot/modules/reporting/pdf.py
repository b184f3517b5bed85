"""
Report rendering shared by all reports.

HTML is produced from the Jinja2 templates under
stockpilot/resources/templates/reports and turned into a paginated A4 PDF,
either through QTextDocument + QPrinter (default) or WeasyPrint.
"""

from __future__ import annotations

import logging
import sys
from datetime import date, timedelta
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Optional, Tuple

from jinja2 import Template

from ...constants import DEFAULT_REPORT_DAYS
from ...utils.helpers import as_date

_log = logging.getLogger(__name__)

_TEMPLATES_PACKAGE = "stockpilot.resources.templates.reports"

_PDF_CSS = """
    @page {
        margin: 12mm;
        size: A4;
    }
"""

ENGINE_QT = "qt"
ENGINE_WEASYPRINT = "weasyprint"


def default_period(today: Optional[date] = None) -> Tuple[date, date]:
    """Last DEFAULT_REPORT_DAYS days up to today (inclusive)."""
    end = today or date.today()
    return end - timedelta(days=DEFAULT_REPORT_DAYS), end


def resolve_period(date_from=None, date_to=None) -> Tuple[date, date]:
    if date_from in (None, ""):
        return default_period()
    start = as_date(date_from)
    end = as_date(date_to) if date_to not in (None, "") else start
    return start, end


def _load_template(name: str) -> Template:
    tpl_str = importlib_resources.files(_TEMPLATES_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    return Template(tpl_str, autoescape=True)


def render_page(name: str, *, title: str, app_name: str, start: date, end: date, **context) -> str:
    """Render report body template `name` inside the shared page layout."""
    content = _load_template(name).render(**context)
    return _load_template("_base.html").render(
        title=title,
        app_name=app_name,
        period_from=start.strftime("%d/%m/%y"),
        period_to=end.strftime("%d/%m/%y"),
        content=content,
    )


def _ensure_gui_app():
    from PySide6.QtGui import QGuiApplication
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv[:1])
    return app


def _qt_pdf(html_text: str, path: Path) -> None:
    from PySide6.QtCore import QMarginsF
    from PySide6.QtGui import QPageLayout, QPageSize, QTextDocument
    from PySide6.QtPrintSupport import QPrinter

    _ensure_gui_app()
    doc = QTextDocument()
    doc.setHtml(html_text)
    printer = QPrinter(QPrinter.HighResolution)
    printer.setOutputFormat(QPrinter.PdfFormat)
    printer.setOutputFileName(str(path))
    printer.setPageSize(QPageSize(QPageSize.A4))
    printer.setPageMargins(QMarginsF(12, 12, 12, 12), QPageLayout.Millimeter)
    doc.print_(printer)


def _weasyprint_pdf(html_text: str, path: Path) -> None:
    from weasyprint import CSS, HTML

    HTML(string=html_text).write_pdf(str(path), stylesheets=[CSS(string=_PDF_CSS)])


def html_to_pdf(html_text: str, filepath: str | Path, engine: str = ENGINE_QT) -> Path:
    """Render HTML to a paginated A4 PDF at `filepath`."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    if engine == ENGINE_QT:
        _qt_pdf(html_text, path)
    elif engine == ENGINE_WEASYPRINT:
        _weasyprint_pdf(html_text, path)
    else:
        raise ValueError(f"Unknown PDF engine: {engine!r}")
    _log.info("PDF written to %s (%s)", path, engine)
    return path
