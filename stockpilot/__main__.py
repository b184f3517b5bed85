"""
Command-line entry point for maintenance tasks on a StockPilot database.

    stockpilot [--db PATH] export backup.json
    stockpilot [--db PATH] import backup.json
    stockpilot [--db PATH] report sales out.pdf --from 2024-05-01 --to 2024-05-31
    stockpilot [--db PATH] summary
"""

from __future__ import annotations

import argparse
import logging
import sys

from .database import open_store
from .database.repositories import ProductsRepo
from .errors import DomainError
from .modules.backup_restore import export_to_file, import_from_file
from .modules.cashflow import CashFlowProjector
from .modules.receivables.service import ReceivablesService
from .modules.reporting import CashFlowReport, PurchasesReport, SalesReport
from .modules.reporting.pdf import ENGINE_QT, ENGINE_WEASYPRINT
from .utils.helpers import fmt_money
from .utils.loggers import get_logger

REPORTS = {
    "cashflow": CashFlowReport,
    "sales": SalesReport,
    "purchases": PurchasesReport,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stockpilot", description="StockPilot maintenance tasks")
    parser.add_argument("--db", help="Path to the SQLite database (default: data/stockpilot.db)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("export", help="Write every collection to a JSON backup file")
    p.add_argument("path")

    p = sub.add_parser("import", help="Merge a JSON backup file into the database")
    p.add_argument("path")

    p = sub.add_parser("report", help="Export a PDF report")
    p.add_argument("kind", choices=sorted(REPORTS))
    p.add_argument("path")
    p.add_argument("--from", dest="date_from", help="First day (YYYY-MM-DD); default last 30 days")
    p.add_argument("--to", dest="date_to", help="Last day (YYYY-MM-DD); default same as --from")
    p.add_argument("--engine", choices=(ENGINE_QT, ENGINE_WEASYPRINT), default=ENGINE_QT)

    sub.add_parser("summary", help="Print cash balance, receivables and low stock")
    return parser


def _summary(store) -> None:
    cash = CashFlowProjector(store).summarize()
    receivables = ReceivablesService(store)
    print(f"Income:      {fmt_money(cash.total_income)}")
    print(f"Expenses:    {fmt_money(cash.total_expense)}")
    print(f"Balance:     {fmt_money(cash.balance)}")
    print(f"Receivable:  {fmt_money(receivables.outstanding_total())} "
          f"({len(receivables.overdue())} overdue)")
    low = ProductsRepo(store).low_stock()
    if low:
        print("Low stock:")
        for p in low:
            print(f"  {p.quantity:>5}  {p.name}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = logging.getLogger("stockpilot")
    log.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    store = open_store(args.db)
    try:
        if args.command == "export":
            path = export_to_file(store, args.path)
            print(f"Backup written to {path}")
        elif args.command == "import":
            counts = import_from_file(store, args.path)
            for name, n in counts.items():
                print(f"{name}: {n}")
        elif args.command == "report":
            report = REPORTS[args.kind](store)
            path = report.export_pdf(args.path, args.date_from, args.date_to, engine=args.engine)
            print(f"Report written to {path}")
        elif args.command == "summary":
            _summary(store)
    except DomainError as e:
        log.error("%s", e)
        return 1
    finally:
        store.close()
    return 0


def run() -> None:
    """Console entry point: attach the stderr handler once, then run."""
    get_logger("stockpilot")
    sys.exit(main())


if __name__ == "__main__":
    run()
