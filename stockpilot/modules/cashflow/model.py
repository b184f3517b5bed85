from __future__ import annotations

from typing import Any, List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor

from ...constants import TXN_INCOME
from ...utils.helpers import fmt_date, fmt_money
from .projector import Transaction


class TransactionsTableModel(QAbstractTableModel):
    """
    Table model for the derived cash-flow feed.

    Columns: Date | Description | Type | Amount
    Amounts are signed; income rows are drawn green, expense rows red.
    """
    HEADERS: List[str] = ["Date", "Description", "Type", "Amount"]

    _INCOME_COLOR = QColor(0, 128, 0)
    _EXPENSE_COLOR = QColor(200, 0, 0)

    def __init__(self, rows: Optional[List[Transaction]] = None) -> None:
        super().__init__()
        self._rows: List[Transaction] = list(rows or [])

    # ---------- Qt model basics ----------

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None

        t = self._rows[index.row()]
        col = index.column()

        if role in (Qt.DisplayRole, Qt.EditRole):
            if col == 0:
                return fmt_date(t.date)
            if col == 1:
                return t.description
            if col == 2:
                return "Income" if t.type == TXN_INCOME else "Expense"
            if col == 3:
                return fmt_money(t.amount)

        if role == Qt.ForegroundRole and col == 3:
            return self._INCOME_COLOR if t.type == TXN_INCOME else self._EXPENSE_COLOR

        if role == Qt.TextAlignmentRole and col == 3:
            return int(Qt.AlignRight | Qt.AlignVCenter)

        if role == Qt.UserRole:
            return t

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            try:
                return self.HEADERS[section]
            except IndexError:
                return ""
        if orientation == Qt.Horizontal and role == Qt.TextAlignmentRole and section == 3:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return super().headerData(section, orientation, role)

    # ---------- Convenience helpers ----------

    def replace(self, rows: List[Transaction]) -> None:
        """Replace all rows at once (keeps column schema unchanged)."""
        self.beginResetModel()
        self._rows = list(rows or [])
        self.endResetModel()

    def transaction_at(self, row: int) -> Transaction:
        return self._rows[row]

    def rows(self) -> List[Transaction]:
        return list(self._rows)

    def follow(self, projector, date_from=None, date_to=None):
        """
        Keep the rows in sync with the store: reload the window now and after
        every committed (or externally detected) collection change.
        Returns the unsubscribe function.
        """
        def _reload(*_):
            self.replace(projector.window(date_from, date_to))

        _reload()
        return projector.store.subscribe(_reload)
