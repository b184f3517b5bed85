from __future__ import annotations
from dataclasses import dataclass

from ...constants import COL_CASH_ADJUSTMENTS
from .base import CollectionRepo, Record


@dataclass
class CashAdjustment(Record):
    id: str
    date: str
    type: str  # 'add' | 'remove'
    amount: float
    description: str


class CashAdjustmentsRepo(CollectionRepo[CashAdjustment]):
    collection = COL_CASH_ADJUSTMENTS
    record_type = CashAdjustment
