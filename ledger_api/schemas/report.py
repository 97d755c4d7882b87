# ledger_api/schemas/report.py
from typing import List
from pydantic import BaseModel

from ledger_api.schemas.base import CamelModel
from ledger_api.schemas.transaction import TransactionRead

class MonthlyBucket(BaseModel):
    month: str
    income: float = 0.0
    expense: float = 0.0

class ReportRead(CamelModel):
    total_income: float
    total_expense: float
    balance: float
    transactions: List[TransactionRead]
    monthly_data: List[MonthlyBucket]
