# ledger_api/api/v1/routes/reports.py
import time

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_api.api.deps import require_admin
from ledger_api.core.database import get_async_session
from ledger_api.core.session import UserSession
from ledger_api.schemas.report import ReportRead
from ledger_api.utils.reporting import build_report, export_csv

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("", response_model=ReportRead)
async def get_report(
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    """
    Returns the financial report:
    - totalIncome, totalExpense, balance
    - transactions: the full ledger, newest first
    - monthlyData: income/expense per calendar month
    """
    return await build_report(db)

@router.get("/export")
async def export_report(
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    """Download the report as a CSV file"""
    content = await export_csv(db)
    filename = f"reporte-{int(time.time() * 1000)}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Cache-Control": "no-cache",
        },
    )
