from fastapi import APIRouter

from ledger_api.api.v1.routes import auth, transactions, users, reports

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(transactions.router)
api_router.include_router(users.router)
api_router.include_router(reports.router)
