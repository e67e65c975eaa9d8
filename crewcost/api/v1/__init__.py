"""
API v1 - REST endpoints for the expense tracker.

- Auth endpoints (register, login, logout, me)
- Project endpoints (create, read, budget, members)
- Cost endpoints (record, list, finalize)
- Allocation endpoints (create, list)
- Report endpoint
- Receipt upload
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .projects import router as projects_router
from .costs import router as costs_router
from .allocations import router as allocations_router
from .reports import router as reports_router
from .receipts import router as receipts_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(projects_router, prefix="/projects", tags=["Projects"])
api_router.include_router(allocations_router, prefix="/projects", tags=["Allocations"])
api_router.include_router(reports_router, prefix="/projects", tags=["Reports"])
api_router.include_router(costs_router, tags=["Costs"])
api_router.include_router(receipts_router, prefix="/receipts", tags=["Receipts"])
