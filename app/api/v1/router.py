"""API V1 Router"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, schools, dashboard, logs, billing

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(schools.router, prefix="/schools", tags=["Schools & Payments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(logs.router, prefix="/logs", tags=["Activity Logs"])
api_router.include_router(billing.router, prefix="/billing", tags=["Billing Calculator"])
