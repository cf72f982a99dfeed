from fastapi import APIRouter
from app.routers import instructors, staff_leave, pto_balance

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(instructors.router, tags=["Instructors"])
api_router.include_router(staff_leave.router, tags=["Staff Leave"])
api_router.include_router(pto_balance.router, tags=["PTO Balance"])
