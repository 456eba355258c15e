from fastapi import APIRouter

from app.schemas.common import ErrorResponse
from .endpoints import auth, users, transactions, categories, reports, goals

# Documented error bodies; every error shares the {"message": ...} envelope
PUBLIC_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}
PROTECTED_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"], responses=PUBLIC_ERRORS)
api_router.include_router(users.router, prefix="/user", tags=["user"], responses=PROTECTED_ERRORS)
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"], responses=PROTECTED_ERRORS)
api_router.include_router(categories.router, prefix="/categories", tags=["categories"], responses=PROTECTED_ERRORS)
api_router.include_router(reports.router, tags=["reports"], responses=PROTECTED_ERRORS)
api_router.include_router(goals.router, prefix="/goals", tags=["goals"], responses=PROTECTED_ERRORS)
