"""API version 1 routes."""

from fastapi import APIRouter

from travelplan.api.v1 import expenses

router = APIRouter(prefix="/api/v1")

router.include_router(expenses.router)
