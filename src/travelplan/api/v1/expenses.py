"""Trip expense maintenance endpoints."""

from fastapi import APIRouter, Depends

from travelplan.api.deps import get_expense_category_service
from travelplan.schemas.expense import (
    ErrorResponse,
    FixCategoriesRequest,
    FixCategoriesResult,
)
from travelplan.services.expense_categories import ExpenseCategoryService

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post(
    "/fix-categories",
    response_model=FixCategoriesResult,
    summary="Backfill missing expense categories for a trip",
    description="""
    Repair expenses that were created from an activity but lost their category.

    Each uncategorized expense titled `"<activity title> (Planning)"` or
    `"<activity title> (Split)"` is matched to the activity with that title,
    and the activity's category is looked up in the expense category catalog.

    - Expenses that can't be resolved are left untouched and counted in `skipped`
    - A failed update doesn't affect the others; it is listed in `failures`
    - Safe to call repeatedly: fixed expenses aren't considered again
    """,
    responses={
        200: {"description": "Backfill completed (possibly partially)"},
        400: {"model": ErrorResponse, "description": "Trip ID missing or invalid"},
        500: {"model": ErrorResponse, "description": "Data could not be loaded or saved"},
    },
)
async def fix_expense_categories(
    payload: FixCategoriesRequest,
    service: ExpenseCategoryService = Depends(get_expense_category_service),
) -> FixCategoriesResult:
    return await service.fix_categories(payload.trip_id)
