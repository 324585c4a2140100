"""Unit tests for ExpenseCategoryService."""

from unittest.mock import Mock

import pytest

from travelplan.core.exceptions import BatchUpdateError
from travelplan.reconciliation.engine import ReconciliationEngine
from travelplan.services.expense_categories import (
    ExpenseCategoryService,
    SqlActivityStore,
    SqlCategoryStore,
    SqlExpenseStore,
    build_message,
)


def _service(stores) -> ExpenseCategoryService:
    return ExpenseCategoryService(
        Mock(), engine=ReconciliationEngine(stores, stores, stores)
    )


class TestExpenseCategoryService:
    """Test suite for ExpenseCategoryService."""

    def test_initialization_builds_sql_stores(self):
        factory = Mock()

        service = ExpenseCategoryService(factory, locale="es", max_concurrency=3)

        assert isinstance(service.engine.references, SqlActivityStore)
        assert isinstance(service.engine.defectives, SqlExpenseStore)
        assert isinstance(service.engine.catalog, SqlCategoryStore)
        assert service.engine.references.session_factory is factory
        assert service.engine.display_names["activity"] == "Actividades"
        assert service.engine.updater.max_concurrency == 3

    @pytest.mark.asyncio
    async def test_success_envelope(self, make_stores, records):
        stores = make_stores(
            references=[records.ref("a1", "City Museum", "activity")],
            defectives=[
                records.expense("e1", "City Museum (Planning)"),
                records.expense("e2", "Random Hotel Charge"),
            ],
        )

        result = await _service(stores).fix_categories("trip-1")

        assert result.success is True
        assert result.message == "Successfully fixed 1 expense"
        assert result.fixed == 1
        assert result.total == 2
        assert result.skipped == {"no-reference-match": 1}
        assert result.failures == []

    @pytest.mark.asyncio
    async def test_nothing_to_fix(self, make_stores):
        result = await _service(make_stores()).fix_categories("trip-1")

        assert result.message == "No expenses need fixing"
        assert (result.fixed, result.total) == (0, 0)

    @pytest.mark.asyncio
    async def test_partial_failure_is_still_success(self, make_stores, records):
        stores = make_stores(
            references=[records.ref("a1", "Dinner", "food")],
            defectives=[
                records.expense("e1", "Dinner (Planning)"),
                records.expense("e2", "Dinner (Split)"),
            ],
        )
        stores.failing_ids = {"e1"}

        result = await _service(stores).fix_categories("trip-1")

        assert result.success is True
        assert result.fixed == 1
        assert result.total == 2
        assert [f.id for f in result.failures] == ["e1"]

    @pytest.mark.asyncio
    async def test_all_updates_failing_raises(self, make_stores, records):
        stores = make_stores(
            references=[records.ref("a1", "Dinner", "food")],
            defectives=[
                records.expense("e1", "Dinner (Planning)"),
                records.expense("e2", "Dinner (Split)"),
            ],
        )
        stores.failing_ids = {"e1", "e2"}

        with pytest.raises(BatchUpdateError) as exc_info:
            await _service(stores).fix_categories("trip-1")

        assert exc_info.value.attempted == 2
        assert {f["id"] for f in exc_info.value.failures} == {"e1", "e2"}

    @pytest.mark.asyncio
    async def test_only_skips_is_not_a_failure(self, make_stores, records):
        stores = make_stores(defectives=[records.expense("e1", "Taxi")])

        result = await _service(stores).fix_categories("trip-1")

        assert result.fixed == 0
        assert result.total == 1
        assert result.message == "Successfully fixed 0 expenses"


@pytest.mark.parametrize(
    ("fixed", "total", "message"),
    [
        (0, 0, "No expenses need fixing"),
        (1, 1, "Successfully fixed 1 expense"),
        (2, 5, "Successfully fixed 2 expenses"),
        (0, 3, "Successfully fixed 0 expenses"),
    ],
)
def test_build_message(fixed, total, message) -> None:
    assert build_message(fixed, total) == message
