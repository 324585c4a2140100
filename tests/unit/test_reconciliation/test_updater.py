"""Unit tests for BatchUpdater."""

import asyncio

import pytest

from travelplan.reconciliation.updater import BatchUpdater
from travelplan.schemas.reconciliation import CategoryUpdate


def _updates(n: int) -> list[CategoryUpdate]:
    return [CategoryUpdate(id=f"e{i}", category_id="cat-7") for i in range(n)]


class TestBatchUpdater:
    """Test suite for BatchUpdater."""

    def test_rejects_non_positive_concurrency(self, make_stores):
        with pytest.raises(ValueError):
            BatchUpdater(make_stores(), max_concurrency=0)

    @pytest.mark.asyncio
    async def test_empty_batch_issues_no_writes(self, make_stores):
        stores = make_stores()

        result = await BatchUpdater(stores).apply([])

        assert result.applied_count == 0
        assert result.failures == []
        assert stores.update_calls == []

    @pytest.mark.asyncio
    async def test_applies_every_update(self, make_stores, records):
        stores = make_stores(defectives=[records.expense(f"e{i}", "x") for i in range(3)])

        result = await BatchUpdater(stores).apply(_updates(3))

        assert result.applied_count == 3
        assert result.failures == []
        assert all(r.category_id == "cat-7" for r in stores.defectives.values())

    @pytest.mark.asyncio
    async def test_one_failure_does_not_abort_siblings(self, make_stores, records):
        stores = make_stores(defectives=[records.expense(f"e{i}", "x") for i in range(4)])
        stores.failing_ids = {"e2"}

        result = await BatchUpdater(stores).apply(_updates(4))

        assert result.applied_count == 3
        assert [f.id for f in result.failures] == ["e2"]
        assert "write rejected" in result.failures[0].error
        assert stores.defectives["e2"].category_id is None
        assert stores.defectives["e3"].category_id == "cat-7"

    @pytest.mark.asyncio
    async def test_updates_are_dispatched_concurrently(self):
        started = 0
        all_started = asyncio.Event()

        class BarrierStore:
            async def update_category(self, record_id, category_id):
                nonlocal started
                started += 1
                if started == 5:
                    all_started.set()
                # Sequential dispatch would never get past this wait.
                await asyncio.wait_for(all_started.wait(), timeout=1)

        result = await BatchUpdater(BarrierStore(), max_concurrency=5).apply(_updates(5))

        assert result.applied_count == 5

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, make_stores, records):
        stores = make_stores(defectives=[records.expense(f"e{i}", "x") for i in range(10)])

        result = await BatchUpdater(stores, max_concurrency=2).apply(_updates(10))

        assert result.applied_count == 10
        assert 1 <= stores.max_in_flight <= 2
