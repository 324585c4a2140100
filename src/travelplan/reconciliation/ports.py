"""Store interfaces the backfill engine reads from and writes to.

Each store is treated as an independent network service with its own
failure modes.
"""

from __future__ import annotations

from typing import Protocol

from travelplan.schemas.reconciliation import (
    CategoryCatalogEntry,
    DefectiveRecord,
    RecordId,
    ReferenceRecord,
)


class ReferenceStore(Protocol):
    async def list_references(self, scope_id: RecordId) -> list[ReferenceRecord]:
        """Every reference record in scope, categorized or not."""
        ...


class DefectiveStore(Protocol):
    async def list_uncategorized(self, scope_id: RecordId) -> list[DefectiveRecord]:
        """Records in scope whose category is unset."""
        ...

    async def update_category(self, record_id: RecordId, category_id: RecordId) -> None:
        """Set one record's category.

        Must be safe to call concurrently for disjoint ids. Raises on failure.
        """
        ...


class CatalogStore(Protocol):
    async def list_categories(self) -> list[CategoryCatalogEntry]:
        ...
