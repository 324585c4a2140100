import asyncio
import os
import tempfile
from collections import Counter
from pathlib import Path
from types import SimpleNamespace

import pytest

# Settings and the default engine are created at import time; point them at
# a throwaway SQLite file before anything from travelplan is imported.
_DEFAULT_DB_DIR = Path(tempfile.mkdtemp(prefix="travelplan-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DEFAULT_DB_DIR / 'default.db'}")
os.environ.setdefault("APP_ENV", "test")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from travelplan.api.deps import get_db, get_session_factory  # noqa: E402
from travelplan.main import app  # noqa: E402
from travelplan.schemas.reconciliation import (  # noqa: E402
    CategoryCatalogEntry,
    DefectiveRecord,
    ReferenceRecord,
)


@pytest.fixture
async def session_factory(tmp_path: Path):
    """Session factory bound to a fresh SQLite database with all tables.

    A file database (not :memory:) so concurrent sessions see the same data.
    """
    from travelplan.models.base import BaseModel

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    """Provide test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory):
    """Provide test client wired to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class FakeStores:
    """In-memory reference, defective and catalog store for one trip."""

    def __init__(self, references=(), defectives=(), categories=()):
        self.references = list(references)
        self.defectives = {record.id: record for record in defectives}
        self.categories = list(categories)
        self.load_errors: dict[str, Exception] = {}
        self.failing_ids: set = set()
        self.missing_ids: set = set()
        self.update_calls: list = []
        self.load_calls: Counter = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_references(self, scope_id):
        self.load_calls["activities"] += 1
        await asyncio.sleep(0)
        if "activities" in self.load_errors:
            raise self.load_errors["activities"]
        return list(self.references)

    async def list_uncategorized(self, scope_id):
        self.load_calls["expenses"] += 1
        await asyncio.sleep(0)
        if "expenses" in self.load_errors:
            raise self.load_errors["expenses"]
        return [r for r in self.defectives.values() if r.category_id is None]

    async def list_categories(self):
        self.load_calls["categories"] += 1
        await asyncio.sleep(0)
        if "categories" in self.load_errors:
            raise self.load_errors["categories"]
        return list(self.categories)

    async def update_category(self, record_id, category_id):
        self.update_calls.append((record_id, category_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if record_id in self.failing_ids:
                raise RuntimeError(f"write rejected for {record_id}")
            if record_id in self.missing_ids:
                raise LookupError(f"Expense {record_id} not found")
            self.defectives[record_id] = self.defectives[record_id].model_copy(
                update={"category_id": category_id}
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def catalog():
    return [
        CategoryCatalogEntry(id="cat-1", name="Flights"),
        CategoryCatalogEntry(id="cat-2", name="Lodging"),
        CategoryCatalogEntry(id="cat-3", name="Transport"),
        CategoryCatalogEntry(id="cat-4", name="Food"),
        CategoryCatalogEntry(id="cat-7", name="Activities"),
    ]


@pytest.fixture
def make_stores(catalog):
    """Build a FakeStores from references and expenses (catalog defaults to ``catalog``)."""

    def _make(references=(), defectives=(), categories=None):
        return FakeStores(
            references=references,
            defectives=defectives,
            categories=catalog if categories is None else categories,
        )

    return _make


def ref(id, title, category=None) -> ReferenceRecord:
    return ReferenceRecord(id=id, title=title, domain_category=category)


def expense(id, title) -> DefectiveRecord:
    return DefectiveRecord(id=id, title=title, category_id=None)


@pytest.fixture
def records():
    """Record builders: ``records.ref(id, title, category)`` and ``records.expense(id, title)``."""
    return SimpleNamespace(ref=ref, expense=expense)
