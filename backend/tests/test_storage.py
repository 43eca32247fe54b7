"""
Tests per i backend di storage e per il caricamento del repository.

SqlStorage usa un database SQLite in memoria condiviso (StaticPool).
"""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from sales_manager.core.database import build_session_factory, close_db, init_db
from sales_manager.core.storage import InMemoryStorage, SqlStorage
from sales_manager.services.container import ServiceContainer
from sales_manager.services.repository import SalesRepository


@pytest.fixture
async def sql_storage():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield SqlStorage(build_session_factory(engine), prefix="test_")
    await close_db(engine)


@pytest.fixture(params=["memory", "sql"])
async def backend(request, sql_storage):
    if request.param == "memory":
        return InMemoryStorage(prefix="test_")
    return sql_storage


class TestStorageBackends:
    """Stesso contratto per entrambi i backend."""

    async def test_save_and_load(self, backend):
        assert await backend.save("invoices", [{"id": "a", "total": "10.00"}]) is True

        assert await backend.load("invoices") == [{"id": "a", "total": "10.00"}]

    async def test_overwrite(self, backend):
        await backend.save("customers", [1])
        await backend.save("customers", [1, 2])

        assert await backend.load("customers") == [1, 2]

    async def test_missing_key(self, backend):
        assert await backend.load("quotes") is None

    async def test_remove(self, backend):
        await backend.save("quotes", [])
        await backend.remove("quotes")

        assert await backend.load("quotes") is None

    async def test_clear_all(self, backend):
        await backend.save("invoices", [])
        await backend.save("payments", [])

        assert await backend.clear_all() is True

        assert await backend.load("invoices") is None
        assert await backend.load("payments") is None

    async def test_unserializable_blob(self, backend):
        assert await backend.save("invoices", [object()]) is False

    async def test_version(self, backend):
        assert await backend.stored_version() is None

        await backend.write_version()

        assert await backend.stored_version() == "1.0.0"


class TestRepositoryPersistence:
    async def test_round_trip_through_sql(self, sql_storage, sample_customer, sample_items, test_settings, now):
        repository = SalesRepository(sql_storage)
        await repository.load()
        container = ServiceContainer(repository, test_settings)
        invoice = await container.invoices.create_invoice(
            customer=sample_customer, items=sample_items, now=now
        )
        await container.payments.process_payment(invoice.id, "cash", Decimal("975"), now=now)

        reloaded = SalesRepository(sql_storage)
        await reloaded.load()

        copy = reloaded.get_invoice(invoice.id)
        assert copy.number == invoice.number
        assert copy.total == Decimal("2975.00")
        assert copy.paid_amount == Decimal("975.00")
        assert copy.date == now
        assert len(copy.transactions) == 1
        assert [p.amount for p in reloaded.payments] == [Decimal("975.00")]

    async def test_load_writes_version_on_first_start(self, storage):
        repository = SalesRepository(storage)

        await repository.load()

        assert await storage.stored_version() == "1.0.0"
        assert repository.invoices == []

    async def test_invalid_entries_are_dropped(self, storage, caplog):
        await storage.save("customers", [{"name": "Valido"}, {"name": ""}, "spazzatura"])

        repository = SalesRepository(storage)
        await repository.load()

        assert [c.name for c in repository.customers] == ["Valido"]
        assert "scartata" in caplog.text

    async def test_non_list_blob_ignored(self, storage):
        await storage.save("invoices", {"non": "lista"})

        repository = SalesRepository(storage)
        await repository.load()

        assert repository.invoices == []

    async def test_unknown_collection_rejected(self, repository):
        with pytest.raises(KeyError):
            await repository.save("ordini")

    async def test_clear_empties_collections_and_store(self, repository, storage, make_invoice):
        await make_invoice()

        assert await repository.clear() is True

        assert repository.invoices == []
        assert await storage.load("invoices") is None
        assert await storage.stored_version() == "1.0.0"
