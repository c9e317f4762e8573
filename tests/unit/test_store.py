"""Unit tests for the in-memory ledger store."""

import pytest

from capsim.errors import DuplicateVersionError, StoreError
from capsim.ledger import EntityKind, InMemoryLedgerStore, TimeStamp, entity_keys
from capsim.roles import StockType
from tests.helpers.factories import make_economy

PROJECT = 1


def _snapshot(scn):
    return {
        EntityKind.COMMODITY: scn.com,
        EntityKind.STOCK: scn.stk,
        EntityKind.INDUSTRY: scn.ind,
        EntityKind.SOCIAL_CLASS: scn.cls,
        EntityKind.GLOBAL: scn.gl,
    }


@pytest.fixture
def scn():
    return make_economy()


@pytest.fixture
def store(scn):
    store = InMemoryLedgerStore()
    store.write_new_version(PROJECT, TimeStamp(1, PROJECT, 1, "start"), _snapshot(scn))
    store.set_current_version(PROJECT, 1)
    return store


class TestWrite:
    def test_written_version_is_listed(self, store):
        assert [ts.version for ts in store.timestamps(PROJECT)] == [1]
        assert store.current_version(PROJECT) == 1
        assert (PROJECT, 1) in store

    def test_writes_are_copies(self, store, scn):
        scn.stk.quantity[:] = -1.0
        stored = store.read_entities(EntityKind.STOCK, PROJECT, 1)
        assert (stored.quantity >= 0).all()

    def test_reads_are_copies(self, store):
        first = store.read_entities(EntityKind.INDUSTRY, PROJECT, 1)
        first.output[:] = 0.0
        again = store.read_entities(EntityKind.INDUSTRY, PROJECT, 1)
        assert again.output[0] == 1000.0

    def test_duplicate_version_is_refused(self, store, scn):
        with pytest.raises(DuplicateVersionError) as excinfo:
            store.write_new_version(
                PROJECT, TimeStamp(1, PROJECT, 1, "demand"), _snapshot(scn)
            )
        assert excinfo.value.version == 1
        assert isinstance(excinfo.value, StoreError)
        # the original record survives
        assert store.timestamp(PROJECT, 1).description == "start"

    def test_incomplete_snapshot_writes_nothing(self, store, scn):
        partial = _snapshot(scn)
        del partial[EntityKind.GLOBAL]
        with pytest.raises(StoreError, match="missing"):
            store.write_new_version(PROJECT, TimeStamp(2, PROJECT, 1, "demand"), partial)
        assert (PROJECT, 2) not in store
        assert len(store.timestamps(PROJECT)) == 1

    def test_foreign_timestamp_is_refused(self, store, scn):
        with pytest.raises(StoreError, match="belongs to project 9"):
            store.write_new_version(PROJECT, TimeStamp(2, 9, 1, "demand"), _snapshot(scn))


class TestPointer:
    def test_pointer_only_moves_to_existing_versions(self, store):
        with pytest.raises(StoreError):
            store.set_current_version(PROJECT, 5)
        assert store.current_version(PROJECT) == 1

    def test_unknown_project(self):
        store = InMemoryLedgerStore()
        with pytest.raises(StoreError):
            store.current_version(3)
        assert store.timestamps(3) == []

    def test_unknown_version(self, store):
        with pytest.raises(StoreError, match="no version 4"):
            store.read_snapshot(PROJECT, 4)
        with pytest.raises(StoreError):
            store.timestamp(PROJECT, 4)


class TestNaturalKeys:
    def test_entity_keys(self, store):
        snapshot = store.read_snapshot(PROJECT, 1)
        assert entity_keys(EntityKind.INDUSTRY, snapshot) == [
            "Department I",
            "Department II",
        ]
        assert entity_keys(EntityKind.GLOBAL, snapshot) == [None]
        stock_keys = entity_keys(EntityKind.STOCK, snapshot)
        assert ("Workers", "Labour Power", "sales") in stock_keys
        assert len(stock_keys) == len(set(stock_keys))

    def test_read_entity_by_name(self, store):
        rec = store.read_entity(EntityKind.SOCIAL_CLASS, PROJECT, 1, "Capitalists")
        assert rec["revenue"] == 500.0
        assert rec["property_share"] == 1.0

    @pytest.mark.parametrize("stock_type", ["sales", StockType.SALES])
    def test_read_stock_by_key(self, store, stock_type):
        rec = store.read_entity(
            EntityKind.STOCK, PROJECT, 1, ("Workers", "Labour Power", stock_type)
        )
        assert rec["quantity"] == 1000.0
        assert rec["price"] == 500.0

    def test_read_global(self, store):
        rec = store.read_entity(EntityKind.GLOBAL, PROJECT, 1, None)
        assert rec["labour_supply_response"] == "flexible"
        assert rec["melt"] == 1.0

    def test_read_entity_accepts_kind_names(self, store):
        rec = store.read_entity("stock", PROJECT, 1, ("Workers", "Labour Power", "sales"))
        assert rec["quantity"] == 1000.0
        assert store.read_entity("global", PROJECT, 1, None)["melt"] == 1.0

    def test_missing_entity_is_none(self, store):
        assert store.read_entity(EntityKind.INDUSTRY, PROJECT, 1, "Department III") is None
