"""Tests for the plants API surface."""

import pytest

from plantlog.api.plants_api import add_plant, list_plants
from plantlog.database.document_store import StoreError, StoreTimestamp
from plantlog.plants.coordinator import FETCH_ERROR_MESSAGE, HEADER_ALL, HEADER_FILTERED
from plantlog.query.filters import FilterValidationError


class FailingStore:
    def __init__(self):
        self.queried = False

    async def get_documents(self, collection, predicates=()):
        self.queried = True
        raise StoreError("network unreachable")

    async def add_document(self, collection, fields):
        raise StoreError("network unreachable")


async def _seed(store):
    await add_plant(store, "Fern", "Shade", "Patio")
    await add_plant(store, "Cactus", "Sun", "Window")


@pytest.mark.asyncio
async def test_add_plant_writes_fields_and_server_timestamp(store):
    doc_id = await add_plant(store, "Fern", "Shade", "Patio")

    [doc] = await store.get_documents("plants")

    assert doc.id == doc_id
    assert {k: doc.data[k] for k in ("name", "type", "location")} == {
        "name": "Fern",
        "type": "Shade",
        "location": "Patio",
    }
    assert isinstance(doc.data["dateAdded"], StoreTimestamp)


@pytest.mark.asyncio
async def test_add_plant_requires_name(store):
    with pytest.raises(ValueError, match="name is required"):
        await add_plant(store, "  ", "Shade", "Patio")


@pytest.mark.asyncio
async def test_add_plant_propagates_store_failure():
    with pytest.raises(StoreError):
        await add_plant(FailingStore(), "Fern")


@pytest.mark.asyncio
async def test_scenario_all_filtered_and_empty(store):
    await _seed(store)

    everything = await list_plants(store)
    assert sorted(r.name for r in everything.records) == ["Cactus", "Fern"]
    assert everything.header_label == HEADER_ALL

    sunny = await list_plants(store, type_="Sun")
    assert [r.id for r in sunny.records] == [r.id for r in everything.records if r.name == "Cactus"]
    assert sunny.header_label == HEADER_FILTERED

    orchids = await list_plants(store, name="Orchid")
    assert orchids.status == "ready"
    assert orchids.records == []


@pytest.mark.asyncio
async def test_explicit_filter_without_criteria_is_rejected_before_fetch():
    store = FailingStore()

    with pytest.raises(FilterValidationError):
        await list_plants(store, " ", "", None, require_filter=True)

    assert store.queried is False


@pytest.mark.asyncio
async def test_store_failure_gives_failed_state():
    state = await list_plants(FailingStore(), name="Fern")

    assert state.status == "failed"
    assert state.error == FETCH_ERROR_MESSAGE
