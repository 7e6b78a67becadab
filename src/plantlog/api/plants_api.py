"""Plants API: create plants and list them with or without filters."""

from typing import Optional

from ..database.document_store import SERVER_TIMESTAMP, DocumentStore
from ..plants.coordinator import FetchCoordinator, FetchState
from ..query.executor import DEFAULT_COLLECTION, DEFAULT_TIMESTAMP_FIELD, PlantQueryExecutor
from ..query.filters import build_filter_criteria, require_criteria
from ..utils.logging import get_logger

logger = get_logger(__name__)


async def add_plant(
    store: DocumentStore,
    name: str,
    type_: str = "",
    location: str = "",
    collection: str = DEFAULT_COLLECTION,
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
) -> str:
    """
    Insert a new plant; the store assigns its creation timestamp.

    Args:
        store: Document store to write to
        name: Plant name (required)
        type_: Plant type
        location: Where the plant is
        collection: Target collection name
        timestamp_field: Field that receives the server timestamp

    Returns:
        The new document id

    Raises:
        ValueError: If name is blank
    """
    if not name or not name.strip():
        raise ValueError("Plant name is required")

    doc_id = await store.add_document(
        collection,
        {
            "name": name,
            "type": type_ or "",
            "location": location or "",
            timestamp_field: SERVER_TIMESTAMP,
        },
    )
    logger.info(f"Plant '{name}' in '{location or ''}' inserted with id {doc_id}")
    return doc_id


async def list_plants(
    store: DocumentStore,
    name: Optional[str] = "",
    type_: Optional[str] = "",
    location: Optional[str] = "",
    *,
    require_filter: bool = False,
    collection: str = DEFAULT_COLLECTION,
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
) -> FetchState:
    """
    List plants, optionally filtered by exact-match on name/type/location.

    Args:
        store: Document store to read from
        name: Raw name filter text
        type_: Raw type filter text
        location: Raw location filter text
        require_filter: Explicit filter action; at least one filter is needed
        collection: Collection name
        timestamp_field: Field holding the creation timestamp

    Returns:
        The settled FetchState (ready or failed)

    Raises:
        FilterValidationError: If require_filter is set and no filter was given
    """
    criteria = build_filter_criteria(name, type_, location)
    if require_filter:
        require_criteria(criteria)

    executor = PlantQueryExecutor(store, collection=collection, timestamp_field=timestamp_field)
    coordinator = FetchCoordinator(executor)
    return await coordinator.trigger(criteria)
