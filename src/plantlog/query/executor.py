"""Plant query executor: criteria in, typed records out."""

from typing import Any, List, Optional

from plantlog.database.document_store import DocumentStore, Predicate, StoreDocument
from plantlog.parsing.normalizer import normalize_date, to_instant
from plantlog.plants.plant_models import PlantRecord
from plantlog.query.filters import FILTER_FIELDS, FilterCriteria
from plantlog.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_COLLECTION = "plants"
DEFAULT_TIMESTAMP_FIELD = "dateAdded"


def build_predicates(criteria: Optional[FilterCriteria]) -> List[Predicate]:
    """One equality predicate per present recognized key, in FILTER_FIELDS order."""
    if not criteria:
        return []
    return [Predicate(key, "==", criteria[key]) for key in FILTER_FIELDS if criteria.get(key)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class PlantQueryExecutor:
    """Runs plant queries against an injected document store."""

    def __init__(
        self,
        store: DocumentStore,
        collection: str = DEFAULT_COLLECTION,
        timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
    ):
        self.store = store
        self.collection = collection
        self.timestamp_field = timestamp_field

    async def fetch(self, criteria: Optional[FilterCriteria] = None) -> List[PlantRecord]:
        """
        Fetch plants matching every supplied criterion.

        Empty criteria retrieve the whole collection. Zero matches return an
        empty list. Store failures propagate to the caller unchanged; there
        are no retries.

        Args:
            criteria: Exact-match criteria keyed by name/type/location

        Returns:
            List of PlantRecord in store order
        """
        predicates = build_predicates(criteria)
        if predicates:
            logger.info(
                f"Executing FILTERED plant query on '{self.collection}': "
                + ", ".join(f"{p.field}=={p.value!r}" for p in predicates)
            )
        else:
            logger.info(f"Executing ALL plants query on '{self.collection}' (no filters provided)")

        documents = await self.store.get_documents(self.collection, predicates)

        if not documents:
            logger.info("No matching plants found")
            return []

        records = [self.to_record(doc) for doc in documents]
        logger.info(f"Fetched {len(records)} plants")
        return records

    def to_record(self, document: StoreDocument) -> PlantRecord:
        """Map a raw document to a PlantRecord, normalizing its timestamp."""
        data = document.data or {}
        raw_timestamp = data.get(self.timestamp_field)

        try:
            date_added = to_instant(raw_timestamp)
        except ValueError:
            logger.warning(f"Plant {document.id} has an unparseable {self.timestamp_field}: {raw_timestamp!r}")
            date_added = None

        return PlantRecord(
            id=document.id,
            name=_text(data.get("name")),
            type=_text(data.get("type")),
            location=_text(data.get("location")),
            date_added=date_added,
            date_added_display=normalize_date(raw_timestamp),
        )
