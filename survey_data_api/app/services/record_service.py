"""
Record gateway: filtered reads and seeding over the record store.

``RecordService`` translates an optional per‑field filter into a store
predicate, runs it and returns the matching records.  It also owns the
default dataset and the two ways of loading it: ``ensure_seeded``
(only when the store is empty) and ``reseed`` (wipe, then load).

The service holds no mutable state of its own; the ``RecordStore``
handle it is given is the only thing it talks to.  Any ``sqlite3``
error is logged with the operation that failed and re‑raised as
``StoreFailure``.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Mapping, Sequence, Union

from pydantic import ValidationError

from survey_data_api.app.core.db import RecordStore
from survey_data_api.app.core.errors import RecordValidationError, StoreFailure
from survey_data_api.app.schemas.record import (
    RECORD_FIELDS,
    RecordCreate,
    RecordFilter,
    RecordRead,
)


logger = logging.getLogger(__name__)


# The third entry's lowercase "male" is kept as it has always been
# seeded.  It passes the case‑insensitive domain check and is stored
# verbatim, so an exact filter on "Male" does not return it.
DEFAULT_SEED_DATA: List[Dict[str, str]] = [
    {"age": "18-24", "gender": "Male", "location": "North America", "device": "Mobile"},
    {"age": "25-34", "gender": "Female", "location": "Europe", "device": "Desktop"},
    {"age": "25-34", "gender": "male", "location": "Europe", "device": "Desktop"},
    {"age": "35-44", "gender": "Other", "location": "Asia", "device": "Tablet"},
]


FilterInput = Union[RecordFilter, Mapping[str, Union[str, Sequence[str], None]], None]


def build_query(filters: FilterInput) -> Dict[str, List[str]]:
    """Map a filter to a store predicate.

    Only fields with a non‑empty list of values appear in the result.
    A bare string counts as a single accepted value.
    An empty result means "match everything".
    """
    if filters is None:
        return {}
    if isinstance(filters, RecordFilter):
        filters = filters.model_dump()
    query: Dict[str, List[str]] = {}
    for field_name in RECORD_FIELDS:
        values = filters.get(field_name)
        if isinstance(values, str):
            values = [values]
        if values:
            query[field_name] = list(values)
    return query


def validate_records(records: Sequence[Union[RecordCreate, Mapping[str, Any]]]) -> List[RecordCreate]:
    """Check every record's fields against their domains.

    Raises ``RecordValidationError`` listing each offending field (with
    the record's position) if any record is invalid.
    """
    validated: List[RecordCreate] = []
    errors: List[Dict[str, Any]] = []
    for index, record in enumerate(records):
        if isinstance(record, RecordCreate):
            validated.append(record)
            continue
        try:
            validated.append(RecordCreate.model_validate(dict(record)))
        except ValidationError as exc:
            for err in exc.errors():
                errors.append(
                    {
                        "index": index,
                        "field": err["loc"][0] if err["loc"] else None,
                        "message": err["msg"],
                    }
                )
    if errors:
        raise RecordValidationError(errors)
    return validated


class RecordService:
    """Gateway between the HTTP layer and the record store."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def list_all(self) -> List[RecordRead]:
        """Return every record in the store."""
        return await self.list_filtered(None)

    async def list_filtered(self, filters: FilterInput) -> List[RecordRead]:
        """Return records matching ``filters``.

        Fields combine with AND; values within a field combine with OR.
        No pagination or sorting beyond insertion order is applied.
        """
        query = build_query(filters)
        try:
            rows = self.store.find(query)
        except sqlite3.Error as e:
            logger.error("Fetching records failed (query=%s): %s", query, e)
            raise StoreFailure("find") from e
        return [RecordRead.model_validate(row) for row in rows]

    async def seed(self, records: Sequence[Union[RecordCreate, Mapping[str, Any]]]) -> int:
        """Insert ``records`` in order without any dedup check.

        Returns the number inserted.  Either all records are written or,
        on failure, none are.
        """
        validated = validate_records(records)
        try:
            inserted = self.store.insert_many([record.model_dump() for record in validated])
        except sqlite3.Error as e:
            logger.error("Seeding records failed: %s", e)
            raise StoreFailure("insert_many") from e
        logger.info("Successfully seeded %d documents", len(inserted))
        return len(inserted)

    async def ensure_seeded(self) -> int:
        """Load the default dataset if, and only if, the store is empty.

        Any existing record, relevant or not, counts as "already
        seeded".  The emptiness check and the insert happen in one
        transaction.  Returns the number of records inserted.
        """
        validated = validate_records(DEFAULT_SEED_DATA)
        try:
            inserted = self.store.insert_many_if_empty([record.model_dump() for record in validated])
        except sqlite3.Error as e:
            logger.error("Checking or seeding initial data failed: %s", e)
            raise StoreFailure("insert_many_if_empty") from e
        if inserted:
            logger.info("No existing data found. Seeded %d documents", len(inserted))
        else:
            logger.info("Store already populated; skipping initial seed")
        return len(inserted)

    async def reseed(self) -> int:
        """Delete every record, then load the default dataset.

        Both steps run in one store transaction, so overlapping reseeds
        each end with exactly the default records.
        """
        validated = validate_records(DEFAULT_SEED_DATA)
        try:
            deleted, inserted = self.store.replace_all([record.model_dump() for record in validated])
        except sqlite3.Error as e:
            logger.error("Reseeding records failed: %s", e)
            raise StoreFailure("replace_all") from e
        logger.info("Cleared %d existing documents and seeded %d", deleted, len(inserted))
        return len(inserted)

    async def count(self) -> int:
        try:
            return self.store.count()
        except sqlite3.Error as e:
            logger.error("Counting records failed: %s", e)
            raise StoreFailure("count") from e
