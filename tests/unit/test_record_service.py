"""Tests for the record gateway."""

import asyncio
import sqlite3

import pytest

from survey_data_api.app.core.errors import RecordValidationError, StoreFailure
from survey_data_api.app.schemas.record import RecordFilter
from survey_data_api.app.services.record_service import (
    DEFAULT_SEED_DATA,
    build_query,
    validate_records,
)


def run(coro):
    return asyncio.run(coro)


def as_tuples(records):
    return [(r.age, r.gender, r.location, r.device) for r in records]


class TestBuildQuery:
    """Tests for filter → predicate mapping."""

    def test_none_is_unconstrained(self):
        assert build_query(None) == {}

    def test_empty_and_missing_fields_dropped(self):
        query = build_query({"age": [], "gender": None, "device": ["Mobile"]})

        assert query == {"device": ["Mobile"]}

    def test_accepts_filter_model(self):
        query = build_query(RecordFilter(location=["Europe", "Asia"]))

        assert query == {"location": ["Europe", "Asia"]}

    def test_bare_string_is_single_value(self):
        query = build_query({"location": "Europe"})

        assert query == {"location": ["Europe"]}

    def test_keeps_field_order_stable(self):
        query = build_query({"device": ["Tablet"], "age": ["18-24"]})

        assert list(query) == ["age", "device"]


class TestValidateRecords:
    """Tests for pre‑write domain validation."""

    def test_default_dataset_is_valid(self):
        assert len(validate_records(DEFAULT_SEED_DATA)) == 4

    def test_lowercase_value_accepted_verbatim(self):
        [record] = validate_records([DEFAULT_SEED_DATA[2]])

        assert record.gender == "male"

    def test_out_of_domain_value_rejected(self, sample_record):
        with pytest.raises(RecordValidationError) as exc_info:
            validate_records([sample_record, {**sample_record, "age": "65+"}])

        assert exc_info.value.errors[0]["index"] == 1
        assert exc_info.value.errors[0]["field"] == "age"

    def test_missing_field_rejected(self, sample_record):
        incomplete = {k: v for k, v in sample_record.items() if k != "device"}

        with pytest.raises(RecordValidationError) as exc_info:
            validate_records([incomplete])

        assert exc_info.value.errors[0]["field"] == "device"


class TestListing:
    """Filtering behaviour against the default dataset."""

    def test_list_all_returns_default_dataset(self, seeded_service):
        records = run(seeded_service.list_all())

        assert as_tuples(records) == [
            (d["age"], d["gender"], d["location"], d["device"]) for d in DEFAULT_SEED_DATA
        ]

    @pytest.mark.parametrize(
        "filters",
        [None, {}, {"age": [], "gender": [], "location": [], "device": []}, RecordFilter()],
    )
    def test_empty_filter_equals_list_all(self, seeded_service, filters):
        all_records = run(seeded_service.list_all())

        assert run(seeded_service.list_filtered(filters)) == all_records

    def test_filter_by_age(self, seeded_service):
        records = run(seeded_service.list_filtered({"age": ["18-24"]}))

        assert as_tuples(records) == [("18-24", "Male", "North America", "Mobile")]

    def test_filter_by_location(self, seeded_service):
        records = run(seeded_service.list_filtered({"location": ["Europe"]}))

        assert [r.gender for r in records] == ["Female", "male"]

    def test_gender_filter_is_case_sensitive(self, seeded_service):
        records = run(seeded_service.list_filtered({"gender": ["Male"]}))

        assert as_tuples(records) == [("18-24", "Male", "North America", "Mobile")]

    def test_lowercase_gender_matches_itself(self, seeded_service):
        records = run(seeded_service.list_filtered({"gender": ["male"]}))

        assert [r.age for r in records] == ["25-34"]

    def test_fields_conjoined_values_disjoined(self, seeded_service):
        records = run(
            seeded_service.list_filtered(
                {"age": ["25-34", "35-44"], "gender": ["Female", "Other"], "device": ["Desktop"]}
            )
        )

        assert as_tuples(records) == [("25-34", "Female", "Europe", "Desktop")]

    def test_every_result_satisfies_every_constraint(self, seeded_service):
        filters = {"age": ["25-34", "35-44"], "location": ["Europe", "Asia"]}

        records = run(seeded_service.list_filtered(filters))

        assert len(records) == 3
        for record in records:
            assert record.age in filters["age"]
            assert record.location in filters["location"]

    def test_bare_string_filter(self, seeded_service):
        records = run(seeded_service.list_filtered({"location": "Europe"}))

        assert [r.gender for r in records] == ["Female", "male"]

    def test_unknown_value_matches_nothing(self, seeded_service):
        assert run(seeded_service.list_filtered({"device": ["Console"]})) == []

    def test_store_error_becomes_store_failure(self, service, monkeypatch):
        def broken_find(predicate):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(service.store, "find", broken_find)

        with pytest.raises(StoreFailure) as exc_info:
            run(service.list_all())

        assert exc_info.value.operation == "find"


class TestSeeding:
    """Tests for seed, ensure_seeded and reseed."""

    def test_seed_inserts_without_dedup(self, service, sample_record):
        assert run(service.seed([sample_record, sample_record])) == 2
        assert run(service.count()) == 2

    def test_seed_rejects_invalid_before_writing(self, service, sample_record):
        with pytest.raises(RecordValidationError):
            run(service.seed([sample_record, {**sample_record, "gender": "Unknown"}]))

        assert run(service.count()) == 0

    def test_ensure_seeded_on_empty_store(self, service):
        assert run(service.ensure_seeded()) == 4
        assert run(service.count()) == 4

    def test_ensure_seeded_is_noop_afterwards(self, service):
        run(service.ensure_seeded())

        assert run(service.ensure_seeded()) == 0
        assert run(service.count()) == 4

    def test_ensure_seeded_leaves_unrelated_data_alone(self, service, sample_record):
        run(service.seed([sample_record]))

        assert run(service.ensure_seeded()) == 0
        assert as_tuples(run(service.list_all())) == [
            ("35-44", "Female", "Asia", "Mobile")
        ]

    @pytest.mark.parametrize("existing", [0, 1, 7])
    def test_reseed_restores_default_dataset(self, service, sample_record, existing):
        if existing:
            run(service.seed([sample_record] * existing))

        assert run(service.reseed()) == 4
        assert as_tuples(run(service.list_all())) == [
            (d["age"], d["gender"], d["location"], d["device"]) for d in DEFAULT_SEED_DATA
        ]

    def test_reseed_twice_keeps_four(self, service):
        run(service.reseed())
        run(service.reseed())

        assert run(service.count()) == 4

    def test_reseed_failure_keeps_existing_records(self, service, sample_record, monkeypatch):
        run(service.seed([sample_record] * 2))

        def broken_insert(cursor, records):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(service.store, "_insert", broken_insert)

        with pytest.raises(StoreFailure) as exc_info:
            run(service.reseed())

        assert exc_info.value.operation == "replace_all"
        assert run(service.count()) == 2
