"""Patient Schemas — boundary validation and write-result serialization."""

import pytest
from bson import ObjectId
from pydantic import ValidationError
from pymongo.results import InsertOneResult, UpdateResult as MongoUpdateResult

from health_monitor.schemas.patient import (
    InsertResult, PatientCreate, PatientUpdate, PrescriptionIn, UpdateResult,
    to_json_document,
)


def test_patient_create_keeps_fields_and_resets_prescriptions():
    body = PatientCreate.model_validate({"name": "Alice", "prescriptions": [1]})
    assert body.to_document() == {"name": "Alice", "prescriptions": []}


def test_patient_create_rejects_identifier():
    with pytest.raises(ValidationError):
        PatientCreate.model_validate({"_id": "x"})


def test_patient_update_rejects_empty():
    with pytest.raises(ValidationError):
        PatientUpdate.model_validate({})


@pytest.mark.parametrize("body", [
    {"prescriptions": {"a": 1}},
    {"prescriptions": None},
    {"prescriptions": [{"_id": "rx-1"}, "rx-2"]},
    {"prescriptions.0": {"_id": "rx-1"}},
    {"$set": {"age": 3}},
])
def test_patient_update_guards_prescriptions_and_operators(body):
    with pytest.raises(ValidationError):
        PatientUpdate.model_validate(body)


def test_patient_update_allows_nested_paths_outside_prescriptions():
    body = PatientUpdate.model_validate({"address.city": "Lyon", "prescriptions": []})
    assert body.to_fields() == {"address.city": "Lyon", "prescriptions": []}


def test_patient_create_rejects_operator_keys():
    with pytest.raises(ValidationError):
        PatientCreate.model_validate({"$where": "1"})


def test_prescription_keeps_caller_identifier():
    body = PrescriptionIn.model_validate({"_id": "rx-1", "drug": "A"})
    assert body.to_document(default_id="other") == {"_id": "rx-1", "drug": "A"}


def test_prescription_defaults_identifier():
    body = PrescriptionIn.model_validate({"drug": "A"})
    assert body.to_document(default_id="rx-9") == {"_id": "rx-9", "drug": "A"}


def test_prescription_coerces_integer_identifier():
    assert PrescriptionIn.model_validate({"_id": 12}).prescription_id == "12"


@pytest.mark.parametrize("bad", [True, "", {"$oid": "x"}, 1.5])
def test_prescription_rejects_bad_identifier(bad):
    with pytest.raises(ValidationError):
        PrescriptionIn.model_validate({"_id": bad})


def test_insert_result_uses_camel_case():
    oid = ObjectId()
    result = InsertResult.from_pymongo(InsertOneResult(oid, acknowledged=True))
    assert result.model_dump(by_alias=True) == {
        "acknowledged": True, "insertedId": str(oid),
    }


def test_update_result_uses_camel_case():
    raw = MongoUpdateResult({"n": 1, "nModified": 1, "updatedExisting": True}, True)
    assert UpdateResult.from_pymongo(raw).model_dump(by_alias=True) == {
        "acknowledged": True,
        "matchedCount": 1,
        "modifiedCount": 1,
        "upsertedCount": 0,
        "upsertedId": None,
    }


def test_to_json_document_renders_object_ids():
    oid = ObjectId()
    assert to_json_document([{"_id": oid, "nested": {"ref": oid}}]) == [
        {"_id": str(oid), "nested": {"ref": str(oid)}},
    ]
