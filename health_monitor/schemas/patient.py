"""Patient Schemas — Pydantic models at the API boundary.

Invariants:
    - Patient and prescription bodies are open documents; any field persists as-is
    - Patient bodies never carry _id (server-assigned, immutable) or $-prefixed keys
    - PatientUpdate keeps prescriptions a list of objects (no dotted prescriptions.* paths)
    - PatientCreate.to_document() always starts with an empty prescriptions list
    - Write results serialize with the driver's camelCase keys (insertedId, matchedCount, ...)

Design Decisions:
    - RootModel[dict] over declared fields: documents are schemaless and _id
      cannot be a declared pydantic field (leading underscore)
    - from_pymongo classmethods keep pymongo result types out of route signatures
"""

from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, RootModel, field_validator
from pydantic.alias_generators import to_camel
from pymongo.results import DeleteResult as MongoDeleteResult
from pymongo.results import InsertOneResult, UpdateResult as MongoUpdateResult


def to_json_document(document: Any) -> Any:
    """Render stored documents as JSON-safe data (ObjectId -> hex string)."""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


def _reject_identifier(data: dict[str, Any]) -> dict[str, Any]:
    if "_id" in data:
        raise ValueError("_id is assigned by the server and cannot be set")
    return data


def _reject_operators(data: dict[str, Any]) -> dict[str, Any]:
    for key in data:
        if key.startswith("$"):
            raise ValueError(f"field names cannot start with '$': {key}")
    return data


def _check_prescriptions(data: dict[str, Any]) -> dict[str, Any]:
    # prescriptions stays a list of documents; elements only change through the sub-routes
    for key in data:
        if key.startswith("prescriptions."):
            raise ValueError(f"cannot update prescriptions elements by path: {key}")
    if "prescriptions" in data:
        value = data["prescriptions"]
        if not isinstance(value, list) or not all(isinstance(p, dict) for p in value):
            raise ValueError("prescriptions must be a list of objects")
    return data


class PatientCreate(RootModel[dict[str, Any]]):
    """New patient: any caller fields, prescriptions reset to []."""

    @field_validator("root")
    @classmethod
    def check_no_identifier(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _reject_operators(_reject_identifier(v))

    def to_document(self) -> dict[str, Any]:
        return {**self.root, "prescriptions": []}


class PatientUpdate(RootModel[dict[str, Any]]):
    """Field replacement for an existing patient (at least one field)."""

    @field_validator("root")
    @classmethod
    def check_fields(cls, v: dict[str, Any]) -> dict[str, Any]:
        if not v:
            raise ValueError("update body must contain at least one field")
        return _check_prescriptions(_reject_operators(_reject_identifier(v)))

    def to_fields(self) -> dict[str, Any]:
        return dict(self.root)


class PrescriptionIn(RootModel[dict[str, Any]]):
    """Prescription body: open document with an optional caller-supplied _id."""

    @field_validator("root")
    @classmethod
    def normalize_identifier(cls, v: dict[str, Any]) -> dict[str, Any]:
        if "_id" not in v or v["_id"] is None:
            return v
        raw = v["_id"]
        # bool is an int subclass but never a sensible identifier
        if isinstance(raw, bool) or not isinstance(raw, (str, int)):
            raise ValueError("_id must be a string or an integer")
        if raw == "":
            raise ValueError("_id cannot be empty")
        return {**v, "_id": str(raw)}

    @property
    def prescription_id(self) -> str | None:
        return self.root.get("_id")

    def to_document(self, default_id: str) -> dict[str, Any]:
        fields = {k: v for k, v in self.root.items() if k != "_id"}
        return {"_id": self.prescription_id or default_id, **fields}


# --- Write results -------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InsertResult(_CamelModel):
    acknowledged: bool
    inserted_id: str

    @classmethod
    def from_pymongo(cls, result: InsertOneResult) -> "InsertResult":
        return cls(
            acknowledged=result.acknowledged,
            inserted_id=str(result.inserted_id),
        )


class UpdateResult(_CamelModel):
    acknowledged: bool
    matched_count: int
    modified_count: int
    upserted_count: int = 0
    upserted_id: str | None = None

    @classmethod
    def from_pymongo(cls, result: MongoUpdateResult) -> "UpdateResult":
        upserted_id = result.upserted_id
        return cls(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_count=0 if upserted_id is None else 1,
            upserted_id=None if upserted_id is None else str(upserted_id),
        )


class DeleteResult(_CamelModel):
    acknowledged: bool
    deleted_count: int

    @classmethod
    def from_pymongo(cls, result: MongoDeleteResult) -> "DeleteResult":
        return cls(
            acknowledged=result.acknowledged,
            deleted_count=result.deleted_count,
        )


class MessageResponse(BaseModel):
    message: str
