"""Patient Routes — list, create, update and delete patient documents.

Invariants:
    - Each handler performs exactly one repository call
    - Storage failures surface as StorageError (500) via the global handler
    - PUT on an unknown id → 404; DELETE on an unknown id → 200 with deletedCount 0
    - Repeated POSTs create duplicate patients (no idempotency keys)
    - GET /patients returns stored documents as-is (response_model=None)
"""

import logging

from fastapi import APIRouter, Depends

from health_monitor.core.domain_types import parse_patient_id
from health_monitor.core.errors import ErrorContext, ResourceNotFoundError
from health_monitor.core.repository_protocols import PatientRepository
from health_monitor.infrastructure.database import get_patient_repository
from health_monitor.schemas.patient import (
    DeleteResult, InsertResult, PatientCreate, PatientUpdate, UpdateResult,
    to_json_document,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=None)
async def list_patients(
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Return every patient document, as stored."""
    patients = await repository.list_patients()
    return to_json_document(patients)


@router.post("", response_model=InsertResult)
async def create_patient(
    body: PatientCreate,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Insert a new patient with an empty prescriptions list."""
    result = await repository.insert_patient(body.to_document())
    logger.info(
        "Patient created", extra={"patient_id": str(result.inserted_id)},
    )
    return InsertResult.from_pymongo(result)


@router.put("/{patient_id}", response_model=UpdateResult)
async def update_patient(
    patient_id: str,
    body: PatientUpdate,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Replace the given fields on an existing patient."""
    oid = parse_patient_id(patient_id)
    result = await repository.update_patient(oid, body.to_fields())
    if result.matched_count == 0:
        raise ResourceNotFoundError(
            "Patient", patient_id, ErrorContext(patient_id=patient_id),
        )
    return UpdateResult.from_pymongo(result)


@router.delete("/{patient_id}", response_model=DeleteResult)
async def delete_patient(
    patient_id: str,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Delete a patient. Unknown ids are not an error."""
    oid = parse_patient_id(patient_id)
    result = await repository.delete_patient(oid)
    return DeleteResult.from_pymongo(result)
