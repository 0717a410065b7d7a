"""Prescription Routes — the prescriptions sequence nested in each patient.

Invariants:
    - prescriptions stays an ordered list: $push appends, $set prescriptions.$ replaces
      the first matching element, $pull removes every element with the matching _id
    - Unknown patient (or prescription, for PUT/DELETE) → 404
    - DELETE reports 404 when nothing was removed, leaving the document untouched

Design Decisions:
    - Appended prescriptions without _id get a fresh ObjectId hex string so they stay addressable
    - Replacement bodies without _id keep the path identifier
    - GET returns the stored sequence as-is (response_model=None), no response validation
"""

import logging

from fastapi import APIRouter, Depends

from health_monitor.core.domain_types import (
    PrescriptionId, new_prescription_id, parse_patient_id,
)
from health_monitor.core.errors import ErrorContext, ResourceNotFoundError
from health_monitor.core.repository_protocols import PatientRepository
from health_monitor.infrastructure.database import get_patient_repository
from health_monitor.schemas.patient import (
    MessageResponse, PrescriptionIn, UpdateResult, to_json_document,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/patients", tags=["prescriptions"])


@router.get("/{patient_id}/prescriptions", response_model=None)
async def list_prescriptions(
    patient_id: str,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Return the patient's prescriptions ([] when never set)."""
    oid = parse_patient_id(patient_id)
    prescriptions = await repository.get_prescriptions(oid)
    if prescriptions is None:
        raise ResourceNotFoundError(
            "Patient", patient_id, ErrorContext(patient_id=patient_id),
        )
    return to_json_document(prescriptions)


@router.post("/{patient_id}/prescriptions", response_model=UpdateResult)
async def add_prescription(
    patient_id: str,
    body: PrescriptionIn,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Append a prescription to the patient's sequence."""
    oid = parse_patient_id(patient_id)
    prescription = body.to_document(default_id=new_prescription_id())
    result = await repository.add_prescription(oid, prescription)
    if result.matched_count == 0:
        raise ResourceNotFoundError(
            "Patient", patient_id, ErrorContext(patient_id=patient_id),
        )
    logger.info(
        "Prescription added",
        extra={"patient_id": patient_id, "prescription_id": prescription["_id"]},
    )
    return UpdateResult.from_pymongo(result)


@router.put(
    "/{patient_id}/prescriptions/{prescription_id}",
    response_model=UpdateResult,
)
async def update_prescription(
    patient_id: str,
    prescription_id: str,
    body: PrescriptionIn,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Replace the first prescription whose _id matches."""
    oid = parse_patient_id(patient_id)
    result = await repository.replace_prescription(
        oid,
        PrescriptionId(prescription_id),
        body.to_document(default_id=prescription_id),
    )
    if result.matched_count == 0:
        raise ResourceNotFoundError(
            "Patient or prescription",
            f"{patient_id}/{prescription_id}",
            ErrorContext(patient_id=patient_id, prescription_id=prescription_id),
        )
    return UpdateResult.from_pymongo(result)


@router.delete(
    "/{patient_id}/prescriptions/{prescription_id}",
    response_model=MessageResponse,
)
async def delete_prescription(
    patient_id: str,
    prescription_id: str,
    repository: PatientRepository = Depends(get_patient_repository),
):
    """Remove prescriptions whose _id matches."""
    oid = parse_patient_id(patient_id)
    result = await repository.remove_prescription(
        oid, PrescriptionId(prescription_id),
    )
    if result.modified_count == 0:
        raise ResourceNotFoundError(
            "Patient or prescription",
            f"{patient_id}/{prescription_id}",
            ErrorContext(patient_id=patient_id, prescription_id=prescription_id),
        )
    return MessageResponse(message="Prescription deleted successfully")
