"""Domain Types — identifier wrappers and parsing for patients and prescriptions.

Invariants:
    - PatientId always wraps a valid BSON ObjectId
    - PrescriptionId is an opaque caller-supplied string (matched by equality only)
    - parse_patient_id never lets bson.errors.InvalidId escape (mapped to 400)
"""

from typing import NewType

from bson import ObjectId

from health_monitor.core.errors import ErrorContext, InvalidIdentifierError

PatientId = NewType("PatientId", ObjectId)
PrescriptionId = NewType("PrescriptionId", str)


def parse_patient_id(raw: str) -> PatientId:
    """Parse a path segment into a PatientId or raise InvalidIdentifierError."""
    if not ObjectId.is_valid(raw):
        raise InvalidIdentifierError(
            raw, "patient id", ErrorContext(patient_id=raw),
        )
    return PatientId(ObjectId(raw))


def new_prescription_id() -> PrescriptionId:
    """Fresh identifier for prescriptions appended without one."""
    return PrescriptionId(str(ObjectId()))
