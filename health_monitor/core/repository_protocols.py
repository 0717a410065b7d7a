"""Boundary Protocols — contracts between routes and storage.

Invariants:
    - Routes NEVER import pymongo collections directly; they receive a PatientRepository
    - Every method issues exactly one storage call
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, routes await them
"""

from typing import Any, Protocol

from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from health_monitor.core.domain_types import PatientId, PrescriptionId


class PatientRepository(Protocol):
    """Contract for patient and prescription persistence, implemented by infrastructure."""
    async def list_patients(self) -> list[dict[str, Any]]: ...
    async def insert_patient(self, document: dict[str, Any]) -> InsertOneResult: ...
    async def update_patient(
        self, patient_id: PatientId, fields: dict[str, Any],
    ) -> UpdateResult: ...
    async def delete_patient(self, patient_id: PatientId) -> DeleteResult: ...
    async def get_prescriptions(
        self, patient_id: PatientId,
    ) -> list[dict[str, Any]] | None: ...
    async def add_prescription(
        self, patient_id: PatientId, prescription: dict[str, Any],
    ) -> UpdateResult: ...
    async def replace_prescription(
        self,
        patient_id: PatientId,
        prescription_id: PrescriptionId,
        prescription: dict[str, Any],
    ) -> UpdateResult: ...
    async def remove_prescription(
        self, patient_id: PatientId, prescription_id: PrescriptionId,
    ) -> UpdateResult: ...
    async def ping(self) -> bool: ...
