"""MongoDB Access — client bootstrap, patient repository and FastAPI dependency.

Invariants:
    - One MongoClient per process, created and pinged on startup (fatal if unreachable)
    - Every repository method issues exactly one collection call
    - All PyMongoError exceptions mapped to StorageError (core/errors.py)
    - Blocking driver calls run on the threadpool, never on the event loop

Design Decisions:
    - Repository stored on app.state and injected via get_patient_repository:
      no module-level collection handle (tests override the dependency)
    - Sync pymongo + run_in_threadpool: the driver owns pooling, routes stay async
"""

import logging
from functools import partial
from typing import Any, Callable, TypeVar

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from health_monitor.config import Settings
from health_monitor.core.domain_types import PatientId, PrescriptionId
from health_monitor.core.errors import (
    ErrorContext, StorageConnectionError, StorageError,
)
from health_monitor.core.repository_protocols import PatientRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def connect_mongo(settings: Settings) -> MongoClient:
    """Create the client and verify the server answers a ping."""
    client: MongoClient = MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
    )
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        logger.critical(f"MongoDB connection failed: {e}")
        raise StorageConnectionError(settings.mongodb_uri) from e
    logger.info(
        f"Connected to MongoDB database '{settings.mongodb_database}'",
    )
    return client


class MongoPatientRepository:
    """PatientRepository over a single pymongo collection."""

    def __init__(self, collection: Collection):
        self._collection = collection

    async def _run(
        self,
        operation: str,
        fn: Callable[..., T],
        *args: Any,
        context: ErrorContext | None = None,
    ) -> T:
        try:
            return await run_in_threadpool(fn, *args)
        except PyMongoError as e:
            ctx = context or ErrorContext()
            logger.error(
                f"Error trying to {operation}: {e}",
                extra={
                    "operation": operation,
                    "patient_id": ctx.patient_id,
                    "prescription_id": ctx.prescription_id,
                },
            )
            raise StorageError(operation, ctx) from e

    async def list_patients(self) -> list[dict[str, Any]]:
        return await self._run(
            "fetch patients", lambda: list(self._collection.find()),
        )

    async def insert_patient(self, document: dict[str, Any]) -> InsertOneResult:
        return await self._run(
            "insert patient", self._collection.insert_one, document,
        )

    async def update_patient(
        self, patient_id: PatientId, fields: dict[str, Any],
    ) -> UpdateResult:
        return await self._run(
            "update patient",
            self._collection.update_one,
            {"_id": patient_id},
            {"$set": fields},
            context=ErrorContext(patient_id=str(patient_id)),
        )

    async def delete_patient(self, patient_id: PatientId) -> DeleteResult:
        return await self._run(
            "delete patient",
            self._collection.delete_one,
            {"_id": patient_id},
            context=ErrorContext(patient_id=str(patient_id)),
        )

    async def get_prescriptions(
        self, patient_id: PatientId,
    ) -> list[dict[str, Any]] | None:
        """Return the patient's prescriptions, [] if unset, None if no such patient."""
        patient = await self._run(
            "fetch prescriptions",
            partial(
                self._collection.find_one,
                {"_id": patient_id},
                projection={"prescriptions": 1},
            ),
            context=ErrorContext(patient_id=str(patient_id)),
        )
        if patient is None:
            return None
        return patient.get("prescriptions") or []

    async def add_prescription(
        self, patient_id: PatientId, prescription: dict[str, Any],
    ) -> UpdateResult:
        return await self._run(
            "add prescription",
            self._collection.update_one,
            {"_id": patient_id},
            {"$push": {"prescriptions": prescription}},
            context=ErrorContext(patient_id=str(patient_id)),
        )

    async def replace_prescription(
        self,
        patient_id: PatientId,
        prescription_id: PrescriptionId,
        prescription: dict[str, Any],
    ) -> UpdateResult:
        # Positional $ targets the first element matched by the filter
        return await self._run(
            "update prescription",
            self._collection.update_one,
            {"_id": patient_id, "prescriptions._id": prescription_id},
            {"$set": {"prescriptions.$": prescription}},
            context=ErrorContext(
                patient_id=str(patient_id), prescription_id=prescription_id,
            ),
        )

    async def remove_prescription(
        self, patient_id: PatientId, prescription_id: PrescriptionId,
    ) -> UpdateResult:
        return await self._run(
            "delete prescription",
            self._collection.update_one,
            {"_id": patient_id},
            {"$pull": {"prescriptions": {"_id": prescription_id}}},
            context=ErrorContext(
                patient_id=str(patient_id), prescription_id=prescription_id,
            ),
        )

    async def ping(self) -> bool:
        """Check database connectivity (for readiness checks)."""
        try:
            await self._run(
                "ping database", self._collection.database.command, "ping",
            )
            return True
        except StorageError:
            return False


def get_patient_repository(request: Request) -> PatientRepository:
    """FastAPI dependency for the repository bound on startup."""
    repository = getattr(request.app.state, "patient_repository", None)
    if repository is None:
        raise RuntimeError("Patient repository not initialized")
    return repository
