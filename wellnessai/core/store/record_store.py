"""
Patient Record Store

In-memory record store for intake profiles. Supplies the most recently
created profile to the assessment flow.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
import threading
import uuid

from wellnessai.core.intake.profile import PatientProfile
from wellnessai.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PatientRecord:
    """Stored profile plus bookkeeping."""
    record_id: str
    profile: PatientProfile
    created_at: datetime
    updated_at: datetime


class PatientRecordStore:
    """
    Thread-safe in-memory store (replace with database in production).

    ``latest()`` orders by creation, so editing an older record does not make
    it the latest.
    """

    def __init__(self):
        self._records: Dict[str, PatientRecord] = {}
        self._order: List[str] = []
        self._lock = threading.Lock()

    def save(self, profile: PatientProfile) -> PatientRecord:
        """Create a new record."""
        now = datetime.now()
        record = PatientRecord(
            record_id=f"PAT-{uuid.uuid4().hex[:8].upper()}",
            profile=profile,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._records[record.record_id] = record
            self._order.append(record.record_id)
        logger.info(f"Patient record created: {record.record_id}")
        return record

    def update(self, record_id: str, profile: PatientProfile) -> PatientRecord:
        """Replace the profile of an existing record (last write wins)."""
        with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                raise KeyError(record_id)
            record = PatientRecord(
                record_id=record_id,
                profile=profile,
                created_at=existing.created_at,
                updated_at=datetime.now(),
            )
            self._records[record_id] = record
        logger.info(f"Patient record updated: {record_id}")
        return record

    def get(self, record_id: str) -> Optional[PatientRecord]:
        with self._lock:
            return self._records.get(record_id)

    def latest(self) -> Optional[PatientRecord]:
        """Most recently created record, or None when the store is empty."""
        with self._lock:
            if not self._order:
                return None
            return self._records[self._order[-1]]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
