from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
import logging
import secrets
import uuid

from ..core.config import settings
from ..models.patient import Patient

logger = logging.getLogger(__name__)

class MrnService:
    """Generates medical record numbers of the form MRN-YYYYMMDD-NNNNN."""

    def __init__(self, db: Session, max_attempts: Optional[int] = None):
        self.db = db
        self.max_attempts = max_attempts if max_attempts is not None else settings.MRN_MAX_ATTEMPTS

    def generate_unique_mrn(self) -> str:
        """Generate an MRN not yet assigned to any patient."""
        for _ in range(self.max_attempts):
            mrn = self._candidate()
            if not self._exists(mrn):
                return mrn

        # Random space exhausted for today, fall back to a UUID tail
        fallback = f"MRN-{self._date_part()}-{uuid.uuid4().hex[:6].upper()}"
        logger.warning(f"MRN generation fell back to {fallback} after {self.max_attempts} attempts")
        return fallback

    def _candidate(self) -> str:
        return f"MRN-{self._date_part()}-{secrets.randbelow(100000):05d}"

    def _date_part(self) -> str:
        return datetime.utcnow().strftime("%Y%m%d")

    def _exists(self, mrn: str) -> bool:
        return self.db.query(Patient.id).filter(
            Patient.medical_record_number == mrn
        ).first() is not None
